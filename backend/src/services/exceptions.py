"""Errors raised by the contact intake and moderation services."""

from models.contact_message import FieldViolation


class ContactIntakeError(Exception):
    """Base class for contact intake errors."""

    pass


class SubmissionValidationError(ContactIntakeError):
    """A submission failed one or more field constraints."""

    def __init__(self, violations: list[FieldViolation]):
        self.violations = violations
        fields = ", ".join(v.field for v in violations)
        super().__init__(f"Invalid submission: {fields}")


class InvalidArgumentError(ContactIntakeError):
    """Bad pagination, sort, or actor parameters."""

    pass


class MessageNotFoundError(ContactIntakeError):
    """No message exists with the given id."""

    def __init__(self, message_id: str):
        self.message_id = message_id
        super().__init__(f"Message {message_id} not found")


class InvalidTransitionError(ContactIntakeError):
    """The requested status change is not allowed from the current status."""

    pass


class StoreError(ContactIntakeError):
    """The message table could not be reached or rejected the request."""

    pass
