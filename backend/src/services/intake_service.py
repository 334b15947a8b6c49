"""Service for accepting new contact messages."""

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from models.contact_message import (
    ANONYMOUS_SUBMITTER,
    ContactMessage,
    ContactSubmission,
    FieldViolation,
    MessageStatus,
)
from services.exceptions import SubmissionValidationError
from services.message_store import MessageStore
from services.message_validator import validate_submission

logger = logging.getLogger(__name__)


class IntakeService:
    """Validates contact submissions and stores them as OPEN messages."""

    def __init__(
        self,
        store: MessageStore,
        validator: Callable[[ContactSubmission], list[FieldViolation]] = validate_submission,
    ):
        """Initialize the intake service.

        Args:
            store: MessageStore the accepted messages are written to
            validator: Returns the violations for a submission
        """
        self.store = store
        self.validator = validator

    def submit(self, raw: ContactSubmission | Mapping[str, Any]) -> str:
        """Validate and persist a new contact message.

        Status, timestamps and submitter are stamped here; any such values
        present in the input are ignored.

        Args:
            raw: Contact form input

        Returns:
            Id of the stored message

        Raises:
            SubmissionValidationError: If any field constraint fails
            StoreError: On database errors
        """
        submission = self._parse(raw)

        violations = self.validator(submission)
        if violations:
            logger.info(
                "Rejected contact submission: %s",
                ", ".join(f"{v.field} ({v.reason})" for v in violations),
            )
            raise SubmissionValidationError(violations)

        message = ContactMessage(
            name=submission.name,
            email=submission.email,
            phone=submission.phone or None,
            subject=submission.subject,
            body=submission.body,
            status=MessageStatus.OPEN,
            created_at=datetime.now(UTC).isoformat(),
            created_by=ANONYMOUS_SUBMITTER,
        )
        message_id = self.store.create(message)

        logger.info("Stored contact message %s", message_id)
        return message_id

    @staticmethod
    def _parse(raw: ContactSubmission | Mapping[str, Any]) -> ContactSubmission:
        if isinstance(raw, ContactSubmission):
            return raw
        if not isinstance(raw, Mapping):
            raise SubmissionValidationError(
                [
                    FieldViolation(
                        field="message",
                        reason=f"Expected form fields, got {type(raw).__name__}",
                    )
                ]
            )
        try:
            return ContactSubmission.model_validate(dict(raw))
        except ValidationError as e:
            raise SubmissionValidationError(
                [
                    FieldViolation(
                        field=".".join(str(part) for part in err["loc"]) or "message",
                        reason=err["msg"],
                    )
                    for err in e.errors()
                ]
            ) from e
