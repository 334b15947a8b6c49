"""Field validation for contact submissions."""

import re

from pydantic import EmailStr, TypeAdapter, ValidationError

from models.contact_message import ContactSubmission, FieldViolation
from utils.constants import (
    BODY_MAX_LENGTH,
    BODY_MIN_LENGTH,
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    PHONE_DIGITS,
    SUBJECT_MAX_LENGTH,
    SUBJECT_MIN_LENGTH,
)

PHONE_PATTERN = re.compile(rf"^[0-9]{{{PHONE_DIGITS}}}$")

# Syntax only; no DNS lookups
_email_adapter = TypeAdapter(EmailStr)


def validate_submission(submission: ContactSubmission) -> list[FieldViolation]:
    """Check a submission against the contact form constraints.

    Required fields that are missing or whitespace-only are reported as
    blank and skip their remaining rules.

    Args:
        submission: Raw contact form input

    Returns:
        List of violations in form order, empty when the submission is valid
    """
    violations: list[FieldViolation] = []

    violations += _check_length(
        submission.name, "name", "Name", NAME_MIN_LENGTH, NAME_MAX_LENGTH
    )
    violations += _check_email(submission.email)

    # Phone is optional; an empty value counts as absent
    if submission.phone and not PHONE_PATTERN.match(submission.phone.strip()):
        violations.append(
            FieldViolation(
                field="phone", reason=f"Phone number must be {PHONE_DIGITS} digits"
            )
        )

    violations += _check_length(
        submission.subject, "subject", "Subject", SUBJECT_MIN_LENGTH, SUBJECT_MAX_LENGTH
    )
    violations += _check_length(
        submission.body, "body", "Message", BODY_MIN_LENGTH, BODY_MAX_LENGTH
    )
    return violations


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _check_email(value: str | None) -> list[FieldViolation]:
    if _is_blank(value):
        return [FieldViolation(field="email", reason="Email must not be blank")]

    invalid = [
        FieldViolation(field="email", reason="Please provide a valid email address")
    ]
    email = value.strip()
    if len(email) > EMAIL_MAX_LENGTH:
        return invalid
    try:
        _email_adapter.validate_python(email)
    except ValidationError:
        return invalid
    return []


def _check_length(
    value: str | None, field: str, label: str, min_length: int, max_length: int
) -> list[FieldViolation]:
    if _is_blank(value):
        return [FieldViolation(field=field, reason=f"{label} must not be blank")]

    length = len(value.strip())
    if length < min_length:
        return [
            FieldViolation(
                field=field,
                reason=f"{label} must be at least {min_length} characters long",
            )
        ]
    if length > max_length:
        return [
            FieldViolation(
                field=field,
                reason=f"{label} must be at most {max_length} characters long",
            )
        ]
    return []
