"""Data models for Contact Intake."""

from .contact_message import (
    ANONYMOUS_SUBMITTER,
    ContactMessage,
    ContactSubmission,
    FieldViolation,
    MessagePage,
    MessageStatus,
)

__all__ = [
    "ANONYMOUS_SUBMITTER",
    "ContactMessage",
    "ContactSubmission",
    "FieldViolation",
    "MessagePage",
    "MessageStatus",
]
