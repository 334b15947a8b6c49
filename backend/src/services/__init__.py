"""Services for Contact Intake backend."""

from .intake_service import IntakeService
from .message_store import MessageStore
from .message_validator import validate_submission
from .moderation_service import ModerationService

__all__ = [
    "IntakeService",
    "MessageStore",
    "ModerationService",
    "validate_submission",
]
