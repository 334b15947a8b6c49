"""Shared constants for the Contact Intake backend."""

# Field length bounds, applied to the stripped value.
NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 100
SUBJECT_MIN_LENGTH = 5
SUBJECT_MAX_LENGTH = 200
BODY_MIN_LENGTH = 10
BODY_MAX_LENGTH = 5000
EMAIL_MAX_LENGTH = 254
PHONE_DIGITS = 10

# Moderation listing defaults. The admin view shows five messages per page.
DEFAULT_PAGE_SIZE = 5
MAX_PAGE_SIZE = 100
DEFAULT_SORT_FIELD = "created_at"
DEFAULT_SORT_DIR = "desc"
SORT_DIRECTIONS = ("asc", "desc")

# Accepted sort field names mapped to stored attribute names.
SORT_FIELDS: dict[str, str] = {
    "created_at": "created_at",
    "createdAt": "created_at",
    "updated_at": "updated_at",
    "updatedAt": "updated_at",
    "name": "name",
    "email": "email",
    "subject": "subject",
}

# DynamoDB layout
STATUS_INDEX = "StatusIndex"
# DynamoDB rejects empty partition keys and keys over 2048 bytes.
MESSAGE_ID_MAX_BYTES = 2048
