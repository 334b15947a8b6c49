"""Contact message data models."""

from enum import Enum

from pydantic import BaseModel, Field

# Attribution stamped on every public submission
ANONYMOUS_SUBMITTER = "ANONYMOUS"


class MessageStatus(str, Enum):
    """Lifecycle status of a contact message.

    The only transition is OPEN -> CLOSED. CLOSED is terminal.
    """

    OPEN = "OPEN"
    CLOSED = "CLOSED"


class ContactSubmission(BaseModel):
    """Raw contact form input.

    Unknown keys (status, timestamps, ids) are ignored so callers cannot
    pre-set message metadata.
    """

    name: str = ""
    email: str = ""
    phone: str | None = None
    subject: str = ""
    body: str = ""


class FieldViolation(BaseModel):
    """A single failed field constraint."""

    field: str
    reason: str


class ContactMessage(BaseModel):
    """Stored contact message record."""

    message_id: str | None = Field(
        None, description="ULID assigned by the store on creation"
    )
    name: str
    email: str
    phone: str | None = None
    subject: str
    body: str
    status: MessageStatus = MessageStatus.OPEN
    created_at: str = Field(..., description="ISO timestamp when submitted")
    created_by: str = ANONYMOUS_SUBMITTER
    updated_at: str | None = Field(None, description="ISO timestamp of the close")
    updated_by: str | None = Field(None, description="Moderator who closed it")

    @property
    def is_open(self) -> bool:
        """Check if the message is still awaiting moderation."""
        return self.status == MessageStatus.OPEN

    def to_item(self) -> dict:
        """Convert to a DynamoDB item, dropping unset optional attributes."""
        item = self.model_dump(exclude_none=True)
        item["status"] = self.status.value
        return item


class MessagePage(BaseModel):
    """One page of messages from a sorted listing."""

    items: list[ContactMessage] = Field(default_factory=list)
    page: int
    page_size: int
    total_items: int
    total_pages: int
    sort_field: str
    sort_dir: str
