"""Service for moderating open contact messages."""

import logging

from models.contact_message import ContactMessage, MessagePage, MessageStatus
from services.exceptions import InvalidArgumentError, InvalidTransitionError
from services.message_store import MessageStore
from utils.constants import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT_DIR,
    DEFAULT_SORT_FIELD,
    MAX_PAGE_SIZE,
)

logger = logging.getLogger(__name__)


class ModerationService:
    """Lists OPEN messages and closes them on behalf of a moderator."""

    def __init__(self, store: MessageStore, max_page_size: int = MAX_PAGE_SIZE):
        """Initialize the moderation service.

        Args:
            store: MessageStore holding the messages
            max_page_size: Largest page a caller may request
        """
        self.store = store
        self.max_page_size = max_page_size

    def list_open(
        self,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        sort_field: str = DEFAULT_SORT_FIELD,
        sort_dir: str = DEFAULT_SORT_DIR,
    ) -> MessagePage:
        """Get one page of messages still awaiting moderation.

        Raises:
            InvalidArgumentError: On a bad page, page size, sort field or direction
            StoreError: On database errors
        """
        if page < 1:
            raise InvalidArgumentError(f"Page must be at least 1, got {page}")
        if not 1 <= page_size <= self.max_page_size:
            raise InvalidArgumentError(
                f"Page size must be between 1 and {self.max_page_size}, got {page_size}"
            )
        return self.store.find_open(page, page_size, sort_field, sort_dir)

    def close(self, message_id: str, actor: str) -> ContactMessage:
        """Close an OPEN message.

        Args:
            message_id: Message to close
            actor: Moderator closing it, recorded as updated_by

        Returns:
            The closed message

        Raises:
            InvalidArgumentError: If actor is blank
            MessageNotFoundError: If no message has this id
            InvalidTransitionError: If the message is already closed
            StoreError: On database errors
        """
        if not actor or not actor.strip():
            raise InvalidArgumentError("Actor must not be blank")

        try:
            message = self.store.update_status(message_id, MessageStatus.CLOSED, actor)
        except InvalidTransitionError:
            logger.warning("Close of message %s by %s rejected", message_id, actor)
            raise

        logger.info("Message %s closed by %s", message_id, actor)
        return message
