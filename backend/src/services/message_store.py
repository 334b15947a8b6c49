"""DynamoDB persistence for contact messages."""

import logging
import math
from datetime import UTC, datetime

from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError
from ulid import ULID

from models.contact_message import ContactMessage, MessagePage, MessageStatus
from services.exceptions import (
    InvalidArgumentError,
    InvalidTransitionError,
    MessageNotFoundError,
    StoreError,
)
from utils.constants import (
    MESSAGE_ID_MAX_BYTES,
    SORT_DIRECTIONS,
    SORT_FIELDS,
    STATUS_INDEX,
)

logger = logging.getLogger(__name__)


class MessageStore:
    """Message table access: create, lookup, open listing and closing."""

    def __init__(self, table):
        """Initialize the message store.

        Args:
            table: DynamoDB table keyed by message_id with a StatusIndex GSI
                (status hash key, created_at range key)
        """
        self.table = table

    def create(self, message: ContactMessage) -> str:
        """Persist a new message and return its assigned id.

        Args:
            message: Message to store; must be OPEN. Any message_id on it is
                replaced by a freshly generated ULID.

        Returns:
            The new message id

        Raises:
            InvalidTransitionError: If the message is not OPEN
            StoreError: On database errors, including id collisions
        """
        if message.status != MessageStatus.OPEN:
            raise InvalidTransitionError(
                f"Messages must be created {MessageStatus.OPEN.value}, "
                f"got {message.status.value}"
            )

        message_id = str(ULID())
        stored = message.model_copy(update={"message_id": message_id})

        try:
            self.table.put_item(
                Item=stored.to_item(),
                ConditionExpression="attribute_not_exists(message_id)",
            )
        except ClientError as e:
            logger.error("Failed to create message %s: %s", message_id, e)
            raise StoreError(f"Failed to create message: {e}") from e
        except BotoCoreError as e:
            logger.error("Message table unavailable creating %s: %s", message_id, e)
            raise StoreError(f"Message table unavailable: {e}") from e

        return message_id

    def find_by_id(self, message_id: str) -> ContactMessage:
        """Get a message by id.

        Raises:
            MessageNotFoundError: If no message has this id
            StoreError: On database errors
        """
        _require_usable_id(message_id)
        item = self._get_item(message_id)
        if not item:
            raise MessageNotFoundError(message_id)
        return ContactMessage(**item)

    def find_open(
        self, page: int, page_size: int, sort_field: str, sort_dir: str
    ) -> MessagePage:
        """Get one page of OPEN messages in the requested order.

        Args:
            page: 1-based page number
            page_size: Maximum number of messages on the page
            sort_field: Attribute to order by (see SORT_FIELDS)
            sort_dir: "asc" or "desc"

        Returns:
            MessagePage holding at most page_size messages

        Raises:
            InvalidArgumentError: On an unknown sort field or direction
            StoreError: On database errors
        """
        attribute = SORT_FIELDS.get(sort_field)
        if attribute is None:
            raise InvalidArgumentError(
                f"Unknown sort field '{sort_field}', expected one of "
                f"{', '.join(sorted(SORT_FIELDS))}"
            )
        direction = (sort_dir or "").lower()
        if direction not in SORT_DIRECTIONS:
            raise InvalidArgumentError(
                f"Unknown sort direction '{sort_dir}', expected asc or desc"
            )

        messages = [
            ContactMessage(**item) for item in self._query_status(MessageStatus.OPEN)
        ]
        messages.sort(
            key=lambda m: ((getattr(m, attribute) or ""), m.message_id or ""),
            reverse=direction == "desc",
        )

        total_items = len(messages)
        start = (page - 1) * page_size
        return MessagePage(
            items=messages[start : start + page_size],
            page=page,
            page_size=page_size,
            total_items=total_items,
            total_pages=math.ceil(total_items / page_size) if page_size else 0,
            sort_field=attribute,
            sort_dir=direction,
        )

    def update_status(
        self, message_id: str, new_status: MessageStatus, actor: str
    ) -> ContactMessage:
        """Move a message from OPEN to new_status.

        The update is conditional on the message existing and still being
        OPEN, so concurrent closes of the same message let exactly one win.

        Args:
            message_id: Message to update
            new_status: Target status; only CLOSED is a legal target
            actor: Who made the change, recorded as updated_by

        Returns:
            The updated message

        Raises:
            MessageNotFoundError: If no message has this id
            InvalidTransitionError: If the message is not OPEN any more
            StoreError: On database errors
        """
        if new_status != MessageStatus.CLOSED:
            raise InvalidTransitionError(
                f"Cannot move message {message_id} to {new_status}"
            )
        _require_usable_id(message_id)

        try:
            response = self.table.update_item(
                Key={"message_id": message_id},
                UpdateExpression=(
                    "SET #status = :new_status, updated_at = :now, updated_by = :actor"
                ),
                ConditionExpression=(
                    "attribute_exists(message_id) AND #status = :open"
                ),
                ExpressionAttributeNames={"#status": "status"},
                ExpressionAttributeValues={
                    ":new_status": MessageStatus.CLOSED.value,
                    ":open": MessageStatus.OPEN.value,
                    ":now": datetime.now(UTC).isoformat(),
                    ":actor": actor,
                },
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if e.response["Error"]["Code"] != "ConditionalCheckFailedException":
                logger.error("Failed to update message %s: %s", message_id, e)
                raise StoreError(f"Failed to update message: {e}") from e
            # Condition failed: either missing or no longer OPEN
            current = self.find_by_id(message_id)
            raise InvalidTransitionError(
                f"Message {message_id} is already {current.status.value}"
            ) from e
        except BotoCoreError as e:
            logger.error("Message table unavailable updating %s: %s", message_id, e)
            raise StoreError(f"Message table unavailable: {e}") from e

        return ContactMessage(**response["Attributes"])

    def _get_item(self, message_id: str) -> dict | None:
        try:
            response = self.table.get_item(
                Key={"message_id": message_id}, ConsistentRead=True
            )
        except ClientError as e:
            logger.error("Failed to get message %s: %s", message_id, e)
            raise StoreError(f"Failed to get message: {e}") from e
        except BotoCoreError as e:
            logger.error("Message table unavailable reading %s: %s", message_id, e)
            raise StoreError(f"Message table unavailable: {e}") from e
        return response.get("Item")

    def _query_status(self, status: MessageStatus) -> list[dict]:
        """Fetch every item with the given status, following pagination."""
        query_kwargs = {
            "IndexName": STATUS_INDEX,
            "KeyConditionExpression": Key("status").eq(status.value),
        }
        items: list[dict] = []
        try:
            while True:
                response = self.table.query(**query_kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                query_kwargs["ExclusiveStartKey"] = last_key
        except ClientError as e:
            logger.error("Failed to list %s messages: %s", status.value, e)
            raise StoreError(f"Failed to list messages: {e}") from e
        except BotoCoreError as e:
            logger.error("Message table unavailable listing messages: %s", e)
            raise StoreError(f"Message table unavailable: {e}") from e
        return items


def _require_usable_id(message_id: str) -> None:
    """Reject ids DynamoDB refuses as keys (empty or over 2048 bytes)."""
    if not message_id or len(message_id.encode("utf-8")) > MESSAGE_ID_MAX_BYTES:
        raise MessageNotFoundError(message_id)
