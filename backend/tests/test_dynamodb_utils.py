"""Tests for the messages table layout."""

from unittest.mock import Mock

from utils.constants import STATUS_INDEX
from utils.dynamodb_utils import create_messages_table, message_table_definition


class TestMessageTableDefinition:
    """Tests for message_table_definition."""

    def test_keyed_by_message_id(self):
        definition = message_table_definition("messages-test")

        assert definition["TableName"] == "messages-test"
        assert definition["KeySchema"] == [
            {"AttributeName": "message_id", "KeyType": "HASH"}
        ]

    def test_status_index(self):
        """Test the GSI used by the open listing."""
        definition = message_table_definition("messages-test")

        (index,) = definition["GlobalSecondaryIndexes"]
        assert index["IndexName"] == STATUS_INDEX
        assert index["KeySchema"] == [
            {"AttributeName": "status", "KeyType": "HASH"},
            {"AttributeName": "created_at", "KeyType": "RANGE"},
        ]
        assert index["Projection"] == {"ProjectionType": "ALL"}

    def test_key_attributes_are_strings(self):
        definition = message_table_definition("messages-test")

        types = {
            a["AttributeName"]: a["AttributeType"]
            for a in definition["AttributeDefinitions"]
        }
        assert types == {"message_id": "S", "status": "S", "created_at": "S"}


class TestCreateMessagesTable:
    """Tests for create_messages_table."""

    def test_creates_and_waits(self):
        dynamodb = Mock()

        table = create_messages_table(dynamodb, "messages-test")

        dynamodb.create_table.assert_called_once_with(
            **message_table_definition("messages-test")
        )
        table.wait_until_exists.assert_called_once()

    def test_no_wait(self):
        dynamodb = Mock()

        table = create_messages_table(dynamodb, "messages-test", wait=False)

        table.wait_until_exists.assert_not_called()
