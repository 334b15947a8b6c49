"""Pytest configuration and shared fixtures."""

from datetime import UTC, datetime, timedelta
from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError

from models.contact_message import ContactSubmission


def make_message_item(
    message_id="01J0000000000000000000000A",
    created_at="2026-01-20T08:00:00+00:00",
    status="OPEN",
    **overrides,
) -> dict:
    """Build a stored message item as DynamoDB returns it."""
    item = {
        "message_id": message_id,
        "name": "Bob Lee",
        "email": "bob@example.com",
        "subject": "Need help today",
        "body": "My account is locked, please assist.",
        "status": status,
        "created_at": created_at,
        "created_by": "ANONYMOUS",
    }
    item.update(overrides)
    return item


def make_client_error(code: str, operation: str = "UpdateItem") -> ClientError:
    """Build a botocore ClientError with the given error code."""
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def valid_submission():
    """Create the valid submission from the help-desk scenario."""
    return ContactSubmission(
        name="Bob Lee",
        email="bob@example.com",
        subject="Need help today",
        body="My account is locked, please assist.",
    )


@pytest.fixture
def open_message_items():
    """Seven OPEN items created one minute apart, oldest first."""
    base = datetime(2026, 1, 20, 8, 0, tzinfo=UTC)
    return [
        make_message_item(
            message_id=f"01J00000000000000000000{i:03d}",
            created_at=(base + timedelta(minutes=i)).isoformat(),
            subject=f"Question number {i}",
        )
        for i in range(7)
    ]


@pytest.fixture
def mock_dynamodb_table():
    """Create a mock DynamoDB table for testing."""
    mock_table = Mock()
    mock_table.put_item.return_value = {}
    mock_table.get_item.return_value = {}
    mock_table.update_item.return_value = {"Attributes": {}}
    mock_table.query.return_value = {"Items": []}
    return mock_table


@pytest.fixture
def message_item():
    """Factory for stored message items."""
    return make_message_item


@pytest.fixture
def client_error():
    """Factory for botocore ClientErrors."""
    return make_client_error
