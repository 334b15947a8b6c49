"""Tests for ModerationService."""

from unittest.mock import Mock

import pytest

from models.contact_message import ContactMessage, MessagePage, MessageStatus
from services.exceptions import (
    InvalidArgumentError,
    InvalidTransitionError,
    MessageNotFoundError,
)
from services.moderation_service import ModerationService


class TestModerationService:
    """Test cases for ModerationService."""

    @pytest.fixture
    def mock_store(self):
        """Create a mock MessageStore."""
        store = Mock()
        store.find_open.return_value = MessagePage(
            items=[],
            page=1,
            page_size=5,
            total_items=0,
            total_pages=0,
            sort_field="created_at",
            sort_dir="desc",
        )
        return store

    @pytest.fixture
    def service(self, mock_store):
        """Create a ModerationService with mocked store."""
        return ModerationService(store=mock_store)

    # -----------------------------------------------------------------------
    # list_open
    # -----------------------------------------------------------------------

    def test_list_open_defaults(self, service, mock_store):
        """Test defaults: first page of five, newest first."""
        service.list_open()

        mock_store.find_open.assert_called_once_with(1, 5, "created_at", "desc")

    def test_list_open_passes_arguments(self, service, mock_store):
        """Test arguments are delegated unchanged."""
        service.list_open(page=3, page_size=20, sort_field="name", sort_dir="asc")

        mock_store.find_open.assert_called_once_with(3, 20, "name", "asc")

    @pytest.mark.parametrize("page", [0, -1])
    def test_list_open_rejects_bad_page(self, service, mock_store, page):
        """Test pages start at 1."""
        with pytest.raises(InvalidArgumentError, match="Page must be at least 1"):
            service.list_open(page=page)

        mock_store.find_open.assert_not_called()

    @pytest.mark.parametrize("page_size", [0, 101, -5])
    def test_list_open_rejects_bad_page_size(self, service, mock_store, page_size):
        """Test page size bounds."""
        with pytest.raises(InvalidArgumentError, match="Page size"):
            service.list_open(page_size=page_size)

        mock_store.find_open.assert_not_called()

    def test_list_open_page_size_bounds_inclusive(self, service, mock_store):
        """Test 1 and the maximum are both allowed."""
        service.list_open(page_size=1)
        service.list_open(page_size=100)

        assert mock_store.find_open.call_count == 2

    def test_list_open_custom_max_page_size(self, mock_store):
        """Test the configured maximum is enforced."""
        service = ModerationService(store=mock_store, max_page_size=10)

        with pytest.raises(InvalidArgumentError):
            service.list_open(page_size=11)

    # -----------------------------------------------------------------------
    # close
    # -----------------------------------------------------------------------

    def test_close_records_actor(self, service, mock_store):
        """Test close targets CLOSED with the moderator as actor."""
        closed = ContactMessage(
            message_id="01J0000000000000000000000A",
            name="Bob Lee",
            email="bob@example.com",
            subject="Need help today",
            body="My account is locked, please assist.",
            status=MessageStatus.CLOSED,
            created_at="2026-01-20T08:00:00+00:00",
            updated_at="2026-01-20T09:00:00+00:00",
            updated_by="mod_1",
        )
        mock_store.update_status.return_value = closed

        result = service.close("01J0000000000000000000000A", actor="mod_1")

        assert result is closed
        mock_store.update_status.assert_called_once_with(
            "01J0000000000000000000000A", MessageStatus.CLOSED, "mod_1"
        )

    @pytest.mark.parametrize("actor", ["", "   ", None])
    def test_close_requires_actor(self, service, mock_store, actor):
        """Test close needs an explicit actor."""
        with pytest.raises(InvalidArgumentError, match="Actor"):
            service.close("01J0000000000000000000000A", actor=actor)

        mock_store.update_status.assert_not_called()

    def test_close_unknown_message(self, service, mock_store):
        """Test closing an unknown id raises MessageNotFoundError."""
        mock_store.update_status.side_effect = MessageNotFoundError("unknown-id")

        with pytest.raises(MessageNotFoundError):
            service.close("unknown-id", actor="mod_1")

    def test_close_twice_rejected(self, service, mock_store):
        """Test invalid transitions propagate to the caller."""
        mock_store.update_status.side_effect = InvalidTransitionError(
            "Message 01J0000000000000000000000A is already CLOSED"
        )

        with pytest.raises(InvalidTransitionError, match="already CLOSED"):
            service.close("01J0000000000000000000000A", actor="mod_2")
