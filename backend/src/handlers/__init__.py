"""Lambda handlers for Contact Intake API."""

from .api_handler import api_handler

__all__ = ["api_handler"]
