"""Shared utilities for Contact Intake."""
