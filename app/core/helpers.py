"""
Helper functions for common infrastructure operations.

These utilities are pure infrastructure: they have no knowledge of
domain concepts like threads or listings.

Usage:
    from core.helpers import parse_uuid, validate_uuid

    if not validate_uuid(raw_id):
        ...
    thread_uuid = parse_uuid(raw_id)
"""

from __future__ import annotations

import uuid


def validate_uuid(value) -> bool:
    """
    Check if a value is a valid UUID.

    Args:
        value: String (or UUID) to validate

    Returns:
        True if valid UUID format

    Example:
        is_valid = validate_uuid("550e8400-e29b-41d4-a716-446655440000")  # True
    """
    return parse_uuid(value) is not None


def parse_uuid(value) -> uuid.UUID | None:
    """
    Parse a value into a UUID, returning None when it is not one.

    Accepts UUID instances unchanged so callers can pass either path
    parameters or model ids.
    """
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        return None
