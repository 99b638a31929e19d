"""Tests for core.helpers."""

import uuid

import pytest

from core.helpers import parse_uuid, validate_uuid


class TestParseUuid:
    def test_parses_canonical_string(self):
        value = "550e8400-e29b-41d4-a716-446655440000"

        assert parse_uuid(value) == uuid.UUID(value)

    def test_returns_uuid_instances_unchanged(self):
        value = uuid.uuid4()

        assert parse_uuid(value) is value

    @pytest.mark.parametrize("value", ["", "not-a-uuid", "123", None, 42, object()])
    def test_rejects_non_uuids(self, value):
        assert parse_uuid(value) is None


class TestValidateUuid:
    def test_valid(self):
        assert validate_uuid(str(uuid.uuid4())) is True

    def test_invalid(self):
        assert validate_uuid("user-123") is False
