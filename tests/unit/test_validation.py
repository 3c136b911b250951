"""
Unit tests for the validation primitives.

This module tests:
- UUID, email and required-field checks with their error messages
- Enum membership checks
- Pagination clamping
"""

import pytest

from tool_tracker.core.exceptions import ValidationError
from tool_tracker.core.validation import (
    clamp_pagination,
    is_valid_uuid,
    validate_choice,
    validate_email,
    validate_optional_uuid,
    validate_required_field,
    validate_uuid,
)
from tool_tracker.domain.entities import ToolStatus, UserRole


@pytest.mark.unit
@pytest.mark.domain
class TestUuidValidation:
    @pytest.mark.parametrize(
        "value",
        [
            "123e4567-e89b-12d3-a456-426614174000",
            "00000000-0000-0000-0000-000000000001",
            "ABCDEF00-1234-5678-9ABC-DEF012345678",
        ],
    )
    def test_accepts_uuid_shaped_strings(self, value):
        assert is_valid_uuid(value)
        assert validate_uuid(value, "tool_id") == value

    @pytest.mark.parametrize(
        "value",
        [
            "not-a-uuid",
            "123e4567e89b12d3a456426614174000",
            "123e4567-e89b-12d3-a456-42661417400",
            "g23e4567-e89b-12d3-a456-426614174000",
            " 123e4567-e89b-12d3-a456-426614174000",
            42,
        ],
    )
    def test_rejects_malformed_values(self, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_uuid(value, "tool_id")

        assert str(exc_info.value) == "tool_id must be a valid UUID"
        assert exc_info.value.field == "tool_id"

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_value_is_required(self, value):
        with pytest.raises(ValidationError, match="user_id is required"):
            validate_uuid(value, "user_id")

    def test_optional_uuid_accepts_none(self):
        assert validate_optional_uuid(None, "actor_id") is None

    def test_optional_uuid_still_checks_format(self):
        with pytest.raises(ValidationError, match="actor_id must be a valid UUID"):
            validate_optional_uuid("actor-x", "actor_id")


@pytest.mark.unit
@pytest.mark.domain
class TestFieldValidation:
    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_required_field(self, value):
        with pytest.raises(ValidationError, match="name is required"):
            validate_required_field(value, "name")

    def test_required_field_returns_value(self):
        assert validate_required_field("Hammer", "name") == "Hammer"

    @pytest.mark.parametrize("value", [123, ["Hammer"], b"Hammer"])
    def test_required_field_must_be_text(self, value):
        with pytest.raises(ValidationError, match="name must be a string"):
            validate_required_field(value, "name")

    @pytest.mark.parametrize(
        "email",
        ["john@example.com", "first.last+tag@sub.example.org", "a_b%c@x-y.io"],
    )
    def test_valid_emails(self, email):
        assert validate_email(email) == email

    @pytest.mark.parametrize(
        "email", ["plainaddress", "@example.com", "john@", "john@example", "john@example.c"]
    )
    def test_invalid_emails(self, email):
        with pytest.raises(ValidationError, match="invalid email format"):
            validate_email(email)

    def test_empty_email_is_required(self):
        with pytest.raises(ValidationError, match="email is required"):
            validate_email("")


@pytest.mark.unit
@pytest.mark.domain
class TestChoiceValidation:
    def test_accepts_member_and_value(self):
        assert validate_choice(ToolStatus.LOST, ToolStatus, "status") is ToolStatus.LOST
        assert validate_choice("MANAGER", UserRole, "role") is UserRole.MANAGER

    def test_is_case_sensitive(self):
        with pytest.raises(ValidationError, match="invalid status in_office"):
            validate_choice("in_office", ToolStatus, "status")

    def test_empty_value_is_required(self):
        with pytest.raises(ValidationError, match="role is required"):
            validate_choice("", UserRole, "role")


@pytest.mark.unit
class TestClampPagination:
    @pytest.mark.parametrize(
        "limit, offset, expected",
        [
            (None, None, (10, 0)),
            (0, 0, (10, 0)),
            (-5, -1, (10, 0)),
            (25, 40, (25, 40)),
            (100, 0, (100, 0)),
            (101, 3, (100, 3)),
            (5000, 0, (100, 0)),
        ],
    )
    def test_clamps_limit_and_offset(self, limit, offset, expected):
        assert clamp_pagination(limit, offset) == expected

    def test_custom_bounds(self):
        assert clamp_pagination(None, 0, default_limit=50, max_limit=500) == (50, 0)
        assert clamp_pagination(900, 0, default_limit=50, max_limit=500) == (500, 0)
