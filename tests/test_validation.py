"""Tests for contact payload validation rules."""
from __future__ import annotations

import pytest

from contact_book.contacts import (
    ContactFields,
    ContactUpdate,
    ValidationError,
    create_violations,
    update_violations,
    validate_create,
    validate_update,
)
from contact_book.contacts.validation import (
    EMPTY_UPDATE_MESSAGE,
    check_email,
    check_name,
    check_phone,
)


VALID = {"name": "Jo", "email": "a@b.co", "phone": "+380671234567"}


def _fields(violations):
    return [v.field for v in violations]


class TestNameRule:
    @pytest.mark.parametrize(
        "name",
        ["Jo", "John Doe", "O'Brien", "Mary-Jane", "J. R. Smith", "Тарас Шевченко", "Їжак Єгор"],
    )
    def test_accepts_latin_and_cyrillic_names(self, name):
        assert check_name(name) is None

    def test_rejects_single_character(self):
        assert "at least 2" in check_name("J")

    def test_rejects_names_over_fifty_characters(self):
        assert check_name("a" * 50) is None
        assert "exceed 50" in check_name("a" * 51)

    @pytest.mark.parametrize("name", ["R2D2", "john_doe", "Ann!", "Bob @home"])
    def test_rejects_digits_and_symbols(self, name):
        assert check_name(name) is not None

    def test_rejects_empty_and_non_string(self):
        assert "must not be empty" in check_name("")
        assert "must be a string" in check_name(None)
        assert "must be a string" in check_name(42)


class TestEmailRule:
    @pytest.mark.parametrize(
        "email",
        ["a@b.co", "john@example.com", "first.last+tag@mail.sub.example.org"],
    )
    def test_accepts_valid_addresses(self, email):
        assert check_email(email) is None

    @pytest.mark.parametrize(
        "email",
        ["josé@example.com", "user@пример.рф", "Жанна@mail.com.ua"],
    )
    def test_accepts_internationalized_addresses(self, email):
        assert check_email(email) is None

    @pytest.mark.parametrize(
        "email",
        ["invalid-email", "user@localhost", "user@", "@example.com", "a b@c.com", "a@-b.com", "a..b@c.com"],
    )
    def test_rejects_invalid_addresses(self, email):
        assert check_email(email) is not None

    def test_rejects_addresses_over_hundred_characters(self):
        email = "a" * 60 + "@" + "b" * 36 + ".com"
        assert len(email) == 101
        assert "exceed 100" in check_email(email)


class TestPhoneRule:
    @pytest.mark.parametrize(
        "phone",
        ["+380671234567", "+12125551234", "+447123456789", "+1234567", "+123456789012345"],
    )
    def test_accepts_e164_numbers(self, phone):
        assert check_phone(phone) is None

    @pytest.mark.parametrize(
        "phone",
        [
            "0501234567",        # no +
            "380671234567",      # no +
            "(123) 456-7890",    # local format
            "+123",              # too short
            "+123456",           # 6 digits
            "+1234567890123456",  # 16 digits
            "+0123456789",       # leading zero
            "+38 067 123 45 67",
            "not-a-phone",
            "+٣٨٠٦٧١٢٣٤٥٦٧",      # non-ASCII digits
        ],
    )
    def test_rejects_other_formats(self, phone):
        assert check_phone(phone) is not None


class TestCreateRule:
    def test_valid_payload_passes(self):
        assert create_violations(VALID) == []
        assert validate_create(VALID) == ContactFields(
            name="Jo", email="a@b.co", phone="+380671234567"
        )

    def test_short_name_fails(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_create({**VALID, "name": "J"})
        assert _fields(exc_info.value.violations) == ["name"]

    def test_phone_without_plus_fails(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_create({"phone": "0501234567", "name": "Jo", "email": "a@b.co"})
        assert _fields(exc_info.value.violations) == ["phone"]
        assert "E.164" in str(exc_info.value)

    def test_all_fields_required(self):
        violations = create_violations({"name": "John Doe"})
        assert _fields(violations) == ["email", "phone"]
        assert violations[0].message == "Email is required"

    def test_reports_every_problem(self):
        violations = create_violations({"name": "J", "email": "nope", "phone": "123"})
        assert _fields(violations) == ["name", "email", "phone"]

    def test_unknown_fields_rejected(self):
        violations = create_violations({**VALID, "id": "abc"})
        assert _fields(violations) == ["id"]

    @pytest.mark.parametrize("payload", [None, [], "text", 3])
    def test_non_object_payload_rejected(self, payload):
        violations = create_violations(payload)
        assert _fields(violations) == ["body"]


class TestUpdateRule:
    def test_single_field_passes(self):
        assert update_violations({"name": "New"}) == []
        assert validate_update({"name": "New"}) == ContactUpdate(name="New")

    def test_empty_payload_fails(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_update({})
        assert str(exc_info.value) == EMPTY_UPDATE_MESSAGE

    def test_only_unknown_fields_fails(self):
        violations = update_violations({"nickname": "Jo", "age": 3})
        assert [v.message for v in violations] == [EMPTY_UPDATE_MESSAGE]

    def test_unknown_field_next_to_known_field_fails(self):
        violations = update_violations({"name": "New", "nickname": "Jo"})
        assert _fields(violations) == ["nickname"]

    def test_field_constraints_still_apply(self):
        violations = update_violations({"phone": "(555) 123-4567"})
        assert _fields(violations) == ["phone"]

    def test_null_value_is_rejected(self):
        violations = update_violations({"email": None})
        assert _fields(violations) == ["email"]

    def test_update_keeps_missing_fields_unset(self):
        changes = validate_update({"phone": "+447987654321"})
        assert changes.provided() == {"phone": "+447987654321"}
        assert changes.name is None and changes.email is None
