"""Validation rules for contact payloads.

Each field has a predicate returning an error message (or None). The create
and update rules combine them and report every problem as a ``Violation``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

from email_validator import EmailNotValidError, validate_email

from .store import CONTACT_FIELDS, ContactFields, ContactUpdate

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 100
EMAIL_MIN_DOMAIN_SEGMENTS = 2

# Latin and Cyrillic (incl. Ukrainian) letters, whitespace, apostrophes,
# periods and hyphens.
NAME_PATTERN = re.compile(r"[a-zA-Zа-яА-ЯёЁіІїЇєЄґҐ'\s.-]+")
# E.164: "+", a non-zero leading digit, 7-15 digits in total.
PHONE_PATTERN = re.compile(r"\+[1-9][0-9]{6,14}")

EMPTY_UPDATE_MESSAGE = "Request body must contain at least one field"


@dataclass(slots=True, frozen=True)
class Violation:
    """A single problem with one field of a payload."""

    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class ValidationError(ValueError):
    """Raised when a contact payload fails validation."""

    def __init__(self, violations: Iterable[Violation]) -> None:
        self.violations: List[Violation] = list(violations)
        super().__init__("; ".join(v.message for v in self.violations))


def _check_string(value: Any, label: str) -> Optional[str]:
    if not isinstance(value, str):
        return f"{label} must be a string"
    if not value:
        return f"{label} must not be empty"
    return None


def check_name(value: Any) -> Optional[str]:
    problem = _check_string(value, "Name")
    if problem:
        return problem
    if len(value) < NAME_MIN_LENGTH:
        return f"Name must be at least {NAME_MIN_LENGTH} characters long"
    if len(value) > NAME_MAX_LENGTH:
        return f"Name must not exceed {NAME_MAX_LENGTH} characters"
    if not NAME_PATTERN.fullmatch(value):
        return "Name may only contain letters, spaces, apostrophes, periods and hyphens"
    return None


def check_email(value: Any) -> Optional[str]:
    problem = _check_string(value, "Email")
    if problem:
        return problem
    if len(value) > EMAIL_MAX_LENGTH:
        return f"Email must not exceed {EMAIL_MAX_LENGTH} characters"
    try:
        # Internationalized addresses are accepted; no DNS lookups.
        result = validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return "Email must be a valid email address"
    if len(result.domain.split(".")) < EMAIL_MIN_DOMAIN_SEGMENTS:
        return "Email must be a valid email address"
    return None


def check_phone(value: Any) -> Optional[str]:
    problem = _check_string(value, "Phone")
    if problem:
        return problem
    if not PHONE_PATTERN.fullmatch(value):
        return "Phone must be in E.164 international format, e.g. +380671234567"
    return None


FIELD_CHECKS = {
    "name": check_name,
    "email": check_email,
    "phone": check_phone,
}


def _unknown_field_violations(payload: Mapping[str, Any]) -> List[Violation]:
    return [
        Violation(str(key), f"Field {key!r} is not allowed")
        for key in payload
        if key not in FIELD_CHECKS
    ]


def _not_an_object(payload: Any) -> List[Violation]:
    if isinstance(payload, Mapping):
        return []
    return [Violation("body", "Request body must be a JSON object")]


def create_violations(payload: Any) -> List[Violation]:
    """Every field is required and must be valid; unknown fields are rejected."""
    problems = _not_an_object(payload)
    if problems:
        return problems

    for field in CONTACT_FIELDS:
        if field not in payload:
            problems.append(Violation(field, f"{field.capitalize()} is required"))
            continue
        message = FIELD_CHECKS[field](payload[field])
        if message:
            problems.append(Violation(field, message))
    problems.extend(_unknown_field_violations(payload))
    return problems


def update_violations(payload: Any) -> List[Violation]:
    """Fields are optional, but at least one known field must be present."""
    problems = _not_an_object(payload)
    if problems:
        return problems

    present = [field for field in CONTACT_FIELDS if field in payload]
    if not present:
        return [Violation("body", EMPTY_UPDATE_MESSAGE)]

    for field in present:
        message = FIELD_CHECKS[field](payload[field])
        if message:
            problems.append(Violation(field, message))
    problems.extend(_unknown_field_violations(payload))
    return problems


def validate_create(payload: Any) -> ContactFields:
    """Check a create payload and return its typed fields.

    Raises:
        ValidationError: listing every violation found.
    """
    problems = create_violations(payload)
    if problems:
        raise ValidationError(problems)
    return ContactFields(
        name=payload["name"],
        email=payload["email"],
        phone=payload["phone"],
    )


def validate_update(payload: Any) -> ContactUpdate:
    """Check a partial update payload and return it as a ``ContactUpdate``.

    Raises:
        ValidationError: listing every violation found.
    """
    problems = update_violations(payload)
    if problems:
        raise ValidationError(problems)
    return ContactUpdate(
        name=payload.get("name"),
        email=payload.get("email"),
        phone=payload.get("phone"),
    )
