"""Shared Pydantic models for API routers.

Request bodies are validated by ``contact_book.contacts.validation``; these
models describe what the API returns.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


# =============================================================================
# Contact Models
# =============================================================================

class ContactResponse(BaseModel):
    """A stored contact as returned by the API."""

    id: str
    name: str
    email: str
    phone: str


# =============================================================================
# Error Models
# =============================================================================

class FieldErrorModel(BaseModel):
    """One field-level validation problem."""
    field: str
    message: str


class ErrorResponse(BaseModel):
    """Error body returned for 4xx/5xx responses."""
    detail: str
    errors: Optional[List[FieldErrorModel]] = Field(
        default=None,
        description="Field-level problems, present on validation failures.",
    )


# =============================================================================
# Health Models
# =============================================================================

class HealthResponse(BaseModel):
    status: str
    time: str
    environment: str
