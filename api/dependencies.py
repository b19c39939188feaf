"""Shared dependencies and helper functions for API routers.

Usage in routers:
    from api.dependencies import get_contact_store, serialize_contact
"""
from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from contact_book.config import Settings, load_settings
from contact_book.contacts import Contact, ContactStore, StoreConfig


# =============================================================================
# Configuration Constants
# =============================================================================

DEV_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


# =============================================================================
# Cached Functions
# =============================================================================

@lru_cache
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return load_settings()


@lru_cache
def _store_for(config: StoreConfig) -> ContactStore:
    return ContactStore(config)


def get_contact_store(settings: Settings = Depends(get_settings)) -> ContactStore:
    """Return the process-wide store so every request shares its write lock."""
    return _store_for(settings.store_config())


# =============================================================================
# Serialization Helpers
# =============================================================================

def serialize_contact(contact: Contact) -> dict:
    """Serialize a Contact to API response format."""
    return contact.to_dict()
