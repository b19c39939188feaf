"""Contact storage and validation module."""
from .store import (
    AccessError,
    CapacityError,
    Contact,
    ContactFields,
    ContactStore,
    ContactStoreError,
    ContactUpdate,
    CorruptStoreError,
    StoreConfig,
    merge_contact,
)
from .validation import (
    ValidationError,
    Violation,
    create_violations,
    update_violations,
    validate_create,
    validate_update,
)

__all__ = [
    # Storage
    "Contact",
    "ContactFields",
    "ContactUpdate",
    "ContactStore",
    "StoreConfig",
    "merge_contact",
    # Store errors
    "ContactStoreError",
    "CorruptStoreError",
    "AccessError",
    "CapacityError",
    # Validation
    "ValidationError",
    "Violation",
    "create_violations",
    "update_violations",
    "validate_create",
    "validate_update",
]
