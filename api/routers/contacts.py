"""Contacts Router - CRUD endpoints over the JSON contacts store.

Handles:
- Listing and fetching contacts
- Creating contacts (all fields required)
- Partial updates (at least one field)
- Deleting contacts

Validation failures raise ``ValidationError`` and store failures raise
``ContactStoreError``; both are translated into responses by the handlers
registered in ``api.main``.
"""
from __future__ import annotations

import logging
from typing import Any, List

from fastapi import APIRouter, Body, Depends, HTTPException, status

from api.dependencies import get_contact_store, serialize_contact
from api.models import ContactResponse, ErrorResponse
from contact_book.contacts import ContactStore, validate_create, validate_update

logger = logging.getLogger(__name__)

# Mounted at /api/contacts
router = APIRouter()


def _not_found(contact_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Contact with id {contact_id} not found",
    )


# =============================================================================
# Read Endpoints
# =============================================================================

@router.get("", response_model=List[ContactResponse])
async def list_contacts(store: ContactStore = Depends(get_contact_store)) -> list:
    """List every contact in insertion order."""
    contacts = await store.list()
    return [serialize_contact(contact) for contact in contacts]


@router.get(
    "/{contact_id}",
    response_model=ContactResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_contact(
    contact_id: str,
    store: ContactStore = Depends(get_contact_store),
) -> dict:
    contact = await store.get(contact_id)
    if contact is None:
        raise _not_found(contact_id)
    return serialize_contact(contact)


# =============================================================================
# Write Endpoints
# =============================================================================

@router.post(
    "",
    response_model=ContactResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_contact(
    payload: Any = Body(...),
    store: ContactStore = Depends(get_contact_store),
) -> dict:
    """Create a contact. ``name``, ``email`` and ``phone`` are all required."""
    fields = validate_create(payload)
    contact = await store.create(fields)
    logger.info(f"[contacts] Created contact {contact.id}")
    return serialize_contact(contact)


@router.put(
    "/{contact_id}",
    response_model=ContactResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_contact(
    contact_id: str,
    payload: Any = Body(...),
    store: ContactStore = Depends(get_contact_store),
) -> dict:
    """Apply a partial update; fields that are not sent keep their values."""
    changes = validate_update(payload)
    contact = await store.update(contact_id, changes)
    if contact is None:
        raise _not_found(contact_id)
    logger.info(f"[contacts] Updated contact {contact_id}: {sorted(changes.provided())}")
    return serialize_contact(contact)


@router.delete(
    "/{contact_id}",
    response_model=ContactResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_contact(
    contact_id: str,
    store: ContactStore = Depends(get_contact_store),
) -> dict:
    """Delete a contact and return it as it was before removal."""
    contact = await store.delete(contact_id)
    if contact is None:
        raise _not_found(contact_id)
    logger.info(f"[contacts] Deleted contact {contact_id}")
    return serialize_contact(contact)
