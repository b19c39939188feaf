"""API Routers Package.

Routers:
- contacts.py: contact CRUD (list, get, create, update, delete)

Usage in main.py:
    from api.routers import contacts_router

    app.include_router(contacts_router, prefix="/api/contacts", tags=["contacts"])
"""

from .contacts import router as contacts_router

__all__ = [
    "contacts_router",
]
