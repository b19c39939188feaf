"""JSON file storage for contacts.

The whole collection lives in one JSON array. Every operation re-reads the
file; mutations rewrite it in full through a temporary file that is atomically
moved over the previous version.
"""
from __future__ import annotations

import asyncio
import errno
import json
import os
import shutil
import tempfile
import uuid
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

CONTACT_FIELDS = ("name", "email", "phone")

_CAPACITY_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}


# --- Errors ---

class ContactStoreError(RuntimeError):
    """Base class for failures reading or writing the contacts store.

    The message is safe to show to API callers; ``path`` is kept separately
    for logs.
    """

    def __init__(self, message: str, *, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


class CorruptStoreError(ContactStoreError):
    """The store exists but does not hold a JSON array of contacts."""


class AccessError(ContactStoreError):
    """Permission denied while reading or writing the store."""


class CapacityError(ContactStoreError):
    """The store could not be written because storage is exhausted."""


# --- Records ---

@dataclass(slots=True)
class Contact:
    """A stored contact."""

    id: str
    name: str
    email: str
    phone: str

    def to_dict(self) -> Dict[str, str]:
        # Key order is the on-disk field order.
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Contact:
        """Build a contact from a decoded JSON object.

        Raises:
            ValueError: if ``data`` is not an object with string values for
                every contact field.
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")
        values = {}
        for key in ("id",) + CONTACT_FIELDS:
            value = data.get(key)
            if not isinstance(value, str):
                raise ValueError(f"field {key!r} missing or not a string")
            values[key] = value
        return cls(**values)


@dataclass(slots=True)
class ContactFields:
    """Fields of a contact that does not have an id yet."""

    name: str
    email: str
    phone: str


@dataclass(slots=True)
class ContactUpdate:
    """Partial contact; ``None`` means the field was not provided."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    def provided(self) -> Dict[str, str]:
        return {
            key: getattr(self, key)
            for key in CONTACT_FIELDS
            if getattr(self, key) is not None
        }

    def is_empty(self) -> bool:
        return not self.provided()


def merge_contact(existing: Contact, changes: ContactUpdate) -> Contact:
    """Return ``existing`` with every provided field of ``changes`` applied.

    The id and any field left as ``None`` are carried over unchanged.
    """
    return replace(existing, **changes.provided())


def new_contact_id(taken: Set[str]) -> str:
    contact_id = str(uuid.uuid4())
    while contact_id in taken:
        contact_id = str(uuid.uuid4())
    return contact_id


# --- File helpers ---

@dataclass(slots=True, frozen=True)
class StoreConfig:
    """Where and how the contacts collection is persisted."""

    path: Path
    encoding: str = "utf-8"
    indent: int = 2


def _read_text(config: StoreConfig) -> Optional[str]:
    """Return the raw store content, or None if the store does not exist."""
    try:
        return config.path.read_text(encoding=config.encoding)
    except FileNotFoundError:
        return None
    except PermissionError as exc:
        raise AccessError(
            "Insufficient permission to read the contacts store", path=config.path
        ) from exc
    except UnicodeDecodeError as exc:
        raise CorruptStoreError(
            "Contacts store is not valid text", path=config.path
        ) from exc


def decode_contacts(raw: str) -> List[Contact]:
    """Parse the serialized collection.

    Raises:
        ValueError: on invalid JSON or an unexpected structure.
    """
    if not raw.strip():
        return []
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array, got {type(data).__name__}")
    return [Contact.from_dict(item) for item in data]


def encode_contacts(contacts: List[Contact], indent: int = 2) -> str:
    return json.dumps(
        [contact.to_dict() for contact in contacts],
        indent=indent,
        ensure_ascii=False,
    ) + "\n"


def _load(config: StoreConfig) -> List[Contact]:
    raw = _read_text(config)
    if raw is None:
        return []
    try:
        return decode_contacts(raw)
    except json.JSONDecodeError as exc:
        raise CorruptStoreError(
            "Contacts store contains invalid JSON", path=config.path
        ) from exc
    except ValueError as exc:
        raise CorruptStoreError(
            "Contacts store is not a valid contacts collection", path=config.path
        ) from exc


def _new_file_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _write_atomic(config: StoreConfig, payload: str) -> None:
    path = config.path
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
    )
    try:
        with os.fdopen(fd, "w", encoding=config.encoding) as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        # mkstemp creates 0600; keep the mode the store already has.
        if path.exists():
            shutil.copymode(path, tmp_name)
        else:
            os.chmod(tmp_name, _new_file_mode())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def _save(config: StoreConfig, contacts: List[Contact]) -> None:
    payload = encode_contacts(contacts, config.indent)
    try:
        _write_atomic(config, payload)
    except PermissionError as exc:
        raise AccessError(
            "Insufficient permission to write the contacts store", path=config.path
        ) from exc
    except OSError as exc:
        if exc.errno in _CAPACITY_ERRNOS:
            raise CapacityError(
                "Not enough disk space to save the contacts store", path=config.path
            ) from exc
        raise


def _index_of(contacts: List[Contact], contact_id: str) -> int:
    for index, contact in enumerate(contacts):
        if contact.id == contact_id:
            return index
    return -1


# --- Store ---

class ContactStore:
    """Asynchronous CRUD access to the contacts collection.

    File I/O runs in a worker thread. Mutations on one instance are
    serialized with a lock so concurrent requests cannot overwrite each
    other's changes; separate processes sharing a file are not coordinated.
    Lookups that miss return ``None`` instead of raising.
    """

    def __init__(self, config: StoreConfig) -> None:
        self.config = config
        self._write_lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self.config.path

    async def _read(self) -> List[Contact]:
        return await asyncio.to_thread(_load, self.config)

    async def _persist(self, contacts: List[Contact]) -> None:
        await asyncio.to_thread(_save, self.config, contacts)

    async def list(self) -> List[Contact]:
        """Return every contact in insertion order."""
        return await self._read()

    async def get(self, contact_id: str) -> Optional[Contact]:
        contacts = await self._read()
        index = _index_of(contacts, contact_id)
        return contacts[index] if index >= 0 else None

    async def create(self, fields: ContactFields) -> Contact:
        """Append a new contact with a generated id and persist the collection."""
        async with self._write_lock:
            contacts = await self._read()
            contact = Contact(
                id=new_contact_id({c.id for c in contacts}),
                name=fields.name,
                email=fields.email,
                phone=fields.phone,
            )
            contacts.append(contact)
            await self._persist(contacts)
        return contact

    async def update(self, contact_id: str, changes: ContactUpdate) -> Optional[Contact]:
        """Merge ``changes`` onto the stored contact.

        Returns the merged contact, or None (without writing) when the id is
        unknown.
        """
        async with self._write_lock:
            contacts = await self._read()
            index = _index_of(contacts, contact_id)
            if index < 0:
                return None
            updated = merge_contact(contacts[index], changes)
            contacts[index] = updated
            await self._persist(contacts)
        return updated

    async def delete(self, contact_id: str) -> Optional[Contact]:
        """Remove a contact and return it as it was before removal."""
        async with self._write_lock:
            contacts = await self._read()
            index = _index_of(contacts, contact_id)
            if index < 0:
                return None
            removed = contacts.pop(index)
            await self._persist(contacts)
        return removed
