"""Contact Book CLI."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict

from .config import ConfigError, Settings, load_settings
from .contacts import (
    Contact,
    ContactStore,
    ContactStoreError,
    ValidationError,
    validate_create,
    validate_update,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contact-book",
        description="Manage contacts stored in a JSON file, or serve them over HTTP.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the REST API with uvicorn.")
    serve_parser.add_argument("--host", help="Bind address (default: CB_HOST or 0.0.0.0).")
    serve_parser.add_argument("--port", type=int, help="Port (default: CB_PORT or 3000).")
    serve_parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart the server when source files change (development only).",
    )

    subparsers.add_parser("list", help="Print every contact.")

    get_parser = subparsers.add_parser("get", help="Print one contact.")
    get_parser.add_argument("contact_id", help="Contact ID.")

    add_parser = subparsers.add_parser("add", help="Create a contact.")
    add_parser.add_argument("--name", required=True)
    add_parser.add_argument("--email", required=True)
    add_parser.add_argument("--phone", required=True, help="E.164 format, e.g. +380671234567.")

    update_parser = subparsers.add_parser(
        "update",
        help="Change some fields of a contact; omitted fields are kept.",
    )
    update_parser.add_argument("contact_id", help="Contact ID.")
    update_parser.add_argument("--name")
    update_parser.add_argument("--email")
    update_parser.add_argument("--phone")

    remove_parser = subparsers.add_parser("remove", help="Delete a contact.")
    remove_parser.add_argument("contact_id", help="Contact ID.")

    return parser


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _print_contact_or_missing(contact: Contact | None, contact_id: str) -> int:
    if contact is None:
        print(f"Contact {contact_id} not found.", file=sys.stderr)
        return EXIT_FAILURE
    _print_json(contact.to_dict())
    return EXIT_OK


async def _run_store_command(args: argparse.Namespace, store: ContactStore) -> int:
    if args.command == "list":
        contacts = await store.list()
        _print_json([contact.to_dict() for contact in contacts])
        return EXIT_OK

    if args.command == "get":
        contact = await store.get(args.contact_id)
        return _print_contact_or_missing(contact, args.contact_id)

    if args.command == "add":
        fields = validate_create(
            {"name": args.name, "email": args.email, "phone": args.phone}
        )
        contact = await store.create(fields)
        _print_json(contact.to_dict())
        return EXIT_OK

    if args.command == "update":
        payload: Dict[str, str] = {
            key: value
            for key, value in (
                ("name", args.name),
                ("email", args.email),
                ("phone", args.phone),
            )
            if value is not None
        }
        changes = validate_update(payload)
        contact = await store.update(args.contact_id, changes)
        return _print_contact_or_missing(contact, args.contact_id)

    if args.command == "remove":
        contact = await store.delete(args.contact_id)
        return _print_contact_or_missing(contact, args.contact_id)

    raise ValueError(f"Unknown command: {args.command}")


def _cmd_serve(settings: Settings, host: str | None, port: int | None, reload: bool) -> int:
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        return _cmd_serve(settings, args.host, args.port, args.reload)

    store = ContactStore(settings.store_config())
    try:
        return asyncio.run(_run_store_command(args, store))
    except ValidationError as exc:
        for violation in exc.violations:
            print(f"{violation.field}: {violation.message}", file=sys.stderr)
        return EXIT_INVALID
    except ContactStoreError as exc:
        logger.error(f"Store failure at {exc.path}: {exc} ({exc.__cause__!r})")
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
