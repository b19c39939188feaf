"""Configuration helpers for the Contact Book service."""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .contacts.store import StoreConfig


DEFAULT_CONTACTS_PATH = Path("db") / "contacts.json"


class ConfigError(RuntimeError):
    """Raised when configuration values are missing or malformed."""


@dataclass(slots=True)
class Settings:
    """Runtime configuration for the API and CLI."""

    contacts_path: Path
    contacts_encoding: str = "utf-8"
    environment: str = "local"
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    allowed_origins: List[str] = field(default_factory=list)

    def store_config(self) -> StoreConfig:
        return StoreConfig(path=self.contacts_path, encoding=self.contacts_encoding)


def load_settings(*, env_file: Optional[str] = None) -> Settings:
    """Load settings from environment variables.

    A ``.env`` file in the working directory (or ``env_file``) is read first;
    variables already present in the environment win.

    Raises:
        ConfigError: if the port or log level cannot be used.
    """

    load_dotenv(env_file)

    raw_path = os.getenv("CB_CONTACTS_PATH", "").strip()
    contacts_path = Path(raw_path) if raw_path else Path.cwd() / DEFAULT_CONTACTS_PATH

    raw_port = os.getenv("CB_PORT", "3000").strip()
    try:
        port = int(raw_port)
    except ValueError:
        raise ConfigError(f"CB_PORT must be an integer, got {raw_port!r}.") from None
    if not 0 < port < 65536:
        raise ConfigError(f"CB_PORT out of range: {port}.")

    log_level = os.getenv("CB_LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"Unknown CB_LOG_LEVEL {log_level!r}.")

    origins = [
        origin.strip()
        for origin in os.getenv("CB_ALLOWED_ORIGINS", "").split(",")
        if origin.strip()
    ]

    return Settings(
        contacts_path=contacts_path,
        contacts_encoding=os.getenv("CB_CONTACTS_ENCODING", "utf-8").strip() or "utf-8",
        environment=os.getenv("CB_ENV", "local"),
        host=os.getenv("CB_HOST", "0.0.0.0").strip() or "0.0.0.0",
        port=port,
        log_level=log_level,
        allowed_origins=origins,
    )
