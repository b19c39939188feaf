"""Contact Book: JSON-file backed contact storage and validation."""

__version__ = "0.1.0"
