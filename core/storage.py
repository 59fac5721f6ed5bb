"""JSON file persistence for SiteLedger collections."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Final

__all__ = [
    "CLIENTS_KEY",
    "JsonStore",
    "LOGO_KEY",
    "PRODUCTS_KEY",
    "PROJECTS_KEY",
    "TEMPLATES_KEY",
]

logger = logging.getLogger(__name__)

PROJECTS_KEY: Final[str] = "projects"
CLIENTS_KEY: Final[str] = "clients"
PRODUCTS_KEY: Final[str] = "products"
TEMPLATES_KEY: Final[str] = "templates"
LOGO_KEY: Final[str] = "logo"


class JsonStore:
    """Key-value store keeping one JSON document per collection.

    Reads fall back to the caller's default when a document is missing or
    unreadable. Writes happen immediately and are not acknowledged: a failed
    write is logged and the in-memory state stays authoritative.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def load(self, key: str, default: Any) -> Any:
        path = self._path(key)
        if not path.exists():
            return default
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except (json.JSONDecodeError, OSError):
            logger.exception("Could not read stored collection %r from %s", key, path)
            return default

    def save(self, key: str, value: Any) -> None:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as handle:
                json.dump(value, handle, ensure_ascii=False, indent=2)
        except (OSError, TypeError, ValueError):
            logger.exception("Could not write collection %r to %s", key, path)
