"""Application configuration utilities."""

from .logging import configure_logging
from .settings import DEFAULT_DATA_DIR, DEFAULT_OPENAI_MODEL, Settings, get_settings

__all__ = [
    "DEFAULT_DATA_DIR",
    "DEFAULT_OPENAI_MODEL",
    "Settings",
    "configure_logging",
    "get_settings",
]
