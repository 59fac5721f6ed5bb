"""Formatting helpers for SiteLedger views and documents."""

from __future__ import annotations

from datetime import date

__all__ = ["format_currency", "format_date", "format_percent", "slugify_filename"]

CURRENCY_SYMBOL = "R$"


def format_currency(value: float, symbol: str = CURRENCY_SYMBOL) -> str:
    """Format an amount Brazilian-style, e.g. ``R$ 1.234,56``."""

    sign = "-" if value < 0 else ""
    grouped = f"{abs(value):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}{symbol} {grouped}"


def format_percent(value: float, digits: int = 1) -> str:
    return f"{value:.{digits}f}%"


def format_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def slugify_filename(name: str) -> str:
    """Collapse whitespace runs to underscores for download file names."""

    return "_".join(name.split())
