"""Shared Plotly theme tokens for SiteLedger visualizations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ThemeTokens:
    """Colours and fonts read by the cost and budget-share charts."""

    label_color: str = "#334155"
    label_font: str = "Inter"
    label_size: int = 12
    budgeted_color: str = "#1E40AF"
    spent_color: str = "#F97316"
    muted_color: str = "#94A3B8"
    slice_border: str = "#FFFFFF"
    gridline: str = "rgba(148, 163, 184, 0.25)"
    # budget-share slices, one per category, repeated when a project has more
    category_palette: tuple[str, ...] = (
        "#1E40AF",
        "#F97316",
        "#0EA5E9",
        "#65A30D",
        "#A16207",
        "#64748B",
    )


SITE_THEME = ThemeTokens()


def theme_tokens() -> ThemeTokens:
    return SITE_THEME
