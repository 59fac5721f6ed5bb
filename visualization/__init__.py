"""Visualization utilities for SiteLedger views."""

from .charts import build_budget_share_chart, build_cost_chart
from .theme import theme_tokens

__all__ = [
    "build_budget_share_chart",
    "build_cost_chart",
    "theme_tokens",
]
