"""Aggregation and filtering helpers shared across SiteLedger views."""

from analytics.filtering import (
    IN_PROGRESS_BUCKET,
    StatusFilter,
    filter_catalog,
    filter_projects,
    split_catalog,
)
from analytics.totals import (
    category_budgeted,
    category_chart_rows,
    chart_frame,
    expense_ledger,
    expenses_by_category,
    line_total,
    project_actual,
    project_budgeted,
    project_chart_rows,
    summarize_portfolio,
    summarize_project,
)

__all__ = [
    "IN_PROGRESS_BUCKET",
    "StatusFilter",
    "filter_catalog",
    "filter_projects",
    "split_catalog",
    "category_budgeted",
    "category_chart_rows",
    "chart_frame",
    "expense_ledger",
    "expenses_by_category",
    "line_total",
    "project_actual",
    "project_budgeted",
    "project_chart_rows",
    "summarize_portfolio",
    "summarize_project",
]
