"""Budget and expense rollups for projects and the whole portfolio.

Everything here is recomputed from the entity tree on each call; nothing is
cached or stored, so totals can never drift from the underlying items and
expenses.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import pandas as pd

from core.models import (
    BudgetCategory,
    BudgetItem,
    ChartRow,
    PortfolioSummary,
    Project,
    ProjectStatus,
    ProjectSummary,
)

CHART_LABEL_LIMIT = 15
UNCATEGORIZED_LABEL = "Uncategorized"

__all__ = [
    "CHART_LABEL_LIMIT",
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
    "truncate_label",
]


def line_total(item: BudgetItem) -> float:
    return float(item.quantity * item.budgeted_cost)


def category_budgeted(category: BudgetCategory) -> float:
    return float(sum(line_total(item) for item in category.items))


def project_budgeted(project: Project) -> float:
    return float(sum(category_budgeted(category) for category in project.budget))


def project_actual(project: Project) -> float:
    return float(sum(expense.amount for expense in project.expenses))


def expenses_by_category(project: Project) -> dict[str, float]:
    """Map each category id to the sum of its expenses.

    Every category of the project is present (0.0 when nothing was spent);
    expenses pointing at a category that no longer exists are left out.
    """

    totals = {category.id: 0.0 for category in project.budget}
    for expense in project.expenses:
        if expense.category_id in totals:
            totals[expense.category_id] += float(expense.amount)
    return totals


def summarize_project(project: Project) -> ProjectSummary:
    budgeted = project_budgeted(project)
    actual = project_actual(project)
    progress = (actual / budgeted) * 100 if budgeted > 0 else 0.0
    return {
        "budgeted": budgeted,
        "actual": actual,
        "balance": budgeted - actual,
        "progress": progress,
    }


def summarize_portfolio(projects: Iterable[Project]) -> PortfolioSummary:
    """Aggregate KPIs across projects.

    Financial health is the share of the global budget still unspent. With
    no budget at all there is nothing to measure against, and health is
    reported as 0 rather than left undefined.
    """

    total_budgeted = 0.0
    total_actual = 0.0
    over_budget = 0
    value_completed = 0.0
    active = 0

    for project in projects:
        budgeted = project_budgeted(project)
        actual = project_actual(project)
        total_budgeted += budgeted
        total_actual += actual
        if actual > budgeted:
            over_budget += 1
        if project.status is ProjectStatus.COMPLETED:
            value_completed += budgeted
        if project.status is ProjectStatus.IN_PROGRESS:
            active += 1

    if total_budgeted > 0:
        health = (total_budgeted - total_actual) / total_budgeted * 100
    else:
        health = 0.0

    return {
        "total_budgeted": total_budgeted,
        "total_actual": total_actual,
        "financial_health": health,
        "over_budget_count": over_budget,
        "total_value_completed": value_completed,
        "active_count": active,
    }


def truncate_label(name: str, limit: int = CHART_LABEL_LIMIT) -> str:
    if len(name) <= limit:
        return name
    return name[:limit] + "..."


def category_chart_rows(project: Project) -> list[ChartRow]:
    spent = expenses_by_category(project)
    return [
        {
            "name": category.name,
            "budgeted": category_budgeted(category),
            "actual": spent.get(category.id, 0.0),
        }
        for category in project.budget
    ]


def project_chart_rows(projects: Iterable[Project]) -> list[ChartRow]:
    return [
        {
            "name": truncate_label(project.name),
            "budgeted": project_budgeted(project),
            "actual": project_actual(project),
        }
        for project in projects
    ]


def chart_frame(rows: Sequence[ChartRow]) -> pd.DataFrame:
    """Reshape chart rows into the long form used by the Plotly builders."""

    if not rows:
        return pd.DataFrame(columns=["Name", "Series", "Value"])

    wide = pd.DataFrame(rows).rename(
        columns={"name": "Name", "budgeted": "Budgeted", "actual": "Spent"}
    )
    wide["Order"] = range(len(wide))
    long = wide.melt(
        id_vars=["Name", "Order"],
        value_vars=["Budgeted", "Spent"],
        var_name="Series",
        value_name="Value",
    )
    long["Value"] = long["Value"].astype(float)
    return long.sort_values(["Order", "Series"]).drop(columns="Order").reset_index(drop=True)


def expense_ledger(project: Project) -> pd.DataFrame:
    """Return the project's expenses, newest first, with category names resolved."""

    columns = ["id", "Date", "Description", "Category", "Amount"]
    if not project.expenses:
        return pd.DataFrame(columns=columns)

    names = {category.id: category.name for category in project.budget}
    ledger = pd.DataFrame(
        [
            {
                "id": expense.id,
                "Date": pd.Timestamp(expense.date),
                "Description": expense.description,
                "Category": names.get(expense.category_id, UNCATEGORIZED_LABEL),
                "Amount": float(expense.amount),
            }
            for expense in project.expenses
        ],
        columns=columns,
    )
    return ledger.sort_values("Date", ascending=False, kind="stable").reset_index(drop=True)
