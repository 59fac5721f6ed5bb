"""Tests for the budget and expense rollups."""

from __future__ import annotations

import sys
from dataclasses import replace
from datetime import date
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from analytics.totals import (
    category_chart_rows,
    chart_frame,
    expense_ledger,
    expenses_by_category,
    project_actual,
    project_budgeted,
    project_chart_rows,
    summarize_portfolio,
    summarize_project,
)
from core.budget import delete_category
from core.models import BudgetCategory, BudgetItem, Expense, Project, ProjectStatus
from core.seed import default_projects
from visualization import build_budget_share_chart, build_cost_chart
from visualization.theme import theme_tokens


def _project(budgeted: float, spent: float, status: ProjectStatus = ProjectStatus.IN_PROGRESS) -> Project:
    return Project(
        id=f"p-{budgeted}-{spent}",
        name="Test",
        client_id="client-1",
        location="Site",
        status=status,
        budget=(
            BudgetCategory(
                id="cat-a",
                name="Materials",
                items=(BudgetItem(id="item-a", name="Lot", quantity=1, budgeted_cost=budgeted),),
            ),
        ),
        expenses=(
            Expense(id="exp-a", description="Spend", amount=spent, date=date(2024, 1, 1), category_id="cat-a"),
        ),
    )


@pytest.fixture()
def seed_projects() -> tuple[Project, ...]:
    return default_projects()


def test_project_totals_from_seed(seed_projects):
    alphaville, itaim = seed_projects

    assert project_budgeted(alphaville) == pytest.approx(42500.0)
    assert project_actual(alphaville) == pytest.approx(15700.0)
    assert project_budgeted(itaim) == pytest.approx(51200.0)

    summary = summarize_project(alphaville)
    assert summary["balance"] == pytest.approx(26800.0)
    assert summary["progress"] == pytest.approx(15700.0 / 42500.0 * 100)


def test_progress_is_zero_without_budget():
    project = Project(id="p", name="Empty", client_id="c", location="x")

    assert summarize_project(project) == {"budgeted": 0.0, "actual": 0.0, "balance": 0.0, "progress": 0.0}


def test_portfolio_summary(seed_projects):
    summary = summarize_portfolio(seed_projects)

    assert summary["total_budgeted"] == pytest.approx(93700.0)
    assert summary["total_actual"] == pytest.approx(67700.0)
    assert summary["financial_health"] == pytest.approx((93700.0 - 67700.0) / 93700.0 * 100)
    assert summary["over_budget_count"] == 1
    assert summary["total_value_completed"] == pytest.approx(51200.0)
    assert summary["active_count"] == 1


def test_financial_health_is_zero_without_budget():
    assert summarize_portfolio([])["financial_health"] == 0.0
    assert summarize_portfolio([_project(0.0, 250.0)])["financial_health"] == 0.0


def test_over_budget_is_strictly_greater():
    assert summarize_portfolio([_project(1000.0, 1000.0)])["over_budget_count"] == 0
    assert summarize_portfolio([_project(1000.0, 1000.01)])["over_budget_count"] == 1


def test_expenses_by_category_ignores_orphans(seed_projects):
    alphaville = seed_projects[0]
    orphan = Expense(id="exp-x", description="Lost", amount=99.0, date=date(2024, 8, 1), category_id="gone")
    project = replace(alphaville, expenses=alphaville.expenses + (orphan,))

    totals = expenses_by_category(project)

    assert totals == {"cat-1": pytest.approx(11450.0), "cat-2": pytest.approx(4250.0)}
    assert project_actual(project) == pytest.approx(15799.0)


def test_chart_rows_truncate_long_project_names(seed_projects):
    rows = project_chart_rows(seed_projects)

    assert [row["name"] for row in rows] == ["Alphaville Resi...", "Itaim Commercia..."]
    assert rows[1]["actual"] == pytest.approx(52000.0)


def test_category_chart_rows_keep_full_names(seed_projects):
    project = seed_projects[0]
    long_name = "Electrical installations"
    renamed = replace(project.budget[0], name=long_name)
    project = replace(project, budget=(renamed,) + project.budget[1:])

    rows = category_chart_rows(project)

    assert rows[0]["name"] == long_name
    assert [row["name"] for row in rows[1:]] == [category.name for category in project.budget[1:]]


def test_chart_frame_is_long_form(seed_projects):
    frame = chart_frame(category_chart_rows(seed_projects[0]))

    assert list(frame.columns) == ["Name", "Series", "Value"]
    assert frame["Name"].tolist() == ["Materials", "Materials", "Labor", "Labor"]
    assert frame["Series"].tolist() == ["Budgeted", "Spent", "Budgeted", "Spent"]
    assert frame["Value"].tolist() == pytest.approx([23500.0, 11450.0, 19000.0, 4250.0])


def test_chart_frame_handles_no_rows():
    frame = chart_frame([])

    assert frame.empty
    assert list(frame.columns) == ["Name", "Series", "Value"]


def test_expense_ledger_is_newest_first_with_category_names(seed_projects):
    ledger = expense_ledger(seed_projects[0])

    assert ledger["id"].tolist() == ["exp-5", "exp-3", "exp-2", "exp-1"]
    assert ledger["Category"].tolist() == ["Labor", "Labor", "Materials", "Materials"]
    assert ledger["Amount"].sum() == pytest.approx(15700.0)


def test_deleted_category_expenses_stay_in_actual_total(seed_projects):
    project = seed_projects[0]
    materials = project.budget[0]

    trimmed = delete_category(project, materials.id)
    ledger = expense_ledger(trimmed)

    assert project_actual(trimmed) == pytest.approx(project_actual(project))
    assert materials.id not in expenses_by_category(trimmed)
    assert ledger["Category"].tolist() == ["Labor", "Labor", "Uncategorized", "Uncategorized"]


def test_cost_chart_uses_series_colours(seed_projects):
    fig = build_cost_chart(chart_frame(category_chart_rows(seed_projects[0])))

    colours = {trace.name: trace.marker.color for trace in fig.data}
    assert colours == {"Budgeted": theme_tokens().budgeted_color, "Spent": theme_tokens().spent_color}


def test_charts_without_data_show_a_message():
    empty = chart_frame([])

    assert build_cost_chart(empty).layout.annotations[0].text == "No cost data to display yet."
    assert build_budget_share_chart(empty).layout.annotations
