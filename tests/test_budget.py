"""Tests for budget editing and the proposal/kit merge rules."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from analytics.totals import line_total, project_budgeted
from core.budget import (
    InvalidProposalError,
    add_category,
    add_expense,
    add_item,
    apply_proposed_items,
    apply_template,
    coerce_cost,
    coerce_quantity,
    create_project,
    delete_category,
    delete_expense,
    delete_item,
    set_status,
    update_item,
)
from core.models import BudgetTemplate, Project, ProjectStatus, ProposedItem, TemplateItem


@pytest.fixture()
def empty_project() -> Project:
    return Project(id="proj-x", name="Kitchen", client_id="client-1", location="Moema, SP")


def _item_sum(project: Project) -> float:
    return sum(line_total(item) for category in project.budget for item in category.items)


def test_create_project_seeds_default_categories():
    project = create_project("  Loft  ", "client-1", "Pinheiros")

    assert project.name == "Loft"
    assert project.status is ProjectStatus.PLANNING
    assert [category.name for category in project.budget] == ["Materials", "Labor"]
    assert project.expenses == ()


def test_create_project_requires_fields():
    with pytest.raises(ValueError):
        create_project("Loft", "client-1", "   ")


def test_total_tracks_items_through_edits(empty_project):
    project = add_category(empty_project, "Finishing")
    category_id = project.budget[0].id
    project = add_item(project, category_id, "Tiles", 12, 45.5)
    project = add_item(project, category_id, "Grout", 3, 20)
    assert project_budgeted(project) == pytest.approx(_item_sum(project))
    assert project_budgeted(project) == pytest.approx(606.0)

    tiles = project.budget[0].items[0]
    project = update_item(project, category_id, tiles.id, name="Porcelain tiles", quantity=10, unit_cost=50)
    assert project.budget[0].items[0].name == "Porcelain tiles"
    assert project_budgeted(project) == pytest.approx(_item_sum(project))
    assert project_budgeted(project) == pytest.approx(560.0)

    grout = project.budget[0].items[1]
    project = delete_item(project, category_id, grout.id)
    assert project_budgeted(project) == pytest.approx(_item_sum(project))
    assert project_budgeted(project) == pytest.approx(500.0)

    project = delete_category(project, category_id)
    assert project.budget == ()
    assert project_budgeted(project) == 0.0


def test_editing_does_not_mutate_input(empty_project):
    updated = add_category(empty_project, "Finishing")

    assert empty_project.budget == ()
    assert len(updated.budget) == 1


def test_applying_same_proposal_twice_sums_quantity(empty_project):
    proposal = [ProposedItem(category="Materials", item_name="Cement", quantity=2, unit_cost=10)]

    project = apply_proposed_items(empty_project, proposal)
    project = apply_proposed_items(project, proposal)

    assert len(project.budget) == 1
    category = project.budget[0]
    assert category.name == "Materials"
    assert len(category.items) == 1
    assert category.items[0].name == "Cement"
    assert category.items[0].quantity == 4
    assert category.items[0].budgeted_cost == 10


def test_proposal_merge_keeps_existing_unit_cost(empty_project):
    project = apply_proposed_items(empty_project, [ProposedItem("Materials", "Cement", 1, 10)])
    project = apply_proposed_items(project, [ProposedItem("materials", "  CEMENT ", 3, 99)])

    item = project.budget[0].items[0]
    assert (item.name, item.quantity, item.budgeted_cost) == ("Cement", 4, 10)


def test_category_match_is_case_insensitive():
    project = create_project("Loft", "client-1", "Pinheiros")

    merged = apply_proposed_items(project, [ProposedItem("materials", "Sand", 5, 8)])

    assert [category.name for category in merged.budget] == ["Materials", "Labor"]
    assert merged.budget[0].items[0].name == "Sand"


def test_proposal_batch_with_blank_name_is_rejected(empty_project):
    proposals = [
        ProposedItem("Materials", "Cement", 2, 10),
        ProposedItem("Labor", "   ", 1, 200),
    ]

    with pytest.raises(InvalidProposalError):
        apply_proposed_items(empty_project, proposals)


def test_proposal_quantities_and_costs_are_coerced(empty_project):
    project = apply_proposed_items(empty_project, [ProposedItem("Equipment", "Mixer", 0, -5)])

    item = project.budget[0].items[0]
    assert (item.quantity, item.budgeted_cost) == (1, 0.0)


def test_applying_kit_twice_appends_items(empty_project):
    kit = BudgetTemplate(
        id="template-1",
        name="Paint job",
        items=(TemplateItem(category="Materials", name="Paint", quantity=1, budgeted_cost=50),),
    )

    project = apply_template(empty_project, kit)
    project = apply_template(project, kit)

    assert len(project.budget) == 1
    assert project.budget[0].name == "Materials"
    paints = project.budget[0].items
    assert [item.name for item in paints] == ["Paint", "Paint"]
    assert [item.quantity for item in paints] == [1, 1]
    assert paints[0].id != paints[1].id


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("3", 3), (2.7, 2), ("", 1), (None, 1), (0, 1), (-4, 1), ("abc", 1)],
)
def test_coerce_quantity(raw, expected):
    assert coerce_quantity(raw) == expected


@pytest.mark.parametrize(("raw", "expected"), [("12.5", 12.5), ("x", 0.0), (-1, 0.0), (float("nan"), 0.0)])
def test_coerce_cost(raw, expected):
    assert coerce_cost(raw) == expected


def test_expenses_are_kept_newest_first(empty_project):
    project = add_category(empty_project, "Materials")
    category_id = project.budget[0].id

    project = add_expense(project, "Sand", 100, date(2024, 5, 1), category_id)
    project = add_expense(project, "Cement", "250.5", date(2024, 6, 1), category_id)
    project = add_expense(project, "Bricks", 80, date(2024, 4, 1), category_id)

    assert [expense.description for expense in project.expenses] == ["Cement", "Sand", "Bricks"]
    assert project.expenses[0].amount == 250.5

    project = delete_expense(project, project.expenses[0].id)
    assert [expense.description for expense in project.expenses] == ["Sand", "Bricks"]


def test_add_expense_rejects_bad_input(empty_project):
    with pytest.raises(ValueError):
        add_expense(empty_project, " ", 10, date(2024, 1, 1), "cat")
    with pytest.raises(ValueError):
        add_expense(empty_project, "Sand", "lots", date(2024, 1, 1), "cat")


def test_set_status(empty_project):
    assert set_status(empty_project, ProjectStatus.PAUSED).status is ProjectStatus.PAUSED
    assert set_status(empty_project, "Completed").status is ProjectStatus.COMPLETED
