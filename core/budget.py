"""Copy-on-write operations on a project's budget tree and expense ledger.

Every function takes a :class:`~core.models.Project` and returns a new one;
inputs are never mutated. Category and item names are compared after
trimming and case-folding, but stored with the casing they arrived with.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Iterable, Sequence

from core.models import (
    LABOR_CATEGORY,
    MATERIALS_CATEGORY,
    BudgetCategory,
    BudgetItem,
    BudgetTemplate,
    Expense,
    Project,
    ProjectStatus,
    ProposedItem,
    new_id,
)

__all__ = [
    "InvalidProposalError",
    "add_category",
    "add_expense",
    "add_item",
    "apply_proposed_items",
    "apply_template",
    "coerce_cost",
    "coerce_quantity",
    "create_project",
    "delete_category",
    "delete_expense",
    "delete_item",
    "seed_budget",
    "set_status",
    "update_item",
]


class InvalidProposalError(ValueError):
    """Raised when a proposed budget line has a blank category or item name."""


def _name_key(name: str) -> str:
    return name.strip().casefold()


def coerce_quantity(value: Any) -> int:
    """Parse a quantity, falling back to 1 for blank, invalid or non-positive input."""

    try:
        quantity = int(float(value))
    except (TypeError, ValueError):
        return 1
    return quantity if quantity >= 1 else 1


def coerce_cost(value: Any) -> float:
    """Parse a unit cost, falling back to 0 for invalid or negative input."""

    try:
        cost = float(value)
    except (TypeError, ValueError):
        return 0.0
    if cost != cost or cost < 0:  # NaN
        return 0.0
    return cost


def seed_budget() -> tuple[BudgetCategory, ...]:
    return (
        BudgetCategory(id=new_id("cat"), name=MATERIALS_CATEGORY),
        BudgetCategory(id=new_id("cat"), name=LABOR_CATEGORY),
    )


def create_project(name: str, client_id: str, location: str) -> Project:
    if not name.strip() or not client_id.strip() or not location.strip():
        raise ValueError("Project name, client and location are required.")
    return Project(
        id=new_id("proj"),
        name=name.strip(),
        client_id=client_id,
        location=location.strip(),
        status=ProjectStatus.PLANNING,
        budget=seed_budget(),
    )


def set_status(project: Project, status: ProjectStatus) -> Project:
    return replace(project, status=ProjectStatus(status))


def _find_category(budget: Sequence[BudgetCategory], name: str) -> int:
    key = _name_key(name)
    for index, category in enumerate(budget):
        if _name_key(category.name) == key:
            return index
    return -1


def _find_item(items: Sequence[BudgetItem], name: str) -> int:
    key = _name_key(name)
    for index, item in enumerate(items):
        if _name_key(item.name) == key:
            return index
    return -1


def _resolve_category(budget: list[BudgetCategory], name: str) -> int:
    """Return the index of the category called ``name``, appending it when missing."""

    index = _find_category(budget, name)
    if index == -1:
        budget.append(BudgetCategory(id=new_id("cat"), name=name.strip()))
        index = len(budget) - 1
    return index


def _replace_category(project: Project, category_id: str, category: BudgetCategory) -> Project:
    budget = tuple(category if cat.id == category_id else cat for cat in project.budget)
    return replace(project, budget=budget)


def _get_category(project: Project, category_id: str) -> BudgetCategory:
    for category in project.budget:
        if category.id == category_id:
            return category
    raise KeyError(f"Unknown category '{category_id}' in project '{project.id}'")


def _validate_proposals(proposals: Iterable[ProposedItem]) -> list[ProposedItem]:
    checked = list(proposals)
    for position, proposal in enumerate(checked):
        if not proposal.category.strip():
            raise InvalidProposalError(f"Proposed line {position + 1} has no category name.")
        if not proposal.item_name.strip():
            raise InvalidProposalError(f"Proposed line {position + 1} has no item name.")
    return checked


def apply_proposed_items(project: Project, proposals: Iterable[ProposedItem]) -> Project:
    """Fold proposed lines into the budget tree.

    Categories are matched by name or created; items already present in the
    target category have their quantity increased and keep their unit cost,
    anything else is appended. Re-applying the same proposals therefore adds
    the quantities again. The whole batch is rejected if any line has a blank
    category or item name.
    """

    checked = _validate_proposals(proposals)
    budget = list(project.budget)

    for proposal in checked:
        index = _resolve_category(budget, proposal.category)
        category = budget[index]
        items = list(category.items)
        quantity = coerce_quantity(proposal.quantity)

        item_index = _find_item(items, proposal.item_name)
        if item_index > -1:
            existing = items[item_index]
            items[item_index] = replace(existing, quantity=existing.quantity + quantity)
        else:
            items.append(
                BudgetItem(
                    id=new_id("item"),
                    name=proposal.item_name.strip(),
                    quantity=quantity,
                    budgeted_cost=coerce_cost(proposal.unit_cost),
                )
            )
        budget[index] = replace(category, items=tuple(items))

    return replace(project, budget=tuple(budget))


def apply_template(project: Project, template: BudgetTemplate) -> Project:
    """Stamp every kit line into the budget as a new item.

    Categories are resolved exactly as in :func:`apply_proposed_items`, but
    items are never merged: applying the same kit twice yields two full sets
    of lines.
    """

    proposals = [
        ProposedItem(
            category=line.category,
            item_name=line.name,
            quantity=line.quantity,
            unit_cost=line.budgeted_cost,
        )
        for line in template.items
    ]
    checked = _validate_proposals(proposals)
    budget = list(project.budget)

    for proposal in checked:
        index = _resolve_category(budget, proposal.category)
        category = budget[index]
        new_item = BudgetItem(
            id=new_id("item"),
            name=proposal.item_name.strip(),
            quantity=coerce_quantity(proposal.quantity),
            budgeted_cost=coerce_cost(proposal.unit_cost),
        )
        budget[index] = replace(category, items=category.items + (new_item,))

    return replace(project, budget=tuple(budget))


def add_category(project: Project, name: str) -> Project:
    if not name.strip():
        raise ValueError("Category name is required.")
    budget = list(project.budget)
    _resolve_category(budget, name)
    return replace(project, budget=tuple(budget))


def delete_category(project: Project, category_id: str) -> Project:
    budget = tuple(cat for cat in project.budget if cat.id != category_id)
    return replace(project, budget=budget)


def add_item(
    project: Project,
    category_id: str,
    name: str,
    quantity: Any,
    unit_cost: Any,
) -> Project:
    if not name.strip():
        raise ValueError("Item name is required.")
    category = _get_category(project, category_id)
    item = BudgetItem(
        id=new_id("item"),
        name=name.strip(),
        quantity=coerce_quantity(quantity),
        budgeted_cost=coerce_cost(unit_cost),
    )
    return _replace_category(project, category_id, replace(category, items=category.items + (item,)))


def update_item(
    project: Project,
    category_id: str,
    item_id: str,
    *,
    name: str,
    quantity: Any,
    unit_cost: Any,
) -> Project:
    category = _get_category(project, category_id)
    items = tuple(
        replace(
            item,
            name=name.strip() or item.name,
            quantity=coerce_quantity(quantity),
            budgeted_cost=coerce_cost(unit_cost),
        )
        if item.id == item_id
        else item
        for item in category.items
    )
    return _replace_category(project, category_id, replace(category, items=items))


def delete_item(project: Project, category_id: str, item_id: str) -> Project:
    category = _get_category(project, category_id)
    items = tuple(item for item in category.items if item.id != item_id)
    return _replace_category(project, category_id, replace(category, items=items))


def add_expense(
    project: Project,
    description: str,
    amount: Any,
    spent_on: date | None,
    category_id: str,
) -> Project:
    """Record an expense, keeping the ledger ordered newest first."""

    if not description.strip() or spent_on is None or not category_id:
        raise ValueError("Description, amount, date and category are required.")
    try:
        value = float(amount)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid expense amount: {amount!r}") from exc

    expense = Expense(
        id=new_id("exp"),
        description=description.strip(),
        amount=value,
        date=spent_on,
        category_id=category_id,
    )
    expenses = sorted(project.expenses + (expense,), key=lambda exp: exp.date, reverse=True)
    return replace(project, expenses=tuple(expenses))


def delete_expense(project: Project, expense_id: str) -> Project:
    expenses = tuple(exp for exp in project.expenses if exp.id != expense_id)
    return replace(project, expenses=expenses)
