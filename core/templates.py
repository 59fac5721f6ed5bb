"""Kit (budget template) editing helpers."""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from core.budget import coerce_quantity
from core.models import BudgetTemplate, CatalogEntry, TemplateItem, new_id

__all__ = [
    "add_catalog_entry",
    "create_template",
    "remove_template_item",
    "rename_template",
    "set_template_item_quantity",
    "template_total",
]


def create_template(name: str) -> BudgetTemplate:
    if not name.strip():
        raise ValueError("Kit name is required.")
    return BudgetTemplate(id=new_id("template"), name=name.strip())


def rename_template(template: BudgetTemplate, name: str) -> BudgetTemplate:
    if not name.strip():
        raise ValueError("Kit name is required.")
    return replace(template, name=name.strip())


def add_catalog_entry(template: BudgetTemplate, entry: CatalogEntry) -> BudgetTemplate:
    """Append a catalog entry to the kit with quantity 1 and the entry's defaults."""

    line = TemplateItem(
        category=entry.default_category,
        name=entry.name,
        quantity=1,
        budgeted_cost=entry.default_unit_cost,
    )
    return replace(template, items=template.items + (line,))


def remove_template_item(template: BudgetTemplate, index: int) -> BudgetTemplate:
    items = tuple(line for position, line in enumerate(template.items) if position != index)
    return replace(template, items=items)


def set_template_item_quantity(template: BudgetTemplate, index: int, quantity: Any) -> BudgetTemplate:
    items = tuple(
        replace(line, quantity=coerce_quantity(quantity)) if position == index else line
        for position, line in enumerate(template.items)
    )
    return replace(template, items=items)


def template_total(template: BudgetTemplate) -> float:
    return float(sum(line.quantity * line.budgeted_cost for line in template.items))
