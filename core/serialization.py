"""Conversion between domain records and JSON-ready dictionaries."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Iterable, Mapping

from core.budget import coerce_quantity
from core.models import (
    BudgetCategory,
    BudgetItem,
    BudgetTemplate,
    CatalogEntry,
    CatalogProduct,
    CatalogService,
    Client,
    Expense,
    Project,
    ProjectStatus,
    TemplateItem,
)

__all__ = [
    "catalog_entry_from_dict",
    "catalog_entry_to_dict",
    "client_from_dict",
    "client_to_dict",
    "dump_many",
    "load_many",
    "project_from_dict",
    "project_to_dict",
    "template_from_dict",
    "template_to_dict",
]

logger = logging.getLogger(__name__)

DECODE_ERRORS = (AttributeError, KeyError, TypeError, ValueError)


def _coerce_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text or None


def client_to_dict(client: Client) -> dict[str, Any]:
    return {
        "id": client.id,
        "name": client.name,
        "document_id": client.document_id,
        "contact_phone": client.contact_phone,
        "address": client.address,
    }


def client_from_dict(data: Mapping[str, Any]) -> Client:
    return Client(
        id=str(data["id"]),
        name=str(data.get("name", "")),
        document_id=_optional_str(data.get("document_id")),
        contact_phone=_optional_str(data.get("contact_phone")),
        address=_optional_str(data.get("address")),
    )


def catalog_entry_to_dict(entry: CatalogEntry) -> dict[str, Any]:
    if isinstance(entry, CatalogProduct):
        return {
            "id": entry.id,
            "name": entry.name,
            "type": "product",
            "cost_price": entry.cost_price,
            "sale_price": entry.sale_price,
        }
    return {
        "id": entry.id,
        "name": entry.name,
        "type": "service",
        "service_cost": entry.service_cost,
    }


def catalog_entry_from_dict(data: Mapping[str, Any]) -> CatalogEntry:
    kind = data.get("type")
    if kind == "product":
        return CatalogProduct(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            cost_price=_coerce_float(data.get("cost_price")),
            sale_price=_coerce_float(data.get("sale_price")),
        )
    if kind == "service":
        return CatalogService(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            service_cost=_coerce_float(data.get("service_cost")),
        )
    raise ValueError(f"Unknown catalog entry type: {kind!r}")


def _item_to_dict(item: BudgetItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "name": item.name,
        "quantity": item.quantity,
        "budgeted_cost": item.budgeted_cost,
    }


def _category_to_dict(category: BudgetCategory) -> dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "items": [_item_to_dict(item) for item in category.items],
    }


def _expense_to_dict(expense: Expense) -> dict[str, Any]:
    return {
        "id": expense.id,
        "description": expense.description,
        "amount": expense.amount,
        "date": expense.date.isoformat(),
        "category_id": expense.category_id,
    }


def project_to_dict(project: Project) -> dict[str, Any]:
    return {
        "id": project.id,
        "name": project.name,
        "client_id": project.client_id,
        "location": project.location,
        "status": project.status.value,
        "budget": [_category_to_dict(category) for category in project.budget],
        "expenses": [_expense_to_dict(expense) for expense in project.expenses],
    }


def project_from_dict(data: Mapping[str, Any]) -> Project:
    budget = tuple(
        BudgetCategory(
            id=str(category["id"]),
            name=str(category.get("name", "")),
            items=tuple(
                BudgetItem(
                    id=str(item["id"]),
                    name=str(item.get("name", "")),
                    quantity=coerce_quantity(item.get("quantity")),
                    budgeted_cost=_coerce_float(item.get("budgeted_cost")),
                )
                for item in category.get("items", [])
            ),
        )
        for category in data.get("budget", [])
    )
    expenses = tuple(
        Expense(
            id=str(expense["id"]),
            description=str(expense.get("description", "")),
            amount=_coerce_float(expense.get("amount")),
            date=date.fromisoformat(str(expense["date"])[:10]),
            category_id=str(expense.get("category_id", "")),
        )
        for expense in data.get("expenses", [])
    )
    return Project(
        id=str(data["id"]),
        name=str(data.get("name", "")),
        client_id=str(data.get("client_id", "")),
        location=str(data.get("location", "")),
        status=ProjectStatus(data.get("status", ProjectStatus.PLANNING.value)),
        budget=budget,
        expenses=expenses,
    )


def template_to_dict(template: BudgetTemplate) -> dict[str, Any]:
    return {
        "id": template.id,
        "name": template.name,
        "items": [
            {
                "category": line.category,
                "name": line.name,
                "quantity": line.quantity,
                "budgeted_cost": line.budgeted_cost,
            }
            for line in template.items
        ],
    }


def template_from_dict(data: Mapping[str, Any]) -> BudgetTemplate:
    return BudgetTemplate(
        id=str(data["id"]),
        name=str(data.get("name", "")),
        items=tuple(
            TemplateItem(
                category=str(line.get("category", "")),
                name=str(line.get("name", "")),
                quantity=coerce_quantity(line.get("quantity")),
                budgeted_cost=_coerce_float(line.get("budgeted_cost")),
            )
            for line in data.get("items", [])
        ),
    )


def dump_many(records: Iterable[Any], encoder: Callable[[Any], dict[str, Any]]) -> list[dict[str, Any]]:
    return [encoder(record) for record in records]


def load_many(raw: Any, decoder: Callable[[Mapping[str, Any]], Any]) -> tuple[Any, ...]:
    """Decode a stored collection, skipping records that cannot be read."""

    if not isinstance(raw, list):
        return ()

    records = []
    for position, entry in enumerate(raw):
        try:
            records.append(decoder(entry))
        except DECODE_ERRORS:
            logger.exception("Skipping unreadable stored record at position %d", position)
    return tuple(records)
