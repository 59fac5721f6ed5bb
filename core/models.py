"""Shared data model definitions for SiteLedger."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Literal, TypedDict, Union

MATERIALS_CATEGORY = "Materials"
LABOR_CATEGORY = "Labor"


def new_id(prefix: str) -> str:
    """Return a fresh identifier such as ``item-3f2a9c0b1d4e``."""

    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class ProjectStatus(str, Enum):
    PLANNING = "Planning"
    IN_PROGRESS = "In Progress"
    PAUSED = "Paused"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


@dataclass(frozen=True)
class Client:
    id: str
    name: str
    document_id: str | None = None
    contact_phone: str | None = None
    address: str | None = None


@dataclass(frozen=True)
class CatalogProduct:
    """A physical product with purchase and resale prices."""

    id: str
    name: str
    cost_price: float = 0.0
    sale_price: float = 0.0

    kind: Literal["product"] = field(default="product", init=False)

    @property
    def default_unit_cost(self) -> float:
        return self.sale_price

    @property
    def default_category(self) -> str:
        return MATERIALS_CATEGORY


@dataclass(frozen=True)
class CatalogService:
    """A service priced by a single cost figure."""

    id: str
    name: str
    service_cost: float = 0.0

    kind: Literal["service"] = field(default="service", init=False)

    @property
    def default_unit_cost(self) -> float:
        return self.service_cost

    @property
    def default_category(self) -> str:
        return LABOR_CATEGORY


CatalogEntry = Union[CatalogProduct, CatalogService]


@dataclass(frozen=True)
class BudgetItem:
    id: str
    name: str
    quantity: int
    budgeted_cost: float


@dataclass(frozen=True)
class BudgetCategory:
    id: str
    name: str
    items: tuple[BudgetItem, ...] = ()


@dataclass(frozen=True)
class Expense:
    id: str
    description: str
    amount: float
    date: date
    category_id: str


@dataclass(frozen=True)
class Project:
    id: str
    name: str
    client_id: str
    location: str
    status: ProjectStatus = ProjectStatus.PLANNING
    budget: tuple[BudgetCategory, ...] = ()
    expenses: tuple[Expense, ...] = ()


@dataclass(frozen=True)
class TemplateItem:
    category: str
    name: str
    quantity: int
    budgeted_cost: float


@dataclass(frozen=True)
class BudgetTemplate:
    id: str
    name: str
    items: tuple[TemplateItem, ...] = ()


@dataclass(frozen=True)
class ProposedItem:
    """A budget line proposed by the AI assistant or a kit."""

    category: str
    item_name: str
    quantity: int
    unit_cost: float


@dataclass(frozen=True)
class Recommendation:
    title: str
    description: str
    impact: str


@dataclass(frozen=True)
class ConsultancyReport:
    title: str
    summary: str
    recommendations: tuple[Recommendation, ...] = ()


class ChartRow(TypedDict):
    name: str
    budgeted: float
    actual: float


class ProjectSummary(TypedDict):
    budgeted: float
    actual: float
    balance: float
    progress: float


class PortfolioSummary(TypedDict):
    total_budgeted: float
    total_actual: float
    financial_health: float
    over_budget_count: int
    total_value_completed: float
    active_count: int


__all__ = [
    "LABOR_CATEGORY",
    "MATERIALS_CATEGORY",
    "BudgetCategory",
    "BudgetItem",
    "BudgetTemplate",
    "CatalogEntry",
    "CatalogProduct",
    "CatalogService",
    "ChartRow",
    "Client",
    "ConsultancyReport",
    "Expense",
    "PortfolioSummary",
    "Project",
    "ProjectStatus",
    "ProjectSummary",
    "ProposedItem",
    "Recommendation",
    "TemplateItem",
    "new_id",
]
