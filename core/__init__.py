"""Core domain package for the SiteLedger application."""

from .budget import InvalidProposalError, apply_proposed_items, apply_template
from .models import (
    BudgetCategory,
    BudgetItem,
    BudgetTemplate,
    CatalogEntry,
    CatalogProduct,
    CatalogService,
    Client,
    ConsultancyReport,
    Expense,
    Project,
    ProjectStatus,
    ProposedItem,
    Recommendation,
    TemplateItem,
)
from .state import AppState, ClientInUseError
from .storage import JsonStore

__all__ = [
    "AppState",
    "BudgetCategory",
    "BudgetItem",
    "BudgetTemplate",
    "CatalogEntry",
    "CatalogProduct",
    "CatalogService",
    "Client",
    "ClientInUseError",
    "ConsultancyReport",
    "Expense",
    "InvalidProposalError",
    "JsonStore",
    "Project",
    "ProjectStatus",
    "ProposedItem",
    "Recommendation",
    "TemplateItem",
    "apply_proposed_items",
    "apply_template",
]
