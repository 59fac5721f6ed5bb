"""Demo records used when the store has no saved collections yet."""

from __future__ import annotations

from datetime import date

from core.models import (
    BudgetCategory,
    BudgetItem,
    CatalogEntry,
    CatalogProduct,
    CatalogService,
    Client,
    Expense,
    Project,
    ProjectStatus,
)

__all__ = ["default_catalog", "default_clients", "default_projects"]


def default_clients() -> tuple[Client, ...]:
    return (
        Client(
            id="client-1",
            name="Silva Family",
            document_id="123.456.789-00",
            contact_phone="11999998888",
            address="Rua das Flores, 123, São Paulo, SP",
        ),
        Client(
            id="client-2",
            name="InvestCo",
            document_id="12.345.678/0001-99",
            contact_phone="11999997777",
            address="Av. Faria Lima, 4500, São Paulo, SP",
        ),
    )


def default_catalog() -> tuple[CatalogEntry, ...]:
    return (
        CatalogProduct(id="prod-1", name="Portland cement (50kg bag)", cost_price=28, sale_price=35),
        CatalogProduct(id="prod-2", name="Ceramic bricks (thousand)", cost_price=750, sale_price=950),
        CatalogService(id="serv-1", name="Mason (day rate)", service_cost=200),
        CatalogService(id="serv-2", name="Electrical point installation", service_cost=80),
    )


def default_projects() -> tuple[Project, ...]:
    return (
        Project(
            id="proj-1",
            name="Alphaville Residence",
            client_id="client-1",
            location="Alphaville, SP",
            status=ProjectStatus.IN_PROGRESS,
            budget=(
                BudgetCategory(
                    id="cat-1",
                    name="Materials",
                    items=(
                        BudgetItem(id="item-1", name="Portland cement (50kg)", quantity=100, budgeted_cost=35),
                        BudgetItem(id="item-2", name="Bricks (thousand)", quantity=10, budgeted_cost=800),
                        BudgetItem(id="item-3", name="CA-50 rebar", quantity=500, budgeted_cost=24),
                    ),
                ),
                BudgetCategory(
                    id="cat-2",
                    name="Labor",
                    items=(
                        BudgetItem(id="item-4", name="Masons (day rate)", quantity=75, budgeted_cost=200),
                        BudgetItem(id="item-5", name="Electrician (per point)", quantity=50, budgeted_cost=80),
                    ),
                ),
            ),
            expenses=(
                Expense(id="exp-5", description="Electrician, 2nd installment", amount=2250,
                        date=date(2024, 7, 28), category_id="cat-2"),
                Expense(id="exp-3", description="Electrician, 1st installment", amount=2000,
                        date=date(2024, 7, 20), category_id="cat-2"),
                Expense(id="exp-2", description="Bricks from Olaria Central", amount=7800,
                        date=date(2024, 7, 16), category_id="cat-1"),
                Expense(id="exp-1", description="Cement from Zé's hardware store", amount=3650,
                        date=date(2024, 7, 15), category_id="cat-1"),
            ),
        ),
        Project(
            id="proj-2",
            name="Itaim Commercial Building",
            client_id="client-2",
            location="Itaim Bibi, SP",
            status=ProjectStatus.COMPLETED,
            budget=(
                BudgetCategory(
                    id="cat-3",
                    name="Foundations",
                    items=(BudgetItem(id="item-6", name="Ready-mix concrete", quantity=20, budgeted_cost=2500),),
                ),
                BudgetCategory(
                    id="cat-4",
                    name="Equipment",
                    items=(BudgetItem(id="item-7", name="Concrete mixer rental (month)", quantity=1, budgeted_cost=1200),),
                ),
            ),
            expenses=(
                Expense(id="exp-4", description="Concrete from ConcreMAX", amount=52000,
                        date=date(2024, 7, 18), category_id="cat-3"),
            ),
        ),
    )
