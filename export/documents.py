"""PDF-ready summaries of a project's budget proposal and work order."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from analytics.totals import category_budgeted, line_total, project_budgeted
from core.models import Client, Project

__all__ = [
    "NOT_INFORMED",
    "Proposal",
    "ProposalLine",
    "ProposalSection",
    "WorkOrder",
    "WorkOrderLine",
    "WorkOrderSection",
    "build_proposal",
    "build_work_order",
]

NOT_INFORMED = "Not informed"
UNKNOWN_CLIENT = "Unknown client"
EMPTY_CATEGORY = "No items in this category."

PROPOSAL_VALIDITY = "Proposal valid for 30 days. Prices are subject to change after this period."
PROPOSAL_CLOSING = "Thank you for your business!"
WORK_ORDER_SUBTITLE = "Agreement on services and materials"
WORK_ORDER_DECLARATION = (
    "I declare that I am aware of and agree with the scope of services and "
    "materials described in this work order."
)


@dataclass(frozen=True)
class ProposalLine:
    name: str
    quantity: int
    unit_cost: float
    total: float


@dataclass(frozen=True)
class ProposalSection:
    name: str
    lines: tuple[ProposalLine, ...]
    subtotal: float


@dataclass(frozen=True)
class Proposal:
    project_name: str
    client_name: str
    issued_on: date
    sections: tuple[ProposalSection, ...]
    subtotal: float
    grand_total: float
    validity_note: str = PROPOSAL_VALIDITY
    closing_note: str = PROPOSAL_CLOSING


@dataclass(frozen=True)
class WorkOrderLine:
    name: str
    quantity: int


@dataclass(frozen=True)
class WorkOrderSection:
    name: str
    lines: tuple[WorkOrderLine, ...]


@dataclass(frozen=True)
class WorkOrder:
    project_name: str
    location: str
    client_name: str
    issued_on: date
    # (label, value) pairs, only for client details that are filled in
    client_details: tuple[tuple[str, str], ...]
    sections: tuple[WorkOrderSection, ...]
    signature_label: str
    subtitle: str = WORK_ORDER_SUBTITLE
    declaration: str = WORK_ORDER_DECLARATION


def build_proposal(project: Project, client: Client | None, issued_on: date) -> Proposal:
    sections = tuple(
        ProposalSection(
            name=category.name,
            lines=tuple(
                ProposalLine(
                    name=item.name,
                    quantity=item.quantity,
                    unit_cost=item.budgeted_cost,
                    total=line_total(item),
                )
                for item in category.items
            ),
            subtotal=category_budgeted(category),
        )
        for category in project.budget
    )
    total = project_budgeted(project)
    return Proposal(
        project_name=project.name,
        client_name=client.name if client else NOT_INFORMED,
        issued_on=issued_on,
        sections=sections,
        subtotal=total,
        grand_total=total,
    )


def build_work_order(project: Project, client: Client | None, issued_on: date) -> WorkOrder:
    details: list[tuple[str, str]] = []
    if client is not None:
        if client.document_id:
            details.append(("Tax ID", client.document_id))
        if client.contact_phone:
            details.append(("Phone", client.contact_phone))
        if client.address:
            details.append(("Site address", client.address))

    sections = tuple(
        WorkOrderSection(
            name=category.name,
            lines=tuple(WorkOrderLine(name=item.name, quantity=item.quantity) for item in category.items),
        )
        for category in project.budget
    )
    return WorkOrder(
        project_name=project.name,
        location=project.location,
        client_name=client.name if client else NOT_INFORMED,
        issued_on=issued_on,
        client_details=tuple(details),
        sections=sections,
        signature_label=f"Client signature ({client.name if client else UNKNOWN_CLIENT})",
    )
