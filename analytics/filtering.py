"""Search and status filters for the project list and the catalog."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Sequence

from core.models import CatalogEntry, CatalogProduct, CatalogService, Client, Project, ProjectStatus

__all__ = [
    "IN_PROGRESS_BUCKET",
    "StatusFilter",
    "filter_catalog",
    "filter_projects",
    "split_catalog",
]


class StatusFilter(str, Enum):
    ALL = "all"
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"


# Anything not finished or cancelled counts as "in progress" on the dashboard.
IN_PROGRESS_BUCKET = frozenset(
    {ProjectStatus.PLANNING, ProjectStatus.IN_PROGRESS, ProjectStatus.PAUSED}
)


def _matches_status(project: Project, status_filter: StatusFilter) -> bool:
    if status_filter is StatusFilter.ALL:
        return True
    if status_filter is StatusFilter.COMPLETED:
        return project.status is ProjectStatus.COMPLETED
    return project.status in IN_PROGRESS_BUCKET


def filter_projects(
    projects: Sequence[Project],
    clients: Iterable[Client],
    search_term: str = "",
    status_filter: StatusFilter | str = StatusFilter.ALL,
) -> list[Project]:
    """Return the projects matching the search text and status bucket, in input order."""

    bucket = StatusFilter(status_filter)
    needle = search_term.strip().casefold()
    client_names = {client.id: client.name.casefold() for client in clients}

    matched: list[Project] = []
    for project in projects:
        if needle:
            client_name = client_names.get(project.client_id)
            in_name = needle in project.name.casefold()
            in_client = client_name is not None and needle in client_name
            if not (in_name or in_client):
                continue
        if _matches_status(project, bucket):
            matched.append(project)
    return matched


def filter_catalog(entries: Sequence[CatalogEntry], search_term: str = "") -> list[CatalogEntry]:
    needle = search_term.strip().casefold()
    if not needle:
        return list(entries)
    return [entry for entry in entries if needle in entry.name.casefold()]


def split_catalog(
    entries: Iterable[CatalogEntry],
) -> tuple[list[CatalogProduct], list[CatalogService]]:
    products: list[CatalogProduct] = []
    services: list[CatalogService] = []
    for entry in entries:
        if isinstance(entry, CatalogProduct):
            products.append(entry)
        else:
            services.append(entry)
    return products, services
