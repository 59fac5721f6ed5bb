"""Tests for the project and catalog filters."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from analytics.filtering import StatusFilter, filter_catalog, filter_projects, split_catalog
from core.models import CatalogProduct, CatalogService, Client, Project, ProjectStatus
from core.seed import default_catalog


@pytest.fixture()
def clients() -> list[Client]:
    return [Client(id="c-1", name="Silva Family"), Client(id="c-2", name="InvestCo")]


@pytest.fixture()
def projects() -> list[Project]:
    return [
        Project(id=f"p-{index}", name=f"{status.value} site", client_id="c-1" if index % 2 else "c-2",
                location="SP", status=status)
        for index, status in enumerate(ProjectStatus)
    ]


def test_in_progress_bucket(projects, clients):
    matched = filter_projects(projects, clients, "", StatusFilter.IN_PROGRESS)

    assert {project.status for project in matched} == {
        ProjectStatus.PLANNING,
        ProjectStatus.IN_PROGRESS,
        ProjectStatus.PAUSED,
    }


def test_completed_and_all_buckets(projects, clients):
    completed = filter_projects(projects, clients, status_filter="completed")
    everything = filter_projects(projects, clients)

    assert [project.status for project in completed] == [ProjectStatus.COMPLETED]
    assert everything == projects


def test_search_matches_project_or_client_name(projects, clients):
    by_project = filter_projects(projects, clients, "  PAUSED ")
    by_client = filter_projects(projects, clients, "investco")

    assert [project.status for project in by_project] == [ProjectStatus.PAUSED]
    assert {project.client_id for project in by_client} == {"c-2"}
    assert [project.id for project in by_client] == ["p-0", "p-2", "p-4"]


def test_search_skips_unknown_clients(clients):
    orphan = Project(id="p-x", name="Warehouse", client_id="missing", location="SP")

    assert filter_projects([orphan], clients, "silva") == []
    assert filter_projects([orphan], clients, "ware") == [orphan]


def test_search_and_status_combine(projects, clients):
    matched = filter_projects(projects, clients, "silva", StatusFilter.COMPLETED)

    assert [project.id for project in matched] == ["p-3"]


def test_catalog_search_and_split():
    catalog = default_catalog()

    assert [entry.id for entry in filter_catalog(catalog, "CEMENT")] == ["prod-1"]
    assert filter_catalog(catalog, "") == list(catalog)

    products, services = split_catalog(catalog)
    assert all(isinstance(entry, CatalogProduct) for entry in products)
    assert all(isinstance(entry, CatalogService) for entry in services)
    assert [entry.id for entry in services] == ["serv-1", "serv-2"]
