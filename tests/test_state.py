"""Tests for the application state handle and its JSON persistence."""

from __future__ import annotations

import json
import sys
from datetime import date
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.budget import add_expense, apply_proposed_items, create_project
from core.models import CatalogService, Client, ProposedItem
from core.state import AppState, ClientInUseError
from core.storage import CLIENTS_KEY, PRODUCTS_KEY, PROJECTS_KEY, TEMPLATES_KEY, JsonStore
from core.templates import add_catalog_entry, create_template, set_template_item_quantity, template_total


@pytest.fixture()
def store(tmp_path: Path) -> JsonStore:
    return JsonStore(tmp_path / "data")


@pytest.fixture()
def state(store: JsonStore) -> AppState:
    return AppState.load(store)


def test_first_load_uses_seed_data(state):
    assert [project.id for project in state.projects] == ["proj-1", "proj-2"]
    assert [client.id for client in state.clients] == ["client-1", "client-2"]
    assert len(state.catalog) == 4
    assert state.templates == ()
    assert state.logo is None


def test_referenced_client_cannot_be_deleted(state):
    before = state.clients

    with pytest.raises(ClientInUseError):
        state.delete_client("client-1")

    assert state.clients == before


def test_unreferenced_client_can_be_deleted(state, store):
    state.add_client(Client(id="client-9", name="Walk-in"))
    state.delete_client("client-9")

    assert [client.id for client in state.clients] == ["client-1", "client-2"]
    assert [entry["id"] for entry in store.load(CLIENTS_KEY, [])] == ["client-1", "client-2"]


def test_blank_client_name_is_rejected(state):
    with pytest.raises(ValueError):
        state.add_client(Client(id="client-9", name="  "))


def test_project_changes_survive_reload(state, store):
    project = create_project("Beach house", "client-2", "Guarujá, SP")
    state.add_project(project)
    category_id = project.budget[0].id
    state.update_project(
        project.id,
        lambda current: add_expense(
            apply_proposed_items(current, [ProposedItem("Materials", "Sand", 4, 120)]),
            "Sand delivery",
            480,
            date(2024, 9, 2),
            category_id,
        ),
    )

    reloaded = AppState.load(store)

    assert reloaded.get_project(project.id) == state.get_project(project.id)
    assert reloaded.get_project(project.id).expenses[0].date == date(2024, 9, 2)


def test_update_of_unknown_project_is_ignored(state):
    before = state.projects

    assert state.update_project("proj-gone", lambda current: current) is None
    assert state.projects == before


def test_deleting_active_project_clears_selection(state):
    state.select_project("proj-2")
    assert state.active_project.name == "Itaim Commercial Building"

    state.delete_project("proj-2")

    assert state.active_project is None
    assert state.get_project("proj-2") is None


def test_catalog_and_kits_persist(state, store):
    service = CatalogService(id="serv-9", name="Plumber (visit)", service_cost=150)
    state.add_catalog_entry(service)

    kit = add_catalog_entry(create_template("Bathroom"), service)
    kit = set_template_item_quantity(kit, 0, "3")
    state.add_template(kit)
    state.set_logo("data:image/png;base64,AAAA")

    reloaded = AppState.load(store)

    assert reloaded.catalog[-1] == service
    assert reloaded.templates == (kit,)
    assert reloaded.templates[0].items[0].category == "Labor"
    assert template_total(reloaded.templates[0]) == pytest.approx(450.0)
    assert reloaded.logo == "data:image/png;base64,AAAA"
    assert any(entry["type"] == "service" for entry in store.load(PRODUCTS_KEY, []))


def test_unreadable_collection_falls_back_to_default(store):
    store.root.mkdir(parents=True, exist_ok=True)
    (store.root / f"{PROJECTS_KEY}.json").write_text("{not json", encoding="utf-8")

    assert store.load(PROJECTS_KEY, "fallback") == "fallback"
    assert [project.id for project in AppState.load(store).projects] == ["proj-1", "proj-2"]


def test_malformed_records_are_skipped_on_load(store):
    store.save(
        PROJECTS_KEY,
        [
            {"id": "p1", "name": "X", "status": "Em Andamento"},
            {"name": "No id"},
            {"id": "p2", "name": "Kitchen", "status": "In Progress"},
        ],
    )
    store.save(
        PRODUCTS_KEY,
        [
            {"id": "x1", "name": "Mystery", "type": "gadget"},
            "not a record",
            {"id": "s1", "name": "Plumber", "type": "service", "service_cost": 90},
        ],
    )

    state = AppState.load(store)

    assert [project.id for project in state.projects] == ["p2"]
    assert [entry.id for entry in state.catalog] == ["s1"]


def test_stored_quantities_are_at_least_one(store):
    store.save(
        PROJECTS_KEY,
        [
            {
                "id": "p1",
                "name": "Bathroom",
                "budget": [
                    {
                        "id": "c1",
                        "name": "Materials",
                        "items": [
                            {"id": "i1", "name": "Tiles", "quantity": 0, "budgeted_cost": 10},
                            {"id": "i2", "name": "Grout", "quantity": -3, "budgeted_cost": 5},
                        ],
                    }
                ],
            }
        ],
    )
    store.save(
        TEMPLATES_KEY,
        [{"id": "t1", "name": "Kit", "items": [{"category": "Labor", "name": "Mason", "quantity": "-2"}]}],
    )

    state = AppState.load(store)

    items = state.projects[0].budget[0].items
    assert [item.quantity for item in items] == [1, 1]
    assert state.templates[0].items[0].quantity == 1


def test_saved_collections_are_plain_json(state, store):
    state.update_client(Client(id="client-2", name="InvestCo Ltd"))

    raw = json.loads((store.root / f"{CLIENTS_KEY}.json").read_text(encoding="utf-8"))
    assert raw[1]["name"] == "InvestCo Ltd"
