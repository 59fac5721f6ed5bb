"""Application state handle shared by the SiteLedger pages.

``AppState`` is the single source of truth for the loaded collections. Pages
receive it explicitly and change it only through its mutators, each of which
swaps in a new tuple for the affected collection and writes that collection
back to the store straight away.
"""

from __future__ import annotations

import logging
from typing import Callable

from core.models import BudgetTemplate, CatalogEntry, Client, Project
from core.seed import default_catalog, default_clients, default_projects
from core.serialization import (
    catalog_entry_from_dict,
    catalog_entry_to_dict,
    client_from_dict,
    client_to_dict,
    dump_many,
    load_many,
    project_from_dict,
    project_to_dict,
    template_from_dict,
    template_to_dict,
)
from core.storage import (
    CLIENTS_KEY,
    LOGO_KEY,
    PRODUCTS_KEY,
    PROJECTS_KEY,
    TEMPLATES_KEY,
    JsonStore,
)

__all__ = ["AppState", "ClientInUseError"]

logger = logging.getLogger(__name__)

ProjectUpdater = Callable[[Project], Project]


class ClientInUseError(ValueError):
    """Raised when deleting a client that is still referenced by a project."""


class AppState:
    def __init__(
        self,
        store: JsonStore,
        *,
        projects: tuple[Project, ...] = (),
        clients: tuple[Client, ...] = (),
        catalog: tuple[CatalogEntry, ...] = (),
        templates: tuple[BudgetTemplate, ...] = (),
        logo: str | None = None,
    ) -> None:
        self._store = store
        self._projects = projects
        self._clients = clients
        self._catalog = catalog
        self._templates = templates
        self._logo = logo
        self._active_project_id: str | None = None

    @classmethod
    def load(cls, store: JsonStore) -> "AppState":
        """Read every collection from ``store``, seeding demo data where absent."""

        projects = store.load(PROJECTS_KEY, None)
        clients = store.load(CLIENTS_KEY, None)
        catalog = store.load(PRODUCTS_KEY, None)
        templates = store.load(TEMPLATES_KEY, [])
        logo = store.load(LOGO_KEY, None)

        return cls(
            store,
            projects=default_projects() if projects is None else load_many(projects, project_from_dict),
            clients=default_clients() if clients is None else load_many(clients, client_from_dict),
            catalog=default_catalog() if catalog is None else load_many(catalog, catalog_entry_from_dict),
            templates=load_many(templates, template_from_dict),
            logo=logo if isinstance(logo, str) else None,
        )

    # -- accessors ---------------------------------------------------------

    @property
    def projects(self) -> tuple[Project, ...]:
        return self._projects

    @property
    def clients(self) -> tuple[Client, ...]:
        return self._clients

    @property
    def catalog(self) -> tuple[CatalogEntry, ...]:
        return self._catalog

    @property
    def templates(self) -> tuple[BudgetTemplate, ...]:
        return self._templates

    @property
    def logo(self) -> str | None:
        return self._logo

    @property
    def active_project(self) -> Project | None:
        if self._active_project_id is None:
            return None
        return self.get_project(self._active_project_id)

    def get_project(self, project_id: str) -> Project | None:
        return next((project for project in self._projects if project.id == project_id), None)

    def get_client(self, client_id: str) -> Client | None:
        return next((client for client in self._clients if client.id == client_id), None)

    def get_template(self, template_id: str) -> BudgetTemplate | None:
        return next((template for template in self._templates if template.id == template_id), None)

    def client_for(self, project: Project) -> Client | None:
        return self.get_client(project.client_id)

    def select_project(self, project_id: str | None) -> None:
        self._active_project_id = project_id

    # -- persistence -------------------------------------------------------

    def _save_projects(self) -> None:
        self._store.save(PROJECTS_KEY, dump_many(self._projects, project_to_dict))

    def _save_clients(self) -> None:
        self._store.save(CLIENTS_KEY, dump_many(self._clients, client_to_dict))

    def _save_catalog(self) -> None:
        self._store.save(PRODUCTS_KEY, dump_many(self._catalog, catalog_entry_to_dict))

    def _save_templates(self) -> None:
        self._store.save(TEMPLATES_KEY, dump_many(self._templates, template_to_dict))

    # -- projects ----------------------------------------------------------

    def add_project(self, project: Project) -> None:
        self._projects = self._projects + (project,)
        self._save_projects()

    def update_project(self, project_id: str, updater: ProjectUpdater) -> Project | None:
        """Replace the project ``project_id`` with ``updater(project)``.

        Returns the updated project, or ``None`` when the id is unknown (for
        example a late AI result for a project that was deleted meanwhile).
        """

        updated: Project | None = None
        projects: list[Project] = []
        for project in self._projects:
            if project.id == project_id:
                updated = updater(project)
                projects.append(updated)
            else:
                projects.append(project)

        if updated is None:
            logger.info("Ignoring update for unknown project %s", project_id)
            return None

        self._projects = tuple(projects)
        self._save_projects()
        return updated

    def delete_project(self, project_id: str) -> None:
        self._projects = tuple(project for project in self._projects if project.id != project_id)
        if self._active_project_id == project_id:
            self._active_project_id = None
        self._save_projects()

    # -- clients -----------------------------------------------------------

    def add_client(self, client: Client) -> None:
        if not client.name.strip():
            raise ValueError("Client name is required.")
        self._clients = self._clients + (client,)
        self._save_clients()

    def update_client(self, client: Client) -> None:
        self._clients = tuple(client if existing.id == client.id else existing for existing in self._clients)
        self._save_clients()

    def delete_client(self, client_id: str) -> None:
        if any(project.client_id == client_id for project in self._projects):
            logger.info("Refusing to delete client %s: referenced by a project", client_id)
            raise ClientInUseError(
                "This client cannot be deleted because it is linked to one or more projects."
            )
        self._clients = tuple(client for client in self._clients if client.id != client_id)
        self._save_clients()

    # -- catalog -----------------------------------------------------------

    def add_catalog_entry(self, entry: CatalogEntry) -> None:
        if not entry.name.strip():
            raise ValueError("Catalog entries need a name.")
        self._catalog = self._catalog + (entry,)
        self._save_catalog()

    def update_catalog_entry(self, entry: CatalogEntry) -> None:
        self._catalog = tuple(entry if existing.id == entry.id else existing for existing in self._catalog)
        self._save_catalog()

    def delete_catalog_entry(self, entry_id: str) -> None:
        self._catalog = tuple(entry for entry in self._catalog if entry.id != entry_id)
        self._save_catalog()

    # -- kits --------------------------------------------------------------

    def add_template(self, template: BudgetTemplate) -> None:
        self._templates = self._templates + (template,)
        self._save_templates()

    def update_template(self, template: BudgetTemplate) -> None:
        self._templates = tuple(
            template if existing.id == template.id else existing for existing in self._templates
        )
        self._save_templates()

    def delete_template(self, template_id: str) -> None:
        self._templates = tuple(template for template in self._templates if template.id != template_id)
        self._save_templates()

    # -- branding ----------------------------------------------------------

    def set_logo(self, logo: str | None) -> None:
        self._logo = logo
        self._store.save(LOGO_KEY, logo)
