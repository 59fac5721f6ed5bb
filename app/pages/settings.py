"""Settings page: company logo, clients, catalog and kits."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from analytics.filtering import filter_catalog, split_catalog
from app.layout import card
from core.formatting import format_currency
from core.models import CatalogEntry, CatalogProduct, CatalogService, Client, new_id
from core.state import AppState, ClientInUseError
from core.templates import (
    add_catalog_entry,
    create_template,
    remove_template_item,
    rename_template,
    set_template_item_quantity,
    template_total,
)
from export import decode_logo, encode_logo


def _render_logo(state: AppState) -> None:
    with card("Company logo", suffix="PDF documents"):
        logo_bytes = decode_logo(state.logo)
        if logo_bytes:
            st.image(logo_bytes, width=180)
        upload = st.file_uploader("Upload logo", type=["png", "jpg", "jpeg"], key="logo-upload")
        cols = st.columns(2)
        if upload is not None and cols[0].button("Save logo"):
            state.set_logo(encode_logo(upload.getvalue(), upload.type or "image/png"))
            st.success("Logo saved.")
            st.rerun()
        if state.logo and cols[1].button("Remove logo"):
            state.set_logo(None)
            st.rerun()


# -- clients --------------------------------------------------------------


def _client_fields(prefix: str, client: Client | None = None) -> dict[str, str]:
    return {
        "name": st.text_input("Name", value=client.name if client else "", key=f"{prefix}-name"),
        "address": st.text_input("Address", value=(client.address or "") if client else "", key=f"{prefix}-address"),
        "document_id": st.text_input(
            "Tax ID (CPF/CNPJ)", value=(client.document_id or "") if client else "", key=f"{prefix}-document"
        ),
        "contact_phone": st.text_input(
            "Phone", value=(client.contact_phone or "") if client else "", key=f"{prefix}-phone"
        ),
    }


def _client_from_fields(client_id: str, fields: dict[str, str]) -> Client:
    return Client(
        id=client_id,
        name=fields["name"].strip(),
        address=fields["address"].strip() or None,
        document_id=fields["document_id"].strip() or None,
        contact_phone=fields["contact_phone"].strip() or None,
    )


def _render_clients(state: AppState) -> None:
    with card("New client"):
        fields = _client_fields("new-client")
        if st.button("Add client", disabled=not fields["name"].strip(), key="new-client-submit"):
            state.add_client(_client_from_fields(new_id("client"), fields))
            st.rerun()

    with card("Clients", suffix=str(len(state.clients))):
        if not state.clients:
            st.caption("No clients yet.")
            return
        st.dataframe(
            pd.DataFrame(
                [
                    {
                        "Name": client.name,
                        "Tax ID": client.document_id or "",
                        "Phone": client.contact_phone or "",
                        "Address": client.address or "",
                    }
                    for client in state.clients
                ]
            ),
            hide_index=True,
            use_container_width=True,
        )

        clients = {client.id: client for client in state.clients}
        client_id = st.selectbox(
            "Client",
            list(clients),
            format_func=lambda key: clients[key].name,
            key="edit-client",
        )
        fields = _client_fields(f"edit-{client_id}", clients[client_id])
        save_col, delete_col = st.columns(2)
        if save_col.button("Save client", disabled=not fields["name"].strip(), key="save-client"):
            state.update_client(_client_from_fields(client_id, fields))
            st.rerun()
        if delete_col.button("Delete client", key="delete-client"):
            try:
                state.delete_client(client_id)
            except ClientInUseError as exc:
                st.error(str(exc))
            else:
                st.rerun()


# -- catalog --------------------------------------------------------------


def _catalog_frame(entries: list[CatalogEntry]) -> pd.DataFrame:
    rows = []
    for entry in entries:
        if isinstance(entry, CatalogProduct):
            rows.append(
                {
                    "Name": entry.name,
                    "Cost price": format_currency(entry.cost_price),
                    "Sale price": format_currency(entry.sale_price),
                }
            )
        else:
            rows.append({"Name": entry.name, "Price": format_currency(entry.service_cost)})
    return pd.DataFrame(rows)


def _render_entry_editor(state: AppState, entries: list[CatalogEntry], kind: str) -> None:
    if not entries:
        return
    by_id = {entry.id: entry for entry in entries}
    entry_id = st.selectbox(
        "Edit entry",
        list(by_id),
        format_func=lambda key: by_id[key].name,
        key=f"edit-{kind}",
    )
    entry = by_id[entry_id]
    name = st.text_input("Name", value=entry.name, key=f"edit-{kind}-name-{entry.id}")
    if isinstance(entry, CatalogProduct):
        cols = st.columns(2)
        cost = cols[0].number_input(
            "Cost price", min_value=0.0, value=float(entry.cost_price), key=f"edit-cost-{entry.id}"
        )
        sale = cols[1].number_input(
            "Sale price", min_value=0.0, value=float(entry.sale_price), key=f"edit-sale-{entry.id}"
        )
        updated: CatalogEntry = CatalogProduct(id=entry.id, name=name.strip(), cost_price=cost, sale_price=sale)
    else:
        price = st.number_input(
            "Price", min_value=0.0, value=float(entry.service_cost), key=f"edit-price-{entry.id}"
        )
        updated = CatalogService(id=entry.id, name=name.strip(), service_cost=price)

    save_col, delete_col = st.columns(2)
    if save_col.button("Save", disabled=not name.strip(), key=f"save-{kind}-{entry.id}"):
        state.update_catalog_entry(updated)
        st.rerun()
    if delete_col.button("Delete", key=f"delete-{kind}-{entry.id}"):
        state.delete_catalog_entry(entry.id)
        st.rerun()


def _render_catalog(state: AppState) -> None:
    products, services = split_catalog(state.catalog)
    left, right = st.columns(2, gap="medium")

    with left:
        with card("Products", suffix=str(len(products))):
            with st.form("new-product", clear_on_submit=True):
                name = st.text_input("Product name")
                cols = st.columns(2)
                cost = cols[0].number_input("Cost price", min_value=0.0, value=0.0)
                sale = cols[1].number_input("Sale price", min_value=0.0, value=0.0)
                if st.form_submit_button("Add product") and name.strip():
                    state.add_catalog_entry(
                        CatalogProduct(id=new_id("prod"), name=name.strip(), cost_price=cost, sale_price=sale)
                    )
                    st.rerun()
            if products:
                st.dataframe(_catalog_frame(list(products)), hide_index=True, use_container_width=True)
            _render_entry_editor(state, list(products), "product")

    with right:
        with card("Services", suffix=str(len(services))):
            with st.form("new-service", clear_on_submit=True):
                name = st.text_input("Service name")
                price = st.number_input("Price", min_value=0.0, value=0.0)
                if st.form_submit_button("Add service") and name.strip():
                    state.add_catalog_entry(CatalogService(id=new_id("serv"), name=name.strip(), service_cost=price))
                    st.rerun()
            if services:
                st.dataframe(_catalog_frame(list(services)), hide_index=True, use_container_width=True)
            _render_entry_editor(state, list(services), "service")


# -- kits -----------------------------------------------------------------


def _render_kit_items(state: AppState, template_id: str) -> None:
    template = state.get_template(template_id)
    if template is None:
        return

    name = st.text_input("Kit name", value=template.name, key=f"kit-name-{template.id}")
    if name.strip() and name.strip() != template.name and st.button("Rename", key=f"kit-rename-{template.id}"):
        state.update_template(rename_template(template, name))
        st.rerun()

    if not template.items:
        st.caption("This kit has no items yet.")
    for index, line in enumerate(template.items):
        cols = st.columns([4, 2, 2, 1])
        cols[0].markdown(f"**{line.name}**  \n<span class='sl-muted'>{line.category}</span>", unsafe_allow_html=True)
        quantity = cols[1].number_input(
            "Qty.",
            min_value=1,
            step=1,
            value=line.quantity,
            key=f"kit-qty-{template.id}-{index}",
            label_visibility="collapsed",
        )
        if quantity != line.quantity:
            state.update_template(set_template_item_quantity(template, index, quantity))
            st.rerun()
        cols[2].write(format_currency(line.quantity * line.budgeted_cost))
        if cols[3].button("✕", key=f"kit-remove-{template.id}-{index}"):
            state.update_template(remove_template_item(template, index))
            st.rerun()
    st.markdown(f"**Kit total:** {format_currency(template_total(template))}")

    search = st.text_input("Search catalog", key=f"kit-search-{template.id}")
    matches = filter_catalog(state.catalog, search)
    if matches:
        entry = st.selectbox(
            "Catalog entry",
            matches,
            format_func=lambda item: f"{item.name} ({format_currency(item.default_unit_cost)})",
            key=f"kit-entry-{template.id}",
        )
        if st.button("Add to kit", key=f"kit-add-{template.id}"):
            state.update_template(add_catalog_entry(template, entry))
            st.rerun()
    else:
        st.caption("No catalog entries match.")

    if st.button("Delete kit", key=f"kit-delete-{template.id}"):
        state.delete_template(template.id)
        st.rerun()


def _render_kits(state: AppState) -> None:
    with card("New kit"):
        name = st.text_input("Kit name", placeholder="e.g. Standard bathroom", key="new-kit-name")
        if st.button("Create kit", disabled=not name.strip(), key="new-kit-submit"):
            state.add_template(create_template(name))
            st.rerun()

    if not state.templates:
        st.info("No kits yet.")
        return

    for template in state.templates:
        with st.expander(f"{template.name} · {len(template.items)} items"):
            _render_kit_items(state, template.id)


def render_page(state: AppState) -> None:
    """Render the settings page."""

    st.title("Settings")
    logo_tab, clients_tab, catalog_tab, kits_tab = st.tabs(["Company", "Clients", "Catalog", "Kits"])
    with logo_tab:
        _render_logo(state)
    with clients_tab:
        _render_clients(state)
    with catalog_tab:
        _render_catalog(state)
    with kits_tab:
        _render_kits(state)
