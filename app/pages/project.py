"""Project detail page: summary, budget, expenses, work order and AI panels."""

from __future__ import annotations

from datetime import date
from typing import Any, Callable

import pandas as pd
import streamlit as st

from analytics.filtering import filter_catalog
from analytics.totals import (
    category_budgeted,
    category_chart_rows,
    chart_frame,
    expense_ledger,
    line_total,
    summarize_project,
)
from app.layout import card, clear_busy, impact_chip, navigate, request_button, status_chip
from config import Settings
from core.ai import (
    AGENT_PROFILES,
    AIServiceError,
    generate_budget_suggestions,
    generate_consultancy_report,
    impact_level,
)
from core.budget import (
    InvalidProposalError,
    add_category,
    add_expense,
    add_item,
    apply_proposed_items,
    apply_template,
    delete_category,
    delete_expense,
    delete_item,
    set_status,
    update_item,
)
from core.formatting import format_currency, format_date, format_percent
from core.models import BudgetCategory, ConsultancyReport, Project, ProjectStatus, ProposedItem
from core.state import AppState
from export import (
    PDFExportError,
    build_proposal,
    build_work_order,
    proposal_filename,
    render_proposal,
    render_work_order,
    work_order_filename,
)
from visualization import build_budget_share_chart, build_cost_chart


def _error_key(key: str) -> str:
    return f"error::{key}"


def _run_request(key: str, work: Callable[[], Any], result_key: str) -> None:
    """Run ``work`` for a busy-flagged control and park its outcome in session state."""

    st.session_state.pop(_error_key(key), None)
    try:
        result = work()
    except (AIServiceError, PDFExportError, ValueError) as exc:
        st.session_state[_error_key(key)] = str(exc)
    else:
        st.session_state[result_key] = result
    finally:
        clear_busy(key)
    st.rerun()


def _show_error(key: str) -> None:
    message = st.session_state.get(_error_key(key))
    if message:
        st.error(message)


# -- header ---------------------------------------------------------------


def _render_header(state: AppState, project: Project) -> None:
    client = state.client_for(project)
    title_col, status_col = st.columns([3, 1])
    with title_col:
        st.title(project.name)
        st.markdown(
            f"{status_chip(project.status)} <span class='sl-muted'>"
            f"{client.name if client else 'Unknown client'} · {project.location}</span>",
            unsafe_allow_html=True,
        )
    with status_col:
        statuses = list(ProjectStatus)
        chosen = st.selectbox(
            "Status",
            statuses,
            index=statuses.index(project.status),
            format_func=lambda status: status.value,
            key=f"status-{project.id}",
        )
        if chosen is not project.status:
            state.update_project(project.id, lambda current: set_status(current, chosen))
            st.rerun()


# -- summary --------------------------------------------------------------


def _render_summary_tab(project: Project) -> None:
    totals = summarize_project(project)
    cols = st.columns(4)
    cols[0].metric("Budgeted", format_currency(totals["budgeted"]))
    cols[1].metric("Spent", format_currency(totals["actual"]))
    cols[2].metric("Balance", format_currency(totals["balance"]))
    cols[3].metric("Budget used", format_percent(totals["progress"]))

    frame = chart_frame(category_chart_rows(project))
    left, right = st.columns([3, 2], gap="medium")
    with left:
        with card("Budgeted vs spent", suffix="By category"):
            st.plotly_chart(build_cost_chart(frame), use_container_width=True, key=f"cost-{project.id}")
    with right:
        with card("Budget split"):
            st.plotly_chart(
                build_budget_share_chart(frame),
                use_container_width=True,
                key=f"share-{project.id}",
            )


# -- budget ---------------------------------------------------------------


def _category_frame(category: BudgetCategory) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Item": item.name,
                "Qty.": item.quantity,
                "Unit price": format_currency(item.budgeted_cost),
                "Total": format_currency(line_total(item)),
            }
            for item in category.items
        ],
        columns=["Item", "Qty.", "Unit price", "Total"],
    )


def _render_item_editor(state: AppState, project: Project, category: BudgetCategory) -> None:
    if not category.items:
        return
    with st.expander("Edit items"):
        items = {item.id: item for item in category.items}
        item_id = st.selectbox(
            "Item",
            list(items),
            format_func=lambda key: items[key].name,
            key=f"edit-item-{category.id}",
        )
        item = items[item_id]
        name = st.text_input("Name", value=item.name, key=f"edit-name-{item.id}")
        cols = st.columns(2)
        quantity = cols[0].number_input(
            "Quantity", min_value=1, step=1, value=item.quantity, key=f"edit-qty-{item.id}"
        )
        unit_cost = cols[1].number_input(
            "Unit price", min_value=0.0, step=1.0, value=float(item.budgeted_cost), key=f"edit-cost-{item.id}"
        )
        save_col, delete_col = st.columns(2)
        if save_col.button("Save item", key=f"save-{item.id}"):
            state.update_project(
                project.id,
                lambda current: update_item(
                    current, category.id, item.id, name=name, quantity=quantity, unit_cost=unit_cost
                ),
            )
            st.rerun()
        if delete_col.button("Delete item", key=f"delete-{item.id}"):
            state.update_project(project.id, lambda current: delete_item(current, category.id, item.id))
            st.rerun()


def _render_add_item(state: AppState, project: Project, category: BudgetCategory) -> None:
    with st.form(f"add-item-{category.id}", clear_on_submit=True):
        cols = st.columns([3, 1, 1])
        name = cols[0].text_input("New item")
        quantity = cols[1].number_input("Qty.", min_value=1, step=1, value=1)
        unit_cost = cols[2].number_input("Unit price", min_value=0.0, step=1.0, value=0.0)
        if st.form_submit_button("Add item"):
            if not name.strip():
                st.warning("Give the item a name.")
            else:
                state.update_project(
                    project.id,
                    lambda current: add_item(current, category.id, name, quantity, unit_cost),
                )
                st.rerun()


def _render_category(state: AppState, project: Project, category: BudgetCategory) -> None:
    with card(category.name, suffix=format_currency(category_budgeted(category))):
        if category.items:
            st.dataframe(_category_frame(category), hide_index=True, use_container_width=True)
        else:
            st.caption("No items in this category.")
        _render_item_editor(state, project, category)
        _render_add_item(state, project, category)
        if st.button("Delete category", key=f"delete-cat-{category.id}"):
            state.update_project(project.id, lambda current: delete_category(current, category.id))
            st.rerun()


def _render_catalog_picker(state: AppState, project: Project) -> None:
    with st.expander("Add from catalog"):
        if not project.budget:
            st.info("Create a category first.")
            return
        search = st.text_input("Search catalog", key=f"catalog-search-{project.id}")
        entries = filter_catalog(state.catalog, search)
        if not entries:
            st.caption("No catalog entries match.")
            return
        entry = st.selectbox(
            "Product or service",
            entries,
            format_func=lambda item: f"{item.name} ({format_currency(item.default_unit_cost)})",
            key=f"catalog-entry-{project.id}",
        )
        categories = {category.id: category for category in project.budget}
        category_id = st.selectbox(
            "Category",
            list(categories),
            format_func=lambda key: categories[key].name,
            key=f"catalog-category-{project.id}",
        )
        quantity = st.number_input("Quantity", min_value=1, step=1, value=1, key=f"catalog-qty-{project.id}")
        if st.button("Add to budget", key=f"catalog-add-{project.id}"):
            state.update_project(
                project.id,
                lambda current: add_item(current, category_id, entry.name, quantity, entry.default_unit_cost),
            )
            st.rerun()


def _render_kit_picker(state: AppState, project: Project) -> None:
    with st.expander("Apply kit"):
        if not state.templates:
            st.caption("No kits yet. Create them under Settings.")
            return
        templates = {template.id: template for template in state.templates}
        template_id = st.selectbox(
            "Kit",
            list(templates),
            format_func=lambda key: templates[key].name,
            key=f"kit-{project.id}",
        )
        template = templates[template_id]
        st.caption(f"{len(template.items)} items will be added to the budget.")
        if st.button("Apply kit", key=f"kit-apply-{project.id}", disabled=not template.items):
            try:
                state.update_project(project.id, lambda current: apply_template(current, template))
            except InvalidProposalError as exc:
                st.error(str(exc))
            else:
                st.success(f"Kit '{template.name}' applied.")
                st.rerun()


def _render_ai_assistant(state: AppState, project: Project, settings: Settings) -> None:
    key = f"ai-suggest-{project.id}"
    result_key = f"suggestions::{project.id}"

    with card("AI budget assistant", suffix="AI"):
        description = st.text_area(
            "Describe the work",
            placeholder="e.g. Renovate a 10 m² bathroom with new tiles and fixtures",
            key=f"ai-description-{project.id}",
        )
        if request_button(
            "Suggest items",
            "Generating suggestions...",
            key,
            disabled=not description.strip(),
        ):
            _run_request(key, lambda: generate_budget_suggestions(description, settings=settings), result_key)
        _show_error(key)

        suggestions: list[ProposedItem] = st.session_state.get(result_key, [])
        if not suggestions:
            return

        st.dataframe(
            pd.DataFrame(
                [
                    {
                        "Category": item.category,
                        "Item": item.item_name,
                        "Qty.": item.quantity,
                        "Unit price": format_currency(item.unit_cost),
                    }
                    for item in suggestions
                ]
            ),
            hide_index=True,
            use_container_width=True,
        )
        add_col, discard_col = st.columns(2)
        if add_col.button("Add all to budget", key=f"ai-apply-{project.id}", type="primary"):
            try:
                state.update_project(project.id, lambda current: apply_proposed_items(current, suggestions))
            except InvalidProposalError as exc:
                st.error(str(exc))
            else:
                st.session_state.pop(result_key, None)
                st.rerun()
        if discard_col.button("Discard", key=f"ai-discard-{project.id}"):
            st.session_state.pop(result_key, None)
            st.rerun()


def _render_pdf_download(
    key: str,
    label: str,
    filename: str,
    build: Callable[[], bytes],
) -> None:
    result_key = f"pdf::{key}"
    if request_button(f"Prepare {label}", "Generating PDF...", key):
        _run_request(key, build, result_key)
    _show_error(key)

    payload = st.session_state.get(result_key)
    if payload:
        st.download_button(
            f"Download {label}",
            data=payload,
            file_name=filename,
            mime="application/pdf",
            key=f"download-{key}",
        )


def _render_budget_tab(state: AppState, project: Project, settings: Settings) -> None:
    client = state.client_for(project)
    _render_pdf_download(
        f"proposal-{project.id}",
        "proposal (PDF)",
        proposal_filename(project.name),
        lambda: render_proposal(build_proposal(project, client, date.today()), state.logo),
    )

    for category in project.budget:
        _render_category(state, project, category)

    with st.form(f"add-category-{project.id}", clear_on_submit=True):
        name = st.text_input("New category")
        if st.form_submit_button("Add category") and name.strip():
            state.update_project(project.id, lambda current: add_category(current, name))
            st.rerun()

    _render_catalog_picker(state, project)
    _render_kit_picker(state, project)
    _render_ai_assistant(state, project, settings)


# -- expenses -------------------------------------------------------------


def _render_expenses_tab(state: AppState, project: Project) -> None:
    categories = {category.id: category for category in project.budget}

    with card("Record expense"):
        if not categories:
            st.info("Add a budget category before recording expenses.")
        else:
            with st.form(f"add-expense-{project.id}", clear_on_submit=True):
                description = st.text_input("Description")
                cols = st.columns(3)
                amount = cols[0].number_input("Amount", min_value=0.0, step=10.0, value=0.0)
                spent_on = cols[1].date_input("Date", value=date.today(), format="DD/MM/YYYY")
                category_id = cols[2].selectbox(
                    "Category",
                    list(categories),
                    format_func=lambda key: categories[key].name,
                )
                if st.form_submit_button("Add expense"):
                    if not description.strip() or amount <= 0:
                        st.warning("Fill in a description and an amount.")
                    else:
                        state.update_project(
                            project.id,
                            lambda current: add_expense(current, description, amount, spent_on, category_id),
                        )
                        st.rerun()

    with card("Expenses", suffix=format_currency(summarize_project(project)["actual"])):
        ledger = expense_ledger(project)
        if ledger.empty:
            st.caption("No expenses recorded yet.")
            return

        display = ledger.drop(columns="id").assign(
            Date=ledger["Date"].dt.date.map(format_date),
            Amount=ledger["Amount"].map(format_currency),
        )
        st.dataframe(display, hide_index=True, use_container_width=True)

        labels = {
            row.id: f"{format_date(row.Date.date())} · {row.Description} · {format_currency(row.Amount)}"
            for row in ledger.itertuples(index=False)
        }
        expense_id = st.selectbox(
            "Expense",
            list(labels),
            format_func=labels.get,
            key=f"expense-pick-{project.id}",
        )
        if st.button("Delete expense", key=f"expense-delete-{project.id}"):
            state.update_project(project.id, lambda current: delete_expense(current, expense_id))
            st.rerun()


# -- work order -----------------------------------------------------------


def _render_work_order_tab(state: AppState, project: Project) -> None:
    client = state.client_for(project)
    _render_pdf_download(
        f"work-order-{project.id}",
        "work order (PDF)",
        work_order_filename(project.name),
        lambda: render_work_order(build_work_order(project, client, date.today()), state.logo),
    )

    with card("Scope of services and materials"):
        for category in project.budget:
            st.markdown(f"**{category.name}**")
            if category.items:
                st.dataframe(
                    pd.DataFrame(
                        [{"Item / Service": item.name, "Quantity": item.quantity} for item in category.items]
                    ),
                    hide_index=True,
                    use_container_width=True,
                )
            else:
                st.caption("No items in this category.")


# -- consultancy ----------------------------------------------------------


def _render_report(report: ConsultancyReport) -> None:
    st.markdown(f"#### {report.title}")
    st.write(report.summary)
    for recommendation in report.recommendations:
        with card(
            recommendation.title,
            suffix_html=impact_chip(recommendation.impact, impact_level(recommendation.impact)),
        ):
            st.write(recommendation.description)


def _render_consultancy(state: AppState, project: Project, settings: Settings) -> None:
    with st.expander("AI consultancy"):
        profiles = {profile.agent: profile for profile in AGENT_PROFILES}
        agent = st.radio(
            "Consultant",
            list(profiles),
            format_func=lambda value: f"{profiles[value].name} · {profiles[value].title}",
            horizontal=True,
            key=f"agent-{project.id}",
        )
        st.caption(profiles[agent].description)

        key = f"consult-{project.id}-{agent.value}"
        result_key = f"report::{project.id}::{agent.value}"
        if request_button("Request analysis", "Analysing project...", key):
            _run_request(
                key,
                lambda: generate_consultancy_report(project, state.clients, agent, settings=settings),
                result_key,
            )
        _show_error(key)

        report = st.session_state.get(result_key)
        if report is not None:
            _render_report(report)


def _render_danger_zone(state: AppState, project: Project) -> None:
    with st.expander("Delete project"):
        confirm = st.checkbox("I understand this cannot be undone.", key=f"confirm-delete-{project.id}")
        if st.button("Delete project", disabled=not confirm, key=f"delete-project-{project.id}"):
            state.delete_project(project.id)
            navigate("dashboard")


def render_page(state: AppState, settings: Settings) -> None:
    """Render the detail view of the active project."""

    project = state.active_project
    if project is None:
        st.info("Select a project on the dashboard to see its details.")
        if st.button("Back to dashboard"):
            navigate("dashboard")
        return

    _render_header(state, project)

    summary_tab, budget_tab, expenses_tab, work_order_tab = st.tabs(
        ["Summary", "Budget", "Expenses", "Work order"]
    )
    with summary_tab:
        _render_summary_tab(project)
    with budget_tab:
        _render_budget_tab(state, project, settings)
    with expenses_tab:
        _render_expenses_tab(state, project)
    with work_order_tab:
        _render_work_order_tab(state, project)

    _render_consultancy(state, project, settings)
    _render_danger_zone(state, project)
