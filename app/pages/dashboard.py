"""Portfolio dashboard: KPIs, global cost chart and the project list."""

from __future__ import annotations

import streamlit as st

from analytics.filtering import StatusFilter, filter_projects
from analytics.totals import chart_frame, project_chart_rows, summarize_portfolio, summarize_project
from app.layout import card, navigate, status_chip
from core.budget import create_project
from core.formatting import format_currency, format_percent
from core.models import PortfolioSummary, Project
from core.state import AppState
from visualization import build_cost_chart

STATUS_FILTER_LABELS = {
    StatusFilter.ALL: "All",
    StatusFilter.IN_PROGRESS: "In progress",
    StatusFilter.COMPLETED: "Completed",
}


def _render_kpis(summary: PortfolioSummary) -> None:
    cols = st.columns(4)
    cols[0].metric(
        "Financial health",
        format_percent(summary["financial_health"]),
        help="Share of the overall budget not yet spent.",
    )
    cols[1].metric("Projects in progress", str(summary["active_count"]))
    cols[2].metric(
        "Over budget",
        str(summary["over_budget_count"]),
        help="Projects whose expenses exceed their budget.",
    )
    cols[3].metric(
        "Total completed",
        format_currency(summary["total_value_completed"]),
        help="Budgeted value of finished projects.",
    )


def _render_project_card(project: Project, client_name: str) -> None:
    totals = summarize_project(project)
    with card(project.name, suffix_html=status_chip(project.status)):
        st.caption(f"{client_name} · {project.location}")
        st.progress(min(max(totals["progress"], 0.0), 100.0) / 100)
        cols = st.columns(2)
        cols[0].markdown(f"**Budgeted**  \n{format_currency(totals['budgeted'])}")
        cols[1].markdown(f"**Spent**  \n{format_currency(totals['actual'])}")
        if st.button("Open project", key=f"open-{project.id}"):
            navigate("project", project.id)


def _render_project_list(state: AppState) -> None:
    search_col, filter_col = st.columns([2, 1])
    search_term = search_col.text_input(
        "Search",
        placeholder="Search by project or client...",
        key="dashboard-search",
    )
    status_filter = filter_col.radio(
        "Status",
        list(STATUS_FILTER_LABELS),
        format_func=STATUS_FILTER_LABELS.get,
        horizontal=True,
        key="dashboard-status",
    )

    projects = filter_projects(state.projects, state.clients, search_term, status_filter)
    if not projects:
        st.info("No projects match the current search.")
        return

    columns = st.columns(2, gap="medium")
    for index, project in enumerate(projects):
        client = state.client_for(project)
        with columns[index % 2]:
            _render_project_card(project, client.name if client else "Unknown client")


def _render_new_project_form(state: AppState) -> None:
    with st.expander("New project"):
        name = st.text_input("Project name", key="new-project-name")
        clients = list(state.clients)
        client = st.selectbox(
            "Client",
            clients,
            index=None,
            format_func=lambda item: item.name,
            placeholder="Select a client",
            key="new-project-client",
        )
        location = st.text_input("Location", key="new-project-location")

        ready = bool(name.strip() and client is not None and location.strip())
        if st.button("Create project", disabled=not ready, type="primary", key="new-project-submit"):
            project = create_project(name, client.id, location)
            state.add_project(project)
            st.success(f"Project '{project.name}' created.")
            navigate("project", project.id)


def render_page(state: AppState) -> None:
    """Render the portfolio dashboard."""

    st.title("Dashboard")
    st.caption("Budget and expense overview across all projects.")

    _render_kpis(summarize_portfolio(state.projects))

    with card("Budgeted vs spent", suffix="All projects"):
        chart = build_cost_chart(chart_frame(project_chart_rows(state.projects)))
        st.plotly_chart(chart, use_container_width=True, key="portfolio-costs")

    _render_new_project_form(state)

    st.subheader("Projects")
    _render_project_list(state)
