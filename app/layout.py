"""Shared layout primitives for the SiteLedger Streamlit app."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from html import escape
from typing import Iterable

import streamlit as st
from streamlit.components.v1 import html as components_html

from core.models import ProjectStatus


@dataclass(frozen=True)
class NavigationLink:
    slug: str
    label: str
    enabled: bool = True


NAV_LINKS: tuple[NavigationLink, ...] = (
    NavigationLink("dashboard", "Dashboard", True),
    NavigationLink("project", "Project", True),
    NavigationLink("settings", "Settings", True),
)

DEFAULT_PAGE = "dashboard"
BUSY_PREFIX = "busy::"

STATUS_CHIP_CLASSES = {
    ProjectStatus.PLANNING: "sl-chip--grey",
    ProjectStatus.IN_PROGRESS: "sl-chip--blue",
    ProjectStatus.PAUSED: "sl-chip--amber",
    ProjectStatus.COMPLETED: "sl-chip--green",
    ProjectStatus.CANCELLED: "sl-chip--red",
}

IMPACT_CHIP_CLASSES = {
    "high": "sl-chip--red",
    "medium": "sl-chip--amber",
    "low": "sl-chip--green",
    "other": "sl-chip--grey",
}


def inject_css() -> None:
    """Inject global CSS tokens and component styling into the Streamlit app."""

    st.markdown(
        """
        <style>
          :root {
            --gap: 16px;
            --radius: 12px;
            --card-bg: #FFFFFF;
            --border: #E6EAF2;
            --shadow: 0 1px 2px rgba(16, 24, 40, 0.05), 0 1px 3px rgba(16, 24, 40, 0.06);
          }

          body, [data-testid="stAppViewContainer"] > .main {
            background: #F4F6FB;
          }

          .block-container {
            max-width: 1200px;
            padding-top: 2.5rem;
            padding-bottom: 4rem;
          }

          .sl-nav {
            display: flex;
            align-items: center;
            justify-content: space-between;
            gap: 2rem;
            padding: 0.9rem 0;
          }

          .sl-nav__brand {
            display: flex;
            align-items: center;
            gap: 0.8rem;
            font-size: 1.5rem;
            font-weight: 700;
            color: #1E40AF;
          }

          .sl-nav__links {
            display: flex;
            align-items: center;
            gap: 1.8rem;
          }

          .sl-nav__link,
          .sl-nav__link:visited {
            position: relative;
            display: inline-flex;
            align-items: center;
            font-weight: 600;
            color: #5C6478;
            text-decoration: none;
            transition: color 0.2s ease;
          }

          .sl-nav__link:hover,
          .sl-nav__link.is-active {
            color: #1E40AF;
          }

          .sl-nav__link.is-active::after {
            content: "";
            position: absolute;
            left: 0;
            right: 0;
            bottom: -8px;
            height: 3px;
            border-radius: 999px;
            background: linear-gradient(90deg, #1E40AF, #F97316);
          }

          .sl-nav__link.is-disabled {
            color: #B7C1D9;
            cursor: not-allowed;
            pointer-events: none;
            opacity: 0.7;
          }

          @media (max-width: 768px) {
            .sl-nav {
              flex-direction: column;
              align-items: flex-start;
              gap: 0.75rem;
            }
          }

          .sl-card-anchor {
            display: none;
          }

          [data-testid="stVerticalBlock"]:has(> .sl-card-anchor) {
            background: var(--card-bg);
            border: 1px solid var(--border);
            border-radius: var(--radius);
            box-shadow: var(--shadow);
            padding: 16px;
            margin-bottom: var(--gap);
            display: flex;
            flex-direction: column;
            gap: 12px;
          }

          .sl-card__head {
            display: flex;
            align-items: center;
            justify-content: space-between;
            gap: 12px;
            font-weight: 600;
            color: #111827;
            margin-bottom: 4px;
            flex-wrap: wrap;
          }

          .sl-card__title {
            font-size: 1.05rem;
          }

          .sl-chip {
            font-size: 12px;
            padding: 2px 8px;
            border-radius: 999px;
            border: 1px solid #D6DEFF;
            background: #F0F4FF;
            color: #1E40AF;
            white-space: nowrap;
          }

          .sl-chip--grey { background: #F3F4F6; border-color: #E5E7EB; color: #4B5563; }
          .sl-chip--blue { background: #EFF6FF; border-color: #BFDBFE; color: #1E40AF; }
          .sl-chip--amber { background: #FFFBEB; border-color: #FDE68A; color: #B45309; }
          .sl-chip--green { background: #ECFDF5; border-color: #A7F3D0; color: #047857; }
          .sl-chip--red { background: #FEF2F2; border-color: #FECACA; color: #B91C1C; }

          .sl-muted {
            color: #6B7280;
            font-size: 0.9rem;
          }

          @media (min-width: 1200px) {
            [data-testid="stVerticalBlock"]:has(> .sl-card-anchor) {
              padding: 24px;
            }
            :root {
              --gap: 24px;
            }
          }
        </style>
        """,
        unsafe_allow_html=True,
    )


def chip(label: str, css_class: str = "") -> str:
    classes = f"sl-chip {css_class}".strip()
    return f'<span class="{classes}">{escape(label)}</span>'


def status_chip(status: ProjectStatus) -> str:
    return chip(status.value, STATUS_CHIP_CLASSES.get(status, ""))


def impact_chip(label: str, level: str) -> str:
    return chip(label, IMPACT_CHIP_CLASSES.get(level, IMPACT_CHIP_CLASSES["other"]))


@contextmanager
def card(title: str, suffix: str | None = None, suffix_html: str | None = None):
    """Render content inside a reusable SiteLedger card."""

    chip_html = suffix_html or (chip(suffix) if suffix else "")
    container = st.container()
    with container:
        st.markdown('<div class="sl-card-anchor"></div>', unsafe_allow_html=True)
        st.markdown(
            f'<div class="sl-card__head"><span class="sl-card__title">{escape(title)}</span>'
            f"{chip_html}</div>",
            unsafe_allow_html=True,
        )
        yield


def render_navbar(active_page: str, project_id: str | None = None) -> None:
    """Render the navigation bar with active state."""

    link_markup: list[str] = []
    for link in NAV_LINKS:
        css_class = "sl-nav__link"
        aria_current = ""
        if link.slug == active_page:
            css_class += " is-active"
            aria_current = ' aria-current="page"'

        enabled = link.enabled and (link.slug != "project" or project_id is not None)
        if enabled:
            href = f"?page={link.slug}"
            if link.slug == "project" and project_id:
                href += f"&project={project_id}"
            link_markup.append(
                f'<a class="{css_class}" href="{href}"{aria_current} data-page="{link.slug}" target="_self">{link.label}</a>'
            )
        else:
            link_markup.append(f'<span class="{css_class} is-disabled">{link.label}</span>')

    st.markdown(
        f"""
        <nav class="sl-nav">
            <div class="sl-nav__brand">SiteLedger</div>
            <div class="sl-nav__links">{''.join(link_markup)}</div>
        </nav>
        """,
        unsafe_allow_html=True,
    )
    _enforce_same_tab_navigation()


def _enforce_same_tab_navigation() -> None:
    """Ensure navigation links stay within the same browser tab."""

    components_html(
        """
        <script>
        (function() {
          if (window.parent && !window.parent.__slNavSameTab) {
            window.parent.__slNavSameTab = true;
            const enforce = () => {
              const anchors = window.parent.document.querySelectorAll('a.sl-nav__link');
              anchors.forEach((anchor) => {
                if (anchor.target && anchor.target.toLowerCase() !== '_self') {
                  anchor.target = '_self';
                }
              });
            };
            enforce();
            const observer = new MutationObserver(enforce);
            observer.observe(window.parent.document.body, { childList: true, subtree: true });
          }
        })();
        </script>
        """,
        height=0,
        width=0,
    )


def _query_param(name: str) -> str | None:
    value = st.query_params.get(name)
    if isinstance(value, list):
        value = value[0] if value else None
    return value


def determine_active_page(valid_pages: Iterable[str]) -> str:
    """Determine the active page from the query params or session state."""

    default_page = st.session_state.get("active_page", DEFAULT_PAGE)
    raw_page = _query_param("page") or default_page
    page = raw_page if raw_page in set(valid_pages) else DEFAULT_PAGE

    if st.session_state.get("active_page") != page:
        st.session_state["active_page"] = page

    if _query_param("page") != page:
        st.query_params["page"] = page

    return page


def selected_project_id() -> str | None:
    return _query_param("project")


def navigate(page: str, project_id: str | None = None) -> None:
    """Switch view by rewriting the query params and rerunning the script."""

    st.session_state["active_page"] = page
    st.query_params["page"] = page
    if project_id:
        st.query_params["project"] = project_id
    elif "project" in st.query_params:
        st.query_params.pop("project")
    st.rerun()


def is_busy(key: str) -> bool:
    return bool(st.session_state.get(BUSY_PREFIX + key, False))


def request_button(label: str, busy_label: str, key: str, *, disabled: bool = False) -> bool:
    """Render a button guarded by a busy flag.

    Clicking sets the flag and reruns, so the control is rendered disabled while
    the request runs. Returns ``True`` on the run where the caller should do the
    work; the caller must then call :func:`clear_busy`.
    """

    running = is_busy(key)
    clicked = st.button(
        busy_label if running else label,
        key=key,
        disabled=disabled or running,
        type="primary",
    )
    if clicked and not running:
        st.session_state[BUSY_PREFIX + key] = True
        st.rerun()
    return running


def clear_busy(key: str) -> None:
    st.session_state[BUSY_PREFIX + key] = False


__all__ = [
    "NAV_LINKS",
    "NavigationLink",
    "card",
    "chip",
    "clear_busy",
    "determine_active_page",
    "impact_chip",
    "inject_css",
    "is_busy",
    "navigate",
    "render_navbar",
    "request_button",
    "selected_project_id",
    "status_chip",
]
