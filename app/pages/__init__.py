"""Page modules for the SiteLedger Streamlit application."""

from .dashboard import render_page as render_dashboard_page
from .project import render_page as render_project_page
from .settings import render_page as render_settings_page

__all__ = [
    "render_dashboard_page",
    "render_project_page",
    "render_settings_page",
]
