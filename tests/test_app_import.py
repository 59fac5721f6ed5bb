import importlib
import sys
from pathlib import Path

import pytest
import streamlit as st

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from prompts import compose_prompts, get_prompt_text


@pytest.fixture(autouse=True)
def clear_streamlit_secrets(monkeypatch):
    monkeypatch.setattr(st, "secrets", {}, raising=False)


def test_app_package_exports_main():
    module = importlib.import_module("app")

    assert hasattr(module, "main"), "app package should expose main entrypoint"


def test_pages_expose_renderers():
    pages = importlib.import_module("app.pages")

    for name in ("render_dashboard_page", "render_project_page", "render_settings_page"):
        assert callable(getattr(pages, name))


def test_prompt_templates_render():
    request = get_prompt_text("budget_request", description="Paint 3 rooms")

    assert "Paint 3 rooms" in request
    assert "$description" not in request
    assert compose_prompts("agent_risk_role", "consultancy_format").count("\n\n") >= 1


@pytest.mark.parametrize("agent", ["budget", "sustainability", "timeline", "risk"])
def test_every_agent_has_prompts(agent):
    assert get_prompt_text(f"agent_{agent}_role")
    assert get_prompt_text(f"agent_{agent}_task")
