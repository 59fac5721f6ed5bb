"""Tests for the AI suggestion and consultancy helpers with injected clients."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any, cast

import httpx
import pytest
import streamlit as st
from openai import APIError, OpenAI

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import Settings, get_settings
from core.ai import (
    AIServiceError,
    AIUnavailableError,
    AgentType,
    build_project_brief,
    generate_budget_suggestions,
    generate_consultancy_report,
    impact_level,
    parse_suggestions,
)
from core.models import Client, ProposedItem
from core.seed import default_clients, default_projects


@pytest.fixture(autouse=True)
def clear_streamlit_secrets(monkeypatch):
    """Provide an empty secrets mapping so tests don't rely on Streamlit runtime."""

    monkeypatch.setattr(st, "secrets", {}, raising=False)


@pytest.fixture()
def settings() -> Settings:
    return Settings(openai_api_key="test-key", openai_model="test-model")


class DummyClient:
    """Minimal stand-in for ``OpenAI`` recording each completion request."""

    def __init__(self, content: str | None = None, error: Exception | None = None):
        self.content = content
        self.error = error
        self.requests: list[dict[str, Any]] = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs: Any):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))])


def _factory(client: DummyClient):
    return lambda: cast(OpenAI, client)


def test_suggestions_are_parsed_from_structured_output(settings):
    payload = {
        "items": [
            {"category": "Materials", "itemName": "Ceramic tiles", "quantity": 12, "unitCost": 59.9},
            {"category": " Labor ", "itemName": "Tiler", "quantity": 3.0, "unitCost": 250},
        ]
    }
    client = DummyClient(json.dumps(payload))

    items = generate_budget_suggestions("Bathroom refit", client_factory=_factory(client), settings=settings)

    assert items == [
        ProposedItem(category="Materials", item_name="Ceramic tiles", quantity=12, unit_cost=59.9),
        ProposedItem(category="Labor", item_name="Tiler", quantity=3, unit_cost=250.0),
    ]
    request = client.requests[0]
    assert request["model"] == "test-model"
    assert request["response_format"]["type"] == "json_schema"
    assert request["response_format"]["json_schema"]["strict"] is True
    assert "Bathroom refit" in request["messages"][1]["content"]


def test_blank_description_is_rejected_before_any_call(settings):
    client = DummyClient("{}")

    with pytest.raises(ValueError):
        generate_budget_suggestions("   ", client_factory=_factory(client), settings=settings)

    assert client.requests == []


@pytest.mark.parametrize(
    "payload",
    [
        {"items": [{"category": "Materials", "itemName": "Cement", "quantity": 2}]},
        {"items": [{"category": "", "itemName": "Cement", "quantity": 2, "unitCost": 10}]},
        {"items": [{"category": "Materials", "itemName": "Cement", "quantity": "two", "unitCost": 10}]},
        {"suggestions": []},
    ],
)
def test_malformed_suggestions_raise(payload):
    with pytest.raises(AIServiceError):
        parse_suggestions(payload)


def test_invalid_json_and_empty_responses_raise(settings):
    for content in ("not json", "", None):
        with pytest.raises(AIServiceError):
            generate_budget_suggestions("Roof", client_factory=_factory(DummyClient(content)), settings=settings)


def test_api_errors_are_wrapped(settings):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    client = DummyClient(error=APIError("boom", request, body=None))

    with pytest.raises(AIServiceError, match="boom"):
        generate_budget_suggestions("Roof", client_factory=_factory(client), settings=settings)


def test_missing_key_fails_fast():
    with pytest.raises(AIUnavailableError):
        generate_budget_suggestions("Roof", settings=Settings(openai_api_key=None))


def test_settings_read_streamlit_secrets(monkeypatch):
    monkeypatch.setattr(st, "secrets", {"openai": {"api_key": "from-secrets", "model": "gpt-test"}}, raising=False)
    get_settings.cache_clear()
    try:
        loaded = get_settings()
    finally:
        get_settings.cache_clear()

    assert loaded.ai_enabled
    assert loaded.openai_model == "gpt-test"
    assert loaded.openai_client_kwargs == {"api_key": "from-secrets"}


def test_project_brief_mentions_categories_and_unknown_client():
    project = default_projects()[0]

    brief = build_project_brief(project, [Client(id="other", name="Someone else")])

    assert "Alphaville Residence" in brief
    assert "Unknown client" in brief
    assert "Materials (3 items)" in brief
    assert "Labor (2 items)" in brief


def test_consultancy_report_uses_agent_prompts(settings):
    payload = {
        "title": "Risk review",
        "summary": "Two main risks.",
        "recommendations": [
            {"title": "Permits", "description": "Check municipal permits.", "impact": "High"},
            {"title": "Weather", "description": "Plan for rain.", "impact": "Moderate risk"},
        ],
    }
    client = DummyClient(json.dumps(payload))

    report = generate_consultancy_report(
        default_projects()[0],
        default_clients(),
        AgentType.RISK,
        client_factory=_factory(client),
        settings=settings,
    )

    assert report.title == "Risk review"
    assert [item.title for item in report.recommendations] == ["Permits", "Weather"]
    messages = client.requests[0]["messages"]
    assert "Silva Family" in messages[1]["content"]
    assert client.requests[0]["response_format"]["json_schema"]["name"] == "consultancy_risk"


def test_consultancy_report_rejects_missing_fields(settings):
    client = DummyClient(json.dumps({"title": "x", "recommendations": []}))

    with pytest.raises(AIServiceError):
        generate_consultancy_report(
            default_projects()[0], default_clients(), "BUDGET", client_factory=_factory(client), settings=settings
        )


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("High", "high"),
        ("alta", "high"),
        ("Medium impact", "medium"),
        ("Média", "medium"),
        ("low", "low"),
        ("Baixo", "low"),
        ("critical", "other"),
        ("", "other"),
    ],
)
def test_impact_level(label, expected):
    assert impact_level(label) == expected
