"""AI consultancy reports written from one of four fixed expert perspectives."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping

from config import Settings, get_settings
from core.ai.client import AIServiceError, ClientFactory, request_structured_json, resolve_openai_client
from core.models import Client, ConsultancyReport, Project, Recommendation
from prompts import compose_prompts, get_prompt_text

MAX_OUTPUT_TOKENS = 1800
UNKNOWN_CLIENT = "Unknown client"

__all__ = [
    "AGENT_PROFILES",
    "AgentProfile",
    "AgentType",
    "REPORT_SCHEMA",
    "build_project_brief",
    "generate_consultancy_report",
    "impact_level",
    "parse_report",
]


class AgentType(str, Enum):
    BUDGET = "BUDGET"
    SUSTAINABILITY = "SUSTAINABILITY"
    TIMELINE = "TIMELINE"
    RISK = "RISK"


@dataclass(frozen=True)
class AgentProfile:
    agent: AgentType
    name: str
    title: str
    description: str

    @property
    def role_prompt(self) -> str:
        return f"agent_{self.agent.value.lower()}_role"

    @property
    def task_prompt(self) -> str:
        return f"agent_{self.agent.value.lower()}_task"


AGENT_PROFILES: tuple[AgentProfile, ...] = (
    AgentProfile(
        AgentType.BUDGET,
        "Cost Engineer",
        "Cost analysis",
        "Optimise the budget, find savings and anticipate hidden costs.",
    ),
    AgentProfile(
        AgentType.SUSTAINABILITY,
        "Sustainable Architect",
        "Green practices",
        "Materials and practices for a greener, more valuable build.",
    ),
    AgentProfile(
        AgentType.TIMELINE,
        "Site Foreman",
        "Planning and execution",
        "A schedule with the critical stages to avoid delays on site.",
    ),
    AgentProfile(
        AgentType.RISK,
        "Risk Manager",
        "Risk analysis",
        "Anticipate market, regulatory and safety issues before they happen.",
    ),
)

REPORT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {"type": "string", "description": "Main title of the report."},
        "summary": {"type": "string", "description": "Concise summary of the main findings."},
        "recommendations": {
            "type": "array",
            "description": "Specific recommendations, findings or points of attention.",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "description": {
                        "type": "string",
                        "description": "Why the recommendation matters and how to apply it.",
                    },
                    "impact": {
                        "type": "string",
                        "description": "Expected impact, e.g. high, medium or low.",
                    },
                },
                "required": ["title", "description", "impact"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["title", "summary", "recommendations"],
    "additionalProperties": False,
}

_IMPACT_WORDS = {
    "high": "high",
    "alta": "high",
    "alto": "high",
    "medium": "medium",
    "média": "medium",
    "media": "medium",
    "médio": "medium",
    "moderate": "medium",
    "low": "low",
    "baixa": "low",
    "baixo": "low",
}


def get_profile(agent: AgentType | str) -> AgentProfile:
    agent = AgentType(agent)
    for profile in AGENT_PROFILES:
        if profile.agent is agent:
            return profile
    raise KeyError(agent)  # pragma: no cover - every AgentType has a profile


def impact_level(impact: str) -> str:
    """Map a free-text impact label to ``high``/``medium``/``low``, else ``other``."""

    words = impact.strip().casefold().split()
    if not words:
        return "other"
    return _IMPACT_WORDS.get(words[0], "other")


def build_project_brief(project: Project, clients: Iterable[Client]) -> str:
    client_name = next(
        (client.name for client in clients if client.id == project.client_id),
        UNKNOWN_CLIENT,
    )
    categories = ", ".join(f"{category.name} ({len(category.items)} items)" for category in project.budget)
    return (
        f"Project name: {project.name}\n"
        f"Client: {client_name}\n"
        f"Location: {project.location}\n"
        f"Current budget: {categories or 'no categories yet'}."
    )


def _require_text(data: Mapping[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise AIServiceError(f"{where} is missing '{key}'")
    return value


def parse_report(payload: Any) -> ConsultancyReport:
    if not isinstance(payload, Mapping):
        raise AIServiceError("AI response was not a report object")

    raw_recommendations = payload.get("recommendations")
    if not isinstance(raw_recommendations, list):
        raise AIServiceError("Report is missing 'recommendations'")

    recommendations: list[Recommendation] = []
    for position, entry in enumerate(raw_recommendations, start=1):
        if not isinstance(entry, Mapping):
            raise AIServiceError(f"Recommendation {position} is not an object")
        where = f"Recommendation {position}"
        recommendations.append(
            Recommendation(
                title=_require_text(entry, "title", where),
                description=_require_text(entry, "description", where),
                impact=_require_text(entry, "impact", where),
            )
        )

    return ConsultancyReport(
        title=_require_text(payload, "title", "Report"),
        summary=_require_text(payload, "summary", "Report"),
        recommendations=tuple(recommendations),
    )


def generate_consultancy_report(
    project: Project,
    clients: Iterable[Client],
    agent: AgentType | str,
    *,
    client_factory: ClientFactory | None = None,
    settings: Settings | None = None,
) -> ConsultancyReport:
    profile = get_profile(agent)
    settings = settings or get_settings()
    client = (client_factory or (lambda: resolve_openai_client(settings)))()

    user_message = f"{build_project_brief(project, clients)}\n---\n{get_prompt_text(profile.task_prompt)}"
    payload = request_structured_json(
        client,
        model=settings.openai_model,
        system_prompt=compose_prompts(profile.role_prompt, "consultancy_format"),
        user_message=user_message,
        schema_name=f"consultancy_{profile.agent.value.lower()}",
        schema=REPORT_SCHEMA,
        max_tokens=MAX_OUTPUT_TOKENS,
    )
    return parse_report(payload)
