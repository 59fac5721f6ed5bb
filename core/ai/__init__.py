"""AI-focused helpers for SiteLedger."""

from .client import AIServiceError, AIUnavailableError, MISSING_KEY_MESSAGE, resolve_openai_client
from .consultancy import (
    AGENT_PROFILES,
    AgentProfile,
    AgentType,
    build_project_brief,
    generate_consultancy_report,
    impact_level,
)
from .suggestions import generate_budget_suggestions, parse_suggestions

__all__ = [
    "AGENT_PROFILES",
    "AIServiceError",
    "AIUnavailableError",
    "AgentProfile",
    "AgentType",
    "MISSING_KEY_MESSAGE",
    "build_project_brief",
    "generate_budget_suggestions",
    "generate_consultancy_report",
    "impact_level",
    "parse_suggestions",
    "resolve_openai_client",
]
