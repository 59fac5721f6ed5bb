"""OpenAI access shared by the SiteLedger AI features."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Mapping

from openai import APIError, OpenAI

from config import Settings, get_settings

__all__ = [
    "AIServiceError",
    "AIUnavailableError",
    "ClientFactory",
    "MISSING_KEY_MESSAGE",
    "request_structured_json",
    "resolve_openai_client",
]

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = (
    "AI features are unavailable: no OpenAI API key is configured. "
    "Set OPENAI_API_KEY or add it to .streamlit/secrets.toml under [openai]."
)

ClientFactory = Callable[[], OpenAI]


class AIServiceError(RuntimeError):
    """Raised when an AI request fails or returns unusable output."""


class AIUnavailableError(AIServiceError):
    """Raised without any network call when no API key was configured."""


def resolve_openai_client(settings: Settings | None = None) -> OpenAI:
    settings = settings or get_settings()
    if not settings.ai_enabled:
        raise AIUnavailableError(MISSING_KEY_MESSAGE)
    return OpenAI(**settings.openai_client_kwargs)


def request_structured_json(
    client: OpenAI,
    *,
    model: str,
    system_prompt: str,
    user_message: str,
    schema_name: str,
    schema: Mapping[str, Any],
    max_tokens: int,
) -> Any:
    """Run a chat completion constrained to ``schema`` and return the decoded JSON."""

    logger.info("Requesting %s from model %s", schema_name, model)
    try:
        response = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            response_format={
                "type": "json_schema",
                "json_schema": {"name": schema_name, "strict": True, "schema": dict(schema)},
            },
            max_tokens=max_tokens,
            temperature=0.3,
        )
    except APIError as exc:
        logger.warning("OpenAI request for %s failed: %s", schema_name, exc)
        raise AIServiceError(f"OpenAI API error: {exc}") from exc

    try:
        text = response.choices[0].message.content or ""
    except (AttributeError, IndexError) as exc:  # pragma: no cover - unexpected SDK output
        raise AIServiceError("Unexpected response format from OpenAI API") from exc

    if not text.strip():
        raise AIServiceError("OpenAI response was empty")

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("OpenAI returned invalid JSON for %s", schema_name)
        raise AIServiceError("OpenAI response was not valid JSON") from exc
