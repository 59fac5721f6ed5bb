"""AI budget assistant: turn a scope description into proposed budget lines."""

from __future__ import annotations

from numbers import Real
from typing import Any, Mapping

from config import Settings, get_settings
from core.ai.client import AIServiceError, ClientFactory, request_structured_json, resolve_openai_client
from core.budget import coerce_cost, coerce_quantity
from core.models import ProposedItem
from prompts import get_prompt_text

PROMPT_SYSTEM = "budget_suggestions"
PROMPT_REQUEST = "budget_request"
MAX_OUTPUT_TOKENS = 1500

SUGGESTION_FIELDS = ("category", "itemName", "quantity", "unitCost")

SUGGESTION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "category": {
                        "type": "string",
                        "description": "Budget category of the line, e.g. Materials, Labor, Equipment.",
                    },
                    "itemName": {
                        "type": "string",
                        "description": "Specific item name, e.g. Cement, Mason, Concrete mixer.",
                    },
                    "quantity": {
                        "type": "number",
                        "description": "Estimated quantity for this line.",
                    },
                    "unitCost": {
                        "type": "number",
                        "description": "Estimated unit cost in Brazilian reais (BRL).",
                    },
                },
                "required": list(SUGGESTION_FIELDS),
                "additionalProperties": False,
            },
        }
    },
    "required": ["items"],
    "additionalProperties": False,
}

__all__ = [
    "SUGGESTION_SCHEMA",
    "generate_budget_suggestions",
    "parse_suggestions",
]


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _parse_entry(entry: Any, position: int) -> ProposedItem:
    if not isinstance(entry, Mapping):
        raise AIServiceError(f"Suggestion {position} is not an object")

    missing = [name for name in SUGGESTION_FIELDS if name not in entry]
    if missing:
        raise AIServiceError(f"Suggestion {position} is missing {', '.join(missing)}")

    category = entry["category"]
    item_name = entry["itemName"]
    if not isinstance(category, str) or not category.strip():
        raise AIServiceError(f"Suggestion {position} has no category")
    if not isinstance(item_name, str) or not item_name.strip():
        raise AIServiceError(f"Suggestion {position} has no item name")
    if not _is_number(entry["quantity"]) or not _is_number(entry["unitCost"]):
        raise AIServiceError(f"Suggestion {position} has a non-numeric quantity or cost")

    return ProposedItem(
        category=category.strip(),
        item_name=item_name.strip(),
        quantity=coerce_quantity(entry["quantity"]),
        unit_cost=coerce_cost(entry["unitCost"]),
    )


def parse_suggestions(payload: Any) -> list[ProposedItem]:
    """Validate decoded model output; any malformed entry rejects the whole list."""

    if isinstance(payload, Mapping):
        payload = payload.get("items")
    if not isinstance(payload, list):
        raise AIServiceError("AI response did not contain a list of suggestions")
    return [_parse_entry(entry, position) for position, entry in enumerate(payload, start=1)]


def generate_budget_suggestions(
    description: str,
    *,
    client_factory: ClientFactory | None = None,
    settings: Settings | None = None,
) -> list[ProposedItem]:
    if not description.strip():
        raise ValueError("Describe the project scope to get suggestions.")

    settings = settings or get_settings()
    client = (client_factory or (lambda: resolve_openai_client(settings)))()

    payload = request_structured_json(
        client,
        model=settings.openai_model,
        system_prompt=get_prompt_text(PROMPT_SYSTEM),
        user_message=get_prompt_text(PROMPT_REQUEST, description=description.strip()),
        schema_name="budget_suggestions",
        schema=SUGGESTION_SCHEMA,
        max_tokens=MAX_OUTPUT_TOKENS,
    )
    return parse_suggestions(payload)
