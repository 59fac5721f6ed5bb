"""Prompt loading utilities for SiteLedger AI features."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from string import Template

__all__ = ["PromptTemplate", "compose_prompts", "get_prompt_text", "load_prompt"]


@dataclass(frozen=True)
class PromptTemplate:
    """A prompt file whose ``$placeholders`` can be filled at request time."""

    name: str
    content: str

    def render(self, **values: str) -> str:
        return Template(self.content).substitute(values)


PROMPTS_DIR = Path(__file__).resolve().parent


@lru_cache(maxsize=32)
def load_prompt(name: str) -> PromptTemplate:
    """Load a prompt template by stem name (without extension)."""

    path = PROMPTS_DIR / f"{name}.txt"
    if not path.exists():
        raise FileNotFoundError(f"Prompt template not found: {path}")

    content = path.read_text(encoding="utf-8").strip()
    return PromptTemplate(name=name, content=content)


def get_prompt_text(name: str, **values: str) -> str:
    """Return prompt text, substituting any ``values`` given."""

    template = load_prompt(name)
    return template.render(**values) if values else template.content


def compose_prompts(*names: str) -> str:
    """Join several prompt files into one instruction block."""

    return "\n\n".join(load_prompt(name).content for name in names)
