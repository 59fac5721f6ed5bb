"""Prompt templates and loaders for SiteLedger."""

from .base import PromptTemplate, compose_prompts, get_prompt_text, load_prompt

__all__ = ["PromptTemplate", "compose_prompts", "get_prompt_text", "load_prompt"]
