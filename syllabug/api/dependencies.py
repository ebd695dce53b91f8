"""FastAPI dependencies shared by the routes."""

from __future__ import annotations

from syllabug.config import Settings, settings
from syllabug.extraction.invoker import ModelInvoker, build_invoker


def settings_dependency() -> Settings:
    return settings


def get_invoker() -> ModelInvoker | None:
    """Build a model invoker for this request from the current settings."""
    return build_invoker(settings)
