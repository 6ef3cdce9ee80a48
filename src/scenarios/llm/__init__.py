"""LLM integration module for Scenarios."""

from __future__ import annotations

from scenarios.llm.models import (
    CompletionRequest,
    CompletionResponse,
    ResponseFormat,
)
from scenarios.llm.provider import DEFAULT_MODEL, OpenAICompatibleProvider

__all__ = [
    "DEFAULT_MODEL",
    "CompletionRequest",
    "CompletionResponse",
    "OpenAICompatibleProvider",
    "ResponseFormat",
]
