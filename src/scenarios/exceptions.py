"""Exceptions raised by Scenarios.

Every error carries a short ``message``, an optional ``hint`` telling the
caller what to do about it, and optional ``details`` for debugging. The CLI
prints them, and MCP tools return them as error payloads via ``to_dict``.
"""

from __future__ import annotations

from typing import Any


class ScenariosError(Exception):
    """Base class for all Scenarios errors."""

    def __init__(
        self,
        message: str,
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Create an error.

        Args:
            message: What went wrong
            hint: How to fix it, shown to users below the message
            details: Extra context such as the offending id or value
        """
        self.message = message
        self.hint = hint
        self.details = details or {}
        super().__init__(str(self))

    def __str__(self) -> str:
        lines = [f"Error: {self.message}"]
        if self.hint:
            lines.append(f"Hint: {self.hint}")
        if self.details:
            lines.append("Details:")
            lines.extend(f"  {key}: {value}" for key, value in self.details.items())
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Error payload with the message, the error class and any hint."""
        payload: dict[str, Any] = {
            "success": False,
            "error": self.message,
            "error_type": type(self).__name__,
        }
        if self.hint:
            payload["hint"] = self.hint
        return payload


class ConfigurationError(ScenariosError):
    """Invalid settings or an unreadable configuration file."""


class ValidationError(ScenariosError):
    """A filter value or registration field has the wrong shape."""


class SceneRegistrationError(ValidationError):
    """A scene was registered without text or structured fields to build it from."""


class SceneNotFoundError(ScenariosError):
    """A scene id or character name is not present in the store."""


class TextExtractionError(ScenariosError):
    """Raw text could not be extracted from a PDF document."""


class LLMError(ScenariosError):
    """Base class for language model failures."""


class LLMProviderError(LLMError):
    """The completion endpoint failed or returned something unreadable."""


# Top-level keys people write by mistake, mapped to the real setting name
MISTAKEN_CONFIG_KEYS = {
    "api_key": "llm_api_key",  # pragma: allowlist secret
    "endpoint": "llm_endpoint",
    "model": "llm_model",
    "temperature": "llm_temperature",
    "port": "mcp_port",
    "host": "mcp_host",
    "transport": "mcp_transport",
}


def check_config_keys(config: dict[str, Any]) -> None:
    """Reject configuration files that use a mistaken key.

    Raises:
        ConfigurationError: Naming the first mistaken key and its replacement
    """
    for key in config:
        correct = MISTAKEN_CONFIG_KEYS.get(key)
        if correct is None:
            continue
        raise ConfigurationError(
            message=f"Unknown configuration key '{key}'",
            hint=f"Use '{correct}' instead of '{key}'",
            details={"key": key, "expected": correct, "keys": sorted(config)},
        )
