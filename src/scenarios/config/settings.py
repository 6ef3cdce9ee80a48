"""Scenarios configuration settings."""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, BinaryIO

import yaml
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from scenarios.exceptions import ConfigurationError, check_config_keys


def _load_yaml(stream: BinaryIO) -> Any:
    return yaml.safe_load(stream)


def _load_json(stream: BinaryIO) -> Any:
    return json.load(stream)


CONFIG_LOADERS: dict[str, Callable[[BinaryIO], Any]] = {
    ".yaml": _load_yaml,
    ".yml": _load_yaml,
    ".toml": tomllib.load,
    ".json": _load_json,
}


class ScenariosSettings(BaseSettings):
    """Runtime configuration for the parser service, MCP server and CLI.

    Values come from, in decreasing priority: keyword arguments (CLI flags,
    tests, ``from_file``), ``SCENARIOS_*`` environment variables, a ``.env``
    file in the working directory, and the defaults below.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCENARIOS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(
        default="scenarios",
        description="Name reported by the MCP server",
    )
    debug: bool = Field(
        default=False,
        description="Add call-site information to log records",
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="DEBUG, INFO, WARNING, ERROR or CRITICAL",
        pattern="(?i)^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    log_format: str = Field(
        default="console",
        description="console, json or structured (key=value)",
        pattern="(?i)^(console|json|structured)$",
    )
    log_file: Path | None = Field(
        default=None,
        description="Also write logs to this file, rotated at 10MB",
    )

    # Language model used for translation, extraction and estimates
    llm_endpoint: str | None = Field(
        default=None,
        description="Base URL of an OpenAI-compatible API",
    )
    llm_api_key: str | None = Field(
        default=None,
        description="Bearer token sent to the endpoint",
    )
    llm_model: str | None = Field(
        default=None,
        description="Model name; default/auto/none mean the built-in default",
    )
    llm_temperature: float = Field(
        default=0.0,
        description="Sampling temperature for completions",
        ge=0.0,
        le=2.0,
    )
    llm_timeout: float = Field(
        default=60.0,
        description="HTTP timeout in seconds for one completion",
        gt=0.0,
    )

    # Capabilities
    capability_timeout: float = Field(
        default=20.0,
        description="Seconds before a translation or estimate falls back",
        gt=0.0,
    )
    translation_enabled: bool = Field(
        default=True,
        description="Retry empty searches after translating filters to English",
    )

    # MCP server
    mcp_host: str = Field(
        default="127.0.0.1",
        description="Host the HTTP transports bind to",
    )
    mcp_port: int = Field(
        default=8080,
        description="Port the HTTP transports bind to",
        validation_alias=AliasChoices(
            "mcp_port", "SCENARIOS_MCP_PORT", "PORT", "MCP_HTTP_PORT"
        ),
        gt=0,
    )
    mcp_transport: str = Field(
        default="stdio",
        description="stdio, sse or streamable-http",
        pattern="^(stdio|sse|streamable-http)$",
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def resolve_log_file(cls, value: Any) -> Path | None:
        """Expand ``~`` and environment variables in the log file path."""
        if value is None or value == "":
            return None
        if not isinstance(value, str | Path):
            raise ValueError(f"log_file must be a path, got {type(value).__name__}")
        return Path(os.path.expandvars(str(value))).expanduser().resolve()

    @field_validator("log_level", "log_format", mode="before")
    @classmethod
    def fold_case(cls, value: Any, info: Any) -> str:
        """Accept any case: levels are stored upper-case, formats lower-case."""
        if not isinstance(value, str):
            raise ValueError(
                f"{info.field_name} must be a string, got {type(value).__name__}"
            )
        return value.upper() if info.field_name == "log_level" else value.lower()

    @field_validator("llm_model", mode="before")
    @classmethod
    def drop_placeholder_model(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().lower() in {
            "",
            "default",
            "auto",
            "none",
        }:
            return None
        return value

    @property
    def llm_configured(self) -> bool:
        """Whether an LLM endpoint and key are both available."""
        return bool(self.llm_endpoint and self.llm_api_key)

    @classmethod
    def from_env(cls) -> ScenariosSettings:
        return cls()

    @classmethod
    def from_file(cls, config_path: Path | str) -> ScenariosSettings:
        """Build settings from a YAML, TOML or JSON file.

        Keys in the file override environment variables.

        Raises:
            FileNotFoundError: If ``config_path`` does not exist
            ConfigurationError: If the format is unknown, the file does not
                hold a mapping, or a key is a known mistake
        """
        path = Path(config_path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        loader = CONFIG_LOADERS.get(path.suffix.lower())
        if loader is None:
            raise ConfigurationError(
                message=f"Unsupported configuration file format: {path.suffix}",
                hint=f"Use one of: {', '.join(sorted(CONFIG_LOADERS))}",
                details={"file": str(path)},
            )
        with path.open("rb") as stream:
            data = loader(stream) or {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                message="Configuration file must contain a mapping of settings",
                details={"file": str(path), "found": type(data).__name__},
            )

        check_config_keys(data)
        return cls(**data)


_settings: ScenariosSettings | None = None


def get_settings() -> ScenariosSettings:
    """Process-wide settings, read from the environment on first use."""
    global _settings
    if _settings is None:
        _settings = ScenariosSettings.from_env()
    return _settings


def set_settings(settings: ScenariosSettings | None) -> None:
    """Replace the process-wide settings; ``None`` forces a reload."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    set_settings(None)
