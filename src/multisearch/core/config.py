"""Configuration management for multisearch.

This module provides configuration models and loading functionality using Pydantic
for validation and type safety. Provider credentials are read from the process
environment (and a ``.env`` file) under the same variable names the deployed
service uses.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, Any

import yaml
from dotenv import load_dotenv
from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_DOTENV_LOADED = False

ALTERNATIVE_PROVIDERS: tuple[str, ...] = (
    "serper",
    "searchapi",
    "searxng",
    "brave",
    "duckduckgo",
)


def _load_env_once() -> None:
    """Load environment variables from a .env file exactly once."""

    global _DOTENV_LOADED
    if not _DOTENV_LOADED:
        load_dotenv()
        _DOTENV_LOADED = True


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in configuration data."""

    if isinstance(data, str):
        return os.path.expandvars(data)
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    return data


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )
    log_file: str | None = Field(default=None, description="Log file path")
    max_bytes: int = Field(default=10485760, description="Max log file size (10MB)")
    backup_count: int = Field(default=5, description="Number of backup files")
    propagate: bool = Field(
        default=False,
        description="Also hand records to the root logger's handlers",
    )

    @field_validator("level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {value}")
        return level


class SearchSettings(BaseSettings):
    """Search provider configuration.

    Alternatives are considered available when their credential, endpoint or
    enable flag is present. ``provider_priority`` drives provider selection and
    ``fallback_order`` the chain walked after a rate-limited primary request.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        populate_by_name=True,
    )

    serper_api_key: str | None = Field(default=None, description="Serper API key")
    searchapi_api_key: str | None = Field(default=None, description="SearchAPI API key")
    searchapi_engine: str = Field(default="google", description="SearchAPI engine name")
    searxng_endpoint: str | None = Field(default=None, description="SearXNG base URL")
    searxng_engines: str | None = Field(default=None, description="SearXNG engines filter")
    searxng_categories: str = Field(default="general", description="SearXNG categories")
    brave_search_api_key: str | None = Field(default=None, description="Brave Search API key")
    duckduckgo_enabled: bool = Field(default=False, description="Enable DuckDuckGo")
    proxy_server: str | None = Field(
        default=None,
        description="Outbound proxy URL applied to every provider",
    )

    max_failures: int = Field(
        default=5,
        ge=1,
        validation_alias=AliasChoices("max_failures", "search_max_failures"),
        description="Rate-limited primary failures before it is demoted",
    )
    failure_cooldown_minutes: float = Field(
        default=30.0,
        ge=0.0,
        validation_alias=AliasChoices(
            "failure_cooldown_minutes", "search_failure_cooldown_minutes"
        ),
        description="Minutes without failures after which the count is forgiven",
    )
    provider_priority: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(ALTERNATIVE_PROVIDERS),
        validation_alias=AliasChoices("provider_priority", "search_provider_priority"),
        description="Alternative providers in selection order",
    )
    fallback_order: Annotated[list[str] | None, NoDecode] = Field(
        default=None,
        validation_alias=AliasChoices("fallback_order", "search_fallback_order"),
        description="Alternatives tried after a rate-limited primary request",
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("provider_priority", "fallback_order", mode="before")
    @classmethod
    def _parse_provider_list(cls, value: Any) -> Any:
        """Accept comma separated or JSON encoded provider lists."""

        if isinstance(value, str):
            text = value.strip()
            if text.startswith("["):
                return yaml.safe_load(text)
            return [item.strip() for item in text.split(",") if item.strip()]
        return value

    @field_validator("provider_priority", "fallback_order")
    @classmethod
    def _validate_provider_names(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        names = [item.lower() for item in value]
        unknown = [name for name in names if name not in ALTERNATIVE_PROVIDERS]
        if unknown:
            raise ValueError(
                f"Unknown alternative provider(s): {', '.join(unknown)}. "
                f"Expected any of: {', '.join(ALTERNATIVE_PROVIDERS)}"
            )
        return names

    @field_validator("duckduckgo_enabled", mode="before")
    @classmethod
    def _parse_enable_flag(cls, value: Any) -> Any:
        # Any non-empty value other than an explicit negative enables the provider
        if isinstance(value, str):
            return value.strip().lower() not in {"", "0", "false", "no", "off"}
        return value

    @field_validator("searxng_endpoint")
    @classmethod
    def _strip_endpoint(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip().rstrip("/")
        return value or None

    @model_validator(mode="after")
    def _default_fallback_order(self) -> SearchSettings:
        if self.fallback_order is None:
            self.fallback_order = list(ALTERNATIVE_PROVIDERS)
        return self

    @property
    def failure_cooldown_seconds(self) -> float:
        return self.failure_cooldown_minutes * 60.0

    @classmethod
    def load(cls, **overrides: Any) -> SearchSettings:
        """Build settings from the environment, loading ``.env`` once."""

        _load_env_once()
        return cls(**overrides)

    @classmethod
    def from_yaml(cls, path: str | Path) -> SearchSettings:
        """Load settings from a YAML file.

        Values from the file win over the environment. ``${VAR}`` references
        inside the file are expanded.

        Args:
            path: Path to YAML configuration file

        Returns:
            SearchSettings instance

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        _load_env_once()
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        return cls(**_expand_env_vars(data))
