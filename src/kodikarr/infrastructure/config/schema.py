"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from kodikarr.infrastructure.kodik.extractors import PLAYER_DOMAINS
from kodikarr.infrastructure.user_agents import DEFAULT_USER_AGENTS

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/kodik/logging/api).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="kodikarr", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=30.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="HTTP timeout in seconds for player page/API requests.",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_follow_redirects",
            AliasPath("http", "follow_redirects"),
        ),
        description="Whether HTTP client follows redirects.",
    )
    http_user_agents: list[str] = Field(
        default_factory=lambda: list(DEFAULT_USER_AGENTS),
        validation_alias=AliasChoices(
            "http_user_agents",
            AliasPath("http", "user_agents"),
        ),
        description="User-Agent pool; one is picked at random per request.",
    )

    # Kodik (YAML section: kodik.*)
    kodik_domains: list[str] = Field(
        default_factory=lambda: list(PLAYER_DOMAINS),
        validation_alias=AliasChoices(
            "kodik_domains",
            AliasPath("kodik", "domains"),
        ),
        description="Player hosts accepted by the stream resolver.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # HTTP API (YAML section: api.*)
    api_host: str = Field(
        default="0.0.0.0",  # noqa: S104
        validation_alias=AliasChoices("api_host", AliasPath("api", "host")),
        description="Bind host for `kodikarr serve`.",
    )
    api_port: int = Field(
        default=7980,
        validation_alias=AliasChoices("api_port", AliasPath("api", "port")),
        description="Bind port for `kodikarr serve`.",
    )

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("http_user_agents")
    @classmethod
    def _validate_user_agents(cls, v: list[str]) -> list[str]:
        agents = [ua.strip() for ua in v if ua and ua.strip()]
        if not agents:
            raise ValueError("http_user_agents must contain at least one entry")
        return agents

    @field_validator("kodik_domains")
    @classmethod
    def _validate_domains(cls, v: list[str]) -> list[str]:
        domains = [d.strip().lower() for d in v if d and d.strip()]
        if not domains:
            raise ValueError("kodik_domains must contain at least one entry")
        return domains

    @field_validator("api_port")
    @classmethod
    def _validate_port(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError("api_port must be in 1..65535")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "follow_redirects": self.http_follow_redirects,
                "user_agents": list(self.http_user_agents),
            },
            "kodik": {"domains": list(self.kodik_domains)},
            "logging": {"level": self.log_level, "format": self.log_format},
            "api": {"host": self.api_host, "port": self.api_port},
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Supported env var examples (flat, explicit):
    - KODIKARR_HTTP_TIMEOUT_SECONDS
    - KODIKARR_HTTP_USER_AGENTS  (JSON list)
    - KODIKARR_KODIK_DOMAINS  (JSON list)
    - KODIKARR_LOG_LEVEL
    - KODIKARR_API_PORT
    """

    model_config = SettingsConfigDict(
        env_prefix="KODIKARR_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agents: Optional[list[str]] = None

    kodik_domains: Optional[list[str]] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    api_host: Optional[str] = None
    api_port: Optional[int] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
