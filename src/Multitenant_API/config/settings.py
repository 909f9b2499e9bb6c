"""Configuration system for the multi-tenant API."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from enum import Enum
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, Field, SecretStr, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environments supported by the platform."""

    DEV = "dev"
    STAGING = "staging"
    PROD = "prod"


class LoggingSettings(BaseModel):
    """Structured logging configuration."""

    level: str = Field(default="INFO", description="Log level for application output")
    correlation_id_header: str = Field(
        default="X-Correlation-ID", description="Header used for trace correlation"
    )
    scrub_fields: Sequence[str] = Field(
        default_factory=lambda: ["password", "token", "secret", "secretkey", "authorization"],
        description="Fields that should be redacted in logs",
    )


class MetricsSettings(BaseModel):
    """Prometheus metrics configuration."""

    enabled: bool = True
    path: str = Field(default="/metrics", description="HTTP path for Prometheus metrics")


class ObservabilitySettings(BaseModel):
    """Aggregate observability configuration."""

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    metrics: MetricsSettings = Field(default_factory=MetricsSettings)


class ApiSettings(BaseModel):
    """REST surface configuration."""

    enabled: bool = Field(default=True, description="Serve the resource API at all")
    base_path: str = Field(default="/v1", description="Versioned prefix of every API route")
    max_batch_size: int = Field(
        default=100, ge=1, description="Maximum number of items accepted by /_batch"
    )
    logo: str = Field(default="Multitenant API v1", description="Body of GET on the base path")

    @model_validator(mode="after")
    def _normalise_base_path(self) -> ApiSettings:
        path = "/" + self.base_path.strip("/")
        self.base_path = "" if path == "/" else path
        return self


class TenancySettings(BaseModel):
    """Root tenant and object identity conventions."""

    root_tenant_id: str = Field(default="root", description="Identifier of the root tenant")
    root_tenant_name: str = Field(default="Root", description="Display name of the root tenant")
    separator: str = Field(
        default=":", min_length=1, description="Separator used in term tuples and link ids"
    )


class PagerSettings(BaseModel):
    """Defaults applied to listing operations."""

    default_limit: int = Field(default=30, ge=1, description="Page size when 'limit' is omitted")
    max_limit: int = Field(default=1000, ge=1, description="Upper bound applied to 'limit'")


class CORSSecuritySettings(BaseModel):
    """CORS configuration consumed by the FastAPI application."""

    allow_origins: Sequence[str] = Field(default_factory=lambda: ["https://localhost"])
    allow_methods: Sequence[str] = Field(default_factory=lambda: ["GET", "POST", "PUT", "DELETE"])
    allow_headers: Sequence[str] = Field(
        default_factory=lambda: ["Authorization", "Content-Type", "X-API-Key", "X-Access-Key"]
    )

    @model_validator(mode="before")
    @classmethod
    def _normalise_sequences(cls, values: dict[str, Any]) -> dict[str, Any]:
        for field in ("allow_origins", "allow_methods", "allow_headers"):
            current = values.get(field)
            if isinstance(current, str):
                values[field] = [
                    item.strip() for item in current.replace(",", " ").split() if item.strip()
                ]
        return values


class SecuritySettings(BaseModel):
    """Aggregate security configuration."""

    access_key_header: str = Field(default="X-Access-Key")
    secret_key_header: str = Field(default="X-API-Key")
    hashing_algorithm: str = Field(default="sha256")
    jwt_secret: SecretStr = Field(default=SecretStr("dev-signing-secret"))
    jwt_algorithm: str = Field(default="HS256")
    token_ttl_seconds: int = Field(default=7 * 24 * 60 * 60, ge=60)
    cors: CORSSecuritySettings = Field(default_factory=CORSSecuritySettings)


class AppSettings(BaseSettings):
    """Top-level application settings."""

    environment: Environment = Environment.DEV
    debug: bool = False
    service_name: str = "multitenant-api"
    api: ApiSettings = Field(default_factory=ApiSettings)
    tenancy: TenancySettings = Field(default_factory=TenancySettings)
    pager: PagerSettings = Field(default_factory=PagerSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    model_config = SettingsConfigDict(env_prefix="MT_", env_nested_delimiter="__")


ENVIRONMENT_DEFAULTS: Mapping[Environment, dict[str, Any]] = {
    Environment.DEV: {
        "debug": True,
        "observability": {"logging": {"level": "DEBUG"}},
    },
    Environment.STAGING: {
        "observability": {"logging": {"level": "INFO"}},
    },
    Environment.PROD: {
        "observability": {"logging": {"level": "WARNING"}},
    },
}


def _deep_update(target: dict[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    for key, value in updates.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            target[key] = _deep_update(dict(current), value)
        else:
            target[key] = value
    return target


def load_settings(environment: str | None = None) -> AppSettings:
    """Load application settings with environment specific defaults applied."""
    env_value = (environment or os.getenv("MT_ENV", "dev")).lower()
    env = Environment(env_value)
    defaults = ENVIRONMENT_DEFAULTS.get(env, {})
    try:
        base_settings = AppSettings()
    except ValidationError as err:
        raise RuntimeError(f"Invalid configuration: {err}") from err
    merged = base_settings.model_dump()
    merged = _deep_update(merged, defaults)
    merged["environment"] = env
    return AppSettings.model_validate(merged)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Cached accessor used by production code."""
    return load_settings()
