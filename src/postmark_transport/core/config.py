"""Application configuration models and loader utilities."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import BaseModel, Field, field_validator


class PostmarkSettings(BaseModel):
    """Settings for the Postmark HTTP API."""

    token: str | None = Field(default=None, description="Server API token")
    message_stream: str | None = Field(
        default=None, description="Message stream identifier, e.g. 'outbound'"
    )
    timeout_seconds: float = Field(
        default=30.0, gt=0, description="Request timeout for API calls"
    )

    @field_validator("token", "message_stream", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def __repr__(self) -> str:
        token = "'[REDACTED]'" if self.token else "None"
        return (
            f"PostmarkSettings(token={token}, "
            f"message_stream={self.message_stream!r}, "
            f"timeout_seconds={self.timeout_seconds!r})"
        )


class LoggingSettings(BaseModel):
    """Logging preferences."""

    level: str = Field(default="INFO", description="Root logging level")
    structured: bool = Field(
        default=False, description="Toggle JSON structured logging"
    )


class AppSettings(BaseModel):
    """Aggregated application configuration."""

    postmark: PostmarkSettings = Field(default_factory=PostmarkSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


ENV_PREFIX = "POSTMARK_TRANSPORT_"


def _setting_path(raw_key: str) -> tuple[str, str] | None:
    """Map ``POSTMARK_TRANSPORT_<SECTION>__<FIELD>`` to a known settings field."""
    section, separator, name = raw_key.removeprefix(ENV_PREFIX).lower().partition("__")
    if not separator:
        return None
    section_field = AppSettings.model_fields.get(section)
    if section_field is None or section_field.annotation is None:
        return None
    if name not in section_field.annotation.model_fields:
        return None
    return section, name


def _collect_env_values(
    env_file: Path | str | None, include_environment: bool
) -> dict[str, dict[str, str]]:
    """Gather settings from an optional env file, then the process environment.

    Blank values are skipped so the model default applies; type coercion
    (booleans, floats) is left to pydantic.
    """
    raw: dict[str, str | None] = {}
    if env_file and Path(env_file).is_file():
        raw.update(dotenv_values(env_file))
    if include_environment:
        raw.update(os.environ)

    collected: dict[str, dict[str, str]] = {}
    for key, value in raw.items():
        if not key.startswith(ENV_PREFIX) or not value:
            continue
        path = _setting_path(key)
        if path is None:
            continue
        section, name = path
        collected.setdefault(section, {})[name] = value
    return collected


@lru_cache(maxsize=1)
def load_app_settings(
    env_file: Path | str | None = None,
    include_environment: bool = True,
    **overrides: Any,
) -> AppSettings:
    """Load application settings, applying env files and overrides."""
    collected: dict[str, Any] = dict(_collect_env_values(env_file, include_environment))
    if overrides:
        collected.update(overrides)
    return AppSettings.model_validate(collected)


__all__ = [
    "AppSettings",
    "LoggingSettings",
    "PostmarkSettings",
    "load_app_settings",
]
