"""Configuration helpers for the hole plan service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from holeplan import __version__

logger = logging.getLogger("holeplan.config")

BACKEND_RESPONSES = "responses"
BACKEND_CHAT = "chat"
BACKENDS = (BACKEND_RESPONSES, BACKEND_CHAT)


class _Settings(BaseSettings):
    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    openai_model: str = Field(default="o4-mini", alias="OPENAI_MODEL")
    openai_base_url: str = Field(
        default="https://api.openai.com/v1", alias="OPENAI_BASE_URL"
    )
    plan_backend: str = Field(default=BACKEND_RESPONSES, alias="PLAN_BACKEND")
    plan_backend_timeout: float | None = Field(
        default=None, alias="PLAN_BACKEND_TIMEOUT"
    )
    plan_mock: bool = Field(default=False, alias="PLAN_MOCK")
    plan_allowed_origins: str = Field(
        default="https://www.canadamga.ca,https://canadamga.ca",
        alias="PLAN_ALLOWED_ORIGINS",
    )
    plan_strict_origin: bool = Field(default=False, alias="PLAN_STRICT_ORIGIN")
    plan_course_name: str = Field(default="Shawneeki", alias="PLAN_COURSE_NAME")
    plan_default_green_speed: str = Field(
        default="medium (course default)", alias="PLAN_DEFAULT_GREEN_SPEED"
    )
    plan_max_diagnostic_chars: int = Field(
        default=2000, alias="PLAN_MAX_DIAGNOSTIC_CHARS"
    )
    build_version: str = Field(default=__version__, alias="BUILD_VERSION")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> _Settings:
    """Return cached application settings."""

    return _Settings()  # type: ignore[call-arg]


def reset_settings_cache() -> None:
    """Clear cached settings (primarily for tests)."""

    get_settings.cache_clear()


@dataclass(frozen=True, slots=True)
class PlanConfig:
    """Immutable configuration handed to the plan pipeline.

    Built once from the environment; the pipeline and its stages only ever
    see this object and never consult ``os.environ`` themselves.
    """

    api_key: str | None
    backend: str = BACKEND_RESPONSES
    model: str = "o4-mini"
    base_url: str = "https://api.openai.com/v1"
    timeout: float | None = None
    mock: bool = False
    allowed_origins: tuple[str, ...] = ("https://www.canadamga.ca",)
    strict_origin: bool = False
    course_name: str = "Shawneeki"
    default_green_speed: str = "medium (course default)"
    max_diagnostic_chars: int = 2000
    version: str = __version__

    @property
    def canonical_origin(self) -> str:
        return self.allowed_origins[0] if self.allowed_origins else "*"

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key and self.api_key.strip())


def _split_origins(raw: str) -> tuple[str, ...]:
    return tuple(o.strip().rstrip("/") for o in raw.split(",") if o.strip())


def _resolve_backend(name: str) -> str:
    value = (name or "").strip().lower()
    if value in BACKENDS:
        return value
    logger.warning(
        "unknown PLAN_BACKEND %r, falling back to %s", name, BACKEND_RESPONSES
    )
    return BACKEND_RESPONSES


def load_plan_config(settings: _Settings | None = None) -> PlanConfig:
    """Build the pipeline configuration from settings."""

    settings = settings or get_settings()
    return PlanConfig(
        api_key=settings.openai_api_key or None,
        backend=_resolve_backend(settings.plan_backend),
        model=settings.openai_model,
        base_url=settings.openai_base_url.rstrip("/"),
        timeout=settings.plan_backend_timeout,
        mock=settings.plan_mock,
        allowed_origins=_split_origins(settings.plan_allowed_origins),
        strict_origin=settings.plan_strict_origin,
        course_name=settings.plan_course_name,
        default_green_speed=settings.plan_default_green_speed,
        max_diagnostic_chars=max(0, settings.plan_max_diagnostic_chars),
        version=settings.build_version,
    )


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def coerce_boolish(value: Any) -> bool | None:
    """Attempt to coerce *value* into a boolean."""

    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    return None


__all__ = [
    "BACKEND_CHAT",
    "BACKEND_RESPONSES",
    "PlanConfig",
    "coerce_boolish",
    "get_settings",
    "load_plan_config",
    "reset_settings_cache",
]
