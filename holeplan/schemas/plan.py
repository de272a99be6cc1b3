"""Pydantic schemas for the hole plan endpoint."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from holeplan.plan.failures import PlanFailure, truncate


class ClientRequest(BaseModel):
    """Recognized request fields. Every field is optional."""

    model_config = ConfigDict(extra="ignore")

    hole: Optional[Any] = None
    par: Optional[Any] = None
    notes: Optional[Any] = None
    miss: Optional[Any] = None
    handicap: Optional[Any] = None
    wind: Optional[Any] = None
    wind_strength: Optional[Any] = None
    green_speed: Optional[Any] = None
    captain_mode: Optional[Any] = None
    pin_lr: Optional[Any] = None
    pin_fb: Optional[Any] = None
    flag_color: Optional[Any] = None
    ping: Optional[Any] = None


class HolePlan(BaseModel):
    """Structured plan returned to the client."""

    conservative: str
    neutral: str
    aggressive: str
    club_suggestions: List[str] = Field(default_factory=list)
    warnings: str = ""


class ErrorEnvelope(BaseModel):
    error_code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    @classmethod
    def from_failure(cls, failure: PlanFailure, *, limit: int) -> "ErrorEnvelope":
        details: Dict[str, Any] | None = None
        if failure.status is not None or failure.raw is not None:
            details = {
                "status": failure.status,
                "raw": truncate(failure.raw, limit),
            }
        return cls(
            error_code=failure.kind.value,
            message=truncate(failure.message, limit) or "",
            details=details,
        )


class PingResponse(BaseModel):
    ok: bool = True
    pong: bool = True
    version: str


HOLE_PLAN_SCHEMA_NAME = "hole_plan"

# Shared by both backend variants so validation never depends on which one
# produced the text.
HOLE_PLAN_JSON_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "conservative": {"type": "string"},
        "neutral": {"type": "string"},
        "aggressive": {"type": "string"},
        "club_suggestions": {"type": "array", "items": {"type": "string"}},
        "warnings": {"type": "string"},
    },
    "required": [
        "conservative",
        "neutral",
        "aggressive",
        "club_suggestions",
        "warnings",
    ],
}

PLAN_REQUIRED_KEYS = ("conservative", "neutral", "aggressive")
PLAN_OPTIONAL_DEFAULTS: Dict[str, Any] = {"club_suggestions": [], "warnings": ""}


__all__ = [
    "ClientRequest",
    "ErrorEnvelope",
    "HOLE_PLAN_JSON_SCHEMA",
    "HOLE_PLAN_SCHEMA_NAME",
    "HolePlan",
    "PLAN_OPTIONAL_DEFAULTS",
    "PLAN_REQUIRED_KEYS",
    "PingResponse",
]
