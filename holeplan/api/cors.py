"""Origin allow-list handling for the plan endpoint."""

from __future__ import annotations

from holeplan.config import PlanConfig

ALLOW_METHODS = "POST, OPTIONS"
ALLOW_HEADERS = "content-type"


def origin_allowed(origin: str | None, config: PlanConfig) -> bool:
    if not origin:
        return False
    return origin.rstrip("/") in config.allowed_origins


def cors_headers(origin: str | None, config: PlanConfig) -> dict[str, str]:
    """Echo a recognized origin, otherwise advertise the canonical one."""

    allow_origin = origin.rstrip("/") if origin_allowed(origin, config) else None
    return {
        "Access-Control-Allow-Origin": allow_origin or config.canonical_origin,
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Vary": "Origin",
    }


__all__ = ["ALLOW_HEADERS", "ALLOW_METHODS", "cors_headers", "origin_allowed"]
