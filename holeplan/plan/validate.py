"""Parse model output into a hole plan and apply the degraded-input notice."""

from __future__ import annotations

import json
import math
from typing import Any

from holeplan.plan.failures import FailureKind, PlanFailure, truncate
from holeplan.schemas.plan import PLAN_OPTIONAL_DEFAULTS, PLAN_REQUIRED_KEYS

DEGRADED_NOTICE = "Generic guidance: client did not send hole details or notes."


def _reject_constant(name: str) -> float:
    raise ValueError(f"non-standard JSON constant: {name}")


def _finite_float(literal: str) -> float:
    value = float(literal)
    if math.isinf(value):
        raise ValueError(f"float out of range: {literal}")
    return value


def parse_plan(text: str, *, limit: int) -> dict[str, Any] | PlanFailure:
    """Parse *text* as a plan object.

    Only shape is checked here: the object must parse and carry the three
    plan strings. Field types are left to the backend's schema enforcement.
    """

    try:
        parsed = json.loads(
            text, parse_constant=_reject_constant, parse_float=_finite_float
        )
    except ValueError:
        return PlanFailure(
            FailureKind.OUTPUT_FORMAT_ERROR,
            "Model output invalid JSON",
            raw=truncate(text, limit),
        )
    if not isinstance(parsed, dict):
        return PlanFailure(
            FailureKind.OUTPUT_FORMAT_ERROR,
            "Model output is not a JSON object",
            raw=truncate(text, limit),
        )

    missing = [key for key in PLAN_REQUIRED_KEYS if key not in parsed]
    if missing:
        return PlanFailure(
            FailureKind.OUTPUT_FORMAT_ERROR,
            f"Model output missing keys: {', '.join(missing)}",
            raw=truncate(text, limit),
        )

    plan = dict(parsed)
    for key, default in PLAN_OPTIONAL_DEFAULTS.items():
        if plan.get(key) is None:
            plan[key] = list(default) if isinstance(default, list) else default
    return plan


def apply_degraded_notice(plan: dict[str, Any], degraded: bool) -> dict[str, Any]:
    """Append the degraded-input notice to ``warnings`` when *degraded*.

    Existing warning text is kept and the notice is never added twice in a
    row, so repeated passes leave it as the final sentence exactly once.
    """

    if not degraded:
        return plan
    current = plan.get("warnings")
    current = "" if current is None else str(current)
    if current.endswith(DEGRADED_NOTICE):
        return plan
    plan["warnings"] = f"{current} {DEGRADED_NOTICE}" if current else DEGRADED_NOTICE
    return plan


__all__ = ["DEGRADED_NOTICE", "apply_degraded_notice", "parse_plan"]
