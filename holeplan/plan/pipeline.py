"""End-to-end hole plan pipeline with fault containment."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any

from holeplan.config import PlanConfig
from holeplan.metrics import BACKEND_LATENCY, record_outcome
from holeplan.plan.context import NormalizedContext, normalize_context
from holeplan.plan.extract import extract_text
from holeplan.plan.failures import FailureKind, PlanFailure
from holeplan.plan.prompt import compile_prompt
from holeplan.plan.rules import resolve_conditions
from holeplan.plan.validate import apply_degraded_notice, parse_plan
from holeplan.providers.base import PlanBackend
from holeplan.schemas.plan import (
    HOLE_PLAN_JSON_SCHEMA,
    HOLE_PLAN_SCHEMA_NAME,
    ErrorEnvelope,
    HolePlan,
    PingResponse,
)

logger = logging.getLogger("holeplan.pipeline")

MOCK_PLAN = HolePlan(
    conservative=(
        "Hybrid to the fat side of the fairway, then wedge to the middle of the green."
    ),
    neutral="Driver at the centre line, mid-iron to the middle of the green.",
    aggressive="Driver down the short side; attack the flag only with a full wedge.",
    club_suggestions=["hybrid", "7-iron"],
    warnings="Mock plan (no model call).",
)


@dataclass(slots=True)
class PlanResult:
    """Rendered outcome of one invocation."""

    body: dict[str, Any]
    status_code: int = 200
    outcome: str = "success"

    @property
    def ok(self) -> bool:
        return self.outcome == "success"


def render_failure(failure: PlanFailure, config: PlanConfig) -> PlanResult:
    envelope = ErrorEnvelope.from_failure(failure, limit=config.max_diagnostic_chars)
    return PlanResult(
        body=envelope.model_dump(),
        status_code=failure.http_status,
        outcome=failure.kind.value,
    )


def _run(
    context: NormalizedContext, config: PlanConfig, backend: PlanBackend
) -> dict[str, Any] | PlanFailure:
    # Short-circuits come before any prompt work; the diagnostic plan
    # ignores every input field, ping included.
    if config.mock:
        return apply_degraded_notice(MOCK_PLAN.model_dump(), context.degraded)
    if context.ping:
        return PingResponse(version=config.version).model_dump()

    conditions = resolve_conditions(
        context,
        course_name=config.course_name,
        default_green_speed=config.default_green_speed,
    )
    prompt = compile_prompt(conditions)

    start = time.perf_counter()
    response = backend.generate(prompt, HOLE_PLAN_SCHEMA_NAME, HOLE_PLAN_JSON_SCHEMA)
    BACKEND_LATENCY.labels(backend=backend.name).observe(time.perf_counter() - start)
    if isinstance(response, PlanFailure):
        return response

    text = extract_text(response, limit=config.max_diagnostic_chars)
    if isinstance(text, PlanFailure):
        return text

    plan = parse_plan(text, limit=config.max_diagnostic_chars)
    if isinstance(plan, PlanFailure):
        return plan
    return apply_degraded_notice(plan, context.degraded)


def run_plan(raw: Any, config: PlanConfig, backend: PlanBackend) -> PlanResult:
    """Produce a plan (or an error envelope) for the raw request body.

    Never raises: every failure, expected or not, comes back as a
    ``PlanResult`` whose body is an :class:`ErrorEnvelope`.
    """

    start = time.perf_counter()
    backend_name = "mock" if config.mock else backend.name
    degraded: bool | None = None
    try:
        context = normalize_context(raw)
        degraded = context.degraded
        outcome = _run(context, config, backend)
    except Exception as exc:
        logger.exception("hole plan pipeline crashed")
        outcome = PlanFailure(FailureKind.INTERNAL_ERROR, f"internal error: {exc}")

    if isinstance(outcome, PlanFailure):
        result = render_failure(outcome, config)
    else:
        result = PlanResult(body=outcome)

    record_outcome(result.outcome, backend_name)
    logger.info(
        "hole_plan",
        extra={
            "hole_plan": {
                "outcome": result.outcome,
                "backend": backend_name,
                "degraded": degraded,
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
            }
        },
    )
    return result


__all__ = ["MOCK_PLAN", "PlanResult", "render_failure", "run_plan"]
