"""API surface for hole plans."""

from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from holeplan.api.cors import ALLOW_METHODS, cors_headers, origin_allowed
from holeplan.config import PlanConfig, load_plan_config
from holeplan.plan.failures import FailureKind, PlanFailure
from holeplan.plan.pipeline import render_failure, run_plan
from holeplan.providers import PlanBackend, build_backend

router = APIRouter(tags=["plan"])

PLAN_PATHS = ("/api/plan", "/plan")
_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@lru_cache(maxsize=1)
def get_plan_config() -> PlanConfig:
    return load_plan_config()


@lru_cache(maxsize=4)
def _backend_for(config: PlanConfig) -> PlanBackend:
    return build_backend(config)


def get_plan_backend(config: PlanConfig = Depends(get_plan_config)) -> PlanBackend:
    return _backend_for(config)


def reset_plan_dependencies() -> None:
    """Drop cached config and backends (primarily for tests)."""

    get_plan_config.cache_clear()
    _backend_for.cache_clear()


def _reject(
    failure: PlanFailure, config: PlanConfig, headers: dict[str, str]
) -> JSONResponse:
    if failure.kind is FailureKind.BAD_METHOD:
        headers["Allow"] = ALLOW_METHODS
    rejected = render_failure(failure, config)
    return JSONResponse(
        status_code=rejected.status_code, content=rejected.body, headers=headers
    )


def method_not_allowed(request: Request) -> JSONResponse:
    """Render the bad-method envelope for methods the router never dispatches.

    Resolves the configuration through ``dependency_overrides`` the same way
    the endpoint does.
    """

    provider = request.app.dependency_overrides.get(get_plan_config, get_plan_config)
    config = provider()
    headers = cors_headers(request.headers.get("origin"), config)
    return _reject(
        PlanFailure(FailureKind.BAD_METHOD, "Method Not Allowed"), config, headers
    )


async def plan(
    request: Request,
    config: PlanConfig = Depends(get_plan_config),
    backend: PlanBackend = Depends(get_plan_backend),
) -> Response:
    """Return a hole plan, or an error envelope, for the posted context."""

    origin = request.headers.get("origin")
    headers = cors_headers(origin, config)

    if request.method == "OPTIONS":
        return Response(status_code=200, headers=headers)

    if request.method != "POST":
        return _reject(
            PlanFailure(FailureKind.BAD_METHOD, "Method Not Allowed"), config, headers
        )
    if config.strict_origin and origin and not origin_allowed(origin, config):
        return _reject(
            PlanFailure(FailureKind.BAD_ORIGIN, "Origin not allowed"), config, headers
        )

    body = await request.body()
    result = await run_in_threadpool(run_plan, body, config, backend)
    return JSONResponse(
        status_code=result.status_code, content=result.body, headers=headers
    )


for _path in PLAN_PATHS:
    router.add_api_route(
        _path,
        plan,
        methods=_METHODS,
        response_model=None,
        include_in_schema=_path == PLAN_PATHS[0],
    )


__all__ = [
    "PLAN_PATHS",
    "get_plan_backend",
    "get_plan_config",
    "method_not_allowed",
    "reset_plan_dependencies",
    "router",
]
