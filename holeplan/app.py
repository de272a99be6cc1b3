from __future__ import annotations

from fastapi import APIRouter, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException

from holeplan import __version__
from holeplan.api.health import health as _health_handler
from holeplan.api.routers.plan import PLAN_PATHS, method_not_allowed
from holeplan.api.routers.plan import router as plan_router
from holeplan.metrics import MetricsMiddleware, metrics_app

app = FastAPI(title="Hole plan", version=__version__)
app.add_middleware(MetricsMiddleware)


@app.exception_handler(StarletteHTTPException)
async def _plan_http_exception(request: Request, exc: StarletteHTTPException):
    # Methods outside the route's list (TRACE, custom verbs) still get the
    # plan envelope and CORS headers.
    if exc.status_code == 405 and request.url.path in PLAN_PATHS:
        return method_not_allowed(request)
    return await http_exception_handler(request, exc)


app.add_api_route(
    "/health",
    _health_handler,
    methods=["GET"],
    response_model=None,
    tags=["health"],
)


_metrics_router = APIRouter()


@_metrics_router.get("/metrics", include_in_schema=False)
async def _metrics_endpoint(request: Request):
    return await metrics_app(request)


app.include_router(_metrics_router)
app.include_router(plan_router)
