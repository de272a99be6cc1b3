"""Shared pytest fixtures for hole plan tests."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from holeplan.api.routers.plan import (
    get_plan_backend,
    get_plan_config,
    reset_plan_dependencies,
)
from holeplan.app import app
from holeplan.config import PlanConfig
from holeplan.providers import PlanBackend, build_backend


class RecordingTransport:
    """Mock transport that records requests and replays a fixed response."""

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response

    @property
    def last_json(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def backend_factory() -> Callable[..., tuple[PlanBackend, RecordingTransport]]:
    def build(
        response: httpx.Response, config: PlanConfig | None = None
    ) -> tuple[PlanBackend, RecordingTransport]:
        recorder = RecordingTransport(response)
        client = httpx.Client(transport=httpx.MockTransport(recorder))
        backend = build_backend(
            config or PlanConfig(api_key="test-key"), http_client=client
        )
        return backend, recorder

    return build


@pytest.fixture
def api_client():
    """Return a factory wiring a config and backend into the app."""

    def build(config: PlanConfig, backend: PlanBackend) -> TestClient:
        app.dependency_overrides[get_plan_config] = lambda: config
        app.dependency_overrides[get_plan_backend] = lambda: backend
        return TestClient(app)

    yield build
    app.dependency_overrides.pop(get_plan_config, None)
    app.dependency_overrides.pop(get_plan_backend, None)
    reset_plan_dependencies()
