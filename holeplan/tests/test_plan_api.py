from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from holeplan import __version__
from holeplan.config import PlanConfig
from holeplan.plan.validate import DEGRADED_NOTICE

CANONICAL = "https://www.canadamga.ca"
VALID_PLAN = {
    "conservative": "Hybrid left-centre, wedge to the fat part of the green.",
    "neutral": "Driver centre, 8-iron to the middle.",
    "aggressive": "Driver over the bunker, attack the pin.",
    "club_suggestions": ["hybrid", "8-iron"],
    "warnings": "",
}


def make_config(**overrides: Any) -> PlanConfig:
    values: dict[str, Any] = {
        "api_key": "test-key",
        "allowed_origins": (CANONICAL, "https://canadamga.ca"),
    }
    values.update(overrides)
    return PlanConfig(**values)


def responses_payload(text: str) -> dict[str, Any]:
    return {"id": "resp_1", "output_text": text}


@pytest.fixture
def ok_backend(backend_factory):
    return backend_factory(
        httpx.Response(200, json=responses_payload(json.dumps(VALID_PLAN)))
    )


def test_preflight_returns_empty_success(api_client, ok_backend) -> None:
    backend, recorder = ok_backend
    with api_client(make_config(), backend) as client:
        resp = client.options("/api/plan", headers={"Origin": "https://canadamga.ca"})

    assert resp.status_code == 200
    assert resp.content == b""
    assert resp.headers["access-control-allow-origin"] == "https://canadamga.ca"
    assert resp.headers["access-control-allow-methods"] == "POST, OPTIONS"
    assert resp.headers["access-control-allow-headers"] == "content-type"
    assert recorder.requests == []


@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
def test_non_post_methods_are_rejected(api_client, ok_backend, method) -> None:
    backend, recorder = ok_backend
    with api_client(make_config(), backend) as client:
        resp = client.request(method, "/api/plan")

    assert resp.status_code == 405
    assert resp.json()["error_code"] == "bad_method"
    assert resp.headers["allow"] == "POST, OPTIONS"
    assert recorder.requests == []


@pytest.mark.parametrize("method", ["TRACE", "PURGE"])
def test_unlisted_methods_get_the_same_envelope(api_client, ok_backend, method) -> None:
    backend, recorder = ok_backend
    with api_client(make_config(), backend) as client:
        resp = client.request(method, "/api/plan", headers={"Origin": CANONICAL})

    assert resp.status_code == 405
    assert resp.json()["error_code"] == "bad_method"
    assert resp.headers["allow"] == "POST, OPTIONS"
    assert resp.headers["access-control-allow-origin"] == CANONICAL
    assert recorder.requests == []


def test_unknown_paths_keep_default_errors(api_client, ok_backend) -> None:
    backend, _ = ok_backend
    with api_client(make_config(), backend) as client:
        missing = client.get("/nope")
        wrong_method = client.post("/health")

    assert missing.status_code == 404
    assert missing.json() == {"detail": "Not Found"}
    assert wrong_method.status_code == 405
    assert "error_code" not in wrong_method.json()


def test_post_returns_plan_with_echoed_origin(api_client, ok_backend) -> None:
    backend, _ = ok_backend
    with api_client(make_config(), backend) as client:
        resp = client.post(
            "/api/plan",
            json={"hole": 4, "notes": {"safe": ["center"], "avoid": ["water"]}},
            headers={"Origin": CANONICAL},
        )

    assert resp.status_code == 200
    assert resp.json() == VALID_PLAN
    assert resp.headers["access-control-allow-origin"] == CANONICAL


def test_unknown_origin_gets_canonical_header(api_client, ok_backend) -> None:
    backend, _ = ok_backend
    with api_client(make_config(), backend) as client:
        resp = client.post(
            "/api/plan", json={"hole": 1}, headers={"Origin": "https://evil.example"}
        )

    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == CANONICAL


def test_strict_origin_rejects_unknown_origin(api_client, ok_backend) -> None:
    backend, recorder = ok_backend
    with api_client(make_config(strict_origin=True), backend) as client:
        rejected = client.post(
            "/api/plan", json={"hole": 1}, headers={"Origin": "https://evil.example"}
        )
        allowed = client.post("/api/plan", json={"hole": 1})

    assert rejected.status_code == 403
    assert rejected.json()["error_code"] == "bad_origin"
    assert allowed.status_code == 200
    assert len(recorder.requests) == 1


def test_plain_text_body_degrades(api_client, ok_backend) -> None:
    backend, _ = ok_backend
    with api_client(make_config(), backend) as client:
        resp = client.post(
            "/api/plan",
            content="hole four please",
            headers={"content-type": "text/plain"},
        )

    assert resp.status_code == 200
    assert DEGRADED_NOTICE in resp.json()["warnings"]


def test_ping(api_client, ok_backend) -> None:
    backend, recorder = ok_backend
    with api_client(make_config(), backend) as client:
        resp = client.post("/plan", json={"ping": True})

    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "pong": True, "version": __version__}
    assert recorder.requests == []


def test_non_finite_model_numbers_still_return_an_envelope(
    api_client, backend_factory
) -> None:
    text = (
        '{"conservative": "a", "neutral": "b", "aggressive": "c", '
        '"club_suggestions": [], "warnings": "", "risk": NaN}'
    )
    backend, _ = backend_factory(httpx.Response(200, json=responses_payload(text)))
    with api_client(make_config(), backend) as client:
        resp = client.post(
            "/api/plan",
            json={"hole": 4, "notes": {"safe": ["center"], "avoid": ["water"]}},
        )

    assert resp.status_code == 200
    body = resp.json()
    assert body["error_code"] == "output_format_error"
    assert body["details"]["raw"] == text
    assert resp.headers["access-control-allow-origin"] == CANONICAL


def test_upstream_failure_uses_success_status(api_client, backend_factory) -> None:
    backend, _ = backend_factory(httpx.Response(401, json={"error": "bad key"}))
    with api_client(make_config(), backend) as client:
        resp = client.post("/api/plan", json={"hole": 4})

    assert resp.status_code == 200
    body = resp.json()
    assert body["error_code"] == "transport_failure"
    assert body["details"]["status"] == 401
    assert "bad key" in body["details"]["raw"]


def test_health_reports_config_without_secret(api_client, ok_backend) -> None:
    backend, _ = ok_backend
    with api_client(make_config(api_key="sk-secret"), backend) as client:
        resp = client.get("/health")

    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["env"]["credential_configured"] is True
    assert "sk-secret" not in resp.text


def test_metrics_exposes_plan_outcomes(api_client, ok_backend) -> None:
    backend, _ = ok_backend
    with api_client(make_config(), backend) as client:
        client.post("/api/plan", json={"hole": 4})
        resp = client.get("/metrics")

    assert resp.status_code == 200
    assert "holeplan_plan_outcomes_total" in resp.text
    assert "holeplan_requests_total" in resp.text
