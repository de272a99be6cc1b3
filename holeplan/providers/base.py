from __future__ import annotations

import abc
import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from holeplan.plan.failures import FailureKind, PlanFailure, truncate

logger = logging.getLogger("holeplan.providers")


@dataclass(frozen=True, slots=True)
class BackendResponse:
    """Decoded success envelope from one of the backend protocols."""

    variant: str
    payload: Mapping[str, Any]


class PlanBackend(abc.ABC):
    """Interface for structured plan generation backends."""

    name: str = "backend"
    path: str = "/"

    def __init__(
        self,
        *,
        api_key: str | None,
        model: str = "o4-mini",
        base_url: str = "https://api.openai.com/v1",
        timeout: float | None = None,
        max_diagnostic_chars: int = 2000,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._url = base_url.rstrip("/") + self.path
        self._timeout = timeout
        self._limit = max_diagnostic_chars
        self._client = http_client

    @property
    def url(self) -> str:
        return self._url

    @abc.abstractmethod
    def build_payload(
        self, prompt: str, schema_name: str, schema: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Return the request envelope for *prompt* under *schema*."""

    def _post(self, payload: Mapping[str, Any]) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        if self._client is not None:
            return self._client.post(
                self._url, json=payload, headers=headers, timeout=self._timeout
            )
        return httpx.post(
            self._url, json=payload, headers=headers, timeout=self._timeout
        )

    def generate(
        self, prompt: str, schema_name: str, schema: Mapping[str, Any]
    ) -> BackendResponse | PlanFailure:
        """Submit *prompt* and return the decoded envelope or a failure."""

        if not (self._api_key and self._api_key.strip()):
            return PlanFailure(
                FailureKind.CONFIG_MISSING, "OPENAI_API_KEY is not configured"
            )

        payload = self.build_payload(prompt, schema_name, schema)
        try:
            response = self._post(payload)
        except httpx.TimeoutException as exc:
            logger.warning("%s backend timed out: %s", self.name, exc)
            return PlanFailure(
                FailureKind.TRANSPORT_FAILURE, "backend request timed out"
            )
        except httpx.HTTPError as exc:
            logger.warning("%s backend request failed: %s", self.name, exc)
            return PlanFailure(
                FailureKind.TRANSPORT_FAILURE,
                "backend request failed",
                raw=truncate(str(exc), self._limit),
            )

        body = response.text
        if not response.is_success:
            logger.warning(
                "%s backend responded with status %s", self.name, response.status_code
            )
            return PlanFailure(
                FailureKind.TRANSPORT_FAILURE,
                "backend responded with an error",
                status=response.status_code,
                raw=truncate(body, self._limit),
            )

        try:
            data = json.loads(body)
        except json.JSONDecodeError:
            return PlanFailure(
                FailureKind.NON_JSON_UPSTREAM,
                "backend returned non-JSON body",
                status=response.status_code,
                raw=truncate(body, self._limit),
            )
        if not isinstance(data, Mapping):
            return PlanFailure(
                FailureKind.NON_JSON_UPSTREAM,
                "backend returned a non-object JSON body",
                status=response.status_code,
                raw=truncate(body, self._limit),
            )
        return BackendResponse(variant=self.name, payload=data)


__all__ = ["BackendResponse", "PlanBackend"]
