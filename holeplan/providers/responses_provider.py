from __future__ import annotations

from typing import Any, Mapping

from .base import PlanBackend


class ResponsesPlanBackend(PlanBackend):
    """Structured-response protocol: one ``input`` field and a strict
    ``text.format`` JSON schema."""

    name = "responses"
    path = "/responses"

    def build_payload(
        self, prompt: str, schema_name: str, schema: Mapping[str, Any]
    ) -> dict[str, Any]:
        return {
            "model": self._model,
            "input": prompt,
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": schema_name,
                    "schema": dict(schema),
                    "strict": True,
                }
            },
        }
