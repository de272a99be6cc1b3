from __future__ import annotations

from typing import Any, Mapping

from .base import PlanBackend


class ChatPlanBackend(PlanBackend):
    """Structured-completion protocol: the prompt travels as a single
    system message and the schema sits under ``response_format``."""

    name = "chat"
    path = "/chat/completions"

    def build_payload(
        self, prompt: str, schema_name: str, schema: Mapping[str, Any]
    ) -> dict[str, Any]:
        return {
            "model": self._model,
            "messages": [{"role": "system", "content": prompt}],
            "response_format": {
                "type": "json_schema",
                "json_schema": {
                    "name": schema_name,
                    "schema": dict(schema),
                    "strict": True,
                },
            },
        }
