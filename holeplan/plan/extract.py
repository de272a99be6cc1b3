"""Pull generated text out of backend response envelopes."""

from __future__ import annotations

import json
from typing import Any, Callable, Mapping

from holeplan.plan.failures import FailureKind, PlanFailure, truncate
from holeplan.providers.base import BackendResponse

_TEXT_BLOCK_TYPES = {"output_text", "text"}


def _block_text(block: Any) -> str:
    if not isinstance(block, Mapping):
        return ""
    if block.get("type") not in _TEXT_BLOCK_TYPES:
        return ""
    text = block.get("text")
    return text if isinstance(text, str) else ""


def _responses_text(payload: Mapping[str, Any]) -> str | None:
    flat = payload.get("output_text")
    if isinstance(flat, str) and flat.strip():
        return flat

    output = payload.get("output")
    if not isinstance(output, list):
        return None
    parts: list[str] = []
    for item in output:
        if isinstance(item, Mapping) and isinstance(item.get("content"), list):
            parts.extend(_block_text(block) for block in item["content"])
        else:
            parts.append(_block_text(item))
    return "".join(parts)


def _chat_text(payload: Mapping[str, Any]) -> str | None:
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, Mapping):
        return None
    message = first.get("message")
    if not isinstance(message, Mapping):
        return None
    content = message.get("content")
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(_block_text(part) for part in content)
    return None


_EXTRACTORS: dict[str, Callable[[Mapping[str, Any]], str | None]] = {
    "responses": _responses_text,
    "chat": _chat_text,
}


def extract_text(response: BackendResponse, *, limit: int) -> str | PlanFailure:
    """Return the generated text carried by *response*."""

    extractor = _EXTRACTORS.get(response.variant)
    if extractor is None:
        raise ValueError(f"unsupported backend variant: {response.variant}")

    text = extractor(response.payload)
    if text is None or not text.strip():
        return PlanFailure(
            FailureKind.NO_OUTPUT_TEXT,
            "No text output from model",
            raw=truncate(json.dumps(response.payload, default=str), limit),
        )
    return text


__all__ = ["extract_text"]
