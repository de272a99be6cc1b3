"""Failure taxonomy for the hole plan pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FailureKind(str, Enum):
    BAD_METHOD = "bad_method"
    BAD_ORIGIN = "bad_origin"
    CONFIG_MISSING = "config_missing"
    TRANSPORT_FAILURE = "transport_failure"
    NON_JSON_UPSTREAM = "non_json_upstream"
    NO_OUTPUT_TEXT = "no_output_text"
    OUTPUT_FORMAT_ERROR = "output_format_error"
    INTERNAL_ERROR = "internal_error"


# Only request-level rejections keep conventional status codes; everything
# downstream of body parsing is delivered as a 200 carrying an envelope.
_HTTP_STATUS = {
    FailureKind.BAD_METHOD: 405,
    FailureKind.BAD_ORIGIN: 403,
}


@dataclass(frozen=True, slots=True)
class PlanFailure:
    """Tagged failure value returned by a pipeline stage."""

    kind: FailureKind
    message: str
    status: int | None = None
    raw: str | None = None

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS.get(self.kind, 200)


def truncate(text: str | None, limit: int) -> str | None:
    if text is None:
        return None
    if len(text) <= limit:
        return text
    return text[:limit]


__all__ = ["FailureKind", "PlanFailure", "truncate"]
