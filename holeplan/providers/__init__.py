"""Plan generation backends."""

from __future__ import annotations

import httpx

from holeplan.config import BACKEND_CHAT, PlanConfig

from .base import BackendResponse, PlanBackend
from .chat_provider import ChatPlanBackend
from .responses_provider import ResponsesPlanBackend


def build_backend(
    config: PlanConfig, *, http_client: httpx.Client | None = None
) -> PlanBackend:
    """Return the backend selected by *config*."""

    cls = ChatPlanBackend if config.backend == BACKEND_CHAT else ResponsesPlanBackend
    return cls(
        api_key=config.api_key,
        model=config.model,
        base_url=config.base_url,
        timeout=config.timeout,
        max_diagnostic_chars=config.max_diagnostic_chars,
        http_client=http_client,
    )


__all__ = [
    "BackendResponse",
    "ChatPlanBackend",
    "PlanBackend",
    "ResponsesPlanBackend",
    "build_backend",
]
