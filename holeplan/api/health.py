import platform
import time
from typing import Any, Dict

from fastapi import Depends

from holeplan.api.routers.plan import get_plan_config
from holeplan.config import PlanConfig


async def health(config: PlanConfig = Depends(get_plan_config)) -> Dict[str, Any]:
    return {
        "status": "ok",
        "version": config.version,
        "ts": time.time(),
        "env": {
            "backend": config.backend,
            "mock": config.mock,
            "model": config.model,
            "credential_configured": config.has_credential,
        },
        "runtime": {
            "python": platform.python_version(),
        },
    }
