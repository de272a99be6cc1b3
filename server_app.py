"""
Import shim for servers and tests: exposes `app` at top-level `server_app`,
e.g. ``uvicorn server_app:app``.
"""

from holeplan.app import app

__all__ = ["app"]
