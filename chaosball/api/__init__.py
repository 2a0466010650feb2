"""ChaosBall API package - FastAPI backend for the broadcast."""

from chaosball.api.main import app, create_app

__all__ = ["app", "create_app"]
