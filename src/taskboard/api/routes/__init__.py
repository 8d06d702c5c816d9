"""HTTP routers mounted under ``/api/v1``."""

from taskboard.api.routes import auth, tasks, users

__all__ = ["auth", "tasks", "users"]
