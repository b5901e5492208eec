# API module exports
from pomodoro_backend.api import health
from pomodoro_backend.api.base import api_router

__all__ = ["health", "api_router"]
