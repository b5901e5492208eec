"""Client-side timer presenter and HTTP client"""
from .api_client import TimerApiClient
from .presenter import TimerPresenter

__all__ = [
    "TimerApiClient",
    "TimerPresenter",
]
