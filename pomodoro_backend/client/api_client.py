"""HTTP client for the timer endpoints"""
import logging
from typing import Any, Dict, Optional

import httpx

from pomodoro_backend.config import SESSION_COOKIE_NAME

logger = logging.getLogger(__name__)


class TimerApiClient:
    """
    Thin async wrapper over the /timer endpoints.

    Failures never raise: a 401 yields None quietly, any other HTTP error
    or transport failure is logged and yields None (or False).
    """

    def __init__(
        self,
        base_url: str,
        session_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        cookies = {SESSION_COOKIE_NAME: session_token} if session_token else None
        self._client = httpx.AsyncClient(base_url=base_url, cookies=cookies, transport=transport)

    async def __aenter__(self) -> "TimerApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning(f"Request {method} {path} failed: {e}")
            return None

        if response.status_code == 401:
            return None
        if response.is_error:
            logger.warning(
                f"Request {method} {path} returned {response.status_code}: {response.text}"
            )
            return None
        return response.json()

    async def fetch_state(self) -> Optional[Dict[str, Any]]:
        """GET /timer"""
        return await self._request("GET", "/timer")

    async def send_action(
        self,
        action: str,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """POST /timer with the action and any duration overrides"""
        body = {"action": action, **(overrides or {})}
        return await self._request("POST", "/timer", json=body)

    async def fetch_settings(self) -> Optional[Dict[str, Any]]:
        """GET /timer/settings"""
        return await self._request("GET", "/timer/settings")

    async def save_settings(self, settings: Dict[str, Any]) -> bool:
        """POST /timer/settings; True on success"""
        return await self._request("POST", "/timer/settings", json=settings) is not None
