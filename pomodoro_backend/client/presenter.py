"""
Client-side timer presenter.

Keeps a local countdown for display between server round-trips. The
server snapshot is the source of truth: every response reseeds the
countdown, and the local value only ticks down once per second while the
timer runs. One request at a time may be outstanding; user actions and
the automatic `finish` are refused while another request is in flight.
"""
import asyncio
import logging
from typing import Any, Callable, Dict, Optional

from pomodoro_backend.client.api_client import TimerApiClient
from pomodoro_backend.features.timer.domain import TimerSettings

logger = logging.getLogger(__name__)

USER_ACTIONS = ("toggle", "reset", "skip")


class TimerPresenter:
    """Local countdown driven by /timer snapshots"""

    def __init__(
        self,
        client: TimerApiClient,
        on_ring: Optional[Callable[[], None]] = None,
        tick_interval: float = 1.0,
    ):
        self.client = client
        self.on_ring = on_ring
        self.tick_interval = tick_interval

        self.settings = TimerSettings()
        self.time_left = self.settings.pomodoro_duration * 60
        self.is_running = False
        self.is_resting = False
        self.is_long_break = False
        self.completed_pomodoros = 0
        self.is_loading = True

        self._request_in_flight = False

    @property
    def buttons_disabled(self) -> bool:
        return self._request_in_flight

    @property
    def display(self) -> str:
        minutes, seconds = divmod(max(0, self.time_left), 60)
        return f"{minutes:02d}:{seconds:02d}"

    def phase_seconds(self) -> int:
        """Full length of the current phase from the local settings"""
        if not self.is_resting:
            return self.settings.work_seconds
        if self.settings.enable_long_break and self.is_long_break:
            return self.settings.long_rest_seconds
        return self.settings.rest_seconds

    def apply_snapshot(self, snapshot: Optional[Dict[str, Any]]) -> None:
        """Reseed local state from a server snapshot; None leaves it unchanged"""
        if snapshot:
            self.time_left = snapshot["timeLeft"]
            self.is_running = snapshot["isRunning"]
            self.is_resting = snapshot["isResting"]
            self.is_long_break = snapshot["isLongBreak"]
            self.completed_pomodoros = snapshot["completedPomodoros"]
            if snapshot.get("enableLongBreak") is not None:
                self.settings.enable_long_break = snapshot["enableLongBreak"]
                self.settings.long_break_interval = (
                    snapshot.get("longBreakInterval") or self.settings.long_break_interval
                )
        self.is_loading = False

    def _overrides(self) -> Dict[str, Any]:
        return {
            "pomodoroDuration": self.settings.pomodoro_duration,
            "breakDuration": self.settings.break_duration,
            "longBreakDuration": self.settings.long_break_duration,
            "isLongBreak": self.is_long_break,
            "completedPomodoros": self.completed_pomodoros,
        }

    def _ring(self) -> None:
        if self.settings.mute or self.on_ring is None:
            return
        self.on_ring()

    async def _send(self, action: str) -> None:
        try:
            snapshot = await self.client.send_action(action, self._overrides())
            if snapshot is None:
                logger.warning(f"Timer action '{action}' got no snapshot; keeping local state")
            self.apply_snapshot(snapshot)
        finally:
            self._request_in_flight = False

    async def load(self) -> None:
        """Fetch settings, then the timer state"""
        if self._request_in_flight:
            return
        self._request_in_flight = True
        self.is_loading = True
        try:
            loaded = await self.client.fetch_settings()
            if loaded:
                update = TimerSettings(**loaded).model_dump(exclude_unset=True)
                self.settings = self.settings.model_copy(update=update)
            self.apply_snapshot(await self.client.fetch_state())
        finally:
            self._request_in_flight = False

    async def dispatch(self, action: str) -> bool:
        """
        Send a user action (toggle, reset or skip).

        Returns:
            False if another request is still in flight, True once handled
        """
        if action not in USER_ACTIONS:
            raise ValueError(f"Unsupported timer action: {action}")
        if self._request_in_flight:
            return False

        self._request_in_flight = True
        if action == "skip":
            self._ring()
        await self._send(action)
        return True

    async def tick(self) -> None:
        """
        Advance the local countdown by one second.

        When the countdown is at zero the phase is reported finished, once:
        no new finish is sent while a request is outstanding.
        """
        if not self.is_running:
            return
        if self.time_left > 0:
            self.time_left -= 1
        if self.time_left > 0 or self._request_in_flight:
            return

        self._request_in_flight = True
        self._ring()
        await self._send("finish")

    async def run(self, stop_event: asyncio.Event) -> None:
        """Tick every tick_interval seconds until stop_event is set"""
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.tick_interval)
            except asyncio.TimeoutError:
                await self.tick()

    async def save_settings(self) -> bool:
        """Persist local settings; a paused timer restarts its phase at full length"""
        if self._request_in_flight:
            return False
        self._request_in_flight = True
        try:
            saved = await self.client.save_settings(self.settings.model_dump(by_alias=True))
        finally:
            self._request_in_flight = False
        if not self.is_running:
            self.time_left = self.phase_seconds()
        return saved
