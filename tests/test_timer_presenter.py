"""Tests for the client-side timer presenter."""

import asyncio
import json

import httpx
import pytest

from pomodoro_backend.client import TimerApiClient, TimerPresenter
from pomodoro_backend.features.timer.domain import TimerSettings


def snapshot(**overrides):
    body = {
        "userId": "user-1",
        "isRunning": False,
        "isResting": False,
        "isLongBreak": False,
        "completedPomodoros": 0,
        "startTime": None,
        "remainingTime": 1500,
        "timeLeft": 1500,
        "enableLongBreak": True,
        "longBreakInterval": 4,
    }
    body.update(overrides)
    return body


class FakeTimerServer:
    """Records requests and answers them from a queue of snapshots."""

    def __init__(self):
        self.requests = []
        self.action_responses = []
        self.state = snapshot()
        self.settings = {"pomodoroDuration": 30, "breakDuration": 5, "mute": False}
        self.gate = None
        self.fail_with = None

    async def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, request.url.path, body))

        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with

        if request.url.path == "/timer/settings":
            if request.method == "POST":
                self.settings.update(body)
            return httpx.Response(200, json=self.settings)
        if request.method == "POST":
            if self.action_responses:
                self.state = self.action_responses.pop(0)
        return httpx.Response(200, json=self.state)

    def actions(self):
        return [body["action"] for method, path, body in self.requests
                if method == "POST" and path == "/timer"]


@pytest.fixture
def server():
    return FakeTimerServer()


@pytest.fixture
async def presenter(server):
    client = TimerApiClient(
        "http://test",
        session_token="token",
        transport=httpx.MockTransport(server.handler),
    )
    rings = []
    presenter = TimerPresenter(client, on_ring=lambda: rings.append(1), tick_interval=0.01)
    presenter.rings = rings
    yield presenter
    await client.aclose()


# ============================================================
# LOADING
# ============================================================


class TestLoad:
    async def test_load_merges_settings_and_state(self, presenter, server):
        server.state = snapshot(timeLeft=640, isRunning=True, remainingTime=None)

        await presenter.load()

        assert isinstance(presenter.settings, TimerSettings)
        assert presenter.settings.pomodoro_duration == 30
        assert presenter.settings.long_break_duration == 15
        assert presenter.time_left == 640
        assert presenter.is_running is True
        assert presenter.is_loading is False
        assert presenter.buttons_disabled is False

    async def test_unauthenticated_load_keeps_defaults(self, presenter):
        presenter.client = TimerApiClient(
            "http://test",
            transport=httpx.MockTransport(lambda request: httpx.Response(401)),
        )

        await presenter.load()

        assert presenter.time_left == 1500
        assert presenter.is_loading is False
        await presenter.client.aclose()

    def test_display_formats_minutes_and_seconds(self, presenter):
        presenter.time_left = 605
        assert presenter.display == "10:05"


# ============================================================
# LOCAL COUNTDOWN
# ============================================================


class TestTick:
    async def test_tick_decrements_while_running(self, presenter, server):
        presenter.is_running = True
        presenter.time_left = 10

        await presenter.tick()

        assert presenter.time_left == 9
        assert server.requests == []

    async def test_tick_is_idle_while_paused(self, presenter, server):
        presenter.time_left = 10

        await presenter.tick()

        assert presenter.time_left == 10
        assert server.requests == []

    async def test_reaching_zero_sends_finish(self, presenter, server):
        presenter.is_running = True
        presenter.time_left = 1
        server.action_responses.append(snapshot(isResting=True, completedPomodoros=1, timeLeft=300))

        await presenter.tick()

        assert server.actions() == ["finish"]
        assert presenter.is_resting is True
        assert presenter.is_running is False
        assert presenter.time_left == 300
        assert presenter.rings == [1]

    async def test_finish_sends_local_durations(self, presenter, server):
        presenter.is_running = True
        presenter.time_left = 0
        presenter.settings.break_duration = 7

        await presenter.tick()

        _, _, body = server.requests[-1]
        assert body["action"] == "finish"
        assert body["pomodoroDuration"] == 25
        assert body["breakDuration"] == 7
        assert body["longBreakDuration"] == 15

    async def test_finish_is_sent_once_while_in_flight(self, presenter, server):
        presenter.is_running = True
        presenter.time_left = 0
        server.gate = asyncio.Event()

        first = asyncio.create_task(presenter.tick())
        await asyncio.sleep(0)
        await asyncio.sleep(0)

        await presenter.tick()
        assert await presenter.dispatch("skip") is False
        assert presenter.buttons_disabled is True

        server.gate.set()
        await first

        assert server.actions() == ["finish"]
        assert presenter.buttons_disabled is False

    async def test_failed_finish_keeps_state_and_releases_guard(self, presenter, server):
        presenter.is_running = True
        presenter.time_left = 0
        server.fail_with = httpx.ConnectError("connection refused")

        await presenter.tick()

        assert presenter.is_running is True
        assert presenter.time_left == 0
        assert presenter.buttons_disabled is False

    async def test_muted_finish_does_not_ring(self, presenter):
        presenter.settings.mute = True
        presenter.is_running = True
        presenter.time_left = 0

        await presenter.tick()

        assert presenter.rings == []

    async def test_run_loop_ticks_until_stopped(self, presenter):
        presenter.is_running = True
        presenter.time_left = 1000
        stop = asyncio.Event()

        task = asyncio.create_task(presenter.run(stop))
        await asyncio.sleep(0.1)
        stop.set()
        await task

        assert presenter.time_left < 1000


# ============================================================
# USER ACTIONS
# ============================================================


class TestDispatch:
    async def test_toggle_reseeds_from_response(self, presenter, server):
        server.action_responses.append(snapshot(isRunning=True, remainingTime=None, timeLeft=1499))

        assert await presenter.dispatch("toggle") is True

        assert presenter.is_running is True
        assert presenter.time_left == 1499
        assert server.actions() == ["toggle"]

    async def test_skip_rings(self, presenter):
        await presenter.dispatch("skip")
        assert presenter.rings == [1]

    async def test_finish_is_not_a_user_action(self, presenter):
        with pytest.raises(ValueError):
            await presenter.dispatch("finish")

    async def test_server_error_leaves_state_unchanged(self, presenter):
        presenter.client = TimerApiClient(
            "http://test",
            transport=httpx.MockTransport(lambda request: httpx.Response(500, json={})),
        )
        presenter.time_left = 77

        assert await presenter.dispatch("reset") is True

        assert presenter.time_left == 77
        assert presenter.buttons_disabled is False
        await presenter.client.aclose()


class TestSaveSettings:
    async def test_save_reseeds_paused_countdown(self, presenter, server):
        presenter.settings.pomodoro_duration = 50
        presenter.time_left = 12

        assert await presenter.save_settings() is True

        assert presenter.time_left == 50 * 60
        method, path, body = server.requests[-1]
        assert (method, path) == ("POST", "/timer/settings")
        assert body["pomodoroDuration"] == 50
        assert body["longBreakInterval"] == 4

    async def test_save_keeps_running_countdown(self, presenter):
        presenter.is_running = True
        presenter.time_left = 12

        await presenter.save_settings()

        assert presenter.time_left == 12

    async def test_long_break_phase_length(self, presenter):
        presenter.is_resting = True
        presenter.is_long_break = True
        assert presenter.phase_seconds() == 15 * 60

        presenter.settings.enable_long_break = False
        assert presenter.phase_seconds() == 5 * 60
