"""A mounted play area: controllers plus the tick sources that drive them."""

from __future__ import annotations

import asyncio
import functools
import logging
import uuid
from datetime import datetime
from typing import Callable, Dict, Iterable, Optional, Protocol, Set

from ..focus import (
    AlertPrompt,
    AlertPromptController,
    FocusConfig,
    FocusSessionController,
    InvalidConfiguration,
    ModeTransition,
    Ticker,
    TimerMode,
)
from .schedule import AlertSchedule

logger = logging.getLogger(__name__)

DEFAULT_ALERT_TASK_NAME = "Focus Task"


class PlayRecorder(Protocol):
    def record_session(
        self,
        project_id: int,
        mode: TimerMode,
        duration_seconds: int,
        completed_at: datetime,
        task_id: Optional[int] = None,
    ) -> None: ...

    def record_alert(self, project_id: int, prompt: AlertPrompt) -> None: ...


class PlaySession:
    """Owns one timer and one focus-check prompt for a project's play area.

    Each mount gets its own instance; nothing here is shared between mounts.
    Recorder writes run in the default executor while an event loop is
    running, so a tick never waits on the database.
    """

    def __init__(
        self,
        project_id: int,
        user_id: int,
        config: FocusConfig,
        recorder: Optional[PlayRecorder] = None,
        schedule: Optional[AlertSchedule] = None,
        tick_interval: float = 1.0,
        alert_countdown: int = 30,
    ):
        self.id = uuid.uuid4().hex
        self.project_id = project_id
        self.user_id = user_id
        self.recorder = recorder
        self.schedule = schedule
        self.current_task_id: Optional[int] = None
        self.current_task_name: Optional[str] = None
        self.timer_error: Optional[str] = None
        self._pending: Set[asyncio.Future] = set()

        self.timer = FocusSessionController(config, sink=self)
        self.timer.on_transition = self._on_transition
        self.alerts = AlertPromptController(
            default_response=config.default_alert_response,
            countdown_seconds=alert_countdown,
            on_response=self._on_alert_response,
        )

        self._timer_ticker = Ticker(self.tick_timer, tick_interval, name=f"play-{self.id}-timer")
        self._alert_ticker = Ticker(self.alerts.tick, tick_interval, name=f"play-{self.id}-alert")

    @property
    def mounted(self) -> bool:
        return self._timer_ticker.running and self._alert_ticker.running

    @property
    def stalled(self) -> bool:
        """A tick source died on an error; `reset()` or `reconfigure()` restarts it."""
        return self._timer_ticker.failed or self._alert_ticker.failed

    def mount(self) -> None:
        self._timer_ticker.start()
        self._alert_ticker.start()
        logger.info("Play session %s mounted for project %s", self.id, self.project_id)

    async def unmount(self) -> None:
        await self._timer_ticker.stop()
        await self._alert_ticker.stop()
        await self.flush()
        logger.info("Play session %s unmounted", self.id)

    async def flush(self) -> None:
        """Wait for recorder writes still in flight."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def set_current_task(self, task_id: Optional[int], task_name: Optional[str]) -> None:
        self.current_task_id = task_id
        self.current_task_name = task_name

    def set_alert_tasks(self, task_ids: Iterable[int]) -> None:
        if self.schedule is not None:
            self.schedule.task_ids = set(task_ids)

    def reset(self) -> None:
        self.timer.reset()
        self.timer_error = None
        if self.schedule:
            self.schedule.reset()
        self._revive()

    def reconfigure(self, config: FocusConfig, schedule: Optional[AlertSchedule] = None) -> None:
        self.timer.reconfigure(config)
        self.timer_error = None
        self.alerts.default_response = config.default_alert_response
        if schedule is not None:
            if self.schedule is not None:
                schedule.task_ids = set(self.schedule.task_ids)
            self.schedule = schedule
        self._revive()

    def open_alert(self, task_name: Optional[str] = None) -> AlertPrompt:
        return self.alerts.open(task_name or self.current_task_name or DEFAULT_ALERT_TASK_NAME)

    def tick_timer(self) -> None:
        """One timer second, followed by the focus-check schedule."""
        try:
            self.timer.tick()
        except InvalidConfiguration as exc:
            # the finished mode stays on screen at 00:00 until settings are fixed
            self.timer.pause()
            self.timer_error = str(exc)
            logger.error("Play session %s paused: %s", self.id, exc)
            return

        session = self.timer.session
        if (
            self.schedule is None
            or session.mode != TimerMode.FOCUS
            or not session.is_running
            or self.alerts.is_open
            or not self.schedule.covers(self.current_task_id)
        ):
            return
        if self.schedule.due(session.duration_seconds - session.remaining_seconds):
            self.open_alert()

    # Session sink for the timer
    def record_completed_session(
        self, mode: TimerMode, duration_seconds: int, completed_at: datetime
    ) -> None:
        if self.recorder is None:
            return
        task_id = self.current_task_id if mode == TimerMode.FOCUS else None
        self._write(
            self.recorder.record_session,
            self.project_id, mode, duration_seconds, completed_at, task_id=task_id,
        )

    def _on_transition(self, transition: ModeTransition) -> None:
        if transition.current == TimerMode.FOCUS and self.schedule:
            self.schedule.reset()

    def _on_alert_response(self, prompt: AlertPrompt) -> None:
        if self.recorder is None:
            return
        self._write(self.recorder.record_alert, self.project_id, prompt)

    def _write(self, fn: Callable[..., None], *args, **kwargs) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is None:
            try:
                fn(*args, **kwargs)
            except Exception:
                logger.exception("Failed to record play session %s outcome", self.id)
            return

        future = loop.run_in_executor(None, functools.partial(fn, *args, **kwargs))
        self._pending.add(future)
        future.add_done_callback(self._write_done)

    def _write_done(self, future: asyncio.Future) -> None:
        self._pending.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error(
                "Failed to record play session %s outcome", self.id, exc_info=exc
            )

    def _revive(self) -> None:
        for ticker in (self._timer_ticker, self._alert_ticker):
            if ticker.failed:
                logger.info("Restarting %s after %r", ticker.name, ticker.error)
                ticker.start()


class PlaySessionRegistry:
    """Mounted play sessions of one application instance."""

    def __init__(self):
        self._sessions: Dict[str, PlaySession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def add(self, session: PlaySession) -> PlaySession:
        self._sessions[session.id] = session
        session.mount()
        return session

    def get(self, play_id: str) -> Optional[PlaySession]:
        return self._sessions.get(play_id)

    async def unmount(self, play_id: str) -> bool:
        session = self._sessions.pop(play_id, None)
        if session is None:
            return False
        await session.unmount()
        return True

    async def unmount_project(self, project_id: int, user_id: Optional[int] = None) -> int:
        """Unmount the project's sessions, optionally only those of `user_id`."""
        ids = [
            sid for sid, s in self._sessions.items()
            if s.project_id == project_id and (user_id is None or s.user_id == user_id)
        ]
        for play_id in ids:
            await self.unmount(play_id)
        return len(ids)

    async def close(self) -> None:
        for play_id in list(self._sessions):
            await self.unmount(play_id)
