"""Focus/break timer state machine driven by an external one-second tick."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Optional, Protocol

from ..clock import utcnow
from .config import FocusConfig, TimerMode
from .errors import InvalidConfiguration

logger = logging.getLogger(__name__)


class SessionSink(Protocol):
    def record_completed_session(
        self, mode: TimerMode, duration_seconds: int, completed_at: datetime
    ) -> None: ...


@dataclass
class TimerSession:
    """Current state of the timer."""
    mode: TimerMode
    duration_seconds: int
    remaining_seconds: int
    is_running: bool = False
    completed_focus_count: int = 0

    @property
    def remaining_display(self) -> str:
        """Format time remaining as MM:SS."""
        minutes, seconds = divmod(self.remaining_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"

    @property
    def progress_percent(self) -> float:
        """Progress through the current mode (0-100)."""
        elapsed = self.duration_seconds - self.remaining_seconds
        return min(100.0, max(0.0, (elapsed / self.duration_seconds) * 100))


@dataclass(frozen=True)
class ModeTransition:
    previous: TimerMode
    current: TimerMode
    automatic: bool


class FocusSessionController:
    """Pomodoro timer for a single play area.

    The controller owns no clock. A tick source calls `tick()` once per elapsed
    second while the view is mounted; completed sessions are handed to `sink`
    without waiting on the outcome.

    Usage:
        controller = FocusSessionController(FocusConfig(), sink=db_sink)
        controller.on_transition = lambda t: print(t.current)
        controller.start()
        controller.tick()
    """

    def __init__(
        self,
        config: Optional[FocusConfig] = None,
        sink: Optional[SessionSink] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.config = config or FocusConfig()
        _check_interval(self.config)
        self.sink = sink
        self._clock = clock

        # Callbacks
        self.on_tick: Optional[Callable[[TimerSession], None]] = None
        self.on_transition: Optional[Callable[[ModeTransition], None]] = None

        duration = self._duration_for(TimerMode.FOCUS)
        self._session = TimerSession(
            mode=TimerMode.FOCUS,
            duration_seconds=duration,
            remaining_seconds=duration,
        )

    @property
    def session(self) -> TimerSession:
        """Read-only copy of the timer state."""
        return replace(self._session)

    @property
    def mode(self) -> TimerMode:
        return self._session.mode

    @property
    def is_running(self) -> bool:
        return self._session.is_running

    def start(self) -> None:
        if self._session.is_running:
            return
        self._session.is_running = True
        logger.info("Timer started: %s", self._session.mode.value)

    def pause(self) -> None:
        if not self._session.is_running:
            return
        self._session.is_running = False
        logger.info("Timer paused: %s", self._session.mode.value)

    def reset(self) -> None:
        """Rewind the current mode without touching the focus count."""
        self._session.remaining_seconds = self._session.duration_seconds
        self._session.is_running = False

    def set_mode(self, mode: TimerMode) -> ModeTransition:
        """Switch modes manually. The new mode always starts paused."""
        mode = TimerMode(mode)
        duration = self._duration_for(mode)
        previous = self._session.mode
        self._enter(mode, duration, running=False)
        transition = ModeTransition(previous=previous, current=mode, automatic=False)
        self._emit_transition(transition)
        return transition

    def reconfigure(self, config: FocusConfig) -> None:
        """Swap the configuration snapshot.

        A paused timer re-enters its mode with the new duration; a running one
        keeps its countdown and picks the new values up at the next mode entry.
        """
        _check_interval(config)
        if not self._session.is_running:
            duration = _validated(self._session.mode, config.duration_for(self._session.mode))
            self.config = config
            self._enter(self._session.mode, duration, running=False)
        else:
            self.config = config

    def tick(self) -> Optional[ModeTransition]:
        """Advance one second. Returns the automatic transition, if one happened."""
        if not self._session.is_running:
            return None

        self._session.remaining_seconds = max(0, self._session.remaining_seconds - 1)

        if self.on_tick:
            try:
                self.on_tick(self.session)
            except Exception:
                logger.exception("Error in on_tick callback")

        if self._session.remaining_seconds == 0:
            return self._complete()
        return None

    def _complete(self) -> ModeTransition:
        completed = self._session.mode
        completed_duration = self._session.duration_seconds
        count = self._session.completed_focus_count

        if completed == TimerMode.FOCUS:
            count += 1
            if count % self.config.long_break_interval == 0:
                next_mode = TimerMode.LONG_BREAK
            else:
                next_mode = TimerMode.SHORT_BREAK
            auto_start = self.config.auto_start_breaks
        else:
            next_mode = TimerMode.FOCUS
            auto_start = self.config.auto_start_pomodoros

        # Raises before anything below mutates the session.
        duration = self._duration_for(next_mode)

        self._session.completed_focus_count = count
        self._enter(next_mode, duration, running=auto_start)
        logger.info(
            "%s complete (focus count %d), next: %s",
            completed.value, count, next_mode.value,
        )

        self._record(completed, completed_duration)
        transition = ModeTransition(previous=completed, current=next_mode, automatic=True)
        self._emit_transition(transition)
        return transition

    def _enter(self, mode: TimerMode, duration: int, running: bool) -> None:
        self._session.mode = mode
        self._session.duration_seconds = duration
        self._session.remaining_seconds = duration
        self._session.is_running = running

    def _duration_for(self, mode: TimerMode) -> int:
        return _validated(mode, self.config.duration_for(mode))

    def _record(self, mode: TimerMode, duration: int) -> None:
        if self.sink is None:
            return
        try:
            self.sink.record_completed_session(mode, duration, self._clock())
        except Exception:
            logger.exception("Failed to record completed %s session", mode.value)

    def _emit_transition(self, transition: ModeTransition) -> None:
        if self.on_transition:
            try:
                self.on_transition(transition)
            except Exception:
                logger.exception("Error in on_transition callback")


def _validated(mode: TimerMode, duration: int) -> int:
    if duration <= 0:
        raise InvalidConfiguration(
            f"{mode.value} duration must be positive, got {duration}"
        )
    return duration


def _check_interval(config: FocusConfig) -> None:
    if config.long_break_interval < 1:
        raise InvalidConfiguration(
            f"long break interval must be at least 1, got {config.long_break_interval}"
        )
