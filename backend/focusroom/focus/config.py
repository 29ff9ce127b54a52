"""Read-only configuration snapshot consumed by the focus controllers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TimerMode(str, Enum):
    FOCUS = "focus"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"


class AlertResponse(str, Enum):
    FOCUSED = "focused"
    DEVIATED = "deviated"


@dataclass(frozen=True)
class FocusConfig:
    """Timer durations are in seconds.

    `countdown_minutes` overrides the focus duration when set.
    """

    focus_duration: int = 25 * 60
    short_break_duration: int = 5 * 60
    long_break_duration: int = 15 * 60
    long_break_interval: int = 4
    auto_start_breaks: bool = True
    auto_start_pomodoros: bool = True
    default_alert_response: AlertResponse = AlertResponse.FOCUSED
    countdown_minutes: Optional[int] = None

    @classmethod
    def from_minutes(
        cls,
        focus_duration: int,
        short_break_duration: int,
        long_break_duration: int,
        **kwargs,
    ) -> "FocusConfig":
        return cls(
            focus_duration=focus_duration * 60,
            short_break_duration=short_break_duration * 60,
            long_break_duration=long_break_duration * 60,
            **kwargs,
        )

    def duration_for(self, mode: TimerMode) -> int:
        """Configured length of `mode` in seconds (not validated)."""
        if mode == TimerMode.FOCUS:
            if self.countdown_minutes is not None:
                return self.countdown_minutes * 60
            return self.focus_duration
        elif mode == TimerMode.SHORT_BREAK:
            return self.short_break_duration
        else:
            return self.long_break_duration
