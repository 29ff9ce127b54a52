"""Focus session state machines: timer, focus-check prompt and task cap."""

from .alerts import AlertPrompt, AlertPromptController
from .bucket import (
    CLEAR_COMPLETED_MESSAGE,
    COMPLETE_EXISTING_MESSAGE,
    MAX_TASKS,
    TaskBucketGate,
    TaskDataProvider,
    TaskLimitStatus,
)
from .config import AlertResponse, FocusConfig, TimerMode
from .errors import DoubleOpenPrompt, FocusError, InvalidConfiguration, StaleResponse
from .ticker import Ticker
from .timer import FocusSessionController, ModeTransition, SessionSink, TimerSession

__all__ = [
    "AlertPrompt",
    "AlertPromptController",
    "AlertResponse",
    "CLEAR_COMPLETED_MESSAGE",
    "COMPLETE_EXISTING_MESSAGE",
    "DoubleOpenPrompt",
    "FocusConfig",
    "FocusError",
    "FocusSessionController",
    "InvalidConfiguration",
    "MAX_TASKS",
    "ModeTransition",
    "SessionSink",
    "StaleResponse",
    "TaskBucketGate",
    "TaskDataProvider",
    "TaskLimitStatus",
    "Ticker",
    "TimerMode",
    "TimerSession",
]
