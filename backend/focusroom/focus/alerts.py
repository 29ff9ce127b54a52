"""Focus check prompt with a countdown that answers itself on expiry."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, List, Optional

from ..clock import utcnow
from .config import AlertResponse
from .errors import DoubleOpenPrompt, StaleResponse

logger = logging.getLogger(__name__)

DEFAULT_COUNTDOWN_SECONDS = 30


@dataclass
class AlertPrompt:
    task_name: str
    countdown: int
    default_response: AlertResponse
    is_open: bool = True
    response: Optional[AlertResponse] = None
    automatic: bool = False
    opened_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None


class AlertPromptController:
    """Owns at most one open prompt.

    `on_response` is called exactly once per prompt, with the closed prompt,
    whether the user answered or the countdown ran out.
    """

    def __init__(
        self,
        default_response: AlertResponse = AlertResponse.FOCUSED,
        countdown_seconds: int = DEFAULT_COUNTDOWN_SECONDS,
        on_response: Optional[Callable[[AlertPrompt], None]] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        if countdown_seconds <= 0:
            raise ValueError("countdown_seconds must be positive")
        self.default_response = AlertResponse(default_response)
        self.countdown_seconds = countdown_seconds
        self.on_response = on_response
        self._clock = clock
        self._prompt: Optional[AlertPrompt] = None
        self.history: List[AlertPrompt] = []

    @property
    def prompt(self) -> Optional[AlertPrompt]:
        """Copy of the latest prompt, open or closed."""
        return replace(self._prompt) if self._prompt else None

    @property
    def is_open(self) -> bool:
        return self._prompt is not None and self._prompt.is_open

    def open(self, task_name: str) -> AlertPrompt:
        if self.is_open:
            raise DoubleOpenPrompt(
                f"A prompt for '{self._prompt.task_name}' is already open"
            )
        self._prompt = AlertPrompt(
            task_name=task_name,
            countdown=self.countdown_seconds,
            default_response=self.default_response,
            opened_at=self._clock(),
        )
        logger.info("Focus check opened for '%s'", task_name)
        return self.prompt

    def tick(self) -> Optional[AlertPrompt]:
        """Count down one second. Returns the prompt if this tick closed it."""
        if not self.is_open:
            return None
        self._prompt.countdown -= 1
        if self._prompt.countdown <= 0:
            self._prompt.countdown = 0
            self._close(self._prompt.default_response, automatic=True)
            return self.prompt
        return None

    def respond(self, response: AlertResponse) -> AlertPrompt:
        if not self.is_open:
            raise StaleResponse("No focus check is open")
        self._close(AlertResponse(response), automatic=False)
        return self.prompt

    def _close(self, response: AlertResponse, automatic: bool) -> None:
        prompt = self._prompt
        prompt.response = response
        prompt.automatic = automatic
        prompt.is_open = False
        prompt.closed_at = self._clock()
        self.history.append(replace(prompt))
        logger.info(
            "Focus check for '%s' answered %s%s",
            prompt.task_name, response.value, " (timed out)" if automatic else "",
        )

        if self.on_response:
            try:
                self.on_response(replace(prompt))
            except Exception:
                logger.exception("Error in on_response callback")
