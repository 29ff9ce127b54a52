"""Recurring one-second callback on the running event loop."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Ticker:
    """Calls `callback` once per `interval` until stopped.

    Runs are sequential, so a callback never overlaps itself. If the callback
    raises, the error is logged, kept on `error`, and the ticker stops; call
    `start()` again to resume.
    """

    def __init__(self, callback: Callable[[], object], interval: float = 1.0, name: str = "ticker"):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.callback = callback
        self.interval = interval
        self.name = name
        self._task: Optional[asyncio.Task] = None
        self.error: Optional[BaseException] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def failed(self) -> bool:
        """Stopped because the callback raised."""
        return self.error is not None and not self.running

    def start(self) -> None:
        """Start ticking. Must be called from within a running event loop."""
        if self.running:
            return
        self.error = None
        self._task = asyncio.create_task(self._run(), name=self.name)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self.callback()
            except Exception as exc:
                logger.exception("Error in %s callback, stopping", self.name)
                self.error = exc
                return
