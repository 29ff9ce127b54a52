from datetime import datetime
from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session

from ..clock import DEFAULT_TIMEZONE, local_day
from ..focus import AlertPrompt, TimerMode
from ..stats.service import DailyStatsService


class DatabaseRecorder:
    """Writes play-area outcomes with a short-lived session of its own.

    Days are taken in the owning user's timezone, matching the task counters
    and the stats window.
    """

    def __init__(self, engine: Engine, timezone_name: str = DEFAULT_TIMEZONE):
        self.engine = engine
        self.timezone_name = timezone_name

    def record_session(
        self,
        project_id: int,
        mode: TimerMode,
        duration_seconds: int,
        completed_at: datetime,
        task_id: Optional[int] = None,
    ) -> None:
        with Session(self.engine) as db:
            DailyStatsService.record_session(
                db, project_id, mode, duration_seconds, completed_at,
                task_id=task_id, timezone_name=self.timezone_name,
            )

    def record_alert(self, project_id: int, prompt: AlertPrompt) -> None:
        day = local_day(prompt.closed_at, self.timezone_name)
        with Session(self.engine) as db:
            DailyStatsService.record_alert_response(db, project_id, prompt.response, day)
