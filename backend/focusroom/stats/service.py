import logging
from typing import List, Optional, Tuple
from datetime import date, datetime, timedelta
from sqlmodel import Session, select, and_

from ..clock import local_day, utcnow
from ..focus import AlertResponse, TimerMode
from ..models import DailyAchievement, RecentSession, Task
from .schemas import ReportPeriod, ReportTotals

logger = logging.getLogger(__name__)

COUNTER_FIELDS = (
    "focus_sessions",
    "break_sessions",
    "tasks_completed",
    "tasks_created",
    "planned_hours",
    "completed_hours",
    "total_session_time",
    "focused_alerts",
    "deviated_alerts",
)


class DailyStatsService:
    """Records what happens in a project into its daily achievement rows."""

    @staticmethod
    def get_or_create_day(db: Session, project_id: int, day: date) -> DailyAchievement:
        row = db.exec(
            select(DailyAchievement).where(
                DailyAchievement.project_id == project_id,
                DailyAchievement.day == day,
            )
        ).first()
        if row is None:
            row = DailyAchievement(project_id=project_id, day=day)
            db.add(row)
        return row

    @staticmethod
    def update_daily_achievements(db: Session, project_id: int, day: date, **increments) -> DailyAchievement:
        """Upsert the row for (project, day), adding `increments` to its counters.

        Counters never drop below zero.
        """
        row = DailyStatsService.get_or_create_day(db, project_id, day)
        for field, amount in increments.items():
            if field not in COUNTER_FIELDS:
                raise ValueError(f"Unknown daily counter: {field}")
            current = getattr(row, field) or 0
            setattr(row, field, max(0, current + amount))
        row.updated_at = utcnow()
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    @staticmethod
    def record_session(
        db: Session,
        project_id: int,
        mode: TimerMode,
        duration_seconds: int,
        completed_at: datetime,
        task_id: Optional[int] = None,
        timezone_name: str = "UTC",
    ) -> RecentSession:
        """Store a completed session under the user's local day."""
        mode = TimerMode(mode)
        record = RecentSession(
            project_id=project_id,
            task_id=task_id,
            session_type=mode.value,
            duration_seconds=duration_seconds,
            completed_at=completed_at,
            day=local_day(completed_at, timezone_name),
        )
        db.add(record)

        minutes = duration_seconds / 60
        if mode == TimerMode.FOCUS:
            if task_id is not None:
                task = db.get(Task, task_id)
                if task and task.project_id == project_id:
                    task.sessions_completed += 1
                    task.actual_duration = (task.actual_duration or 0) + minutes
                    db.add(task)
            DailyStatsService.update_daily_achievements(
                db, project_id, record.day, focus_sessions=1, total_session_time=minutes
            )
        else:
            DailyStatsService.update_daily_achievements(
                db, project_id, record.day, break_sessions=1
            )
        db.refresh(record)
        logger.info("Recorded %s session for project %s", mode.value, project_id)
        return record

    @staticmethod
    def record_task_creation(db: Session, project_id: int, estimated_minutes: int, day: Optional[date] = None):
        return DailyStatsService.update_daily_achievements(
            db, project_id, day or local_day(),
            tasks_created=1, planned_hours=estimated_minutes / 60,
        )

    @staticmethod
    def record_task_completion(db: Session, project_id: int, actual_minutes: float, day: Optional[date] = None):
        return DailyStatsService.update_daily_achievements(
            db, project_id, day or local_day(),
            tasks_completed=1, completed_hours=actual_minutes / 60,
        )

    @staticmethod
    def record_task_reopened(db: Session, project_id: int, actual_minutes: float, day: Optional[date] = None):
        return DailyStatsService.update_daily_achievements(
            db, project_id, day or local_day(),
            tasks_completed=-1, completed_hours=-actual_minutes / 60,
        )

    @staticmethod
    def record_alert_response(db: Session, project_id: int, response: AlertResponse, day: Optional[date] = None):
        field = (
            "focused_alerts"
            if AlertResponse(response) == AlertResponse.FOCUSED
            else "deviated_alerts"
        )
        return DailyStatsService.update_daily_achievements(
            db, project_id, day or local_day(), **{field: 1}
        )

    @staticmethod
    def days_between(db: Session, project_id: int, start: date, end: date) -> List[DailyAchievement]:
        """Rows with start <= day < end, oldest first."""
        return list(db.exec(
            select(DailyAchievement)
            .where(
                and_(
                    DailyAchievement.project_id == project_id,
                    DailyAchievement.day >= start,
                    DailyAchievement.day < end,
                )
            )
            .order_by(DailyAchievement.day)
        ).all())

    @staticmethod
    def streaks(db: Session, project_id: int, today: Optional[date] = None) -> Tuple[int, int]:
        """(current, longest) runs of consecutive days with a completed focus session.

        The current streak survives until the end of the day after the last
        active day.
        """
        today = today or local_day()
        active_days = sorted(set(db.exec(
            select(DailyAchievement.day).where(
                DailyAchievement.project_id == project_id,
                DailyAchievement.focus_sessions > 0,
            )
        ).all()))
        if not active_days:
            return 0, 0

        longest = run = 1
        for previous, day in zip(active_days, active_days[1:]):
            run = run + 1 if day - previous == timedelta(days=1) else 1
            longest = max(longest, run)

        active = set(active_days)
        cursor = today if today in active else today - timedelta(days=1)
        current = 0
        while cursor in active:
            current += 1
            cursor -= timedelta(days=1)
        return current, longest

    @staticmethod
    def period_bounds(period: ReportPeriod, start: Optional[date] = None) -> Tuple[date, date]:
        anchor = start or local_day()
        if period == ReportPeriod.WEEKLY:
            begin = anchor - timedelta(days=anchor.weekday())
            return begin, begin + timedelta(days=7)
        if period == ReportPeriod.MONTHLY:
            begin = anchor.replace(day=1)
            if begin.month == 12:
                return begin, begin.replace(year=begin.year + 1, month=1)
            return begin, begin.replace(month=begin.month + 1)
        begin = anchor.replace(month=1, day=1)
        return begin, begin.replace(year=begin.year + 1)

    @staticmethod
    def totals(rows: List[DailyAchievement]) -> ReportTotals:
        sums = {field: sum(getattr(row, field) or 0 for row in rows) for field in COUNTER_FIELDS}
        answered = sums["focused_alerts"] + sums["deviated_alerts"]
        return ReportTotals(
            **sums,
            active_days=sum(1 for row in rows if row.focus_sessions > 0),
            focus_rate=(sums["focused_alerts"] / answered) if answered else None,
        )
