from fastapi import APIRouter, Query
from typing import List, Optional
from datetime import date, timedelta
from sqlmodel import select

from ..clock import local_day
from ..db import SessionDep
from ..auth.deps import ActiveUserDep
from ..models import DailyAchievement, RecentSession
from ..projects.deps import get_owned_project
from .schemas import (
    DailyAchievementPublic,
    ProjectStatsPublic,
    RecentSessionPublic,
    ReportPeriod,
    ReportPublic,
)
from .service import DailyStatsService

router = APIRouter(prefix="/projects/{project_id}", tags=["Stats"])


def _days_public(rows: List[DailyAchievement]) -> List[DailyAchievementPublic]:
    return [DailyAchievementPublic.model_validate(row, from_attributes=True) for row in rows]


@router.get("/stats", response_model=ProjectStatsPublic)
def get_project_stats(
    db: SessionDep,
    project_id: int,
    current_user: ActiveUserDep,
    days: int = Query(30, ge=1, le=366),
):
    """Daily achievements for the last `days` days plus streaks."""
    get_owned_project(db, project_id, current_user)
    today = local_day(timezone_name=current_user.timezone)
    rows = DailyStatsService.days_between(
        db, project_id, today - timedelta(days=days - 1), today + timedelta(days=1)
    )
    current_streak, longest_streak = DailyStatsService.streaks(db, project_id, today)
    return ProjectStatsPublic(
        project_id=project_id,
        current_streak=current_streak,
        longest_streak=longest_streak,
        totals=DailyStatsService.totals(rows),
        days=_days_public(rows),
    )


@router.get("/reports", response_model=ReportPublic)
def get_report(
    db: SessionDep,
    project_id: int,
    current_user: ActiveUserDep,
    period: ReportPeriod = ReportPeriod.WEEKLY,
    start_date: Optional[date] = None,
):
    get_owned_project(db, project_id, current_user)
    start, end = DailyStatsService.period_bounds(
        period, start_date or local_day(timezone_name=current_user.timezone)
    )
    rows = DailyStatsService.days_between(db, project_id, start, end)
    return ReportPublic(
        project_id=project_id,
        period=period,
        start_date=start,
        end_date=end,
        totals=DailyStatsService.totals(rows),
        days=_days_public(rows),
    )


@router.get("/sessions", response_model=List[RecentSessionPublic])
def get_recent_sessions(
    db: SessionDep,
    project_id: int,
    current_user: ActiveUserDep,
    limit: int = Query(50, ge=1, le=500),
):
    get_owned_project(db, project_id, current_user)
    sessions = db.exec(
        select(RecentSession)
        .where(RecentSession.project_id == project_id)
        .order_by(RecentSession.completed_at.desc())
        .limit(limit)
    ).all()
    return [RecentSessionPublic.model_validate(s, from_attributes=True) for s in sessions]
