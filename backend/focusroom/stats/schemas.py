from enum import Enum
from typing import List, Optional
from datetime import date, datetime
from pydantic import BaseModel


class ReportPeriod(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class DailyAchievementPublic(BaseModel):
    day: date
    focus_sessions: int
    break_sessions: int
    tasks_completed: int
    tasks_created: int
    planned_hours: float
    completed_hours: float
    total_session_time: float
    focused_alerts: int
    deviated_alerts: int


class ReportTotals(BaseModel):
    focus_sessions: int = 0
    break_sessions: int = 0
    tasks_completed: int = 0
    tasks_created: int = 0
    planned_hours: float = 0
    completed_hours: float = 0
    total_session_time: float = 0
    focused_alerts: int = 0
    deviated_alerts: int = 0
    active_days: int = 0
    focus_rate: Optional[float] = None


class ProjectStatsPublic(BaseModel):
    project_id: int
    current_streak: int
    longest_streak: int
    totals: ReportTotals
    days: List[DailyAchievementPublic]


class ReportPublic(BaseModel):
    project_id: int
    period: ReportPeriod
    start_date: date
    end_date: date  # exclusive
    totals: ReportTotals
    days: List[DailyAchievementPublic]


class RecentSessionPublic(BaseModel):
    id: int
    task_id: Optional[int]
    session_type: str
    duration_seconds: int
    completed_at: datetime
