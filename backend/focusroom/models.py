from typing import List, Optional, TYPE_CHECKING
from datetime import date, datetime
from sqlalchemy import UniqueConstraint
from sqlmodel import Field as SQLField, SQLModel, Relationship

from .clock import utcnow

if TYPE_CHECKING:
    from .users.models import User  # noqa: F401


class UserSettings(SQLModel, table=True):
    __tablename__ = "user_settings"
    id: Optional[int] = SQLField(default=None, primary_key=True)
    user_id: int = SQLField(foreign_key="user.id", index=True, unique=True)
    # durations in minutes
    focus_duration: int = 25
    short_break_duration: int = 5
    long_break_duration: int = 15
    long_break_interval: int = 4
    auto_start_breaks: bool = True
    auto_start_pomodoros: bool = True
    countdown_minutes: Optional[int] = None
    default_alert_response: str = "focused"  # "focused" or "deviated"
    alerts_enabled: bool = False
    alert_frequency: int = 10  # minutes of focus between focus checks
    alert_repeat: bool = True  # False: one check per focus session
    alert_mode: str = "common"  # "common" or "selective"
    updated_at: datetime = SQLField(default_factory=utcnow)

    user: Optional["User"] = Relationship(back_populates="settings")


class Project(SQLModel, table=True):
    id: Optional[int] = SQLField(default=None, primary_key=True)
    user_id: int = SQLField(foreign_key="user.id", index=True)
    name: str
    description: str = SQLField(default="")
    planned_hours: float = SQLField(default=0)
    created_at: datetime = SQLField(default_factory=utcnow)
    updated_at: datetime = SQLField(default_factory=utcnow)

    user: Optional["User"] = Relationship(back_populates="projects")
    tasks: List["Task"] = Relationship(
        back_populates="project",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
    recent_sessions: List["RecentSession"] = Relationship(
        back_populates="project",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
    daily_achievements: List["DailyAchievement"] = Relationship(
        back_populates="project",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


class Task(SQLModel, table=True):
    id: Optional[int] = SQLField(default=None, primary_key=True)
    project_id: int = SQLField(foreign_key="project.id", index=True)
    name: str = SQLField(index=True)
    estimated_duration: int  # minutes
    actual_duration: Optional[float] = None  # minutes
    sessions_completed: int = SQLField(default=0)
    order: int = SQLField(default=0)
    completed: bool = SQLField(default=False)
    completed_at: Optional[datetime] = None
    archived: bool = SQLField(default=False, index=True)
    archived_at: Optional[datetime] = None
    created_at: datetime = SQLField(default_factory=utcnow)

    project: Optional[Project] = Relationship(back_populates="tasks")


class RecentSession(SQLModel, table=True):
    __tablename__ = "recent_session"
    id: Optional[int] = SQLField(default=None, primary_key=True)
    project_id: int = SQLField(foreign_key="project.id", index=True)
    task_id: Optional[int] = None
    session_type: str  # "focus", "short_break", "long_break"
    duration_seconds: int
    completed_at: datetime = SQLField(default_factory=utcnow, index=True)
    day: date = SQLField(index=True)

    project: Optional[Project] = Relationship(back_populates="recent_sessions")


class DailyAchievement(SQLModel, table=True):
    """One row per project and day, upserted as things happen."""
    __tablename__ = "daily_achievement"
    __table_args__ = (UniqueConstraint("project_id", "day"),)

    id: Optional[int] = SQLField(default=None, primary_key=True)
    project_id: int = SQLField(foreign_key="project.id", index=True)
    day: date = SQLField(index=True)

    focus_sessions: int = 0
    break_sessions: int = 0
    tasks_completed: int = 0
    tasks_created: int = 0
    planned_hours: float = 0
    completed_hours: float = 0
    total_session_time: float = 0  # minutes of completed focus
    focused_alerts: int = 0
    deviated_alerts: int = 0

    created_at: datetime = SQLField(default_factory=utcnow)
    updated_at: datetime = SQLField(default_factory=utcnow)

    project: Optional[Project] = Relationship(back_populates="daily_achievements")
