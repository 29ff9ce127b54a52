from typing import List, Optional
from pydantic import BaseModel

from ..focus import AlertResponse, TimerMode
from .schedule import AlertMode


class TimerStatePublic(BaseModel):
    mode: TimerMode
    duration_seconds: int
    remaining_seconds: int
    remaining_display: str
    progress_percent: float
    is_running: bool
    completed_focus_count: int


class AlertPromptPublic(BaseModel):
    task_name: str
    countdown: int
    is_open: bool
    default_response: AlertResponse
    response: Optional[AlertResponse] = None
    automatic: bool = False


class PlayStatePublic(BaseModel):
    id: str
    project_id: int
    current_task_id: Optional[int] = None
    current_task_name: Optional[str] = None
    alerts_scheduled: bool
    alert_mode: Optional[AlertMode] = None
    alert_task_ids: List[int] = []
    stalled: bool = False
    timer_error: Optional[str] = None
    timer: TimerStatePublic
    alert: Optional[AlertPromptPublic] = None


class ModeChange(BaseModel):
    mode: TimerMode


class CurrentTaskUpdate(BaseModel):
    task_id: Optional[int] = None


class AlertTasksUpdate(BaseModel):
    task_ids: List[int]


class AlertOpen(BaseModel):
    task_name: Optional[str] = None


class AlertRespond(BaseModel):
    response: AlertResponse
