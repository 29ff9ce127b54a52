from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field

from ..focus import AlertResponse
from ..play.schedule import AlertMode


class UserSettingsPublic(BaseModel):
    focus_duration: int
    short_break_duration: int
    long_break_duration: int
    long_break_interval: int
    auto_start_breaks: bool
    auto_start_pomodoros: bool
    countdown_minutes: Optional[int] = None
    default_alert_response: AlertResponse
    alerts_enabled: bool
    alert_frequency: int
    alert_repeat: bool
    alert_mode: AlertMode
    updated_at: datetime


class UserSettingsUpdate(BaseModel):
    focus_duration: Optional[int] = Field(default=None, gt=0)
    short_break_duration: Optional[int] = Field(default=None, gt=0)
    long_break_duration: Optional[int] = Field(default=None, gt=0)
    long_break_interval: Optional[int] = Field(default=None, ge=1)
    auto_start_breaks: Optional[bool] = None
    auto_start_pomodoros: Optional[bool] = None
    countdown_minutes: Optional[int] = Field(default=None, gt=0)
    clear_countdown: bool = False
    default_alert_response: Optional[AlertResponse] = None
    alerts_enabled: Optional[bool] = None
    alert_frequency: Optional[int] = Field(default=None, gt=0)
    alert_repeat: Optional[bool] = None
    alert_mode: Optional[AlertMode] = None
