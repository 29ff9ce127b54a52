from enum import Enum

from sqlmodel import Session, select

from ..focus import AlertResponse, FocusConfig
from ..models import UserSettings
from ..clock import utcnow
from .schemas import UserSettingsUpdate


def get_or_create_settings(db: Session, user_id: int) -> UserSettings:
    user_settings = db.exec(
        select(UserSettings).where(UserSettings.user_id == user_id)
    ).first()
    if user_settings is None:
        user_settings = UserSettings(user_id=user_id)
        db.add(user_settings)
        db.commit()
        db.refresh(user_settings)
    return user_settings


def apply_update(db: Session, user_settings: UserSettings, update: UserSettingsUpdate) -> UserSettings:
    changes = update.model_dump(exclude_unset=True, exclude_none=True, exclude={"clear_countdown"})
    for key, value in changes.items():
        if isinstance(value, Enum):
            value = value.value
        setattr(user_settings, key, value)
    if update.clear_countdown:
        user_settings.countdown_minutes = None
    user_settings.updated_at = utcnow()
    db.add(user_settings)
    db.commit()
    db.refresh(user_settings)
    return user_settings


def to_focus_config(user_settings: UserSettings) -> FocusConfig:
    """Snapshot of the stored settings for a focus controller."""
    return FocusConfig.from_minutes(
        focus_duration=user_settings.focus_duration,
        short_break_duration=user_settings.short_break_duration,
        long_break_duration=user_settings.long_break_duration,
        long_break_interval=user_settings.long_break_interval,
        auto_start_breaks=user_settings.auto_start_breaks,
        auto_start_pomodoros=user_settings.auto_start_pomodoros,
        default_alert_response=AlertResponse(user_settings.default_alert_response),
        countdown_minutes=user_settings.countdown_minutes,
    )
