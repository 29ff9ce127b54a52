from typing import Optional

import pytz
from pydantic import field_validator
from sqlmodel import SQLModel

from ..auth.utils import get_password_hash
from ..clock import get_timezone


class UserBase(SQLModel):
    first_name: str
    middle_name: Optional[str] = None
    last_name: str
    email: str
    # IANA name; daily stats are bucketed by the calendar day in this zone
    timezone: str = "UTC"

    @field_validator("timezone")
    def check_timezone(cls, value: str) -> str:
        try:
            get_timezone(value)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Unknown timezone: {value}")
        return value


class UserCreate(UserBase):
    password: str

    @field_validator("password")
    def hash_password(cls, value: str) -> str:
        return get_password_hash(value)


class UserPublic(UserBase):
    id: int
