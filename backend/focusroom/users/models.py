from typing import Optional, List, TYPE_CHECKING

from sqlmodel import SQLModel, Field, Relationship

if TYPE_CHECKING:
    from ..models import Project, UserSettings  # noqa: F401


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str
    middle_name: Optional[str]
    last_name: str
    email: str = Field(index=True, unique=True)
    password: str
    timezone: str = Field(default="UTC")

    projects: List["Project"] = Relationship(back_populates="user")
    settings: Optional["UserSettings"] = Relationship(back_populates="user")
