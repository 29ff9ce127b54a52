from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    planned_hours: float = Field(default=0, ge=0)


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    planned_hours: Optional[float] = Field(default=None, ge=0)


class ProjectPublic(BaseModel):
    id: int
    name: str
    description: str
    planned_hours: float
    task_count: int = 0
    completed_task_count: int = 0
    created_at: datetime
    updated_at: datetime
