from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field


class TaskCreate(BaseModel):
    name: str = Field(min_length=1)
    estimated_duration: int = Field(gt=0)


class TaskUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    estimated_duration: Optional[int] = Field(default=None, gt=0)


class TaskComplete(BaseModel):
    actual_duration: Optional[float] = Field(default=None, ge=0)


class TaskReorder(BaseModel):
    task_ids: List[int]


class TaskPublic(BaseModel):
    id: int
    project_id: int
    name: str
    estimated_duration: int
    actual_duration: Optional[float] = None
    sessions_completed: int
    order: int
    completed: bool
    completed_at: Optional[datetime] = None
    archived: bool
    archived_at: Optional[datetime] = None


class TaskLimitPublic(BaseModel):
    current_count: int
    max_limit: int
    can_create: bool
    has_completed_tasks: bool
    message: Optional[str] = None
    progress_message: str
