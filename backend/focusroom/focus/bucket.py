"""Cap on the number of active tasks a project may hold."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

MAX_TASKS = 10

CLEAR_COMPLETED_MESSAGE = (
    "Maximum tasks reached! Clear your completed tasks to make room for new ones."
)
COMPLETE_EXISTING_MESSAGE = (
    "Task limit hit! Complete or edit existing tasks to make room for new ones."
)


class TaskDataProvider(Protocol):
    def get_task_count(self, project_id: int) -> int: ...

    def has_completed_uncleared_tasks(self, project_id: int) -> bool: ...


@dataclass
class TaskLimitStatus:
    current_count: int
    max_limit: int
    can_create: bool
    has_completed_tasks: bool
    message: Optional[str] = None


class TaskBucketGate:
    """Decides whether another task may be created in a project.

    Every creation path asks the gate first; the store does not enforce the
    limit on its own. Counts are read fresh from the provider on each check.
    """

    max_limit = MAX_TASKS

    def __init__(self, provider: Optional[TaskDataProvider] = None):
        self.provider = provider

    def can_create(self, current_count: int) -> bool:
        return current_count < self.max_limit

    def status_message(self, current_count: int, has_completed_tasks: bool) -> Optional[str]:
        if self.can_create(current_count):
            return None
        if has_completed_tasks:
            return CLEAR_COMPLETED_MESSAGE
        return COMPLETE_EXISTING_MESSAGE

    def progress_message(self, current_count: int) -> str:
        progress = (current_count * 100) // self.max_limit
        if progress < 30:
            prefix = "Getting started!"
        elif progress < 60:
            prefix = "Building momentum!"
        elif progress < 90:
            prefix = "Almost there!"
        else:
            prefix = "Full plan ready!"
        return f"{prefix} {current_count} of {self.max_limit} tasks planned."

    def check(self, project_id: int) -> TaskLimitStatus:
        if self.provider is None:
            raise RuntimeError("TaskBucketGate.check needs a task data provider")
        count = self.provider.get_task_count(project_id)
        has_completed = self.provider.has_completed_uncleared_tasks(project_id)
        return TaskLimitStatus(
            current_count=count,
            max_limit=self.max_limit,
            can_create=self.can_create(count),
            has_completed_tasks=has_completed,
            message=self.status_message(count, has_completed),
        )
