import threading
from contextlib import contextmanager
from typing import Dict

from sqlalchemy import func
from sqlmodel import Session, select

from ..focus import TaskBucketGate, TaskLimitStatus
from ..models import Project, Task

_locks_guard = threading.Lock()
_project_locks: Dict[int, threading.Lock] = {}


class TaskLimitReached(Exception):
    def __init__(self, status: TaskLimitStatus):
        super().__init__(status.message)
        self.status = status


class DatabaseTaskProvider:
    """Task counts for the bucket gate, read straight from the store."""

    def __init__(self, db: Session):
        self.db = db

    def get_task_count(self, project_id: int) -> int:
        return self.db.exec(
            select(func.count(Task.id)).where(
                Task.project_id == project_id,
                Task.archived == False,  # noqa: E712
            )
        ).one()

    def has_completed_uncleared_tasks(self, project_id: int) -> bool:
        return self.db.exec(
            select(Task.id).where(
                Task.project_id == project_id,
                Task.archived == False,  # noqa: E712
                Task.completed == True,  # noqa: E712
            )
        ).first() is not None


def task_gate(db: Session) -> TaskBucketGate:
    return TaskBucketGate(DatabaseTaskProvider(db))


def next_order(db: Session, project_id: int) -> int:
    max_order = db.exec(
        select(func.max(Task.order)).where(Task.project_id == project_id)
    ).one()
    return (max_order or 0) + 1


@contextmanager
def project_lock(db: Session, project_id: int):
    """Serialize bucket changes for one project.

    The in-process lock covers SQLite; the row lock covers databases that
    support ``SELECT ... FOR UPDATE``.
    """
    with _locks_guard:
        lock = _project_locks.setdefault(project_id, threading.Lock())
    with lock:
        db.exec(select(Project.id).where(Project.id == project_id).with_for_update()).one()
        yield


def add_task(db: Session, project_id: int, name: str, estimated_duration: int) -> Task:
    """Insert a task if the project's bucket has room, else raise TaskLimitReached."""
    with project_lock(db, project_id):
        limit = task_gate(db).check(project_id)
        if not limit.can_create:
            db.rollback()
            raise TaskLimitReached(limit)
        task = Task(
            project_id=project_id,
            name=name,
            estimated_duration=estimated_duration,
            order=next_order(db, project_id),
        )
        db.add(task)
        db.commit()
        db.refresh(task)
    return task


def restore_task(db: Session, task: Task) -> Task:
    """Unarchive `task`; bringing it back counts against the bucket like a new one."""
    with project_lock(db, task.project_id):
        limit = task_gate(db).check(task.project_id)
        if not limit.can_create:
            db.rollback()
            raise TaskLimitReached(limit)
        task.archived = False
        task.archived_at = None
        db.add(task)
        db.commit()
        db.refresh(task)
    return task
