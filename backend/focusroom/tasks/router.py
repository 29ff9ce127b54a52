from fastapi import APIRouter, HTTPException, status
from typing import List, Optional
from sqlmodel import select

from ..db import SessionDep
from ..auth.deps import ActiveUserDep
from ..models import Task
from ..clock import local_day, utcnow
from ..projects.deps import get_owned_project
from ..stats.service import DailyStatsService
from ..users.models import User
from .schemas import (
    TaskComplete,
    TaskCreate,
    TaskLimitPublic,
    TaskPublic,
    TaskReorder,
    TaskUpdate,
)
from .service import TaskLimitReached, add_task, restore_task, task_gate

router = APIRouter(tags=["Tasks"])


def get_owned_task(db, task_id: int, user: User) -> Task:
    task = db.get(Task, task_id)
    if not task or not task.project or task.project.user_id != user.id:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


def _public(task: Task) -> TaskPublic:
    return TaskPublic.model_validate(task, from_attributes=True)


def _limit_conflict(exc: TaskLimitReached) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.status.message)


@router.get("/projects/{project_id}/tasks", response_model=List[TaskPublic])
def read_tasks(
    db: SessionDep,
    project_id: int,
    current_user: ActiveUserDep,
    include_archived: bool = False,
):
    get_owned_project(db, project_id, current_user)
    query = select(Task).where(Task.project_id == project_id)
    if not include_archived:
        query = query.where(Task.archived == False)  # noqa: E712
    return [_public(task) for task in db.exec(query.order_by(Task.order)).all()]


@router.get("/projects/{project_id}/tasks/limit", response_model=TaskLimitPublic)
def read_task_limit(db: SessionDep, project_id: int, current_user: ActiveUserDep):
    get_owned_project(db, project_id, current_user)
    gate = task_gate(db)
    limit = gate.check(project_id)
    return TaskLimitPublic(
        current_count=limit.current_count,
        max_limit=limit.max_limit,
        can_create=limit.can_create,
        has_completed_tasks=limit.has_completed_tasks,
        message=limit.message,
        progress_message=gate.progress_message(limit.current_count),
    )


@router.post(
    "/projects/{project_id}/tasks",
    response_model=TaskPublic,
    status_code=status.HTTP_201_CREATED,
)
def create_task(
    db: SessionDep,
    project_id: int,
    task_data: TaskCreate,
    current_user: ActiveUserDep,
):
    get_owned_project(db, project_id, current_user)
    try:
        task = add_task(db, project_id, task_data.name, task_data.estimated_duration)
    except TaskLimitReached as exc:
        raise _limit_conflict(exc)

    DailyStatsService.record_task_creation(
        db, project_id, task.estimated_duration,
        day=local_day(timezone_name=current_user.timezone),
    )
    return _public(task)


@router.put("/projects/{project_id}/tasks/reorder", response_model=List[TaskPublic])
def reorder_tasks(
    db: SessionDep,
    project_id: int,
    reorder: TaskReorder,
    current_user: ActiveUserDep,
):
    get_owned_project(db, project_id, current_user)
    tasks = {
        task.id: task
        for task in db.exec(select(Task).where(Task.project_id == project_id)).all()
    }
    unknown = [task_id for task_id in reorder.task_ids if task_id not in tasks]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown task ids: {unknown}")

    for idx, task_id in enumerate(reorder.task_ids):
        tasks[task_id].order = idx
        db.add(tasks[task_id])
    db.commit()

    ordered = db.exec(
        select(Task)
        .where(Task.project_id == project_id, Task.archived == False)  # noqa: E712
        .order_by(Task.order)
    ).all()
    return [_public(task) for task in ordered]


@router.post("/projects/{project_id}/tasks/clear-completed", response_model=dict)
def clear_completed_tasks(db: SessionDep, project_id: int, current_user: ActiveUserDep):
    """Permanently delete completed tasks to free up room in the bucket."""
    get_owned_project(db, project_id, current_user)
    completed = db.exec(
        select(Task).where(
            Task.project_id == project_id,
            Task.archived == False,  # noqa: E712
            Task.completed == True,  # noqa: E712
        )
    ).all()
    for task in completed:
        db.delete(task)
    db.commit()
    return {"cleared_count": len(completed)}


@router.put("/tasks/{task_id}", response_model=TaskPublic)
def update_task(
    db: SessionDep,
    task_id: int,
    task_data: TaskUpdate,
    current_user: ActiveUserDep,
):
    task = get_owned_task(db, task_id, current_user)
    for key, value in task_data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(task, key, value)
    db.add(task)
    db.commit()
    db.refresh(task)
    return _public(task)


@router.delete("/tasks/{task_id}", response_model=dict)
def delete_task(db: SessionDep, task_id: int, current_user: ActiveUserDep):
    task = get_owned_task(db, task_id, current_user)
    db.delete(task)
    db.commit()
    return {"message": "Task deleted successfully"}


@router.put("/tasks/{task_id}/complete", response_model=TaskPublic)
def complete_task(
    db: SessionDep,
    task_id: int,
    current_user: ActiveUserDep,
    completion: Optional[TaskComplete] = None,
):
    task = get_owned_task(db, task_id, current_user)
    if task.completed:
        return _public(task)

    if completion and completion.actual_duration is not None:
        task.actual_duration = completion.actual_duration
    task.completed = True
    completed_at = utcnow()
    task.completed_at = completed_at
    db.add(task)
    db.commit()
    db.refresh(task)

    actual = task.actual_duration if task.actual_duration is not None else task.estimated_duration
    DailyStatsService.record_task_completion(
        db, task.project_id, actual, local_day(completed_at, current_user.timezone)
    )
    return _public(task)


@router.put("/tasks/{task_id}/uncomplete", response_model=TaskPublic)
def uncomplete_task(db: SessionDep, task_id: int, current_user: ActiveUserDep):
    task = get_owned_task(db, task_id, current_user)
    if not task.completed:
        return _public(task)

    completed_on = (
        local_day(task.completed_at, current_user.timezone) if task.completed_at
        else local_day(timezone_name=current_user.timezone)
    )
    task.completed = False
    task.completed_at = None
    db.add(task)
    db.commit()
    db.refresh(task)

    actual = task.actual_duration if task.actual_duration is not None else task.estimated_duration
    DailyStatsService.record_task_reopened(db, task.project_id, actual, completed_on)
    return _public(task)


@router.post("/tasks/{task_id}/archive", response_model=TaskPublic)
def archive_task(db: SessionDep, task_id: int, current_user: ActiveUserDep):
    task = get_owned_task(db, task_id, current_user)
    if not task.archived:
        task.archived = True
        task.archived_at = utcnow()
        db.add(task)
        db.commit()
        db.refresh(task)
    return _public(task)


@router.post("/tasks/{task_id}/unarchive", response_model=TaskPublic)
def unarchive_task(db: SessionDep, task_id: int, current_user: ActiveUserDep):
    task = get_owned_task(db, task_id, current_user)
    if task.archived:
        try:
            task = restore_task(db, task)
        except TaskLimitReached as exc:
            raise _limit_conflict(exc)
    return _public(task)
