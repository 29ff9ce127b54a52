import logging
from fastapi import APIRouter, Request
from typing import List
from sqlmodel import select

from ..db import SessionDep
from ..auth.deps import ActiveUserDep
from ..models import Project
from ..clock import utcnow
from .deps import get_owned_project
from .schemas import ProjectCreate, ProjectPublic, ProjectUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["Projects"])


def _public(project: Project) -> ProjectPublic:
    active = [t for t in project.tasks if not t.archived]
    return ProjectPublic(
        id=project.id,
        name=project.name,
        description=project.description,
        planned_hours=project.planned_hours,
        task_count=len(active),
        completed_task_count=sum(1 for t in active if t.completed),
        created_at=project.created_at,
        updated_at=project.updated_at,
    )


@router.post("/", response_model=ProjectPublic, status_code=201)
def create_project(
    db: SessionDep,
    project_data: ProjectCreate,
    current_user: ActiveUserDep,
):
    project = Project(user_id=current_user.id, **project_data.model_dump())
    db.add(project)
    db.commit()
    db.refresh(project)
    return _public(project)


@router.get("/", response_model=List[ProjectPublic])
def read_projects(db: SessionDep, current_user: ActiveUserDep):
    projects = db.exec(
        select(Project)
        .where(Project.user_id == current_user.id)
        .order_by(Project.created_at)
    ).all()
    return [_public(project) for project in projects]


@router.get("/{project_id}", response_model=ProjectPublic)
def read_project(db: SessionDep, project_id: int, current_user: ActiveUserDep):
    return _public(get_owned_project(db, project_id, current_user))


@router.put("/{project_id}", response_model=ProjectPublic)
def update_project(
    db: SessionDep,
    project_id: int,
    project_update: ProjectUpdate,
    current_user: ActiveUserDep,
):
    project = get_owned_project(db, project_id, current_user)
    for key, value in project_update.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(project, key, value)
    project.updated_at = utcnow()
    db.add(project)
    db.commit()
    db.refresh(project)
    return _public(project)


@router.delete("/{project_id}", response_model=dict)
async def delete_project(
    request: Request,
    db: SessionDep,
    project_id: int,
    current_user: ActiveUserDep,
):
    """Delete a project together with its tasks, sessions and daily stats."""
    project = get_owned_project(db, project_id, current_user)

    registry = request.app.state.play_sessions
    unmounted = await registry.unmount_project(project_id)

    db.delete(project)
    db.commit()
    logger.info("Deleted project %s (%d play sessions closed)", project_id, unmounted)
    return {"message": "Project deleted successfully"}
