from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ..auth.deps import ActiveUserDep
from ..config import settings
from ..db import SessionDep, engine
from ..focus import DoubleOpenPrompt, InvalidConfiguration, StaleResponse
from ..models import Task, UserSettings
from ..projects.deps import get_owned_project
from ..user_settings.service import get_or_create_settings, to_focus_config
from .recorder import DatabaseRecorder
from .schedule import AlertMode, AlertSchedule
from .schemas import (
    AlertOpen,
    AlertPromptPublic,
    AlertRespond,
    AlertTasksUpdate,
    CurrentTaskUpdate,
    ModeChange,
    PlayStatePublic,
    TimerStatePublic,
)
from .session import PlaySession, PlaySessionRegistry

router = APIRouter(prefix="/play", tags=["Play"])


def get_registry(request: Request) -> PlaySessionRegistry:
    return request.app.state.play_sessions


RegistryDep = Annotated[PlaySessionRegistry, Depends(get_registry)]


def get_play_session(play_id: str, registry: RegistryDep, current_user: ActiveUserDep) -> PlaySession:
    play = registry.get(play_id)
    if play is None or play.user_id != current_user.id:
        raise HTTPException(status_code=404, detail="Play session not found")
    return play


PlayDep = Annotated[PlaySession, Depends(get_play_session)]


def _schedule(user_settings: UserSettings) -> AlertSchedule:
    return AlertSchedule(
        frequency_seconds=user_settings.alert_frequency * 60,
        repeat=user_settings.alert_repeat,
        enabled=user_settings.alerts_enabled,
        mode=AlertMode(user_settings.alert_mode),
    )


def _state(play: PlaySession) -> PlayStatePublic:
    session = play.timer.session
    prompt = play.alerts.prompt
    return PlayStatePublic(
        id=play.id,
        project_id=play.project_id,
        current_task_id=play.current_task_id,
        current_task_name=play.current_task_name,
        alerts_scheduled=bool(play.schedule and play.schedule.enabled),
        alert_mode=play.schedule.mode if play.schedule else None,
        alert_task_ids=sorted(play.schedule.task_ids) if play.schedule else [],
        stalled=play.stalled,
        timer_error=play.timer_error,
        timer=TimerStatePublic(
            mode=session.mode,
            duration_seconds=session.duration_seconds,
            remaining_seconds=session.remaining_seconds,
            remaining_display=session.remaining_display,
            progress_percent=session.progress_percent,
            is_running=session.is_running,
            completed_focus_count=session.completed_focus_count,
        ),
        alert=AlertPromptPublic(
            task_name=prompt.task_name,
            countdown=prompt.countdown,
            is_open=prompt.is_open,
            default_response=prompt.default_response,
            response=prompt.response,
            automatic=prompt.automatic,
        ) if prompt else None,
    )


def _invalid(exc: InvalidConfiguration) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))


@router.post("/projects/{project_id}", response_model=PlayStatePublic, status_code=201)
async def mount_play_session(
    db: SessionDep,
    project_id: int,
    registry: RegistryDep,
    current_user: ActiveUserDep,
):
    """Open the play area for a project with the user's current settings.

    Replaces any session the user already has mounted for the project.
    """
    get_owned_project(db, project_id, current_user)
    user_settings = get_or_create_settings(db, current_user.id)
    try:
        play = PlaySession(
            project_id=project_id,
            user_id=current_user.id,
            config=to_focus_config(user_settings),
            recorder=DatabaseRecorder(engine, current_user.timezone),
            schedule=_schedule(user_settings),
            tick_interval=settings.tick_interval_seconds,
            alert_countdown=settings.alert_countdown_seconds,
        )
    except InvalidConfiguration as exc:
        raise _invalid(exc)
    await registry.unmount_project(project_id, user_id=current_user.id)
    registry.add(play)
    return _state(play)


@router.get("/{play_id}", response_model=PlayStatePublic)
async def read_play_session(play: PlayDep):
    return _state(play)


@router.delete("/{play_id}", response_model=dict)
async def unmount_play_session(play: PlayDep, registry: RegistryDep):
    await registry.unmount(play.id)
    return {"message": "Play session closed"}


@router.post("/{play_id}/start", response_model=PlayStatePublic)
async def start_timer(play: PlayDep):
    play.timer.start()
    return _state(play)


@router.post("/{play_id}/pause", response_model=PlayStatePublic)
async def pause_timer(play: PlayDep):
    play.timer.pause()
    return _state(play)


@router.post("/{play_id}/reset", response_model=PlayStatePublic)
async def reset_timer(play: PlayDep):
    play.reset()
    return _state(play)


@router.put("/{play_id}/mode", response_model=PlayStatePublic)
async def change_mode(play: PlayDep, change: ModeChange):
    try:
        play.timer.set_mode(change.mode)
    except InvalidConfiguration as exc:
        raise _invalid(exc)
    return _state(play)


@router.put("/{play_id}/task", response_model=PlayStatePublic)
async def set_current_task(db: SessionDep, play: PlayDep, update: CurrentTaskUpdate):
    task_name: Optional[str] = None
    if update.task_id is not None:
        task = db.get(Task, update.task_id)
        if not task or task.project_id != play.project_id or task.archived:
            raise HTTPException(status_code=404, detail="Task not found")
        task_name = task.name
    play.set_current_task(update.task_id, task_name)
    return _state(play)


@router.post("/{play_id}/reconfigure", response_model=PlayStatePublic)
async def reconfigure_play_session(db: SessionDep, play: PlayDep):
    """Pick up the user's saved settings."""
    user_settings = get_or_create_settings(db, play.user_id)
    try:
        play.reconfigure(to_focus_config(user_settings), _schedule(user_settings))
    except InvalidConfiguration as exc:
        raise _invalid(exc)
    return _state(play)


@router.post("/{play_id}/alert", response_model=PlayStatePublic)
async def open_alert(play: PlayDep, alert: Optional[AlertOpen] = None):
    try:
        play.open_alert(alert.task_name if alert else None)
    except DoubleOpenPrompt as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return _state(play)


@router.post("/{play_id}/alert/respond", response_model=PlayStatePublic)
async def respond_to_alert(play: PlayDep, answer: AlertRespond):
    try:
        play.alerts.respond(answer.response)
    except StaleResponse as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    await play.flush()
    return _state(play)


@router.put("/{play_id}/alert-tasks", response_model=PlayStatePublic)
async def set_alert_tasks(db: SessionDep, play: PlayDep, update: AlertTasksUpdate):
    """Pick the tasks that get focus checks in selective mode."""
    for task_id in update.task_ids:
        task = db.get(Task, task_id)
        if not task or task.project_id != play.project_id or task.archived:
            raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    play.set_alert_tasks(update.task_ids)
    return _state(play)
