from fastapi import APIRouter

from ..auth.deps import ActiveUserDep
from ..db import SessionDep
from .schemas import UserSettingsPublic, UserSettingsUpdate
from .service import apply_update, get_or_create_settings

router = APIRouter(prefix="/settings", tags=["Settings"])


def _public(user_settings) -> UserSettingsPublic:
    return UserSettingsPublic.model_validate(user_settings, from_attributes=True)


@router.get("/", response_model=UserSettingsPublic)
def read_settings(db: SessionDep, current_user: ActiveUserDep):
    return _public(get_or_create_settings(db, current_user.id))


@router.put("/", response_model=UserSettingsPublic)
def update_settings(
    db: SessionDep,
    update: UserSettingsUpdate,
    current_user: ActiveUserDep,
):
    """Update timer settings.

    Mounted play sessions keep their snapshot until they are explicitly
    reconfigured.
    """
    user_settings = get_or_create_settings(db, current_user.id)
    return _public(apply_update(db, user_settings, update))
