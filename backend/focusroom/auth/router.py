from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import select

from ..db import SessionDep
from ..models import UserSettings
from ..users.models import User
from ..users.schemas import UserPublic
from .schemas import Token, UserRegister
from .deps import (
    ActiveUserDep,
    authenticate_user,
    create_access_token,
    create_refresh_token,
    credentials_exception,
    decode_token,
    get_user,
    oauth2_scheme,
)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED
)
def register(user: UserRegister, session: SessionDep):
    # check existing
    existing = session.exec(select(User).where(User.email == user.email)).first()
    if existing:
        raise HTTPException(status_code=400, detail="Email already registered")

    db_user = User(**user.model_dump())
    session.add(db_user)
    session.commit()
    session.refresh(db_user)

    # Every user starts with the default timer settings
    session.add(UserSettings(user_id=db_user.id))
    session.commit()

    return db_user


@router.post("/token", response_model=Token)
def login_for_access_token(
    session: SessionDep,
    form_data: OAuth2PasswordRequestForm = Depends(),
):
    user = authenticate_user(session, form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return Token(
        access_token=create_access_token(data={"user_id": str(user.id)}),
        refresh_token=create_refresh_token(data={"user_id": str(user.id)}),
    )


@router.post("/token/refresh", response_model=Token)
def refresh_token_endpoint(
    session: SessionDep,
    refresh_token: str = Depends(oauth2_scheme),
):
    """Exchange a valid refresh token for a new access & refresh token pair."""
    token_data = decode_token(refresh_token, "refresh")

    user = get_user(session, token_data.user_id)
    if user is None:
        raise credentials_exception()

    return Token(
        access_token=create_access_token(data={"user_id": str(user.id)}),
        refresh_token=create_refresh_token(data={"user_id": str(user.id)}),
    )


@router.get("/me", response_model=UserPublic)
def read_current_user(current_user: ActiveUserDep):
    return current_user
