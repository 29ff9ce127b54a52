from typing import Optional

from sqlmodel import SQLModel

from ..users.schemas import UserCreate


class UserRegister(UserCreate): ...


class Token(SQLModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TokenData(SQLModel):
    user_id: Optional[int] = None
    token_type: str = "access"
