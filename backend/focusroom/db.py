import logging
from typing import Annotated

from fastapi import Depends
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from .config import settings

logger = logging.getLogger(__name__)

DATABASE_URL = settings.database_url

connect_args = {}
engine_kwargs = {}

if DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False
    # every connection to an in-memory database would otherwise get its own copy
    if ":memory:" in DATABASE_URL:
        engine_kwargs["poolclass"] = StaticPool

engine = create_engine(
    DATABASE_URL, echo=settings.database_echo, connect_args=connect_args, **engine_kwargs
)


def get_session():
    with Session(engine) as session:
        yield session


def create_db_and_tables():
    # Import models so they are registered on the metadata
    from . import models  # noqa: F401
    from .users import models as user_models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Database tables ready")


SessionDep = Annotated[Session, Depends(get_session)]
