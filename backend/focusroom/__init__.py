import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from .config import settings
from .db import create_db_and_tables
from .auth.router import router as auth_router
from .play.router import router as play_router
from .play.session import PlaySessionRegistry
from .projects.router import router as projects_router
from .stats.router import router as stats_router
from .tasks.router import router as tasks_router
from .user_settings.router import router as settings_router

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("Application startup...")
    create_db_and_tables()
    app.state.play_sessions = PlaySessionRegistry()
    yield
    await app.state.play_sessions.close()
    logger.info("Application shutdown.")


app = FastAPI(
    title="Focusroom API",
    description="Projects, tasks and Pomodoro play sessions with focus checks and daily stats.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(settings_router)
app.include_router(projects_router)
app.include_router(tasks_router)
app.include_router(stats_router)
app.include_router(play_router)


@app.get("/", tags=["Root"])
async def read_root():
    return {"message": "Welcome to the Focusroom API!"}
