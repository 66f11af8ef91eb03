"""
Application Entry Point

Usage:
    uvicorn edugen.main:app --app-dir backend
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from edugen.config import settings, yaml_config
from edugen.db.redis import close_redis_pool
from edugen.middleware import setup_error_handling
from edugen.routers import exercises_router, health_router

logger = logging.getLogger(__name__)

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str | None = None) -> None:
    """
    Configure the root logger.

    Level comes from the argument, else DEBUG when settings.DEBUG is set,
    else ``logging.level`` in config/default.yaml.
    """
    logging_config = yaml_config.get("logging", {})
    if level is None:
        level = "DEBUG" if settings.DEBUG else logging_config.get("level", "INFO")

    logging.basicConfig(
        level=level,
        format=logging_config.get("format", DEFAULT_LOG_FORMAT),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{settings.APP_NAME} starting ({settings.ENVIRONMENT})")
    yield
    await close_redis_pool()


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    setup_logging()

    application = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    setup_error_handling(application, debug=settings.DEBUG)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Exercises-Count", "X-Model-Used", "X-Cached"],
    )

    application.include_router(health_router.router)
    application.include_router(exercises_router.router)
    return application


app = create_app()
