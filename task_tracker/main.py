"""Main FastAPI application for the task tracker API."""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from . import __version__, db
from .api.handlers import register_exception_handlers, unhandled_exception_handler
from .api.routes import router as api_router
from .logging_utils import configure_logging, reset_request_id, set_request_id
from .models.task import now_utc
from .repositories.postgres_repository import PostgresTaskRepository
from .repositories.task_repository import InMemoryTaskRepository, TaskRepository
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info("Starting Task Tracker API...")
    logger.info("CORS allowed origins=%d", len(settings.allowed_origins))

    opened_pool = False
    if app.state.repository_injected:
        logger.info("Using injected %s task storage", app.state.task_repository.backend_name)
    elif settings.database_url:
        logger.info("DATABASE_URL detected, enabling Postgres persistence")
        try:
            await db.init_db(
                settings.database_url,
                min_size=settings.db_pool_min_size,
                max_size=settings.db_pool_max_size,
            )
        except Exception:
            logger.exception("Failed to initialize database connection")
            raise
        opened_pool = True
        app.state.task_repository = PostgresTaskRepository()
    else:
        logger.info("DATABASE_URL not set, using in-memory task storage")

    yield

    logger.info("Shutting down Task Tracker API...")
    if opened_pool:
        await db.close_db()


def create_app(
    repository: Optional[TaskRepository] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the application.

    ``repository`` overrides the storage chosen from settings; the lifespan
    then leaves the database alone.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Task Tracker API",
        description="Create, list, update, complete and delete tasks",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.repository_injected = repository is not None
    app.state.task_repository = repository or InMemoryTaskRepository()

    register_exception_handlers(app)

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request_token = set_request_id(request_id)
        started = time.perf_counter()
        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                response = await unhandled_exception_handler(request, exc)
            logger.info(
                "%s %s -> %s (%.1f ms)",
                request.method,
                request.url.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
        finally:
            reset_request_id(request_token)
        response.headers["X-Request-ID"] = request_id
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> Dict[str, str]:
        """Root endpoint with basic API info."""
        return {
            "message": "Task Tracker API",
            "endpoints": "/api/tasks",
        }

    @app.get("/health")
    @app.get("/api/health")
    async def health_check() -> Dict[str, Any]:
        """Health check for monitoring."""
        return {
            "ok": True,
            "status": "healthy",
            "storage": app.state.task_repository.backend_name,
            "timestamp": now_utc().isoformat(),
        }

    app.include_router(api_router, prefix="/api")
    app.include_router(api_router)
    return app


app = create_app()
