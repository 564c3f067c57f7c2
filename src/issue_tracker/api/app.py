"""
issue_tracker.api.app

FastAPI app factory for the issue tracker service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Initialize and dispose shared infrastructure (DB engine/session factory).
- Refuse to start without a token signing secret.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from issue_tracker import __version__
from issue_tracker.api.errors import install_error_handlers
from issue_tracker.api.routers.auth import router as auth_router
from issue_tracker.api.routers.health import router as health_router
from issue_tracker.api.routers.issues import router as issues_router
from issue_tracker.api.routers.projects import router as projects_router
from issue_tracker.api.routers.users import router as users_router
from issue_tracker.auth.errors import SigningSecretMissing
from issue_tracker.db.init_db import init_db
from issue_tracker.db.session import create_engine, create_sessionmaker
from issue_tracker.observability.logging import configure_logging, get_logger
from issue_tracker.observability.middleware import RequestContextMiddleware
from issue_tracker.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    if not settings.jwt_secret:
        log.error("jwt_secret_missing", env=settings.env)
        raise SigningSecretMissing("TRACKER_JWT_SECRET must be set")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        # Routers obtain sessions via dependencies (see `issue_tracker.api.deps`).
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Issue Tracker",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    install_error_handlers(app)
    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(projects_router)
    app.include_router(issues_router)

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; authorization lives in `auth`, data access in `db`.
