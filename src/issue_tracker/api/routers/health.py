"""
issue_tracker.api.routers.health

Liveness and readiness probes.

`/readyz` fails (500) when the database cannot be reached; it does not need a
bearer token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from issue_tracker import __version__
from issue_tracker.api.deps import db_session, settings_dep
from issue_tracker.settings import Settings

router = APIRouter()


@router.get("/healthz")
async def healthz(settings: Settings = Depends(settings_dep)) -> dict[str, str]:
    return {"status": "ok", "service": settings.service_name, "version": __version__}


@router.get("/readyz")
async def readyz(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> dict[str, str]:
    await session.execute(text("SELECT 1"))
    return {"status": "ready", "env": settings.env}
