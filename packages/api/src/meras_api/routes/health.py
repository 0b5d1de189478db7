# This project was developed with assistance from AI tools.
"""Liveness and readiness probes."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from meras_db import DatabaseService, get_db_service

router = APIRouter()


@router.get("/")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/ready")
async def ready(db_service: DatabaseService = Depends(get_db_service)):
    """Report 503 until the database answers."""
    if await db_service.health_check():
        return {"status": "ok", "database": "ok"}
    return JSONResponse(status_code=503, content={"status": "degraded", "database": "unavailable"})
