"""Health endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter

from bidmarket.core.config import get_config
from bidmarket.database.db import verify_database_connection

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict:
    cfg = get_config()
    database_ok = verify_database_connection()
    return {
        "status": "ok" if database_ok else "degraded",
        "service": cfg.APP_NAME,
        "version": cfg.APP_VERSION,
        "database": "ok" if database_ok else "unavailable",
    }
