"""Startup validation and bootstrap helpers."""

from __future__ import annotations

import logging

from bidmarket.core.config import get_config
from bidmarket.core.logging_config import configure_logging
from bidmarket.database import db
from bidmarket.services.cache import get_cache

logger = logging.getLogger(__name__)


def validate_startup_config() -> None:
    """Fail-fast connectivity checks."""
    config = get_config()
    if not db.verify_database_connection():
        raise RuntimeError("Database connectivity check failed.")

    if config.is_production and config.DATABASE_URL.startswith("sqlite"):
        logger.warning(
            "startup.production.sqlite_detected",
            extra={"event": "startup.production.sqlite_detected"},
        )

    logger.info(
        "startup.config.validated",
        extra={
            "event": "startup.config.validated",
            "env": config.ENV,
            "database_url_scheme": db.DATABASE_URL.split("://", 1)[0],
            "strict_project_transitions": config.STRICT_PROJECT_TRANSITIONS,
        },
    )


def bootstrap() -> None:
    """Initialize logging, create tables and start the cache sweeper."""
    configure_logging()
    validate_startup_config()
    db.init_db()
    get_cache().start_sweeper(get_config().CACHE_SWEEP_INTERVAL_SECONDS)
