"""ASGI application entrypoint."""

from __future__ import annotations

from fastapi import FastAPI

from bidmarket.api.v1 import get_api_router
from bidmarket.api.v1._authz import marketplace_error_handler
from bidmarket.core.config import get_config
from bidmarket.core.exceptions import MarketplaceError
from bidmarket.core.startup import bootstrap


def create_app(run_bootstrap: bool = True) -> FastAPI:
    """Create the FastAPI application."""
    cfg = get_config()
    if run_bootstrap:
        bootstrap()

    app = FastAPI(title=cfg.APP_NAME, version=cfg.APP_VERSION)
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
    app.include_router(get_api_router())

    @app.get("/")
    def root() -> dict:
        return {"service": cfg.APP_NAME, "version": cfg.APP_VERSION, "api_prefix": cfg.API_PREFIX}

    return app
