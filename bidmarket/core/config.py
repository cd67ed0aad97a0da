"""Environment-driven settings for the bid marketplace."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlparse

from dotenv import load_dotenv

from bidmarket.core.exceptions import ConfigurationError

load_dotenv()

SUPPORTED_CURRENCIES = {"INR", "USD"}
SUPPORTED_DB_SCHEMES = {"sqlite", "postgresql", "postgresql+psycopg2"}
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    try:
        return default if value is None else int(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer.") from exc


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    try:
        return default if value is None else float(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number.") from exc


@dataclass(frozen=True)
class Config:
    """Runtime configuration with validation."""

    APP_NAME: str
    APP_VERSION: str
    ENV: str
    DEBUG: bool
    DATABASE_URL: str
    CACHE_TTL_SECONDS: float
    CACHE_MAX_ENTRIES: int
    CACHE_SWEEP_INTERVAL_SECONDS: float
    SELECT_BID_MAX_RETRIES: int
    MAX_BATCH_PROJECTS: int
    STRICT_PROJECT_TRANSITIONS: bool
    DEFAULT_CURRENCY: str
    JWT_SECRET: str
    API_PREFIX: str
    LOG_LEVEL: str
    LOG_FILE: str

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"


def _build_config(env: str | None = None) -> Config:
    resolved_env = (env or os.getenv("ENV", "development")).strip().lower()
    production = resolved_env == "production"

    config = Config(
        APP_NAME="BidMarket",
        APP_VERSION=os.getenv("APP_VERSION", "1.0.0"),
        ENV=resolved_env,
        DEBUG=False if production else _env_flag("DEBUG", default=True),
        DATABASE_URL=os.getenv("DATABASE_URL", "sqlite:///./bidmarket.db"),
        CACHE_TTL_SECONDS=_env_float("CACHE_TTL_SECONDS", 300.0),
        CACHE_MAX_ENTRIES=_env_int("CACHE_MAX_ENTRIES", 1000),
        CACHE_SWEEP_INTERVAL_SECONDS=_env_float("CACHE_SWEEP_INTERVAL_SECONDS", 60.0),
        SELECT_BID_MAX_RETRIES=_env_int("SELECT_BID_MAX_RETRIES", 3),
        MAX_BATCH_PROJECTS=_env_int("MAX_BATCH_PROJECTS", 50),
        STRICT_PROJECT_TRANSITIONS=_env_flag("STRICT_PROJECT_TRANSITIONS"),
        DEFAULT_CURRENCY=os.getenv("DEFAULT_CURRENCY", "INR").strip().upper(),
        JWT_SECRET=os.getenv("JWT_SECRET", "change_me_jwt_secret"),
        API_PREFIX=os.getenv("API_PREFIX", "/api/v1").rstrip("/"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        LOG_FILE=os.getenv("LOG_FILE", ""),
    )
    _validate_config(config)
    return config


def _validate_database_url(database_url: str) -> None:
    parsed = urlparse(database_url)
    if parsed.scheme not in SUPPORTED_DB_SCHEMES:
        raise ConfigurationError("DATABASE_URL must use sqlite:// or postgresql:// style URL.")
    if parsed.scheme.startswith("postgresql") and not parsed.hostname:
        raise ConfigurationError("PostgreSQL DATABASE_URL is missing hostname.")


def _validate_config(config: Config) -> None:
    _validate_database_url(config.DATABASE_URL)

    bounds = (
        ("CACHE_TTL_SECONDS", config.CACHE_TTL_SECONDS > 0, "must be > 0"),
        ("CACHE_MAX_ENTRIES", config.CACHE_MAX_ENTRIES >= 1, "must be >= 1"),
        ("CACHE_SWEEP_INTERVAL_SECONDS", config.CACHE_SWEEP_INTERVAL_SECONDS > 0, "must be > 0"),
        ("SELECT_BID_MAX_RETRIES", config.SELECT_BID_MAX_RETRIES >= 0, "must be >= 0"),
        ("MAX_BATCH_PROJECTS", 1 <= config.MAX_BATCH_PROJECTS <= 500, "must be between 1 and 500"),
        ("DEFAULT_CURRENCY", config.DEFAULT_CURRENCY in SUPPORTED_CURRENCIES, "must be one of INR/USD"),
        ("LOG_LEVEL", config.LOG_LEVEL in LOG_LEVELS, "must be one of DEBUG/INFO/WARNING/ERROR/CRITICAL"),
    )
    for name, ok, rule in bounds:
        if not ok:
            raise ConfigurationError(f"{name} {rule}.")

    if config.is_production and "change_me" in config.JWT_SECRET:
        raise ConfigurationError("Production JWT_SECRET uses the placeholder value.")


@lru_cache(maxsize=8)
def get_config(env: str | None = None) -> Config:
    """Get validated configuration for the requested environment."""
    return _build_config(env)
