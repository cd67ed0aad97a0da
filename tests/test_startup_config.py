from __future__ import annotations

import json
import logging

import pytest

import bidmarket.core.config as config_module
import bidmarket.core.startup as startup_module
from bidmarket.core.exceptions import ConfigurationError
from bidmarket.core.logging_config import JsonFormatter


def test_config_defaults(monkeypatch):
    for name in ("ENV", "DEBUG", "MAX_BATCH_PROJECTS", "STRICT_PROJECT_TRANSITIONS", "DEFAULT_CURRENCY"):
        monkeypatch.delenv(name, raising=False)

    config = config_module._build_config()

    assert config.ENV == "development"
    assert config.DEBUG is True
    assert config.MAX_BATCH_PROJECTS == 50
    assert config.STRICT_PROJECT_TRANSITIONS is False
    assert config.DEFAULT_CURRENCY == "INR"


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("DATABASE_URL", "mysql://user:pw@localhost/bids"),
        ("DATABASE_URL", "postgresql:///nohost"),
        ("CACHE_TTL_SECONDS", "0"),
        ("MAX_BATCH_PROJECTS", "0"),
        ("MAX_BATCH_PROJECTS", "many"),
        ("SELECT_BID_MAX_RETRIES", "-1"),
        ("DEFAULT_CURRENCY", "eur"),
        ("LOG_LEVEL", "chatty"),
    ],
)
def test_invalid_settings_are_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError):
        config_module._build_config()


def test_production_requires_real_jwt_secret(monkeypatch):
    monkeypatch.delenv("JWT_SECRET", raising=False)
    with pytest.raises(ConfigurationError, match="JWT_SECRET"):
        config_module._build_config("production")

    monkeypatch.setenv("JWT_SECRET", "a-real-secret")
    config = config_module._build_config("production")
    assert config.is_production
    assert config.DEBUG is False


def test_json_formatter_includes_extra_fields():
    record = logging.getLogger("bidmarket.test").makeRecord(
        "bidmarket.test",
        logging.INFO,
        __file__,
        1,
        "bid.submitted",
        (),
        None,
        extra={"event": "bid.submitted", "bid_id": 7},
    )

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "bid.submitted"
    assert payload["level"] == "INFO"
    assert payload["event"] == "bid.submitted"
    assert payload["bid_id"] == 7


def test_startup_raises_when_database_unreachable(monkeypatch):
    monkeypatch.setattr(startup_module.db, "verify_database_connection", lambda: False)

    with pytest.raises(RuntimeError, match="Database connectivity check failed"):
        startup_module.validate_startup_config()


def test_startup_passes_when_database_reachable(monkeypatch):
    monkeypatch.setattr(startup_module.db, "verify_database_connection", lambda: True)

    startup_module.validate_startup_config()
