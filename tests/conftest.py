from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta

import pytest

import bidmarket.database.models  # noqa: F401
from bidmarket.core.config import get_config
from bidmarket.database.db import Base, build_engine, build_session_factory
from bidmarket.database.models import ClientProfile, VendorProfile
from bidmarket.services.bid_service import BidService
from bidmarket.services.cache import TTLCache
from bidmarket.services.project_service import ProjectService

FUTURE_START = date.today() + timedelta(days=30)


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'bidmarket_test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def cache():
    cache = TTLCache(ttl_seconds=60, max_entries=500)
    yield cache
    cache.stop_sweeper()


@pytest.fixture
def config():
    return replace(get_config(), SELECT_BID_MAX_RETRIES=3, STRICT_PROJECT_TRANSITIONS=False, DEBUG=True)


@pytest.fixture
def bid_service(session_factory, cache, config):
    return BidService(session_factory=session_factory, cache=cache, config=config)


@pytest.fixture
def project_service(session_factory, cache, config):
    return ProjectService(session_factory=session_factory, cache=cache, config=config)


@pytest.fixture
def make_client(session_factory):
    def _make(user_id: int = 100, name: str = "Asha Client") -> int:
        with session_factory() as session:
            client = ClientProfile(user_id=user_id, name=name)
            session.add(client)
            session.commit()
            return client.id

    return _make


@pytest.fixture
def make_vendor(session_factory):
    def _make(user_id: int = 200, **overrides) -> int:
        values = {
            "company_name": f"Vendor {user_id}",
            "city": "Pune",
            "state": "Maharashtra",
            "status": "active",
            "services": ["residential", "commercial"],
            "years_in_business": 10,
            "rating_average": 4.5,
        }
        values.update(overrides)
        with session_factory() as session:
            vendor = VendorProfile(user_id=user_id, **values)
            session.add(vendor)
            session.commit()
            return vendor.id

    return _make


@pytest.fixture
def project_payload():
    def _payload(**overrides) -> dict:
        payload = {
            "title": "Villa construction in Pune",
            "description": "Two storey villa with a landscaped garden and covered parking.",
            "budget": {"min": 90000, "max": 150000},
            "location": {"address": "12 MG Road, Pune", "state": "Maharashtra", "pincode": "411001"},
            "project_type": "residential",
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def bid_payload():
    def _payload(cost: float = 100000, **overrides) -> dict:
        payload = {
            "proposed_cost": cost,
            "start_date": FUTURE_START.isoformat(),
            "duration": 6,
            "team_size": 8,
            "proposal": "We will deliver the villa on schedule with certified engineers.",
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def open_project(make_client, project_service, project_payload):
    """A published project owned by client user 100."""
    make_client(user_id=100)
    return project_service.create_and_publish_project(100, project_payload())
