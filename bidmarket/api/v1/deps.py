"""Service providers injected into route handlers."""

from __future__ import annotations

from functools import lru_cache

from bidmarket.services.bid_service import BidService
from bidmarket.services.project_service import ProjectService


@lru_cache(maxsize=1)
def get_bid_service() -> BidService:
    return BidService()


@lru_cache(maxsize=1)
def get_project_service() -> ProjectService:
    return ProjectService()
