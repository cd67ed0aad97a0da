"""Common schema module."""

from __future__ import annotations

import math
from datetime import datetime

from pydantic import BaseModel, ConfigDict

MAX_PAGE_LIMIT = 100


def clamp_pagination(page: int | None, limit: int | None, default_limit: int) -> tuple[int, int]:
    """Clamp to ``page >= 1`` and ``1 <= limit <= 100``."""
    resolved_page = max(1, int(page or 1))
    resolved_limit = default_limit if limit is None else int(limit)
    resolved_limit = max(1, min(resolved_limit, MAX_PAGE_LIMIT))
    return resolved_page, resolved_limit


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if total else 0)


class StatusHistoryEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    status: str
    reason: str | None = None
    timestamp: datetime


class ErrorEnvelope(BaseModel):
    status: str = "error"
    error_code: str
    detail: str
    errors: list[dict] | None = None


class DeletionResult(BaseModel):
    success: bool = True
    id: int
    deleted_bids: int = 0
