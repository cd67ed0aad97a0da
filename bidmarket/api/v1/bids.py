"""Bid endpoints for API v1."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Header, Query

from bidmarket.api.v1._authz import authorize
from bidmarket.api.v1.deps import get_bid_service
from bidmarket.schemas.analysis import CompetitiveAnalysis
from bidmarket.schemas.bids import (
    BatchBidsRequest,
    BatchBidsResponse,
    BidActionResult,
    BidDecisionRequest,
    BidPage,
    BidResponse,
    BidStatusChangeRequest,
    NegotiationResult,
    SelectBidResult,
)
from bidmarket.schemas.common import DeletionResult
from bidmarket.services.bid_service import BidService

router = APIRouter(prefix="/bids", tags=["bids"])


@router.post("/batch", response_model=BatchBidsResponse)
def batch_bids(
    payload: BatchBidsRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    bids: BidService = Depends(get_bid_service),
) -> BatchBidsResponse:
    identity = authorize(authorization, ["bids.batch_read"])
    return bids.get_multiple_project_bids(payload.project_ids, identity.user_id, identity.role, status=payload.status)


@router.get("/mine", response_model=BidPage)
def my_bids(
    bid_status: str | None = Query(default=None, alias="status"),
    page: int = Query(default=1),
    limit: int | None = Query(default=None),
    authorization: str | None = Header(default=None, alias="Authorization"),
    bids: BidService = Depends(get_bid_service),
) -> BidPage:
    identity = authorize(authorization, ["bids.manage_own"])
    return bids.get_vendor_bids(identity.user_id, status=bid_status, page=page, limit=limit)


@router.get("/{bid_id}", response_model=BidResponse)
def get_bid(
    bid_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    bids: BidService = Depends(get_bid_service),
) -> BidResponse:
    identity = authorize(authorization, ["bids.read"])
    return bids.get_bid_details(bid_id, identity.user_id, identity.role)


@router.patch("/{bid_id}", response_model=BidResponse)
def update_bid(
    bid_id: int,
    payload: dict[str, Any] = Body(...),
    authorization: str | None = Header(default=None, alias="Authorization"),
    bids: BidService = Depends(get_bid_service),
) -> BidResponse:
    identity = authorize(authorization, ["bids.manage_own"])
    return bids.update_bid(bid_id, identity.user_id, payload)


@router.delete("/{bid_id}", response_model=DeletionResult)
def delete_bid(
    bid_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    bids: BidService = Depends(get_bid_service),
) -> DeletionResult:
    identity = authorize(authorization, ["bids.manage_own"])
    return bids.delete_bid(bid_id, identity.user_id)


@router.post("/{bid_id}/select", response_model=SelectBidResult)
def select_bid(
    bid_id: int,
    payload: BidDecisionRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    bids: BidService = Depends(get_bid_service),
) -> SelectBidResult:
    identity = authorize(authorization, ["bids.decide"])
    return bids.select_bid(bid_id, payload.project_id, identity.user_id)


@router.post("/{bid_id}/reject", response_model=BidActionResult)
def reject_bid(
    bid_id: int,
    payload: BidDecisionRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    bids: BidService = Depends(get_bid_service),
) -> BidActionResult:
    identity = authorize(authorization, ["bids.decide"])
    return bids.reject_bid(bid_id, payload.project_id, identity.user_id, reason=payload.reason)


@router.post("/{bid_id}/review", response_model=BidActionResult)
def review_bid(
    bid_id: int,
    payload: BidDecisionRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    bids: BidService = Depends(get_bid_service),
) -> BidActionResult:
    identity = authorize(authorization, ["bids.decide"])
    return bids.review_bid(bid_id, payload.project_id, identity.user_id, reason=payload.reason)


@router.post("/{bid_id}/withdraw", response_model=BidActionResult)
def withdraw_bid(
    bid_id: int,
    payload: BidStatusChangeRequest | None = None,
    authorization: str | None = Header(default=None, alias="Authorization"),
    bids: BidService = Depends(get_bid_service),
) -> BidActionResult:
    identity = authorize(authorization, ["bids.manage_own"])
    return bids.withdraw_bid(bid_id, identity.user_id, reason=payload.reason if payload else None)


@router.post("/{bid_id}/resubmit", response_model=BidActionResult)
def resubmit_bid(
    bid_id: int,
    payload: BidStatusChangeRequest | None = None,
    authorization: str | None = Header(default=None, alias="Authorization"),
    bids: BidService = Depends(get_bid_service),
) -> BidActionResult:
    identity = authorize(authorization, ["bids.manage_own"])
    return bids.resubmit_bid(bid_id, identity.user_id, reason=payload.reason if payload else None)


@router.post("/{bid_id}/negotiations", response_model=NegotiationResult)
def negotiate_bid(
    bid_id: int,
    payload: dict[str, Any] = Body(...),
    authorization: str | None = Header(default=None, alias="Authorization"),
    bids: BidService = Depends(get_bid_service),
) -> NegotiationResult:
    identity = authorize(authorization, ["bids.negotiate"])
    return bids.negotiate_bid(bid_id, payload, identity.initiator, actor_user_id=identity.user_id)


@router.get("/{bid_id}/analysis", response_model=CompetitiveAnalysis)
def competitive_analysis(
    bid_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    bids: BidService = Depends(get_bid_service),
) -> CompetitiveAnalysis:
    identity = authorize(authorization, ["bids.analysis"])
    # Only parties to the bid may see how it compares.
    bids.get_bid_details(bid_id, identity.user_id, identity.role)
    return bids.get_competitive_analysis(bid_id)
