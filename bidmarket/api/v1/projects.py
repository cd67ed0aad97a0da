"""Project endpoints for API v1."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Header, Query, status

from bidmarket.api.v1._authz import authorize
from bidmarket.api.v1.deps import get_bid_service, get_project_service
from bidmarket.core.enums import ProjectStatus, ProjectType
from bidmarket.schemas.bids import BidPage, BidResponse
from bidmarket.schemas.common import DeletionResult
from bidmarket.schemas.projects import ProjectPage, ProjectResponse, ProjectStatusUpdateRequest, VendorMatch
from bidmarket.services.bid_service import BidService
from bidmarket.services.project_service import ProjectService

router = APIRouter(prefix="/projects", tags=["projects"])


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    payload: dict[str, Any] = Body(...),
    authorization: str | None = Header(default=None, alias="Authorization"),
    projects: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    identity = authorize(authorization, ["projects.create"])
    return projects.create_and_publish_project(identity.user_id, payload)


@router.get("", response_model=ProjectPage)
def search_projects(
    project_type: ProjectType | None = Query(default=None),
    project_status: ProjectStatus | None = Query(default=None, alias="status"),
    city: str | None = Query(default=None, max_length=120),
    state: str | None = Query(default=None, max_length=120),
    budget_min: float | None = Query(default=None, ge=0),
    budget_max: float | None = Query(default=None, ge=0),
    page: int = Query(default=1),
    limit: int | None = Query(default=None),
    authorization: str | None = Header(default=None, alias="Authorization"),
    projects: ProjectService = Depends(get_project_service),
) -> ProjectPage:
    identity = authorize(authorization, ["projects.search"])
    criteria = {
        "project_type": project_type.value if project_type else None,
        "status": project_status.value if project_status else None,
        "city": city,
        "state": state,
        "budget_min": budget_min,
        "budget_max": budget_max,
    }
    return projects.search_projects(
        {key: value for key, value in criteria.items() if value is not None},
        user_id=identity.user_id,
        role=identity.role,
        page=page,
        limit=limit,
    )


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    projects: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    identity = authorize(authorization, ["projects.read"])
    return projects.get_project(project_id, count_view=identity.is_vendor)


@router.patch("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: int,
    payload: dict[str, Any] = Body(...),
    authorization: str | None = Header(default=None, alias="Authorization"),
    projects: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    identity = authorize(authorization, ["projects.manage"])
    return projects.update_project(project_id, identity.user_id, payload)


@router.patch("/{project_id}/status", response_model=ProjectResponse)
def update_project_status(
    project_id: int,
    payload: ProjectStatusUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    projects: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    identity = authorize(authorization, ["projects.manage"])
    return projects.update_project_status(project_id, identity.user_id, payload.status.value, payload.reason)


@router.delete("/{project_id}", response_model=DeletionResult)
def delete_project(
    project_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    projects: ProjectService = Depends(get_project_service),
) -> DeletionResult:
    identity = authorize(authorization, ["projects.manage"])
    return projects.delete_project(project_id, identity.user_id)


@router.get("/{project_id}/vendors", response_model=list[VendorMatch])
def matching_vendors(
    project_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    projects: ProjectService = Depends(get_project_service),
) -> list[VendorMatch]:
    authorize(authorization, ["projects.match_vendors"])
    return projects.find_matching_vendors(project_id)


@router.post("/{project_id}/bids", response_model=BidResponse, status_code=status.HTTP_201_CREATED)
def submit_bid(
    project_id: int,
    payload: dict[str, Any] = Body(...),
    authorization: str | None = Header(default=None, alias="Authorization"),
    bids: BidService = Depends(get_bid_service),
) -> BidResponse:
    identity = authorize(authorization, ["bids.submit"])
    return bids.submit_bid(project_id, identity.user_id, payload)


@router.get("/{project_id}/bids", response_model=BidPage)
def project_bids(
    project_id: int,
    bid_status: str | None = Query(default=None, alias="status"),
    page: int = Query(default=1),
    limit: int | None = Query(default=None),
    authorization: str | None = Header(default=None, alias="Authorization"),
    bids: BidService = Depends(get_bid_service),
) -> BidPage:
    identity = authorize(authorization, ["bids.decide"])
    return bids.get_project_bids(
        project_id,
        status=bid_status,
        page=page,
        limit=limit,
        client_user_id=identity.user_id,
    )
