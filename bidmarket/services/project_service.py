"""Project publishing, maintenance and discovery."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel

from bidmarket.core.enums import ProjectStatus, ProjectType, UserRole, VendorStatus
from bidmarket.core.exceptions import NotFoundError
from bidmarket.database.models import Bid, Project, ProjectStatusHistory, VendorProfile, utcnow
from bidmarket.orchestration.lifecycle import apply_project_status
from bidmarket.schemas.common import DeletionResult, PaginationMeta, clamp_pagination
from bidmarket.schemas.projects import (
    ProjectCreateRequest,
    ProjectPage,
    ProjectResponse,
    ProjectSearchCriteria,
    ProjectStatusUpdateRequest,
    ProjectUpdateRequest,
    VendorMatch,
)
from bidmarket.services.base_service import VENDOR_ROLES, BaseService, parse_role, service_boundary, validated_payload
from bidmarket.services.cache import CacheKeys
from bidmarket.services.eligibility import check_eligibility, covers_budget

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 10

DEFAULT_SUB_TYPES = {
    ProjectType.RESIDENTIAL.value: "villa",
    ProjectType.COMMERCIAL.value: "office",
}

IMMUTABLE_PROJECT_FIELDS = {
    "id",
    "_id",
    "client",
    "client_id",
    "metadata",
    "views",
    "version",
    "status_history",
    "created_at",
    "updated_at",
    "last_activity_at",
}


class ProjectService(BaseService):
    """Service for project CRUD, status changes and search."""

    @service_boundary("project.create")
    def create_and_publish_project(self, client_user_id: int, request: ProjectCreateRequest | dict[str, Any]) -> ProjectResponse:
        request = validated_payload(ProjectCreateRequest, request)
        project_type = request.project_type.value

        with self.session_scope() as session:
            client = self.profiles.require_client(session, client_user_id)
            now = utcnow()
            project = Project(
                client_id=client.id,
                title=request.title,
                description=request.description,
                budget_min=request.budget.min,
                budget_max=request.budget.max,
                currency=request.budget.currency or self.config.DEFAULT_CURRENCY,
                budget_flexibility=request.budget.flexibility,
                address=request.location.address,
                city=request.location.city,
                state=request.location.state,
                pincode=request.location.pincode,
                project_type=project_type,
                sub_type=request.sub_type or DEFAULT_SUB_TYPES.get(project_type),
                area_value=request.area,
                area_unit=request.area_unit,
                floors=request.floors,
                requirements=[item.model_dump(mode="json") for item in request.requirements],
                expected_start_date=request.expected_start_date,
                expected_duration=request.expected_duration,
                visibility=request.visibility,
                min_experience=request.min_experience,
                min_rating=request.min_rating,
                status=ProjectStatus.OPEN.value,
                views=0,
                created_at=now,
                updated_at=now,
                last_activity_at=now,
            )
            project.status_history.append(
                ProjectStatusHistory(status=ProjectStatus.OPEN.value, reason="Project published", timestamp=now)
            )
            session.add(project)
            self.commit(session)
            response = ProjectResponse.model_validate(project)

        logger.info(
            "project.published",
            extra={"event": "project.published", "project_id": response.id, "client_id": response.client_id},
        )
        return response

    @service_boundary("project.get")
    def get_project(self, project_id: int, count_view: bool = False) -> ProjectResponse:
        with self.session_scope() as session:
            project = session.get(Project, project_id)
            if project is None:
                raise NotFoundError("Project not found")
            if count_view:
                project.views = (project.views or 0) + 1
                project.last_activity_at = utcnow()
                self.commit(session)
            return ProjectResponse.model_validate(project)

    @service_boundary("project.update")
    def update_project(
        self,
        project_id: int,
        client_user_id: int,
        patch: ProjectUpdateRequest | dict[str, Any],
    ) -> ProjectResponse:
        if isinstance(patch, BaseModel):
            patch = patch.model_dump(exclude_unset=True)
        cleaned = {key: value for key, value in dict(patch).items() if key not in IMMUTABLE_PROJECT_FIELDS}
        update = validated_payload(ProjectUpdateRequest, cleaned)
        fields = update.model_fields_set

        with self.session_scope() as session:
            project = self.load_owned_project(session, project_id, client_user_id)

            for name in ("title", "description", "area_unit", "floors", "visibility", "min_experience", "min_rating"):
                value = getattr(update, name)
                if value is not None:
                    setattr(project, name, value)
            for name in ("sub_type", "expected_start_date", "expected_duration"):
                if name in fields:
                    setattr(project, name, getattr(update, name))
            if update.project_type is not None:
                project.project_type = update.project_type.value
            if update.area is not None:
                project.area_value = update.area
            if update.requirements is not None:
                project.requirements = [item.model_dump(mode="json") for item in update.requirements]
            if update.budget is not None:
                project.budget_min = update.budget.min
                project.budget_max = update.budget.max
                project.budget_flexibility = update.budget.flexibility
                if update.budget.currency:
                    project.currency = update.budget.currency
            if update.location is not None:
                project.address = update.location.address
                project.city = update.location.city
                project.state = update.location.state
                project.pincode = update.location.pincode

            now = utcnow()
            if update.status is not None:
                apply_project_status(
                    project,
                    update.status.value,
                    update.status_reason or "Updated by client",
                    strict=self.config.STRICT_PROJECT_TRANSITIONS,
                    at=now,
                )
            project.last_activity_at = now
            self.commit(session)
            response = ProjectResponse.model_validate(project)

        logger.info(
            "project.updated",
            extra={"event": "project.updated", "project_id": project_id, "fields": ",".join(sorted(fields))},
        )
        return response

    @service_boundary("project.status")
    def update_project_status(
        self,
        project_id: int,
        client_user_id: int,
        status: str,
        reason: str | None = None,
    ) -> ProjectResponse:
        request = validated_payload(ProjectStatusUpdateRequest, {"status": status, "reason": reason})

        with self.session_scope() as session:
            project = self.load_owned_project(session, project_id, client_user_id)
            previous = project.status
            changed = apply_project_status(
                project,
                request.status.value,
                request.reason or "Status updated by client",
                strict=self.config.STRICT_PROJECT_TRANSITIONS,
            )
            if changed:
                self.commit(session)
            response = ProjectResponse.model_validate(project)

        if changed:
            logger.info(
                "project.status_changed",
                extra={
                    "event": "project.status_changed",
                    "project_id": project_id,
                    "from_status": previous,
                    "to_status": response.status,
                },
            )
        return response

    @service_boundary("project.delete")
    def delete_project(self, project_id: int, client_user_id: int) -> DeletionResult:
        """Remove the project and every bid on it in one transaction."""
        with self.session_scope() as session:
            project = self.load_owned_project(session, project_id, client_user_id)
            bid_ids = [row.id for row in session.query(Bid.id).filter(Bid.project_id == project.id)]
            session.query(Bid).filter(Bid.project_id == project.id).delete(synchronize_session=False)
            session.delete(project)
            self.commit(session)

        self.cache.invalidate(*(CacheKeys.bid(bid_id) for bid_id in bid_ids))
        self.cache.invalidate_prefix(CacheKeys.project_bids_prefix(project_id))
        self.cache.invalidate_prefix(CacheKeys.analysis_prefix(project_id))
        logger.info(
            "project.deleted",
            extra={"event": "project.deleted", "project_id": project_id, "deleted_bids": len(bid_ids)},
        )
        return DeletionResult(id=project_id, deleted_bids=len(bid_ids))

    @service_boundary("project.search")
    def search_projects(
        self,
        criteria: ProjectSearchCriteria | dict[str, Any] | None,
        user_id: int,
        role: str,
        page: int | None = 1,
        limit: int | None = None,
    ) -> ProjectPage:
        """Vendors see open public projects; clients see only their own."""
        criteria = validated_payload(ProjectSearchCriteria, criteria or {})
        page, limit = clamp_pagination(page, limit, DEFAULT_SEARCH_LIMIT)
        role = parse_role(role)

        with self.session_scope() as session:
            query = session.query(Project)
            if role in VENDOR_ROLES:
                query = query.filter(Project.status == ProjectStatus.OPEN.value, Project.visibility == "public")
            elif role == UserRole.CLIENT_OWNER.value:
                client = self.profiles.get_client(session, user_id)
                if client is None:
                    return ProjectPage(items=[], pagination=PaginationMeta.build(page=page, limit=limit, total=0))
                query = query.filter(Project.client_id == client.id)
                if criteria.status is not None:
                    query = query.filter(Project.status == criteria.status.value)

            if criteria.project_type is not None:
                query = query.filter(Project.project_type == criteria.project_type.value)
            if criteria.city:
                query = query.filter(Project.city.icontains(criteria.city, autoescape=True))
            if criteria.state:
                query = query.filter(Project.state.icontains(criteria.state, autoescape=True))
            if criteria.budget_min is not None:
                query = query.filter(Project.budget_min <= criteria.budget_min, Project.budget_max >= criteria.budget_min)
            if criteria.budget_max is not None:
                query = query.filter(Project.budget_max >= criteria.budget_max)

            total = query.count()
            rows = (
                query.order_by(Project.created_at.desc(), Project.id.desc())
                .offset((page - 1) * limit)
                .limit(limit)
                .all()
            )
            return ProjectPage(
                items=[ProjectResponse.model_validate(row) for row in rows],
                pagination=PaginationMeta.build(page=page, limit=limit, total=total),
            )

    @service_boundary("project.matching_vendors")
    def find_matching_vendors(self, project_id: int) -> list[VendorMatch]:
        with self.session_scope() as session:
            project = session.get(Project, project_id)
            if project is None:
                raise NotFoundError("Project not found")
            vendors = (
                session.query(VendorProfile)
                .filter(VendorProfile.status == VendorStatus.ACTIVE.value)
                .order_by(VendorProfile.rating_average.desc(), VendorProfile.years_in_business.desc())
                .all()
            )
            return [
                VendorMatch.model_validate(vendor)
                for vendor in vendors
                if check_eligibility(vendor, project).ok and covers_budget(vendor, project)
            ]
