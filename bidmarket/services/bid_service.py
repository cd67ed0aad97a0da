"""Bid lifecycle service: submission, review, selection and reads.

Every operation opens its own session, runs its writes as one transaction and
returns pydantic models built before the session closes. Mutations declare the
cache keys they affect through ``CacheKeys``.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from bidmarket.core.enums import (
    BIDDABLE_PROJECT_STATUSES,
    COMPETING_BID_STATUSES,
    BidStatus,
    Initiator,
    NegotiationStatus,
    ProjectStatus,
    UserRole,
)
from bidmarket.core.exceptions import (
    ConflictError,
    EligibilityError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from bidmarket.database.models import Bid, BidNegotiation, BidStatusHistory, Project, utcnow
from bidmarket.orchestration.lifecycle import apply_bid_status, apply_project_status
from bidmarket.schemas.analysis import CompetitiveAnalysis
from bidmarket.schemas.bids import (
    BatchBidsResponse,
    BidActionResult,
    BidPage,
    BidResponse,
    BidSubmitRequest,
    BidSummary,
    BidUpdateRequest,
    Milestone,
    NegotiationResult,
    SelectBidResult,
    check_milestone_total,
)
from bidmarket.schemas.common import DeletionResult, PaginationMeta, clamp_pagination
from bidmarket.schemas.negotiations import NegotiationResponse, negotiation_adapter
from bidmarket.schemas.projects import ProjectResponse
from bidmarket.services.base_service import VENDOR_ROLES, BaseService, parse_role, service_boundary, validated_payload
from bidmarket.services.bid_pricing import (
    DEFAULT_APPROACH,
    DEFAULT_UNIQUE_VALUE,
    build_cost_breakdown,
    build_milestones,
    price_bid,
)
from bidmarket.services.cache import CacheKeys
from bidmarket.services.competitive_analysis import (
    BidSnapshot,
    PreviousWorkScorer,
    TeamScorer,
    analyze,
    constant_previous_work_score,
    constant_team_score,
)
from bidmarket.services.eligibility import check_eligibility
from bidmarket.utils.validators import sanitize_payload, sanitize_text

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_BIDS_LIMIT = 20
DEFAULT_VENDOR_BIDS_LIMIT = 10

# Keys a caller may send but never change through update_bid.
IMMUTABLE_BID_FIELDS = {
    "id",
    "_id",
    "project",
    "project_id",
    "vendor",
    "vendor_id",
    "status",
    "status_history",
    "metadata",
    "negotiations",
    "created_at",
    "updated_at",
    "submitted_at",
    "last_updated",
    "client_viewed",
    "client_viewed_at",
    "competitiveness_score",
}

DEFAULT_REVIEW_REASONS = {
    BidStatus.PENDING.value: "Client started reviewing the bid",
    BidStatus.REJECTED.value: "Bid reconsidered by client",
    BidStatus.ACCEPTED.value: "Bid selection reverted by client",
}


def _normalize_status(status: str | None) -> str | None:
    if status in (None, ""):
        return None
    try:
        return BidStatus(str(status).upper()).value
    except ValueError as exc:
        raise ValidationError(f"Unknown bid status: {status}") from exc


def _assert_milestones(milestones: list[dict[str, Any]]) -> None:
    try:
        check_milestone_total([Milestone.model_validate(item) for item in milestones])
    except ValueError as exc:
        raise ValidationError(str(exc), details=[{"field": "milestones", "message": str(exc)}]) from exc


def _labor_quantity(cost_breakdown: list[dict[str, Any]]) -> int | None:
    for item in cost_breakdown or []:
        if item.get("category") == "labor":
            return item.get("quantity")
    return None


class BidService(BaseService):
    """Service for the bid lifecycle and bid queries."""

    def __init__(
        self,
        *args: Any,
        team_scorer: TeamScorer = constant_team_score,
        previous_work_scorer: PreviousWorkScorer = constant_previous_work_score,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.team_scorer = team_scorer
        self.previous_work_scorer = previous_work_scorer

    # -- helpers -----------------------------------------------------------

    def _load_bid(self, session: Session, bid_id: int) -> Bid:
        bid = session.get(Bid, bid_id)
        if bid is None:
            raise NotFoundError("Bid not found")
        return bid

    def _load_vendor_bid(self, session: Session, bid_id: int, vendor_user_id: int) -> Bid:
        vendor = self.profiles.require_vendor(session, vendor_user_id)
        bid = self._load_bid(session, bid_id)
        if bid.vendor_id != vendor.id:
            raise ForbiddenError("Not authorized to access this bid")
        return bid

    def _load_project_bid(self, session: Session, bid_id: int, project_id: int, client_user_id: int) -> tuple[Project, Bid]:
        project = self.load_owned_project(session, project_id, client_user_id)
        bid = self._load_bid(session, bid_id)
        if bid.project_id != project.id:
            raise NotFoundError("Bid not found for this project")
        return project, bid

    def _cached_bid(self, session: Session, bid_id: int) -> BidResponse:
        return self.cache.get_or_set(
            CacheKeys.bid(bid_id),
            lambda: BidResponse.model_validate(self._load_bid(session, bid_id)),
        )

    def _invalidate(self, project_id: int, *bid_ids: int) -> None:
        self.cache.invalidate(*(CacheKeys.bid(bid_id) for bid_id in bid_ids))
        self.cache.invalidate_prefix(CacheKeys.project_bids_prefix(project_id))
        self.cache.invalidate_prefix(CacheKeys.analysis_prefix(project_id))

    def _page(self, query, page: int, limit: int) -> BidPage:
        total = query.count()
        rows = (
            query.order_by(Bid.submitted_at.desc(), Bid.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return BidPage(
            items=[BidSummary.model_validate(row) for row in rows],
            pagination=PaginationMeta.build(page=page, limit=limit, total=total),
        )

    # -- mutations ---------------------------------------------------------

    @service_boundary("bid.submit")
    def submit_bid(self, project_id: int, vendor_user_id: int, request: BidSubmitRequest | dict[str, Any]) -> BidResponse:
        request = validated_payload(BidSubmitRequest, request)

        with self.session_scope() as session:
            vendor = self.profiles.require_vendor(session, vendor_user_id)
            project = session.get(Project, project_id)
            if project is None:
                raise NotFoundError("Project not found")
            if project.status not in BIDDABLE_PROJECT_STATUSES:
                raise InvalidStateError("Project is not accepting bids")

            eligibility = check_eligibility(vendor, project)
            if not eligibility.ok:
                logger.info(
                    "bid.submit.ineligible",
                    extra={
                        "event": "bid.submit.ineligible",
                        "project_id": project_id,
                        "vendor_id": vendor.id,
                        "reason": eligibility.reason,
                    },
                )
                raise EligibilityError(eligibility.reason or "Vendor is not eligible to bid")

            duplicate = (
                session.query(Bid.id)
                .filter(Bid.project_id == project.id, Bid.vendor_id == vendor.id)
                .first()
            )
            if duplicate is not None:
                raise ConflictError("Vendor has already submitted a bid for this project")

            priced = price_bid(
                total=request.proposed_cost,
                start_date=request.start_date,
                duration_months=request.duration,
                team_size=request.team_size,
            )
            _assert_milestones(priced.milestones)

            now = utcnow()
            bid = Bid(
                project_id=project.id,
                vendor_id=vendor.id,
                total_cost=request.proposed_cost,
                currency=request.currency or project.currency,
                cost_breakdown=priced.cost_breakdown,
                proposed_start_date=request.start_date,
                duration_months=request.duration,
                milestones=priced.milestones,
                proposal_summary=request.proposal,
                proposal_approach=DEFAULT_APPROACH,
                unique_value=DEFAULT_UNIQUE_VALUE,
                risks=[],
                team_composition=priced.team_composition,
                project_manager=priced.project_manager,
                previous_work=[item.model_dump(mode="json", exclude_none=True) for item in request.previous_work],
                status=BidStatus.PENDING.value,
                submitted_at=now,
                last_updated=now,
                created_at=now,
            )
            bid.status_history.append(BidStatusHistory(status=BidStatus.PENDING.value, reason="Bid submitted", timestamp=now))
            session.add(bid)
            try:
                self.commit(session)
            except IntegrityError as exc:
                raise ConflictError("Vendor has already submitted a bid for this project") from exc

            response = BidResponse.model_validate(bid)

        self._invalidate(project_id)
        self.cache.set(CacheKeys.bid(response.id), response)
        logger.info(
            "bid.submitted",
            extra={"event": "bid.submitted", "bid_id": response.id, "project_id": project_id, "vendor_id": response.vendor_id},
        )
        return response

    @service_boundary("bid.update")
    def update_bid(self, bid_id: int, vendor_user_id: int, patch: BidUpdateRequest | dict[str, Any]) -> BidResponse:
        if isinstance(patch, BaseModel):
            patch = patch.model_dump(exclude_unset=True)
        cleaned = {key: value for key, value in dict(patch).items() if key not in IMMUTABLE_BID_FIELDS}
        update = validated_payload(BidUpdateRequest, cleaned)

        with self.session_scope() as session:
            bid = self._load_vendor_bid(session, bid_id, vendor_user_id)
            if bid.status not in (BidStatus.DRAFT.value, BidStatus.PENDING.value):
                raise InvalidStateError("Cannot update bid in current status")

            self._apply_update(bid, update)
            _assert_milestones(bid.milestones)
            bid.last_updated = utcnow()
            self.commit(session)
            response = BidResponse.model_validate(bid)

        self._invalidate(response.project_id, bid_id)
        logger.info(
            "bid.updated",
            extra={"event": "bid.updated", "bid_id": bid_id, "fields": ",".join(sorted(update.model_fields_set))},
        )
        return response

    def _apply_update(self, bid: Bid, update: BidUpdateRequest) -> None:
        fields = update.model_fields_set

        if update.proposed_cost is not None:
            bid.total_cost = update.proposed_cost
            if update.cost_breakdown is None:
                bid.cost_breakdown = build_cost_breakdown(update.proposed_cost, team_size=_labor_quantity(bid.cost_breakdown))
        if update.cost_breakdown is not None:
            bid.cost_breakdown = [item.model_dump(mode="json", exclude_none=True) for item in update.cost_breakdown]
        if update.currency is not None:
            bid.currency = update.currency
        if "cost_notes" in fields:
            bid.cost_notes = update.cost_notes or None

        schedule_changed = False
        if update.start_date is not None:
            bid.proposed_start_date = update.start_date
            schedule_changed = True
        if update.duration is not None:
            bid.duration_months = update.duration
            schedule_changed = True
        if update.milestones is not None:
            bid.milestones = [item.model_dump(mode="json", exclude_none=True) for item in update.milestones]
        elif schedule_changed:
            bid.milestones = build_milestones(bid.proposed_start_date, bid.duration_months)

        if update.proposal_summary is not None:
            bid.proposal_summary = update.proposal_summary
        if "proposal_approach" in fields:
            bid.proposal_approach = update.proposal_approach or None
        if "unique_value" in fields:
            bid.unique_value = update.unique_value or None
        if update.risks is not None:
            bid.risks = [item.model_dump(mode="json", exclude_none=True) for item in update.risks]
        if update.team_composition is not None:
            bid.team_composition = [item.model_dump(mode="json") for item in update.team_composition]
        if update.project_manager is not None:
            bid.project_manager = update.project_manager.model_dump(mode="json")
        if update.previous_work is not None:
            bid.previous_work = [item.model_dump(mode="json", exclude_none=True) for item in update.previous_work]

    @service_boundary("bid.select")
    def select_bid(self, bid_id: int, project_id: int, client_user_id: int) -> SelectBidResult:
        """Accept one bid, reject its live rivals and start the project.

        A losing concurrent attempt is retried; the retry sees the committed
        winner and either returns it unchanged or fails with ``InvalidState``.
        """
        attempts = self.config.SELECT_BID_MAX_RETRIES + 1
        for attempt in range(1, attempts + 1):
            try:
                return self._select_bid_once(bid_id, project_id, client_user_id)
            except (StaleDataError, IntegrityError) as exc:
                logger.warning(
                    "bid.select.contended",
                    extra={"event": "bid.select.contended", "bid_id": bid_id, "project_id": project_id, "attempt": attempt},
                )
                if attempt == attempts:
                    raise ConflictError("Project was modified concurrently; retry the selection") from exc
        raise ConflictError("Project was modified concurrently; retry the selection")

    def _select_bid_once(self, bid_id: int, project_id: int, client_user_id: int) -> SelectBidResult:
        with self.session_scope() as session:
            project, bid = self._load_project_bid(session, bid_id, project_id, client_user_id)

            if bid.status == BidStatus.ACCEPTED.value:
                return SelectBidResult(
                    bid=BidResponse.model_validate(bid),
                    project=ProjectResponse.model_validate(project),
                    already_accepted=True,
                )
            if bid.status not in COMPETING_BID_STATUSES:
                raise InvalidStateError("Bid cannot be selected in current status")
            if project.status not in BIDDABLE_PROJECT_STATUSES:
                raise InvalidStateError("Project must be open or in review to select a bid")
            accepted = (
                session.query(Bid.id)
                .filter(Bid.project_id == project.id, Bid.status == BidStatus.ACCEPTED.value)
                .first()
            )
            if accepted is not None:
                raise InvalidStateError("Project already has an accepted bid")

            now = utcnow()
            if bid.status == BidStatus.PENDING.value:
                apply_bid_status(bid, BidStatus.IN_REVIEW.value, "Bid under final review", at=now)
            apply_bid_status(bid, BidStatus.ACCEPTED.value, "Selected by client", at=now)

            rivals = (
                session.query(Bid)
                .filter(
                    Bid.project_id == project.id,
                    Bid.id != bid.id,
                    Bid.status.in_(COMPETING_BID_STATUSES),
                )
                .all()
            )
            for rival in rivals:
                apply_bid_status(rival, BidStatus.REJECTED.value, "Another bid was selected", at=now)

            apply_project_status(
                project,
                ProjectStatus.IN_PROGRESS.value,
                "Bid selected and accepted",
                strict=self.config.STRICT_PROJECT_TRANSITIONS,
                at=now,
            )
            rejected_ids = [rival.id for rival in rivals]
            self.commit(session)
            result = SelectBidResult(bid=BidResponse.model_validate(bid), project=ProjectResponse.model_validate(project))

        self._invalidate(project_id, bid_id, *rejected_ids)
        logger.info(
            "bid.selected",
            extra={
                "event": "bid.selected",
                "bid_id": bid_id,
                "project_id": project_id,
                "rejected_count": len(rejected_ids),
            },
        )
        return result

    @service_boundary("bid.reject")
    def reject_bid(
        self,
        bid_id: int,
        project_id: int,
        client_user_id: int,
        reason: str | None = None,
    ) -> BidActionResult:
        reason = sanitize_text(reason, max_len=2000) or "Bid rejected by client"

        with self.session_scope() as session:
            _, bid = self._load_project_bid(session, bid_id, project_id, client_user_id)
            if bid.status == BidStatus.REJECTED.value:
                return BidActionResult(bid=BidResponse.model_validate(bid), message="Bid is already rejected")
            if bid.status == BidStatus.ACCEPTED.value:
                raise InvalidStateError("Cannot reject an accepted bid")

            apply_bid_status(bid, BidStatus.REJECTED.value, reason)
            self.commit(session)
            response = BidResponse.model_validate(bid)

        self._invalidate(project_id, bid_id)
        logger.info("bid.rejected", extra={"event": "bid.rejected", "bid_id": bid_id, "project_id": project_id})
        return BidActionResult(bid=response, message="Bid rejected successfully")

    @service_boundary("bid.review")
    def review_bid(
        self,
        bid_id: int,
        project_id: int,
        client_user_id: int,
        reason: str | None = None,
    ) -> BidActionResult:
        """Put a bid under review, reconsider a rejection or revert a selection."""
        reason = sanitize_text(reason, max_len=2000) or None

        with self.session_scope() as session:
            project, bid = self._load_project_bid(session, bid_id, project_id, client_user_id)
            previous = bid.status
            now = utcnow()
            apply_bid_status(bid, BidStatus.IN_REVIEW.value, reason or DEFAULT_REVIEW_REASONS.get(previous), at=now)

            strict = self.config.STRICT_PROJECT_TRANSITIONS
            if previous == BidStatus.ACCEPTED.value and project.status == ProjectStatus.IN_PROGRESS.value:
                apply_project_status(project, ProjectStatus.IN_REVIEW.value, "Accepted bid reverted", strict=strict, at=now)
            elif project.status == ProjectStatus.OPEN.value:
                apply_project_status(project, ProjectStatus.IN_REVIEW.value, "Client started reviewing bids", strict=strict, at=now)

            self.commit(session)
            response = BidResponse.model_validate(bid)

        self._invalidate(project_id, bid_id)
        logger.info(
            "bid.reviewed",
            extra={"event": "bid.reviewed", "bid_id": bid_id, "project_id": project_id, "from_status": previous},
        )
        return BidActionResult(bid=response, message="Bid moved to review")

    @service_boundary("bid.withdraw")
    def withdraw_bid(self, bid_id: int, vendor_user_id: int, reason: str | None = None) -> BidActionResult:
        return self._vendor_transition(
            bid_id,
            vendor_user_id,
            BidStatus.WITHDRAWN.value,
            sanitize_text(reason, max_len=2000) or "Withdrawn by vendor",
            message="Bid withdrawn",
        )

    @service_boundary("bid.resubmit")
    def resubmit_bid(self, bid_id: int, vendor_user_id: int, reason: str | None = None) -> BidActionResult:
        return self._vendor_transition(
            bid_id,
            vendor_user_id,
            BidStatus.PENDING.value,
            sanitize_text(reason, max_len=2000) or "Resubmitted by vendor",
            message="Bid resubmitted",
            require_open_project=True,
        )

    def _vendor_transition(
        self,
        bid_id: int,
        vendor_user_id: int,
        target: str,
        reason: str,
        message: str,
        require_open_project: bool = False,
    ) -> BidActionResult:
        with self.session_scope() as session:
            bid = self._load_vendor_bid(session, bid_id, vendor_user_id)
            if require_open_project and bid.project.status not in BIDDABLE_PROJECT_STATUSES:
                raise InvalidStateError("Project is not accepting bids")
            apply_bid_status(bid, target, reason)
            self.commit(session)
            response = BidResponse.model_validate(bid)

        self._invalidate(response.project_id, bid_id)
        logger.info("bid.status_changed", extra={"event": "bid.status_changed", "bid_id": bid_id, "status": target})
        return BidActionResult(bid=response, message=message)

    @service_boundary("bid.delete")
    def delete_bid(self, bid_id: int, vendor_user_id: int) -> DeletionResult:
        with self.session_scope() as session:
            bid = self._load_vendor_bid(session, bid_id, vendor_user_id)
            if bid.status != BidStatus.PENDING.value:
                raise InvalidStateError("Only pending bids can be deleted")
            project_id = bid.project_id
            session.delete(bid)
            self.commit(session)

        self._invalidate(project_id, bid_id)
        logger.info("bid.deleted", extra={"event": "bid.deleted", "bid_id": bid_id, "project_id": project_id})
        return DeletionResult(id=bid_id)

    @service_boundary("bid.negotiate")
    def negotiate_bid(
        self,
        bid_id: int,
        payload: BaseModel | dict[str, Any],
        initiator: str,
        actor_user_id: int | None = None,
    ) -> NegotiationResult:
        """Record a negotiation proposal; the bid's status does not change.

        When ``actor_user_id`` is given it must be the project's client (for
        ``initiator="client"``) or the bidding vendor (``"vendor"``).
        """
        try:
            initiator = Initiator(initiator).value
        except ValueError as exc:
            raise ValidationError("initiator must be 'client' or 'vendor'") from exc
        if isinstance(payload, BaseModel):
            payload = payload.model_dump()
        request = negotiation_adapter.validate_python(sanitize_payload(payload, max_len=5000))

        with self.session_scope() as session:
            bid = self._load_bid(session, bid_id)
            if actor_user_id is not None:
                owner = bid.project.client.user_id if initiator == Initiator.CLIENT.value else bid.vendor.user_id
                if owner != actor_user_id:
                    raise ForbiddenError("Not authorized to negotiate on this bid")
            if bid.status not in COMPETING_BID_STATUSES:
                raise InvalidStateError("Bid cannot be negotiated in current status")

            now = utcnow()
            negotiation = BidNegotiation(
                initiator=initiator,
                negotiation_type=request.type,
                original_value=request.original_value,
                proposed_value=request.proposed_value,
                message=request.message or None,
                status=NegotiationStatus.PENDING.value,
                timestamp=now,
            )
            bid.negotiations.append(negotiation)
            bid.last_updated = now
            self.commit(session)
            result = NegotiationResult(
                bid=BidResponse.model_validate(bid),
                negotiation=NegotiationResponse.model_validate(negotiation),
            )

        self._invalidate(result.bid.project_id, bid_id)
        logger.info(
            "bid.negotiation_added",
            extra={"event": "bid.negotiation_added", "bid_id": bid_id, "initiator": initiator, "type": request.type},
        )
        return result

    # -- reads -------------------------------------------------------------

    @service_boundary("bid.details")
    def get_bid_details(self, bid_id: int, user_id: int, role: str) -> BidResponse:
        role = parse_role(role)

        with self.session_scope() as session:
            view = self._cached_bid(session, bid_id)
            if role == UserRole.CLIENT_OWNER.value:
                client = self.profiles.require_client(session, user_id)
                owner_id = session.query(Project.client_id).filter(Project.id == view.project_id).scalar()
                if owner_id != client.id:
                    raise ForbiddenError("Unauthorized to view this bid")
                if not view.client_viewed:
                    bid = self._load_bid(session, bid_id)
                    bid.client_viewed = True
                    bid.client_viewed_at = utcnow()
                    self.commit(session)
                    self.cache.invalidate(CacheKeys.bid(bid_id))
                    self.cache.invalidate_prefix(CacheKeys.project_bids_prefix(view.project_id))
                    view = self._cached_bid(session, bid_id)
            elif role in VENDOR_ROLES:
                vendor = self.profiles.require_vendor(session, user_id)
                if view.vendor_id != vendor.id:
                    raise ForbiddenError("Unauthorized to view this bid")
            else:
                raise ForbiddenError("Unauthorized to view this bid")
        return view

    @service_boundary("bid.analysis")
    def get_competitive_analysis(self, bid_id: int) -> CompetitiveAnalysis:
        with self.session_scope() as session:
            view = self._cached_bid(session, bid_id)
            key = CacheKeys.analysis(view.project_id, bid_id)
            cached = self.cache.get(key)
            if cached is not None:
                return cached

            guard = self.cache.guard(CacheKeys.analysis_prefix(view.project_id))
            bid = self._load_bid(session, bid_id)
            competitors = (
                session.query(Bid)
                .filter(
                    Bid.project_id == bid.project_id,
                    Bid.id != bid.id,
                    Bid.status.in_(COMPETING_BID_STATUSES),
                )
                .order_by(Bid.total_cost.asc())
                .all()
            )
            analysis = analyze(
                BidSnapshot.from_bid(bid),
                [BidSnapshot.from_bid(competitor) for competitor in competitors],
                team_scorer=self.team_scorer,
                previous_work_scorer=self.previous_work_scorer,
            )
            score = round(analysis.competitiveness, 2)
            if bid.competitiveness_score != score:
                bid.competitiveness_score = score
                self.commit(session)
                self.cache.invalidate(CacheKeys.bid(bid_id))
                self.cache.invalidate_prefix(CacheKeys.project_bids_prefix(view.project_id))

        self.cache.set(key, analysis, guard=guard)
        return analysis

    @service_boundary("bid.project_bids")
    def get_project_bids(
        self,
        project_id: int,
        status: str | None = None,
        page: int | None = 1,
        limit: int | None = None,
        client_user_id: int | None = None,
    ) -> BidPage:
        """Page through a project's bids, newest submission first.

        Passing ``client_user_id`` restricts the read to the project's owner.
        """
        page, limit = clamp_pagination(page, limit, DEFAULT_PROJECT_BIDS_LIMIT)
        status = _normalize_status(status)
        if client_user_id is not None:
            with self.session_scope() as session:
                self.load_owned_project(session, project_id, client_user_id)

        key = CacheKeys.project_bids(project_id, status, page, limit)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        guard = self.cache.guard(CacheKeys.project_bids_prefix(project_id))
        with self.session_scope() as session:
            if session.get(Project, project_id) is None:
                raise NotFoundError("Project not found")
            query = session.query(Bid).filter(Bid.project_id == project_id)
            if status:
                query = query.filter(Bid.status == status)
            result = self._page(query, page, limit)

        self.cache.set(key, result, guard=guard)
        return result

    @service_boundary("bid.vendor_bids")
    def get_vendor_bids(
        self,
        vendor_user_id: int,
        status: str | None = None,
        page: int | None = 1,
        limit: int | None = None,
    ) -> BidPage:
        page, limit = clamp_pagination(page, limit, DEFAULT_VENDOR_BIDS_LIMIT)
        status = _normalize_status(status)

        with self.session_scope() as session:
            vendor = self.profiles.require_vendor(session, vendor_user_id)
            query = session.query(Bid).filter(Bid.vendor_id == vendor.id)
            if status:
                query = query.filter(Bid.status == status)
            return self._page(query, page, limit)

    @service_boundary("bid.batch")
    def get_multiple_project_bids(
        self,
        project_ids: list[int],
        user_id: int,
        role: str,
        status: str | None = None,
    ) -> BatchBidsResponse:
        """Bids for several projects, grouped by project id.

        Clients only see bids on projects they own. Construction firms only see
        their own bids. Ids the caller cannot see come back as empty groups.
        """
        role = parse_role(role)
        unique_ids = list(dict.fromkeys(int(project_id) for project_id in project_ids))
        if not unique_ids:
            raise ValidationError("At least one project id is required")
        if len(unique_ids) > self.config.MAX_BATCH_PROJECTS:
            raise ValidationError(f"At most {self.config.MAX_BATCH_PROJECTS} project ids per request")
        status = _normalize_status(status)

        with self.session_scope() as session:
            query = session.query(Bid).filter(Bid.project_id.in_(unique_ids))
            if role == UserRole.CLIENT_OWNER.value:
                client = self.profiles.require_client(session, user_id)
                query = query.join(Project, Project.id == Bid.project_id).filter(Project.client_id == client.id)
            elif role == UserRole.CONSTRUCTION_FIRM.value:
                vendor = self.profiles.require_vendor(session, user_id)
                query = query.filter(Bid.vendor_id == vendor.id)
            else:
                raise ForbiddenError("Not authorized to read bids in batch")
            if status:
                query = query.filter(Bid.status == status)
            rows = query.order_by(Bid.submitted_at.desc(), Bid.id.desc()).all()
            grouped: dict[int, list[BidSummary]] = {project_id: [] for project_id in unique_ids}
            for row in rows:
                grouped[row.project_id].append(BidSummary.model_validate(row))

        return BatchBidsResponse(bids=grouped, total=len(rows))
