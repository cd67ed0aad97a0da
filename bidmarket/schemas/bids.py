"""Bid request/response schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from bidmarket.schemas.common import PaginationMeta, StatusHistoryEntry
from bidmarket.schemas.negotiations import NegotiationResponse
from bidmarket.schemas.projects import ProjectResponse

CostCategory = Literal["labor", "materials", "equipment", "permits", "overhead", "other"]
TeamRole = Literal["project_manager", "architect", "engineer", "supervisor", "labor", "specialist"]


def check_milestone_total(milestones: list["Milestone"]) -> list["Milestone"]:
    """Payment percentages of a non-empty schedule must add up to 100."""
    if milestones and abs(sum(m.payment_percentage for m in milestones) - 100) > 1e-6:
        raise ValueError("Milestone payment percentages must sum to 100")
    return milestones


class CostItem(BaseModel):
    category: CostCategory
    description: str = Field(min_length=1, max_length=500)
    amount: float = Field(ge=0)
    unit: str | None = Field(default=None, max_length=40)
    quantity: int | None = Field(default=None, ge=1)


class Milestone(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    expected_completion_date: date
    payment_percentage: float = Field(ge=0, le=100)


class TeamMember(BaseModel):
    role: TeamRole
    count: int = Field(ge=1)
    expertise: list[str] = Field(default_factory=list)
    availability: Literal["full_time", "part_time", "on_call"] = "full_time"


class ProjectManager(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    experience: int = Field(default=0, ge=0)
    certifications: list[str] = Field(default_factory=list)


class Risk(BaseModel):
    description: str = Field(min_length=1, max_length=2000)
    mitigation: str | None = Field(default=None, max_length=2000)
    impact: Literal["low", "medium", "high"] | None = None


class PreviousWork(BaseModel):
    project_name: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    completion_date: date | None = None
    value: float | None = Field(default=None, ge=0)
    similarity_score: float | None = Field(default=None, ge=0, le=100)


class BidSubmitRequest(BaseModel):
    """Simplified bid request; the pricing engine fills in the rest."""

    proposed_cost: float = Field(ge=0)
    currency: Literal["INR", "USD"] | None = None
    start_date: date
    duration: int = Field(ge=1, description="Estimated duration in months.")
    team_size: int = Field(default=1, ge=1)
    proposal: str = Field(min_length=20, max_length=10000)
    previous_work: list[PreviousWork] = Field(default_factory=list)

    @field_validator("start_date")
    @classmethod
    def start_date_not_in_past(cls, value: date) -> date:
        if value < date.today():
            raise ValueError("Start date cannot be in the past")
        return value


class BidUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    proposed_cost: float | None = Field(default=None, ge=0)
    currency: Literal["INR", "USD"] | None = None
    cost_breakdown: list[CostItem] | None = None
    cost_notes: str | None = Field(default=None, max_length=5000)
    start_date: date | None = None
    duration: int | None = Field(default=None, ge=1)
    milestones: list[Milestone] | None = None
    # Submissions call the narrative "proposal"; both names are accepted here.
    proposal_summary: str | None = Field(
        default=None,
        min_length=20,
        max_length=10000,
        validation_alias=AliasChoices("proposal_summary", "proposal"),
    )
    proposal_approach: str | None = Field(default=None, max_length=10000)
    unique_value: str | None = Field(default=None, max_length=5000)
    risks: list[Risk] | None = None
    team_composition: list[TeamMember] | None = None
    project_manager: ProjectManager | None = None
    previous_work: list[PreviousWork] | None = None

    @field_validator("milestones")
    @classmethod
    def milestones_sum_to_hundred(cls, value: list[Milestone] | None) -> list[Milestone] | None:
        if value is None:
            return value
        if not value:
            raise ValueError("Milestone schedule cannot be empty")
        return check_milestone_total(value)

    @field_validator("start_date")
    @classmethod
    def start_date_not_in_past(cls, value: date | None) -> date | None:
        if value is not None and value < date.today():
            raise ValueError("Start date cannot be in the past")
        return value


class BidStatusChangeRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=2000)


class BidDecisionRequest(BidStatusChangeRequest):
    """Client decision on a bid of one of their projects."""

    project_id: int


class BatchBidsRequest(BaseModel):
    project_ids: list[int] = Field(min_length=1)
    status: str | None = None


class BidSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    vendor_id: int
    total_cost: float
    currency: str
    proposed_start_date: date
    duration_months: int
    status: str
    submitted_at: datetime | None = None
    last_updated: datetime
    client_viewed: bool
    competitiveness_score: float | None = None


class BidResponse(BidSummary):
    cost_breakdown: list[CostItem] = Field(default_factory=list)
    cost_notes: str | None = None
    milestones: list[Milestone] = Field(default_factory=list)
    proposal_summary: str
    proposal_approach: str | None = None
    unique_value: str | None = None
    risks: list[Risk] = Field(default_factory=list)
    team_composition: list[TeamMember] = Field(default_factory=list)
    project_manager: ProjectManager | None = None
    previous_work: list[PreviousWork] = Field(default_factory=list)
    status_history: list[StatusHistoryEntry] = Field(default_factory=list)
    negotiations: list[NegotiationResponse] = Field(default_factory=list)
    client_viewed_at: datetime | None = None
    created_at: datetime


class BidPage(BaseModel):
    items: list[BidSummary]
    pagination: PaginationMeta


class BatchBidsResponse(BaseModel):
    bids: dict[int, list[BidSummary]]
    total: int


class SelectBidResult(BaseModel):
    bid: BidResponse
    project: ProjectResponse
    already_accepted: bool = False


class BidActionResult(BaseModel):
    bid: BidResponse
    message: str


class NegotiationResult(BaseModel):
    bid: BidResponse
    negotiation: NegotiationResponse
