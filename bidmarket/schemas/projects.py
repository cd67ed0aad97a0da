"""Project request/response schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from bidmarket.core.enums import ProjectStatus, ProjectType
from bidmarket.schemas.common import PaginationMeta, StatusHistoryEntry

# Budget ceiling applied when a client only states a single figure.
BUDGET_BUFFER = 1.2


class BudgetInput(BaseModel):
    min: float = Field(ge=0)
    max: float | None = Field(default=None, ge=0)
    currency: Literal["INR", "USD"] | None = None
    flexibility: Literal["strict", "flexible", "very_flexible"] = "flexible"

    @model_validator(mode="after")
    def derive_and_check_range(self) -> "BudgetInput":
        if self.max is None:
            self.max = round(self.min * BUDGET_BUFFER, 2)
        if self.max <= self.min:
            raise ValueError("Maximum budget must be greater than minimum budget")
        return self


class LocationInput(BaseModel):
    address: str = Field(min_length=3, max_length=500)
    city: str | None = Field(default=None, max_length=120)
    state: str | None = Field(default=None, max_length=120)
    pincode: str | None = Field(default=None, pattern=r"^[1-9][0-9]{5}$")

    @model_validator(mode="after")
    def derive_city(self) -> "LocationInput":
        if not self.city:
            self.city = self.address.split(",")[0].strip() or self.address
        return self


class Requirement(BaseModel):
    category: Literal["structural", "electrical", "plumbing", "interior", "exterior", "other"]
    description: str = Field(min_length=1, max_length=2000)
    priority: Literal["high", "medium", "low"] = "medium"


class ProjectCreateRequest(BaseModel):
    title: str = Field(min_length=5, max_length=100)
    description: str = Field(min_length=20, max_length=10000)
    budget: BudgetInput
    location: LocationInput
    project_type: ProjectType
    sub_type: str | None = Field(default=None, max_length=30)
    area: float | None = Field(default=None, gt=0)
    area_unit: Literal["sqft", "sqm"] = "sqft"
    floors: int = Field(default=1, ge=1)
    requirements: list[Requirement] = Field(default_factory=list)
    expected_start_date: date | None = None
    expected_duration: int | None = Field(default=None, ge=1)
    visibility: Literal["public", "private", "invited"] = "public"
    min_experience: int = Field(default=0, ge=0)
    min_rating: float = Field(default=0.0, ge=0, le=5)


class ProjectUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=5, max_length=100)
    description: str | None = Field(default=None, min_length=20, max_length=10000)
    budget: BudgetInput | None = None
    location: LocationInput | None = None
    project_type: ProjectType | None = None
    sub_type: str | None = Field(default=None, max_length=30)
    area: float | None = Field(default=None, gt=0)
    area_unit: Literal["sqft", "sqm"] | None = None
    floors: int | None = Field(default=None, ge=1)
    requirements: list[Requirement] | None = None
    expected_start_date: date | None = None
    expected_duration: int | None = Field(default=None, ge=1)
    visibility: Literal["public", "private", "invited"] | None = None
    min_experience: int | None = Field(default=None, ge=0)
    min_rating: float | None = Field(default=None, ge=0, le=5)
    status: ProjectStatus | None = None
    status_reason: str | None = Field(default=None, max_length=2000)


class ProjectStatusUpdateRequest(BaseModel):
    status: ProjectStatus
    reason: str | None = Field(default=None, max_length=2000)


class ProjectSearchCriteria(BaseModel):
    project_type: ProjectType | None = None
    status: ProjectStatus | None = None
    city: str | None = Field(default=None, max_length=120)
    state: str | None = Field(default=None, max_length=120)
    budget_min: float | None = Field(default=None, ge=0)
    budget_max: float | None = Field(default=None, ge=0)


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    client_id: int
    title: str
    description: str
    budget_min: float
    budget_max: float
    currency: str
    budget_flexibility: str
    address: str
    city: str
    state: str | None = None
    pincode: str | None = None
    project_type: str
    sub_type: str | None = None
    area_value: float | None = None
    area_unit: str | None = None
    floors: int | None = None
    requirements: list[Requirement] = Field(default_factory=list)
    expected_start_date: date | None = None
    expected_duration: int | None = None
    visibility: str
    min_experience: int
    min_rating: float
    status: str
    status_history: list[StatusHistoryEntry] = Field(default_factory=list)
    views: int
    created_at: datetime
    updated_at: datetime
    last_activity_at: datetime


class ProjectPage(BaseModel):
    items: list[ProjectResponse]
    pagination: PaginationMeta


class VendorMatch(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_name: str
    city: str | None = None
    state: str | None = None
    years_in_business: int
    rating_average: float
    is_verified: bool
