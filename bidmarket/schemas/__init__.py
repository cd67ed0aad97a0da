"""Pydantic schema package for service and API contracts."""

from bidmarket.schemas.analysis import BidFigures, CompetitiveAnalysis, CostRange, MarketStats
from bidmarket.schemas.bids import (
    BatchBidsRequest,
    BatchBidsResponse,
    BidActionResult,
    BidDecisionRequest,
    BidPage,
    BidResponse,
    BidStatusChangeRequest,
    BidSubmitRequest,
    BidSummary,
    BidUpdateRequest,
    CostItem,
    Milestone,
    NegotiationResult,
    SelectBidResult,
    TeamMember,
)
from bidmarket.schemas.common import DeletionResult, ErrorEnvelope, PaginationMeta, StatusHistoryEntry
from bidmarket.schemas.negotiations import (
    CostNegotiation,
    NegotiationRequest,
    NegotiationResponse,
    OtherNegotiation,
    ScopeNegotiation,
    TimelineNegotiation,
)
from bidmarket.schemas.projects import (
    BudgetInput,
    LocationInput,
    ProjectCreateRequest,
    ProjectPage,
    ProjectResponse,
    ProjectSearchCriteria,
    ProjectStatusUpdateRequest,
    ProjectUpdateRequest,
    VendorMatch,
)

__all__ = [
    "BatchBidsRequest",
    "BatchBidsResponse",
    "BidActionResult",
    "BidDecisionRequest",
    "BidFigures",
    "BidPage",
    "BidResponse",
    "BidStatusChangeRequest",
    "BidSubmitRequest",
    "BidSummary",
    "BidUpdateRequest",
    "BudgetInput",
    "CompetitiveAnalysis",
    "CostItem",
    "CostNegotiation",
    "CostRange",
    "DeletionResult",
    "ErrorEnvelope",
    "LocationInput",
    "MarketStats",
    "Milestone",
    "NegotiationRequest",
    "NegotiationResponse",
    "NegotiationResult",
    "OtherNegotiation",
    "PaginationMeta",
    "ProjectCreateRequest",
    "ProjectPage",
    "ProjectResponse",
    "ProjectSearchCriteria",
    "ProjectStatusUpdateRequest",
    "ProjectUpdateRequest",
    "ScopeNegotiation",
    "SelectBidResult",
    "StatusHistoryEntry",
    "TeamMember",
    "TimelineNegotiation",
    "VendorMatch",
]
