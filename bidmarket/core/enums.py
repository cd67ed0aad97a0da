"""Canonical enum values for projects, bids and profiles."""

from __future__ import annotations

import enum


class UserRole(str, enum.Enum):
    CLIENT_OWNER = "client_owner"
    VENDOR_SUPPLIER = "vendor_supplier"
    CONSTRUCTION_FIRM = "construction_firm"


class ProjectStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    OPEN = "OPEN"
    IN_REVIEW = "IN_REVIEW"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class BidStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    IN_REVIEW = "IN_REVIEW"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"


class ProjectType(str, enum.Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"
    INFRASTRUCTURE = "infrastructure"


class VendorStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class NegotiationType(str, enum.Enum):
    COST = "cost"
    TIMELINE = "timeline"
    SCOPE = "scope"
    OTHER = "other"


class NegotiationStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Initiator(str, enum.Enum):
    CLIENT = "client"
    VENDOR = "vendor"


# Statuses that still count as live competition for a project.
COMPETING_BID_STATUSES = (BidStatus.PENDING.value, BidStatus.IN_REVIEW.value)
BIDDABLE_PROJECT_STATUSES = (ProjectStatus.OPEN.value, ProjectStatus.IN_REVIEW.value)
