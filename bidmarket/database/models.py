from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import relationship

from .db import Base


def utcnow() -> datetime:
    """Return UTC now as naive datetime for storage."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ClientProfile(Base):
    __tablename__ = "client_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=utcnow)

    projects = relationship("Project", back_populates="client")


class VendorProfile(Base):
    __tablename__ = "vendor_profiles"
    __table_args__ = (
        Index("idx_vendor_profiles_rating", "rating_average"),
        Index("idx_vendor_profiles_experience", "years_in_business"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, unique=True)
    company_name = Column(String(255), nullable=False)
    city = Column(String(120))
    state = Column(String(120))
    status = Column(String(20), nullable=False, default="active")
    services = Column(JSON, nullable=False, default=list)
    years_in_business = Column(Integer, nullable=False, default=0)
    total_projects = Column(Integer, nullable=False, default=0)
    rating_average = Column(Float, nullable=False, default=0.0)
    rating_count = Column(Integer, nullable=False, default=0)
    is_verified = Column(Boolean, nullable=False, default=False)
    min_budget = Column(Float)
    max_budget = Column(Float)
    created_at = Column(DateTime, default=utcnow)

    bids = relationship("Bid", back_populates="vendor")


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint("budget_max > budget_min", name="ck_projects_budget_range"),
        Index("idx_projects_status", "status"),
        Index("idx_projects_type", "project_type"),
        Index("idx_projects_city_state", "city", "state"),
        Index("idx_projects_budget", "budget_min", "budget_max"),
        Index("idx_projects_created_at", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("client_profiles.id"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    budget_min = Column(Float, nullable=False)
    budget_max = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False, default="INR")
    budget_flexibility = Column(String(20), nullable=False, default="flexible")
    address = Column(String(500), nullable=False)
    city = Column(String(120), nullable=False)
    state = Column(String(120))
    pincode = Column(String(6))
    project_type = Column(String(30), nullable=False)
    sub_type = Column(String(30))
    area_value = Column(Float)
    area_unit = Column(String(4), default="sqft")
    floors = Column(Integer, default=1)
    requirements = Column(JSON, nullable=False, default=list)
    expected_start_date = Column(Date)
    expected_duration = Column(Integer)
    visibility = Column(String(20), nullable=False, default="public")
    min_experience = Column(Integer, nullable=False, default=0)
    min_rating = Column(Float, nullable=False, default=0.0)
    status = Column(String(20), nullable=False, default="OPEN")
    views = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    last_activity_at = Column(DateTime, default=utcnow, nullable=False)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    client = relationship("ClientProfile", back_populates="projects")
    status_history = relationship(
        "ProjectStatusHistory",
        order_by="ProjectStatusHistory.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    bids = relationship("Bid", back_populates="project", cascade="all, delete-orphan", passive_deletes=True)


class ProjectStatusHistory(Base):
    __tablename__ = "project_status_history"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False)
    reason = Column(Text)
    timestamp = Column(DateTime, default=utcnow, nullable=False)


class Bid(Base):
    __tablename__ = "bids"
    __table_args__ = (
        UniqueConstraint("project_id", "vendor_id", name="uq_bids_project_vendor"),
        Index("idx_bids_status", "status"),
        Index("idx_bids_total_cost", "total_cost"),
        Index("idx_bids_submitted_at", "submitted_at"),
        Index(
            "uq_bids_project_accepted",
            "project_id",
            unique=True,
            sqlite_where=text("status = 'ACCEPTED'"),
            postgresql_where=text("status = 'ACCEPTED'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    vendor_id = Column(Integer, ForeignKey("vendor_profiles.id"), nullable=False, index=True)
    total_cost = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False, default="INR")
    cost_breakdown = Column(JSON, nullable=False, default=list)
    cost_notes = Column(Text)
    proposed_start_date = Column(Date, nullable=False)
    duration_months = Column(Integer, nullable=False)
    milestones = Column(JSON, nullable=False, default=list)
    proposal_summary = Column(Text, nullable=False)
    proposal_approach = Column(Text)
    unique_value = Column(Text)
    risks = Column(JSON, nullable=False, default=list)
    team_composition = Column(JSON, nullable=False, default=list)
    project_manager = Column(JSON)
    previous_work = Column(JSON, nullable=False, default=list)
    status = Column(String(20), nullable=False, default="PENDING")
    submitted_at = Column(DateTime)
    last_updated = Column(DateTime, default=utcnow, nullable=False)
    client_viewed = Column(Boolean, nullable=False, default=False)
    client_viewed_at = Column(DateTime)
    competitiveness_score = Column(Float)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    project = relationship("Project", back_populates="bids")
    vendor = relationship("VendorProfile", back_populates="bids")
    status_history = relationship(
        "BidStatusHistory",
        order_by="BidStatusHistory.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    negotiations = relationship(
        "BidNegotiation",
        order_by="BidNegotiation.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class BidStatusHistory(Base):
    __tablename__ = "bid_status_history"

    id = Column(Integer, primary_key=True)
    bid_id = Column(Integer, ForeignKey("bids.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False)
    reason = Column(Text)
    timestamp = Column(DateTime, default=utcnow, nullable=False)


class BidNegotiation(Base):
    __tablename__ = "bid_negotiations"

    id = Column(Integer, primary_key=True)
    bid_id = Column(Integer, ForeignKey("bids.id", ondelete="CASCADE"), nullable=False, index=True)
    initiator = Column(String(10), nullable=False)
    negotiation_type = Column(String(20), nullable=False)
    original_value = Column(JSON)
    proposed_value = Column(JSON)
    message = Column(Text)
    status = Column(String(20), nullable=False, default="pending")
    timestamp = Column(DateTime, default=utcnow, nullable=False)
