"""Deterministic pricing for simplified bid requests.

Turns a headline cost, start date, duration and team size into the
itemised breakdown, milestone payment schedule and team composition stored on
a bid.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any

from bidmarket.schemas.bids import CostItem, Milestone, ProjectManager, TeamMember, check_milestone_total

DAYS_PER_MONTH = 30

LABOR_SHARE = 0.6
MATERIALS_SHARE = 0.3

# (title, fraction of the duration elapsed, payment percentage)
MILESTONE_PLAN: tuple[tuple[str, float, float], ...] = (
    ("Foundation Complete", 0.3, 30.0),
    ("Structure Complete", 0.7, 40.0),
    ("Project Complete", 1.0, 30.0),
)

DEFAULT_APPROACH = (
    "We will follow industry best practices and ensure quality workmanship throughout the project."
)
DEFAULT_UNIQUE_VALUE = "Experienced team with proven track record"


@dataclass(frozen=True)
class PricedBid:
    cost_breakdown: list[dict[str, Any]]
    milestones: list[dict[str, Any]]
    team_composition: list[dict[str, Any]]
    project_manager: dict[str, Any]


def build_cost_breakdown(total: float, team_size: int | None = None) -> list[dict[str, Any]]:
    """Split ``total`` into labor/materials/overhead; overhead absorbs rounding."""
    labor = round(total * LABOR_SHARE, 2)
    materials = round(total * MATERIALS_SHARE, 2)
    overhead = round(total - labor - materials, 2)
    items = [
        CostItem(category="labor", description="Labor costs", amount=labor, quantity=team_size),
        CostItem(category="materials", description="Materials and supplies", amount=materials),
        CostItem(category="overhead", description="Overhead and profit", amount=max(overhead, 0.0)),
    ]
    return [item.model_dump(mode="json", exclude_none=True) for item in items]


def build_milestones(start_date: date, duration_months: int) -> list[dict[str, Any]]:
    total_days = duration_months * DAYS_PER_MONTH
    milestones = [
        Milestone(
            title=title,
            expected_completion_date=start_date + timedelta(days=round(total_days * fraction)),
            payment_percentage=percentage,
        )
        for title, fraction, percentage in MILESTONE_PLAN
    ]
    check_milestone_total(milestones)
    return [milestone.model_dump(mode="json", exclude_none=True) for milestone in milestones]


def build_team(team_size: int) -> tuple[list[dict[str, Any]], dict[str, Any]]:
    supervisors = max(1, math.ceil(team_size / 5))
    laborers = max(1, team_size - supervisors - 1)
    composition = [
        TeamMember(role="project_manager", count=1, expertise=["construction", "management"]),
        TeamMember(role="supervisor", count=supervisors, expertise=["construction", "supervision"]),
        TeamMember(role="labor", count=laborers, expertise=["construction"]),
    ]
    manager = ProjectManager(name="Project Manager", experience=5, certifications=["Construction Management"])
    return [member.model_dump(mode="json") for member in composition], manager.model_dump(mode="json")


def price_bid(total: float, start_date: date, duration_months: int, team_size: int) -> PricedBid:
    team_composition, project_manager = build_team(team_size)
    return PricedBid(
        cost_breakdown=build_cost_breakdown(total, team_size=team_size),
        milestones=build_milestones(start_date, duration_months),
        team_composition=team_composition,
        project_manager=project_manager,
    )
