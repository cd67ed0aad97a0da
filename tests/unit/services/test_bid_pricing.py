from __future__ import annotations

from datetime import date

import pytest

from bidmarket.services.bid_pricing import build_cost_breakdown, build_milestones, build_team, price_bid


def test_breakdown_splits_total_and_absorbs_rounding():
    items = build_cost_breakdown(100000.01, team_size=4)
    by_category = {item["category"]: item for item in items}

    assert by_category["labor"]["amount"] == pytest.approx(60000.01)
    assert by_category["labor"]["quantity"] == 4
    assert by_category["materials"]["amount"] == pytest.approx(30000.0)
    assert sum(item["amount"] for item in items) == pytest.approx(100000.01)


def test_milestones_follow_thirty_forty_thirty_plan():
    milestones = build_milestones(date(2030, 1, 1), duration_months=6)

    assert [m["payment_percentage"] for m in milestones] == [30.0, 40.0, 30.0]
    assert [m["expected_completion_date"] for m in milestones] == ["2030-02-24", "2030-05-07", "2030-06-30"]


def test_team_scales_supervisors_with_size():
    composition, manager = build_team(8)
    counts = {member["role"]: member["count"] for member in composition}

    assert counts == {"project_manager": 1, "supervisor": 2, "labor": 5}
    assert manager["experience"] == 5


def test_small_team_still_has_one_laborer():
    composition, _ = build_team(1)
    counts = {member["role"]: member["count"] for member in composition}
    assert counts == {"project_manager": 1, "supervisor": 1, "labor": 1}


def test_price_bid_bundles_every_part():
    priced = price_bid(250000, date(2030, 3, 1), 12, 10)

    assert sum(m["payment_percentage"] for m in priced.milestones) == pytest.approx(100)
    assert priced.project_manager["name"] == "Project Manager"
    assert len(priced.cost_breakdown) == 3
