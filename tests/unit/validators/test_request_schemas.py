from __future__ import annotations

from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from bidmarket.schemas.bids import BidSubmitRequest, BidUpdateRequest
from bidmarket.schemas.common import clamp_pagination
from bidmarket.schemas.negotiations import CostNegotiation, TimelineNegotiation, negotiation_adapter
from bidmarket.schemas.projects import BudgetInput, LocationInput


def test_budget_max_defaults_to_twenty_percent_buffer():
    budget = BudgetInput(min=100000)
    assert budget.max == 120000


def test_budget_max_must_exceed_min():
    with pytest.raises(ValidationError):
        BudgetInput(min=100000, max=100000)


def test_city_is_derived_from_address():
    location = LocationInput(address="221B Baker Street, Mumbai")
    assert location.city == "221B Baker Street"


def test_pincode_must_be_six_digits():
    with pytest.raises(ValidationError):
        LocationInput(address="12 MG Road, Pune", pincode="01234")


def test_submit_rejects_past_start_date():
    with pytest.raises(ValidationError):
        BidSubmitRequest(
            proposed_cost=1000,
            start_date=date.today() - timedelta(days=1),
            duration=3,
            proposal="A sufficiently long proposal text.",
        )


def test_submit_rejects_short_proposal():
    with pytest.raises(ValidationError):
        BidSubmitRequest(proposed_cost=1000, start_date=date.today(), duration=3, proposal="too short")


def test_update_milestones_must_sum_to_hundred():
    when = (date.today() + timedelta(days=90)).isoformat()
    with pytest.raises(ValidationError, match="sum to 100"):
        BidUpdateRequest(
            milestones=[
                {"title": "Half", "expected_completion_date": when, "payment_percentage": 50},
                {"title": "Rest", "expected_completion_date": when, "payment_percentage": 40},
            ]
        )


def test_update_rejects_unknown_fields():
    with pytest.raises(ValidationError):
        BidUpdateRequest(discount=10)


def test_update_accepts_submit_name_for_proposal():
    text = "Revised plan with a larger site team."
    update = BidUpdateRequest.model_validate({"proposal": text})

    assert update.proposal_summary == text
    assert update.model_fields_set == {"proposal_summary"}
    assert BidUpdateRequest.model_validate({"proposal_summary": text}).proposal_summary == text


def test_negotiation_payload_is_dispatched_on_type():
    cost = negotiation_adapter.validate_python({"type": "cost", "original_value": 100, "proposed_value": 90})
    timeline = negotiation_adapter.validate_python({"type": "timeline", "original_value": 6, "proposed_value": 5})

    assert isinstance(cost, CostNegotiation)
    assert isinstance(timeline, TimelineNegotiation)


def test_negotiation_values_must_match_type():
    with pytest.raises(ValidationError):
        negotiation_adapter.validate_python({"type": "timeline", "original_value": 6, "proposed_value": 0})
    with pytest.raises(ValidationError):
        negotiation_adapter.validate_python({"type": "barter", "original_value": 1, "proposed_value": 2})


@pytest.mark.parametrize(
    ("page", "limit", "expected"),
    [
        (None, None, (1, 20)),
        (0, 500, (1, 100)),
        (-3, 0, (1, 1)),
        (4, 15, (4, 15)),
    ],
)
def test_pagination_is_clamped(page, limit, expected):
    assert clamp_pagination(page, limit, default_limit=20) == expected
