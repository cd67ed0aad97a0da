from __future__ import annotations

from types import SimpleNamespace

from bidmarket.services.eligibility import check_eligibility, covers_budget


def _vendor(**overrides):
    values = {
        "status": "active",
        "services": ["residential"],
        "years_in_business": 6,
        "rating_average": 4.2,
        "is_verified": False,
        "min_budget": None,
        "max_budget": None,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def _project(**overrides):
    values = {
        "project_type": "residential",
        "min_experience": 5,
        "min_rating": 4.0,
        "budget_min": 100000,
        "budget_max": 150000,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def test_unverified_active_vendor_is_eligible():
    result = check_eligibility(_vendor(), _project())
    assert result.ok is True
    assert result.reason is None


def test_inactive_vendor_fails_first():
    result = check_eligibility(_vendor(status="suspended", years_in_business=0), _project())
    assert result.ok is False
    assert result.reason == "Vendor account is not active"


def test_service_mismatch_is_rejected():
    result = check_eligibility(_vendor(services=["commercial"]), _project())
    assert result.reason == "Project type does not match vendor services"


def test_wildcard_or_empty_services_match_any_type():
    assert check_eligibility(_vendor(services=["Any"]), _project(project_type="industrial")).ok
    assert check_eligibility(_vendor(services=["NA"]), _project(project_type="industrial")).ok
    assert check_eligibility(_vendor(services=[]), _project(project_type="industrial")).ok


def test_experience_checked_before_rating():
    result = check_eligibility(_vendor(years_in_business=2, rating_average=1.0), _project())
    assert result.reason == "Vendor does not meet minimum experience requirement"


def test_low_rating_is_rejected():
    result = check_eligibility(_vendor(rating_average=3.9), _project())
    assert result.reason == "Vendor does not meet minimum rating requirement"


def test_missing_thresholds_default_to_zero():
    vendor = _vendor(years_in_business=0, rating_average=0)
    assert check_eligibility(vendor, _project(min_experience=None, min_rating=None)).ok


def test_covers_budget_respects_declared_range():
    project = _project()
    assert covers_budget(_vendor(), project)
    assert covers_budget(_vendor(min_budget=50000, max_budget=200000), project)
    assert not covers_budget(_vendor(min_budget=120000), project)
    assert not covers_budget(_vendor(max_budget=140000), project)
