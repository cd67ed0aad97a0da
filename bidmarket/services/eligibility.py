"""Vendor eligibility rules for bidding on a project.

Rules run in order and the first failure wins. Verification status is not a
rule: any active vendor may bid.
"""

from __future__ import annotations

from dataclasses import dataclass

from bidmarket.core.enums import VendorStatus

# Service lists containing one of these match every project type.
WILDCARD_SERVICES = {"any", "na"}


@dataclass(frozen=True)
class EligibilityResult:
    ok: bool
    reason: str | None = None


ELIGIBLE = EligibilityResult(ok=True)


def _declares_services(services: list[str] | None) -> bool:
    if not services:
        return False
    return not any(str(service).strip().lower() in WILDCARD_SERVICES for service in services)


def check_eligibility(vendor, project) -> EligibilityResult:
    """Return whether ``vendor`` may bid on ``project`` and, if not, why."""
    if vendor.status != VendorStatus.ACTIVE.value:
        return EligibilityResult(ok=False, reason="Vendor account is not active")

    services = list(vendor.services or [])
    if _declares_services(services):
        offered = {str(service).strip().lower() for service in services}
        if str(project.project_type).lower() not in offered:
            return EligibilityResult(ok=False, reason="Project type does not match vendor services")

    min_experience = project.min_experience or 0
    if (vendor.years_in_business or 0) < min_experience:
        return EligibilityResult(ok=False, reason="Vendor does not meet minimum experience requirement")

    min_rating = project.min_rating or 0
    if (vendor.rating_average or 0) < min_rating:
        return EligibilityResult(ok=False, reason="Vendor does not meet minimum rating requirement")

    return ELIGIBLE


def covers_budget(vendor, project) -> bool:
    """True when the vendor's declared budget range (if any) covers the project's."""
    if vendor.min_budget is not None and vendor.min_budget > project.budget_min:
        return False
    if vendor.max_budget is not None and vendor.max_budget < project.budget_max:
        return False
    return True
