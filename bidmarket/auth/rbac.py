"""Role-based authorization helpers."""

from __future__ import annotations

from bidmarket.core.exceptions import ForbiddenError

_VENDOR_SCOPES = {
    "projects.search",
    "projects.read",
    "bids.submit",
    "bids.manage_own",
    "bids.read",
    "bids.negotiate",
    "bids.analysis",
}

# Scope strings are kept explicit for endpoint-level declarations.
ROLE_SCOPES: dict[str, set[str]] = {
    "client_owner": {
        "projects.create",
        "projects.manage",
        "projects.search",
        "projects.read",
        "projects.match_vendors",
        "bids.read",
        "bids.batch_read",
        "bids.decide",
        "bids.negotiate",
        "bids.analysis",
    },
    "vendor_supplier": set(_VENDOR_SCOPES),
    # Firms bid like individual vendors and may also read bids in batches.
    "construction_firm": _VENDOR_SCOPES | {"bids.batch_read"},
}


def get_scopes_for_role(role: str) -> set[str]:
    """Return scopes granted to a role."""
    return ROLE_SCOPES.get(role.lower(), set())


def has_scopes(role: str, required_scopes: list[str] | set[str] | tuple[str, ...]) -> bool:
    """Check if role includes every required scope."""
    return set(required_scopes).issubset(get_scopes_for_role(role))


def require_scopes(role: str, required_scopes: list[str] | set[str] | tuple[str, ...]) -> None:
    """Raise when a role lacks required scopes."""
    if has_scopes(role=role, required_scopes=required_scopes):
        return
    missing = sorted(set(required_scopes) - get_scopes_for_role(role))
    raise ForbiddenError(f"Missing required scopes: {', '.join(missing)}")
