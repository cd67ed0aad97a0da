"""Caller identity extracted from verified token claims."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from bidmarket.core.enums import Initiator, UserRole
from bidmarket.core.exceptions import AuthenticationError


@dataclass(frozen=True)
class Identity:
    user_id: int
    role: str

    @property
    def is_client(self) -> bool:
        return self.role == UserRole.CLIENT_OWNER.value

    @property
    def is_vendor(self) -> bool:
        return self.role in {UserRole.VENDOR_SUPPLIER.value, UserRole.CONSTRUCTION_FIRM.value}

    @property
    def initiator(self) -> str:
        """Negotiation side this caller speaks for."""
        return Initiator.CLIENT.value if self.is_client else Initiator.VENDOR.value


def from_claims(claims: dict[str, Any]) -> Identity:
    """Build an identity from JWT claims; unknown roles are rejected."""
    try:
        user_id = int(claims["sub"])
        role = UserRole(str(claims["role"]).lower()).value
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthenticationError("Token claims are missing user/role context.") from exc
    return Identity(user_id=user_id, role=role)
