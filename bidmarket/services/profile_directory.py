"""Lookup of client and vendor profiles by authenticated user id."""

from __future__ import annotations

from sqlalchemy.orm import Session

from bidmarket.core.exceptions import NotFoundError
from bidmarket.database.models import ClientProfile, VendorProfile


class ProfileDirectory:
    """Resolves user ids to marketplace profiles inside the caller's session."""

    def get_client(self, session: Session, user_id: int) -> ClientProfile | None:
        return session.query(ClientProfile).filter(ClientProfile.user_id == user_id).first()

    def get_vendor(self, session: Session, user_id: int) -> VendorProfile | None:
        return session.query(VendorProfile).filter(VendorProfile.user_id == user_id).first()

    def require_client(self, session: Session, user_id: int) -> ClientProfile:
        client = self.get_client(session, user_id)
        if client is None:
            raise NotFoundError("Client profile not found. Please create your profile first")
        return client

    def require_vendor(self, session: Session, user_id: int) -> VendorProfile:
        vendor = self.get_vendor(session, user_id)
        if vendor is None:
            raise NotFoundError("Vendor profile not found")
        return vendor
