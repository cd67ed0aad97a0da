from __future__ import annotations

from datetime import timedelta

import pytest

from bidmarket.auth.identity import from_claims
from bidmarket.auth.jwt import create_access_token, decode_access_token, decode_jwt, encode_jwt
from bidmarket.auth.rbac import has_scopes, require_scopes
from bidmarket.core.exceptions import AuthenticationError, ForbiddenError


def test_access_token_roundtrip_contains_required_claims():
    token = create_access_token(user_id=10, role="vendor_supplier", secret="test-secret")
    claims = decode_jwt(token, secret="test-secret")

    assert claims["sub"] == "10"
    assert claims["role"] == "vendor_supplier"
    assert {"exp", "iat", "jti"} <= set(claims)


def test_tampered_or_foreign_token_is_rejected():
    token = create_access_token(user_id=10, role="client_owner", secret="test-secret")
    with pytest.raises(AuthenticationError, match="signature"):
        decode_jwt(token, secret="other-secret")
    with pytest.raises(AuthenticationError, match="format"):
        decode_jwt("not-a-token", secret="test-secret")


def test_expired_token_is_rejected():
    token = encode_jwt({"sub": "1", "role": "client_owner"}, secret="s", ttl=timedelta(seconds=-5))
    with pytest.raises(AuthenticationError, match="expired"):
        decode_jwt(token, secret="s")


def test_only_access_tokens_identify_callers():
    refresh = encode_jwt({"sub": "1", "role": "client_owner", "token_use": "refresh"}, secret="s", ttl=timedelta(days=1))
    with pytest.raises(AuthenticationError, match="access token"):
        decode_access_token(refresh, secret="s")

    access = create_access_token(user_id=1, role="client_owner", secret="s")
    assert decode_access_token(access, secret="s")["token_use"] == "access"


def test_vendor_cannot_decide_on_bids():
    require_scopes("vendor_supplier", ["bids.submit"])
    with pytest.raises(ForbiddenError):
        require_scopes("vendor_supplier", ["bids.decide"])


def test_construction_firm_bids_like_a_vendor():
    assert has_scopes("construction_firm", ["bids.submit", "bids.manage_own"])
    assert not has_scopes("construction_firm", ["projects.create"])
    assert has_scopes("construction_firm", ["bids.batch_read"])
    assert not has_scopes("vendor_supplier", ["bids.batch_read"])


def test_identity_from_claims():
    identity = from_claims({"sub": "7", "role": "CONSTRUCTION_FIRM"})
    assert identity.user_id == 7
    assert identity.is_vendor
    assert identity.initiator == "vendor"

    with pytest.raises(AuthenticationError):
        from_claims({"sub": "7", "role": "admin"})
