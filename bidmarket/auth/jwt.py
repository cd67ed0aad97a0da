"""Bearer token codec for marketplace identities (HS256).

Tokens are issued by the external auth layer; this module only needs to read
them. ``create_access_token`` exists for local tooling and tests and produces
the same claim set that layer issues: ``sub`` (user id), ``role`` and
``token_use="access"``.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from bidmarket.core.exceptions import AuthenticationError

ALGORITHM = "HS256"
ACCESS_TOKEN_USE = "access"


def _encode_segment(value: dict[str, Any] | bytes) -> str:
    raw = value if isinstance(value, bytes) else json.dumps(value, separators=(",", ":"), sort_keys=True).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _decode_segment(segment: str) -> dict[str, Any]:
    try:
        raw = base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))
        value = json.loads(raw.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as exc:
        raise AuthenticationError("Invalid token payload.") from exc
    if not isinstance(value, dict):
        raise AuthenticationError("Invalid token payload.")
    return value


def _signature(signing_input: str, secret: str) -> str:
    if not secret:
        raise AuthenticationError("JWT secret must be configured.")
    return _encode_segment(hmac.new(secret.encode("utf-8"), signing_input.encode("ascii"), hashlib.sha256).digest())


def encode_jwt(payload: dict[str, Any], secret: str, ttl: timedelta) -> str:
    """Sign ``payload``; ``iat``, ``exp`` and ``jti`` are filled in when absent."""
    issued = datetime.now(timezone.utc)
    claims = {
        "iat": int(issued.timestamp()),
        "exp": int((issued + ttl).timestamp()),
        "jti": uuid.uuid4().hex,
        **payload,
    }
    signing_input = f"{_encode_segment({'alg': ALGORITHM, 'typ': 'JWT'})}.{_encode_segment(claims)}"
    return f"{signing_input}.{_signature(signing_input, secret)}"


def decode_jwt(token: str, secret: str, verify_exp: bool = True) -> dict[str, Any]:
    """Verify signature and expiry, then return the claims."""
    parts = token.split(".") if token else []
    if len(parts) != 3:
        raise AuthenticationError("Invalid token format.")
    header_segment, claims_segment, signature = parts

    if _decode_segment(header_segment).get("alg") != ALGORITHM:
        raise AuthenticationError("Unsupported token algorithm.")
    if not hmac.compare_digest(_signature(f"{header_segment}.{claims_segment}", secret), signature):
        raise AuthenticationError("Invalid token signature.")

    claims = _decode_segment(claims_segment)
    if verify_exp:
        if "exp" not in claims:
            raise AuthenticationError("Token is missing exp claim.")
        if int(claims["exp"]) < int(datetime.now(timezone.utc).timestamp()):
            raise AuthenticationError("Token has expired.")
    return claims


def decode_access_token(token: str, secret: str) -> dict[str, Any]:
    claims = decode_jwt(token, secret=secret)
    if claims.get("token_use", ACCESS_TOKEN_USE) != ACCESS_TOKEN_USE:
        raise AuthenticationError("Token is not an access token.")
    return claims


def create_access_token(user_id: int, role: str, secret: str, ttl_minutes: int = 60) -> str:
    payload = {"sub": str(user_id), "role": role, "token_use": ACCESS_TOKEN_USE}
    return encode_jwt(payload, secret=secret, ttl=timedelta(minutes=ttl_minutes))
