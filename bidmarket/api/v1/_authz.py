"""Shared authorization and error-mapping helpers for API v1 route modules."""

from __future__ import annotations

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from bidmarket.auth.identity import Identity, from_claims
from bidmarket.auth.jwt import decode_access_token
from bidmarket.auth.rbac import require_scopes
from bidmarket.core import exceptions
from bidmarket.core.config import get_config
from bidmarket.core.exceptions import AuthenticationError, MarketplaceError
from bidmarket.schemas.common import ErrorEnvelope

HTTP_STATUS_BY_KIND: dict[str, int] = {
    exceptions.NOT_FOUND: 404,
    exceptions.FORBIDDEN: 403,
    exceptions.INVALID_STATE: 409,
    exceptions.CONFLICT: 409,
    exceptions.VALIDATION: 422,
    exceptions.TIMEOUT: 504,
    exceptions.INTERNAL: 500,
}


def _extract_bearer_token(authorization: str | None) -> str:
    if authorization is None or not authorization.strip():
        raise AuthenticationError("Authorization header is required.")
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationError("Authorization header must use Bearer token.")
    return parts[1].strip()


def authorize(authorization: str | None, scopes: list[str]) -> Identity:
    """Resolve the caller and enforce ``scopes``.

    Authentication failures become 401s here; a missing scope raises
    ``ForbiddenError`` and is rendered by ``marketplace_error_handler``.
    """
    try:
        token = _extract_bearer_token(authorization)
        identity = from_claims(decode_access_token(token, secret=get_config().JWT_SECRET))
    except AuthenticationError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    require_scopes(identity.role, scopes)
    return identity


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    envelope = ErrorEnvelope(**exc.to_dict())
    return JSONResponse(
        status_code=HTTP_STATUS_BY_KIND.get(exc.kind, 500),
        content=envelope.model_dump(exclude_none=True),
    )
