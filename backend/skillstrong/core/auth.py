"""Bearer-token auth - resolves the Supabase user id for owner-scoped endpoints."""

import logging

import jwt
from fastapi import Header, HTTPException

from skillstrong.core.config import settings

logger = logging.getLogger(__name__)


class AuthError(Exception):
    pass


def decode_user_id(token: str) -> str:
    """Verify a Supabase access token and return its subject. Raises AuthError."""
    if not settings.supabase_jwt_secret:
        raise AuthError("Auth is not configured. Set SKILLSTRONG_SUPABASE_JWT_SECRET.")
    try:
        claims = jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=["HS256"],
            audience=settings.supabase_jwt_audience,
        )
    except jwt.PyJWTError as e:
        raise AuthError(f"Invalid token: {e}") from e

    sub = claims.get("sub")
    if not sub:
        raise AuthError("Token has no subject")
    return str(sub)


def _bearer(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_user_id(authorization: str | None = Header(default=None)) -> str:
    token = _bearer(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized")
    try:
        return decode_user_id(token)
    except AuthError as e:
        logger.debug(f"Rejected token: {e}")
        raise HTTPException(status_code=401, detail="Unauthorized")


async def get_optional_user_id(authorization: str | None = Header(default=None)) -> str | None:
    token = _bearer(authorization)
    if not token:
        return None
    try:
        return decode_user_id(token)
    except AuthError:
        return None


def require_admin(secret: str | None) -> None:
    """Gate admin endpoints behind the configured shared secret, if any."""
    if settings.admin_secret and secret != settings.admin_secret:
        raise HTTPException(status_code=401, detail="unauthorized")
