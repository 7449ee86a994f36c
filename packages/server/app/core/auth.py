"""
Caller identity for the membership API.

Session handling lives outside this service. Clients present
``Authorization: Bearer <token>`` where the token is either:
- a signed JWT whose ``sub`` is the user id, or
- a bare user UUID (local development, ``allow_uuid_tokens``).

The resolved user id is passed explicitly into every service call.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import structlog
from fastapi import Depends
from fastapi.security import APIKeyHeader

from app.core.config import get_settings
from app.core.errors import Unauthenticated

log = structlog.get_logger()
settings = get_settings()

api_key_header = APIKeyHeader(name="Authorization", auto_error=False)


# ---------------------------------------------------------------------------
# JWT
# ---------------------------------------------------------------------------

def create_jwt(
    user_id: uuid.UUID,
    *,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed session JWT for a user."""
    now = datetime.now(timezone.utc)
    exp = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": exp,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_jwt(token: str) -> dict:
    """Decode and verify a JWT. Raises jwt.PyJWTError on failure."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])


def resolve_user_id(token: str) -> uuid.UUID:
    """Resolve a bearer token to a user id; raises Unauthenticated."""
    if settings.allow_uuid_tokens:
        try:
            return uuid.UUID(token)
        except ValueError:
            pass

    try:
        payload = decode_jwt(token)
    except jwt.PyJWTError:
        raise Unauthenticated("Invalid or expired session")

    try:
        return uuid.UUID(payload["sub"])
    except (KeyError, ValueError):
        raise Unauthenticated("Session has no valid subject")


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

async def get_caller_id(
    authorization: str | None = Depends(api_key_header),
) -> uuid.UUID:
    """FastAPI dependency returning the authenticated caller's user id."""
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthenticated("Authentication required")
    token = authorization[7:].strip()
    if not token:
        raise Unauthenticated("Authentication required")
    return resolve_user_id(token)
