# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Verifies the Supabase access token sent as "Authorization: Bearer <jwt>".
#
# Supports both:
# - HS256 tokens signed with the project's JWT secret
# - ES256/RS256 tokens signed with keys published at the project's JWKS URL
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
import time
from typing import Any, Optional

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError

from app.config import settings
from app.auth.models import ANONYMOUS_USER, AuthUser

logger = logging.getLogger(__name__)

# auto_error is off so that REQUIRE_AUTH=false can serve requests without a header
security = HTTPBearer(auto_error=False)

JWKS_CACHE_TTL = 3600  # 1 hour
_jwks_cache: dict[str, Any] = {}
_jwks_cache_time: float = 0


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _fetch_jwks() -> dict[str, Any]:
    """Fetch the project's JWKS, cached for JWKS_CACHE_TTL seconds."""
    global _jwks_cache, _jwks_cache_time

    now = time.time()
    if _jwks_cache and (now - _jwks_cache_time) < JWKS_CACHE_TTL:
        return _jwks_cache

    jwks_url = f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1/.well-known/jwks.json"
    try:
        response = httpx.get(jwks_url, timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        _jwks_cache_time = now
        logger.debug(f"Fetched JWKS from {jwks_url}")
    except httpx.HTTPError as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        # A stale key set is better than rejecting every token
        if not _jwks_cache:
            return {"keys": []}
    return _jwks_cache


def _signing_key(token: str) -> tuple[Any, str]:
    """
    Pick the key and algorithm to verify `token` with.

    Raises:
        JWTError: If the header is unreadable or no key matches
    """
    header = jwt.get_unverified_header(token)
    alg = header.get("alg", "HS256")

    if alg == "HS256":
        if not settings.SUPABASE_JWT_SECRET:
            raise JWTError("SUPABASE_JWT_SECRET is not configured")
        return settings.SUPABASE_JWT_SECRET, alg

    kid = header.get("kid")
    for key in _fetch_jwks().get("keys", []):
        if key.get("kid") == kid:
            return key, alg

    raise JWTError(f"No signing key found for kid={kid}")


def decode_access_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and return the user it identifies.

    Raises:
        HTTPException: 401 if the token is invalid, expired, or has no subject
    """
    try:
        key, algorithm = _signing_key(token)
        payload = jwt.decode(
            token,
            key,
            algorithms=[algorithm],
            audience="authenticated",
        )
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized(f"Invalid token: {e}")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise _unauthorized("Invalid token: missing user ID")

    return AuthUser(id=user_id, email=payload.get("email"), role=payload.get("role"))


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthUser:
    """
    Resolve the operator making the request.

    With REQUIRE_AUTH disabled every request runs as an anonymous user.

    Raises:
        HTTPException: 401 if auth is required and the token is missing or invalid
    """
    if not settings.REQUIRE_AUTH:
        return ANONYMOUS_USER

    if credentials is None:
        raise _unauthorized("Not authenticated")

    user = decode_access_token(credentials.credentials)
    logger.debug(f"Authenticated user: {user.id}")
    return user
