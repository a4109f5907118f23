# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Verifies Supabase-issued JWTs. Sign-in itself happens against Supabase
# Auth; this API only checks the resulting access token.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
# =============================================================================

from app.auth.dependencies import get_current_user, decode_access_token
from app.auth.models import AuthUser, ANONYMOUS_USER

__all__ = [
    "get_current_user",
    "decode_access_token",
    "AuthUser",
    "ANONYMOUS_USER",
]
