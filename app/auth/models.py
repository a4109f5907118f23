# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from typing import Optional

from pydantic import BaseModel, ConfigDict

# Served when REQUIRE_AUTH is off (local development)
ANONYMOUS_USER_ID = "00000000-0000-0000-0000-000000000000"


class AuthUser(BaseModel):
    """
    Operator identity extracted from a Supabase access token.

    This is the minimal user info available from the token itself,
    without querying the database.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    email: Optional[str] = None
    role: Optional[str] = None
    anonymous: bool = False


ANONYMOUS_USER = AuthUser(id=ANONYMOUS_USER_ID, role="anon", anonymous=True)
