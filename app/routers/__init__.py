# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - contacts.py: Contact CRUD, listing, search, sort, pagination
# - uploads.py: Pre-signed upload authorizations
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import contacts
from . import uploads

__all__ = [
    "health",
    "contacts",
    "uploads",
]
