# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable wrappers around external services:
# - supabase_client.py: Supabase client singleton + contacts table store
# - storage_client.py: S3 client singleton used for signing uploads
# - utils.py: Shared utilities (identifier normalization, object keys, URLs)
#
# Modules are imported directly (e.g. `from lib.supabase_client import ...`)
# so that importing one does not pull in every external SDK.
# =============================================================================
