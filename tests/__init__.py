# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Contacts API and client:
# - test_models.py: Pydantic model validation and field messages
# - test_contact_store.py: Record store and contact service over a fake Supabase
# - test_upload_service.py: Upload authorization signing
# - test_api.py: HTTP endpoints through FastAPI's TestClient
# - test_auth.py: Access token verification
# - test_listing.py, test_editor.py, test_forms.py, test_upload_flow.py:
#   client-side flows
#
# Run tests with: poetry run pytest
# =============================================================================
