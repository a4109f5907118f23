# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic:
# - models/: Pydantic schemas shared by the API and the client package
# - services/: Contact CRUD and upload authorization services
#
# Models must stay free of FastAPI and SDK imports so the client package
# can validate forms with exactly the rules the API enforces.
# =============================================================================
