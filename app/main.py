# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Contacts API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   poetry run uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.dependencies import get_contact_service, get_upload_service
from app.exceptions import ContactsException, contacts_exception_handler
from app.routers import health, contacts, uploads
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup builds the shared services (and with them the single Supabase
    and S3 clients) so configuration errors surface before the first request.
    The clients hold no resources that need closing.
    """
    logger.info(f"Starting Contacts API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    get_contact_service()
    get_upload_service()
    logger.info(
        f"Services ready (table={settings.CONTACTS_TABLE}, "
        f"bucket={settings.AWS_BUCKET_NAME}, upload_mode={settings.UPLOAD_MODE})"
    )

    yield

    logger.info("Shutting down Contacts API")


app = FastAPI(
    title="Contacts API",
    description="""
## Contact records with direct-to-storage image uploads

### How It Works

1. **Create** - add one contact or a batch of contacts
2. **List** - search by name, sort by any column, page through results
3. **Edit** - send only the changed fields
4. **Attach an image** - get an upload authorization, upload straight to S3,
   then store the returned `publicUrl` as the contact's `image_url`

### Quick Start

```bash
# 1. Create a contact
curl -X POST http://localhost:8000/api/v1/contacts \\
  -H "Content-Type: application/json" \\
  -d '{"name": "John Doe", "phone": "1234567890", "email": "john@example.com", "age": 30}'

# 2. Search
curl "http://localhost:8000/api/v1/contacts?search=jo&sort_by=age&sort_dir=asc&page=0"

# 3. Get an upload authorization
curl -X POST http://localhost:8000/api/v1/uploads/authorization \\
  -H "Content-Type: application/json" \\
  -d '{"fileName": "avatar.png", "fileType": "image/png"}'
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Verify Supabase access tokens"},
        {"name": "Contacts", "description": "Create, list, edit and delete contacts"},
        {"name": "Uploads", "description": "Pre-signed upload authorizations"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(ContactsException)
async def handle_contacts_exception(request: Request, exc: ContactsException):
    """Handle custom Contacts API exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return await contacts_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

app.include_router(
    contacts.router,
    prefix="/api/v1/contacts",
    tags=["Contacts"]
)

app.include_router(
    uploads.router,
    prefix="/api/v1/uploads",
    tags=["Uploads"]
)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint - returns API info."""
    return {
        "name": "Contacts API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
