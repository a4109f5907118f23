# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Liveness and readiness checks. Readiness goes through the same injected
# services the contact and upload routes use, so it fails exactly when
# they would.
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from app.dependencies import ContactServiceDep, UploadServiceDep

router = APIRouter()

API_VERSION = "1.0.0"


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    environment: str
    version: str


class DependencyCheck(BaseModel):
    """State of one backing service."""
    target: str
    status: str


class ReadinessResponse(BaseModel):
    status: str
    record_store: DependencyCheck
    object_storage: DependencyCheck
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health status for load balancers and monitoring."""
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=API_VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(contacts: ContactServiceDep, uploads: UploadServiceDep):
    """
    Readiness check.

    The record store must answer a count query on the contacts table.
    Signing uploads needs no network call, so object storage is ready
    once a signer and a bucket are configured.
    """
    store = DependencyCheck(target=contacts.store.table, status="healthy")
    try:
        contacts.store.count()
    except Exception as e:
        store.status = f"unhealthy: {str(e)[:50]}"

    storage = DependencyCheck(target=uploads.bucket, status="healthy")
    if uploads.s3 is None or not uploads.bucket:
        storage.status = "unhealthy: no signer configured"

    ready = store.status == "healthy" and storage.status == "healthy"
    return ReadinessResponse(
        status="ready" if ready else "degraded",
        record_store=store,
        object_storage=storage,
        timestamp=_now(),
    )


@router.get("/health/live")
async def liveness_check():
    """Whether the process is alive."""
    return {"status": "alive", "timestamp": _now()}
