# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory Supabase fake so store, service and API tests run offline
# - FastAPI TestClient with the shared services swapped via dependency_overrides
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length")
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "AKIATESTKEY")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test-secret-key")
os.environ.setdefault("AWS_BUCKET_NAME", "test-bucket")
os.environ.setdefault("REQUIRE_AUTH", "false")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from tests.fakes import FakeSupabase, ServiceBackedAPI


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def contact_payload():
    """A valid contact as a form or API client would send it."""
    return {
        "name": "John Doe",
        "phone": "1234567890",
        "email": "john@example.com",
        "age": 30,
    }


@pytest.fixture
def fake_supabase():
    """Empty in-memory contact_info table."""
    return FakeSupabase()


@pytest.fixture
def store(fake_supabase):
    from lib.supabase_client import ContactStore

    return ContactStore(fake_supabase, table="contact_info")


@pytest.fixture
def contact_service(store):
    from core.services.contact_service import ContactService

    return ContactService(store)


@pytest.fixture
def api(contact_service):
    """Client-side API backed directly by the contact service."""
    return ServiceBackedAPI(contact_service)


@pytest.fixture
def notices():
    from client.notifications import NoticeBoard

    return NoticeBoard()


@pytest.fixture
def fixed_now():
    return datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def mock_s3():
    """S3 client mock returning realistic signed URLs."""
    s3 = MagicMock()
    s3.generate_presigned_url.side_effect = lambda op, Params, ExpiresIn: (
        f"https://{Params['Bucket']}.s3.amazonaws.com/{Params['Key']}"
        f"?X-Amz-Algorithm=AWS4-HMAC-SHA256&X-Amz-Expires={ExpiresIn}&X-Amz-Signature=abc"
    )
    s3.generate_presigned_post.side_effect = lambda Bucket, Key, Fields, Conditions, ExpiresIn: {
        "url": f"https://{Bucket}.s3.amazonaws.com/",
        "fields": {**Fields, "key": Key, "policy": "eyJ...", "x-amz-signature": "abc"},
    }
    return s3


@pytest.fixture
def upload_service(mock_s3, fixed_now):
    from core.services.upload_service import UploadService

    return UploadService(
        mock_s3,
        bucket="test-bucket",
        expires_in=60,
        allowed_types=["image/"],
        clock=lambda: fixed_now,
    )


@pytest.fixture
def app(contact_service, upload_service):
    """The FastAPI app wired to the in-memory store and mocked S3."""
    from app.dependencies import get_contact_service, get_upload_service
    from app.main import app

    app.dependency_overrides[get_contact_service] = lambda: contact_service
    app.dependency_overrides[get_upload_service] = lambda: upload_service
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)
