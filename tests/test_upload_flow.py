# =============================================================================
# tests/test_upload_flow.py - Direct Upload Flow Tests
# =============================================================================
# Tests the client-side upload state machine. The storage service is an
# httpx.MockTransport that records what the flow sends; the API is a
# stub returning a prepared authorization.
#
# Run with: poetry run pytest tests/test_upload_flow.py -v
# =============================================================================

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from client import DirectUploadFlow, InvalidTransitionError, UploadState
from client.api import ContactsAPI, ContactsAPIError
from core.models import UploadAuthorization, UploadMethod

NOW = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
PUBLIC_URL = "https://test-bucket.s3.amazonaws.com/avatar.png"


def put_authorization(**overrides):
    data = {
        "method": UploadMethod.PUT,
        "key": "avatar.png",
        "content_type": "image/png",
        "expires_at": NOW + timedelta(seconds=60),
        "upload_url": f"{PUBLIC_URL}?X-Amz-Expires=60&X-Amz-Signature=abc",
        "public_url": PUBLIC_URL,
    }
    data.update(overrides)
    return UploadAuthorization(**data)


def post_authorization():
    return UploadAuthorization(
        method=UploadMethod.POST,
        key="avatar.png",
        content_type="image/png",
        expires_at=NOW + timedelta(seconds=60),
        url="https://test-bucket.s3.amazonaws.com/",
        fields={"key": "avatar.png", "Content-Type": "image/png", "policy": "eyJ..."},
        public_url=PUBLIC_URL,
    )


class StubAPI:
    def __init__(self, authorization=None, error=None):
        self.authorization = authorization
        self.error = error
        self.requests = []

    async def request_upload_authorization(self, file_name, file_type):
        self.requests.append((file_name, file_type))
        if self.error:
            raise self.error
        return self.authorization


class StorageRecorder:
    """MockTransport handler standing in for the bucket."""

    def __init__(self, status_code=200):
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code)


@pytest.fixture
def storage():
    return StorageRecorder()


def make_flow(api, storage, **kwargs):
    transfer = httpx.AsyncClient(transport=httpx.MockTransport(storage))
    return DirectUploadFlow(api, transfer, clock=lambda: NOW, **kwargs)


class TestStateMachine:
    """Tests for allowed and rejected transitions."""

    def test_starts_idle(self, storage):
        flow = make_flow(StubAPI(), storage)
        assert flow.state == UploadState.IDLE

    def test_select_does_not_upload(self, storage):
        api = StubAPI(put_authorization())
        flow = make_flow(api, storage)

        flow.select_file("avatar.png", b"\x89PNG", "image/png")

        assert flow.state == UploadState.FILE_SELECTED
        assert api.requests == []
        assert storage.requests == []

    @pytest.mark.asyncio
    async def test_upload_without_file(self, storage):
        flow = make_flow(StubAPI(), storage)

        with pytest.raises(InvalidTransitionError):
            await flow.upload()

    @pytest.mark.asyncio
    async def test_select_after_success_starts_over(self, storage):
        flow = make_flow(StubAPI(put_authorization()), storage)
        flow.select_file("avatar.png", b"\x89PNG", "image/png")
        await flow.upload()

        flow.select_file("avatar.png", b"other", "image/png")

        assert flow.state == UploadState.FILE_SELECTED
        assert flow.public_url is None


class TestPutTransfer:
    """Tests for uploads through a pre-signed PUT URL."""

    @pytest.mark.asyncio
    async def test_success(self, storage):
        completed = []
        flow = make_flow(StubAPI(put_authorization()), storage, on_complete=completed.append)
        flow.select_file("avatar.png", b"\x89PNG", "image/png")

        url = await flow.upload()

        assert url == PUBLIC_URL
        assert flow.state == UploadState.SUCCEEDED
        assert completed == [PUBLIC_URL]

        request = storage.requests[0]
        assert request.method == "PUT"
        assert request.headers["Content-Type"] == "image/png"
        assert request.content == b"\x89PNG"
        assert "X-Amz-Signature" in str(request.url)

    @pytest.mark.asyncio
    async def test_storage_rejects(self):
        storage = StorageRecorder(status_code=403)
        flow = make_flow(StubAPI(put_authorization()), storage)
        flow.select_file("avatar.png", b"\x89PNG", "image/png")

        assert await flow.upload() is None
        assert flow.state == UploadState.FAILED
        assert "403" in flow.error

    @pytest.mark.asyncio
    async def test_authorization_failure(self, storage):
        api = StubAPI(error=ContactsAPIError("Error generating upload URL", status_code=502))
        flow = make_flow(api, storage)
        flow.select_file("avatar.png", b"\x89PNG", "image/png")

        await flow.upload()

        assert flow.state == UploadState.FAILED
        assert "Error generating upload URL" in flow.error
        assert storage.requests == []

    @pytest.mark.asyncio
    async def test_expired_authorization_not_used(self, storage):
        expired = put_authorization(expires_at=NOW - timedelta(seconds=1))
        flow = make_flow(StubAPI(expired), storage)
        flow.select_file("avatar.png", b"\x89PNG", "image/png")

        await flow.upload()

        assert flow.state == UploadState.FAILED
        assert "expired" in flow.error
        assert storage.requests == []

    @pytest.mark.asyncio
    async def test_authorization_for_other_key_not_used(self, storage):
        flow = make_flow(StubAPI(put_authorization(key="someone-else.png")), storage)
        flow.select_file("avatar.png", b"\x89PNG", "image/png")

        await flow.upload()

        assert flow.state == UploadState.FAILED
        assert storage.requests == []

    @pytest.mark.asyncio
    async def test_authorization_for_other_type_not_used(self, storage):
        flow = make_flow(StubAPI(put_authorization(content_type="image/jpeg")), storage)
        flow.select_file("avatar.png", b"\x89PNG", "image/png")

        await flow.upload()

        assert flow.state == UploadState.FAILED
        assert storage.requests == []

    @pytest.mark.asyncio
    async def test_failed_upload_is_not_retried(self):
        storage = StorageRecorder(status_code=500)
        flow = make_flow(StubAPI(put_authorization()), storage)
        flow.select_file("avatar.png", b"\x89PNG", "image/png")

        await flow.upload()

        assert len(storage.requests) == 1
        with pytest.raises(InvalidTransitionError):
            await flow.upload()


class TestPostTransfer:
    """Tests for uploads through a POST policy."""

    @pytest.mark.asyncio
    async def test_multipart_form(self, storage):
        flow = make_flow(StubAPI(post_authorization()), storage)
        flow.select_file("avatar.png", b"\x89PNG", "image/png")

        await flow.upload()

        request = storage.requests[0]
        body = request.content
        assert flow.state == UploadState.SUCCEEDED
        assert request.method == "POST"
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert b'name="key"' in body
        assert b'name="file"; filename="avatar.png"' in body
        # Policy fields must precede the file part
        assert body.index(b'name="policy"') < body.index(b'name="file"')


def api_answering(handler):
    """A real ContactsAPI whose server is a MockTransport handler."""
    http = httpx.AsyncClient(base_url="http://api.test", transport=httpx.MockTransport(handler))
    return ContactsAPI(http)


class TestUnexpectedFailures:
    """Every way an upload can go wrong ends in FAILED, never stuck mid-flight."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, json={"uploadURL": "https://x"}),
            httpx.Response(200, text="<html>gateway</html>"),
        ],
        ids=["missing-fields", "not-json"],
    )
    async def test_malformed_authorization_body(self, storage, response):
        flow = make_flow(api_answering(lambda request: response), storage)
        flow.select_file("avatar.png", b"\x89PNG", "image/png")

        assert await flow.upload() is None

        assert flow.state == UploadState.FAILED
        assert flow.error.startswith("Could not get upload authorization")
        assert storage.requests == []

        flow.reset()
        flow.select_file("avatar.png", b"\x89PNG", "image/png")
        assert flow.state == UploadState.FILE_SELECTED

    @pytest.mark.asyncio
    async def test_unexpected_api_exception(self, storage):
        flow = make_flow(StubAPI(error=RuntimeError("boom")), storage)
        flow.select_file("avatar.png", b"\x89PNG", "image/png")

        assert await flow.upload() is None

        assert flow.state == UploadState.FAILED
        assert "boom" in flow.error

    @pytest.mark.asyncio
    async def test_unusable_upload_url(self, storage):
        bad = put_authorization(upload_url=f"{PUBLIC_URL}\n?X-Amz-Signature=abc")
        flow = make_flow(StubAPI(bad), storage)
        flow.select_file("avatar.png", b"\x89PNG", "image/png")

        assert await flow.upload() is None

        assert flow.state == UploadState.FAILED
        assert flow.error.startswith("Upload failed")
        assert storage.requests == []

        flow.select_file("avatar.png", b"\x89PNG", "image/png")
        assert flow.state == UploadState.FILE_SELECTED

    @pytest.mark.asyncio
    async def test_transport_error_during_transfer(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        flow = make_flow(StubAPI(put_authorization()), refuse)
        flow.select_file("avatar.png", b"\x89PNG", "image/png")

        assert await flow.upload() is None
        assert flow.state == UploadState.FAILED
        assert "connection refused" in flow.error
