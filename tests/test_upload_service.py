# =============================================================================
# tests/test_upload_service.py - Upload Authorization Tests
# =============================================================================
# Tests that authorizations are bound to one key and one content type,
# carry the configured expiry, and that signing failures are reported
# without creating anything.
#
# Signing is local in boto3, so the "real client" tests need no network.
#
# Run with: poetry run pytest tests/test_upload_service.py -v
# =============================================================================

from datetime import timedelta
from urllib.parse import parse_qs, unquote, urlsplit

import pytest
from botocore.exceptions import ClientError

from app.exceptions import InvalidUploadKeyError, InvalidUploadTypeError, UploadAuthorizationError
from core.models import UploadMethod
from core.services.upload_service import UploadService
from lib.storage_client import create_s3_client
from lib.utils import object_url


class TestPutAuthorization:
    """Tests for the pre-signed PUT variant."""

    def test_signs_key_and_content_type(self, upload_service, mock_s3):
        upload_service.issue_authorization("avatar.png", "image/png")

        mock_s3.generate_presigned_url.assert_called_once_with(
            "put_object",
            Params={"Bucket": "test-bucket", "Key": "avatar.png", "ContentType": "image/png"},
            ExpiresIn=60,
        )

    def test_authorization_fields(self, upload_service, fixed_now):
        auth = upload_service.issue_authorization("avatar.png", "image/png")

        assert auth.method == UploadMethod.PUT
        assert auth.key == "avatar.png"
        assert auth.content_type == "image/png"
        assert auth.expires_at == fixed_now + timedelta(seconds=60)
        assert auth.upload_url.startswith("https://test-bucket.s3.amazonaws.com/avatar.png?")
        assert auth.public_url == "https://test-bucket.s3.amazonaws.com/avatar.png"

    def test_directories_stripped_from_key(self, upload_service):
        auth = upload_service.issue_authorization("../../etc/avatar.png", "image/png")
        assert auth.key == "avatar.png"

    def test_key_prefix(self, mock_s3):
        service = UploadService(mock_s3, bucket="test-bucket", key_prefix="contacts/")

        auth = service.issue_authorization("avatar.png", "image/png")

        assert auth.key == "contacts/avatar.png"

    def test_empty_basename_rejected(self, upload_service, mock_s3):
        with pytest.raises(InvalidUploadKeyError):
            upload_service.issue_authorization("uploads/", "image/png")

        mock_s3.generate_presigned_url.assert_not_called()

    def test_non_image_type_rejected(self, upload_service, mock_s3):
        with pytest.raises(InvalidUploadTypeError) as exc_info:
            upload_service.issue_authorization("notes.txt", "text/plain")

        assert exc_info.value.status_code == 400
        mock_s3.generate_presigned_url.assert_not_called()

    def test_exact_type_allowed(self, mock_s3):
        service = UploadService(mock_s3, bucket="test-bucket", allowed_types=["application/pdf"])

        assert service.issue_authorization("cv.pdf", "application/pdf").content_type == "application/pdf"

    def test_signing_failure(self, upload_service, mock_s3):
        mock_s3.generate_presigned_url.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )

        with pytest.raises(UploadAuthorizationError) as exc_info:
            upload_service.issue_authorization("avatar.png", "image/png")

        assert exc_info.value.to_dict()["error"] == "Error generating upload URL"
        assert exc_info.value.status_code == 502


class TestPostAuthorization:
    """Tests for the pre-signed POST policy variant."""

    @pytest.fixture
    def post_service(self, mock_s3, fixed_now):
        return UploadService(
            mock_s3,
            bucket="test-bucket",
            mode="post",
            max_size_bytes=1024,
            clock=lambda: fixed_now,
        )

    def test_policy_binds_content_type_and_size(self, post_service, mock_s3):
        post_service.issue_authorization("avatar.png", "image/png")

        kwargs = mock_s3.generate_presigned_post.call_args.kwargs
        assert kwargs["Key"] == "avatar.png"
        assert kwargs["Fields"] == {"Content-Type": "image/png"}
        assert {"Content-Type": "image/png"} in kwargs["Conditions"]
        assert ["content-length-range", 1, 1024] in kwargs["Conditions"]

    def test_public_url_joins_form_url_and_key(self, post_service):
        auth = post_service.issue_authorization("avatar.png", "image/png")

        assert auth.method == UploadMethod.POST
        assert auth.upload_url is None
        assert auth.fields["key"] == "avatar.png"
        assert auth.public_url == "https://test-bucket.s3.amazonaws.com/avatar.png"

    def test_public_url_percent_encodes_key(self, post_service):
        auth = post_service.issue_authorization("my photo#1.png", "image/png")

        assert auth.fields["key"] == "my photo#1.png"
        assert auth.public_url == "https://test-bucket.s3.amazonaws.com/my%20photo%231.png"


class TestObjectUrl:
    """Tests for joining an endpoint and a key."""

    def test_prefix_slashes_kept(self):
        assert object_url("https://b.example.com/", "contacts/a b.png") == (
            "https://b.example.com/contacts/a%20b.png"
        )

    def test_reserved_characters_encoded(self):
        assert object_url("https://b.example.com", "x?y#z&.png") == (
            "https://b.example.com/x%3Fy%23z%26.png"
        )


class TestRealSigner:
    """Tests against a real boto3 client with dummy credentials."""

    @pytest.fixture
    def s3(self):
        return create_s3_client("us-east-1", "AKIATESTKEY", "test-secret-key")

    def test_put_url_carries_expiry_and_key(self, s3):
        service = UploadService(s3, bucket="test-bucket", expires_in=60)

        auth = service.issue_authorization("avatar.png", "image/png")

        parts = urlsplit(auth.upload_url)
        query = parse_qs(parts.query)
        assert parts.path == "/avatar.png"
        assert query["X-Amz-Expires"] == ["60"]
        assert "X-Amz-Signature" in query
        assert auth.public_url == f"{parts.scheme}://{parts.netloc}/avatar.png"

    def test_post_fields_bound_to_key(self, s3):
        service = UploadService(s3, bucket="test-bucket", mode="post", max_size_bytes=1024)

        auth = service.issue_authorization("avatar.png", "image/png")

        assert auth.fields["key"] == "avatar.png"
        assert auth.fields["Content-Type"] == "image/png"
        assert "policy" in auth.fields
        assert auth.public_url.endswith("/avatar.png")

    def test_put_and_post_public_urls_encode_key_alike(self, s3):
        """Spaces, '#' and '?' in a name must not leak into the URL raw."""
        put = UploadService(s3, bucket="test-bucket", mode="put")
        post = UploadService(s3, bucket="test-bucket", mode="post")

        put_auth = put.issue_authorization("my photo#1?.png", "image/png")
        post_auth = post.issue_authorization("my photo#1?.png", "image/png")

        put_parts = urlsplit(put_auth.public_url)
        post_parts = urlsplit(post_auth.public_url)
        assert post_parts.path == put_parts.path == "/my%20photo%231%3F.png"
        assert post_parts.query == post_parts.fragment == ""
        assert unquote(post_parts.path) == "/" + post_auth.key
