"""
Tests for presigned and direct uploads.
"""

import io
import pytest
from unittest.mock import Mock
from botocore.exceptions import ClientError
from PIL import Image

from propzing.config import settings
from propzing.schemas.upload import PresignRequest
from propzing.services.storage import StorageService
from propzing.utils.file_utils import FileStorage
from propzing.utils.exceptions import (
    StorageConfigurationError,
    StorageError,
    FileSizeExceededError,
    UnsupportedFileTypeError,
)


@pytest.fixture
def r2_settings(monkeypatch):
    """Object storage credentials as configured in production."""
    monkeypatch.setattr(settings, "cloudflare_account_id", "acc123")
    monkeypatch.setattr(settings, "r2_access_key_id", "key")
    monkeypatch.setattr(settings, "r2_secret_access_key", "secret")
    monkeypatch.setattr(settings, "r2_bucket_name", "listings")
    monkeypatch.setattr(settings, "r2_bucket_public_domain", "media.propzing.com")


@pytest.fixture
def no_r2_settings(monkeypatch):
    for field in (
        "cloudflare_account_id",
        "r2_access_key_id",
        "r2_secret_access_key",
        "r2_bucket_name",
        "r2_bucket_public_domain",
    ):
        monkeypatch.setattr(settings, field, None)


@pytest.fixture
def s3_client():
    client = Mock()
    client.generate_presigned_url.return_value = "https://acc123.r2.cloudflarestorage.com/listings/key?X-Amz-Signature=abc"
    return client


def presign_request(**overrides) -> PresignRequest:
    data = {"fileName": "lobby.jpg", "fileType": "image/jpeg", "category": "image", "fileSize": 2048}
    data.update(overrides)
    return PresignRequest.model_validate(data)


def png_bytes(width: int = 32, height: int = 16) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height)).save(buffer, format="PNG")
    return buffer.getvalue()


class TestPresignedUpload:

    def test_presigned_url(self, r2_settings, s3_client):
        service = StorageService(client=s3_client)

        response = service.create_presigned_upload(presign_request())

        assert response.success is True
        assert response.upload_url.startswith("https://acc123.r2.cloudflarestorage.com/")
        assert response.key.startswith("images/")
        assert response.key.endswith("-lobby.jpg")
        assert response.public_url == f"https://media.propzing.com/{response.key}"

        s3_client.generate_presigned_url.assert_called_once_with(
            "put_object",
            Params={"Bucket": "listings", "Key": response.key, "ContentType": "image/jpeg"},
            ExpiresIn=settings.presigned_url_expiry,
        )

    def test_response_uses_camel_case(self, r2_settings, s3_client):
        response = StorageService(client=s3_client).create_presigned_upload(presign_request())
        data = response.model_dump(by_alias=True)

        assert set(data) == {"success", "uploadUrl", "publicUrl", "key"}

    def test_validation_runs_before_signing(self, r2_settings, s3_client):
        service = StorageService(client=s3_client)

        with pytest.raises(FileSizeExceededError):
            service.create_presigned_upload(presign_request(fileSize=10 * 1024 * 1024))
        with pytest.raises(UnsupportedFileTypeError):
            service.create_presigned_upload(presign_request(fileType="application/pdf"))

        s3_client.generate_presigned_url.assert_not_called()

    def test_signing_failure(self, r2_settings, s3_client):
        s3_client.generate_presigned_url.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, "PutObject"
        )

        with pytest.raises(StorageError) as exc_info:
            StorageService(client=s3_client).create_presigned_upload(presign_request())
        assert exc_info.value.status_code == 502
        assert exc_info.value.detail.startswith("Failed to generate upload URL:")

    def test_missing_configuration_outside_development(self, no_r2_settings, monkeypatch, s3_client):
        monkeypatch.setattr(settings, "environment", "production")

        with pytest.raises(StorageConfigurationError) as exc_info:
            StorageService(client=s3_client).create_presigned_upload(presign_request())
        assert exc_info.value.status_code == 503

    def test_development_fallback(self, no_r2_settings, monkeypatch, tmp_path, s3_client):
        monkeypatch.setattr(settings, "environment", "development")
        service = StorageService(client=s3_client, local_storage=FileStorage(base_dir=tmp_path))

        response = service.create_presigned_upload(presign_request())

        assert response.upload_url == response.public_url == f"/uploads/{response.key}"
        s3_client.generate_presigned_url.assert_not_called()


class TestDirectUpload:

    @pytest.mark.asyncio
    async def test_upload_to_object_storage(self, r2_settings, s3_client):
        content = png_bytes(32, 16)

        response = await StorageService(client=s3_client).upload_file("plan.png", "image/png", content, "image")

        assert response.url == f"https://media.propzing.com/{response.key}"
        assert response.path == response.key
        assert response.name == "plan.png"
        assert response.mime == "image/png"
        assert response.size == len(content)
        assert (response.width, response.height) == (32, 16)
        s3_client.put_object.assert_called_once_with(
            Bucket="listings", Key=response.key, Body=content, ContentType="image/png"
        )

    @pytest.mark.asyncio
    async def test_non_image_has_no_dimensions(self, r2_settings, s3_client):
        response = await StorageService(client=s3_client).upload_file(
            "brochure.pdf", "application/pdf", b"%PDF-1.4", "document"
        )

        assert response.key.startswith("documents/")
        assert response.width is None
        assert response.size_label == "8 Bytes"

    @pytest.mark.asyncio
    async def test_upload_failure(self, r2_settings, s3_client):
        s3_client.put_object.side_effect = ClientError(
            {"Error": {"Code": "InternalError", "Message": "boom"}}, "PutObject"
        )

        with pytest.raises(StorageError, match="Failed to upload file"):
            await StorageService(client=s3_client).upload_file("a.png", "image/png", png_bytes(), "image")

    @pytest.mark.asyncio
    async def test_local_upload_in_development(self, no_r2_settings, monkeypatch, tmp_path):
        monkeypatch.setattr(settings, "environment", "development")
        service = StorageService(local_storage=FileStorage(base_dir=tmp_path))
        content = png_bytes()

        response = await service.upload_file("cover.png", "image/png", content, "image")

        assert response.url == f"/uploads/{response.key}"
        assert (tmp_path / response.key).read_bytes() == content
