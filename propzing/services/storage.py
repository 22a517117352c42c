"""
Object storage uploads against Cloudflare R2 through its S3 compatible API.
Issues presigned PUT URLs for the browser and stores files uploaded through the API.
"""

from typing import Optional
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool
from propzing.schemas.upload import PresignRequest, PresignResponse, UploadResponse
from propzing.utils.file_utils import (
    FileValidator,
    FileStorage,
    build_object_key,
    format_file_size,
    get_image_dimensions,
)
from propzing.utils.exceptions import StorageConfigurationError, StorageError
from propzing.config import settings
import logging

logger = logging.getLogger(__name__)


class StorageService:
    """
    Upload service for listing media.

    Without R2 credentials, development falls back to local disk and any other
    environment refuses uploads.
    """

    def __init__(self, client=None, local_storage: Optional[FileStorage] = None):
        self._client = client
        self._local_storage = local_storage

    def _get_client(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                endpoint_url=settings.r2_endpoint_url,
                aws_access_key_id=settings.r2_access_key_id,
                aws_secret_access_key=settings.r2_secret_access_key,
                region_name="auto",
            )
        return self._client

    def _get_local_storage(self) -> FileStorage:
        if self._local_storage is None:
            self._local_storage = FileStorage()
        return self._local_storage

    def _public_url(self, key: str) -> str:
        return f"https://{settings.r2_bucket_public_domain}/{key}"

    def _use_local_storage(self) -> bool:
        """Whether to fall back to local disk; raises when storage is required but missing."""
        if settings.storage_configured:
            return False
        if settings.is_development:
            return True
        logger.error("Upload refused: object storage credentials are not configured")
        raise StorageConfigurationError()

    def create_presigned_upload(self, request: PresignRequest) -> PresignResponse:
        """
        Sign a PUT URL the browser can upload the file to directly.

        Raises:
            FileUploadError: If the request fails validation
            StorageConfigurationError: If storage is not configured outside development
            StorageError: If signing fails
        """
        FileValidator.validate_upload(request.file_name, request.file_type, request.file_size, request.category)
        key = build_object_key(request.file_name, request.category)

        if self._use_local_storage():
            # Nothing is signed locally; the caller uploads through POST /uploads instead
            logger.warning(f"Development mode: returning local upload target for {key}")
            local_url = self._get_local_storage().public_url(key)
            return PresignResponse(upload_url=local_url, public_url=local_url, key=key)

        try:
            upload_url = self._get_client().generate_presigned_url(
                "put_object",
                Params={
                    "Bucket": settings.r2_bucket_name,
                    "Key": key,
                    "ContentType": request.file_type,
                },
                ExpiresIn=settings.presigned_url_expiry,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to generate presigned URL for {key}: {e}")
            raise StorageError(f"Failed to generate upload URL: {str(e)}")

        logger.info(f"Generated presigned upload URL for {key}")
        return PresignResponse(upload_url=upload_url, public_url=self._public_url(key), key=key)

    async def upload_file(
        self,
        filename: str,
        content_type: str,
        content: bytes,
        category: str
    ) -> UploadResponse:
        """
        Store an uploaded file and describe it in the ImageInput shape.

        Args:
            filename: Original file name
            content_type: MIME type reported by the client
            content: File bytes
            category: Upload category

        Raises:
            FileUploadError: If the file fails validation
            StorageConfigurationError: If storage is not configured outside development
            StorageError: If the object store rejects the file
        """
        size = len(content)
        FileValidator.validate_upload(filename, content_type, size, category)
        key = build_object_key(filename, category)

        width, height = (None, None)
        if category == "image":
            width, height = get_image_dimensions(content)

        if self._use_local_storage():
            local = self._get_local_storage()
            await local.save_bytes(key, content)
            url = local.public_url(key)
            logger.info(f"Saved {filename} locally as {key}")
        else:
            try:
                await run_in_threadpool(
                    self._get_client().put_object,
                    Bucket=settings.r2_bucket_name,
                    Key=key,
                    Body=content,
                    ContentType=content_type,
                )
            except (BotoCoreError, ClientError) as e:
                logger.error(f"Failed to upload {key}: {e}")
                raise StorageError(f"Failed to upload file: {str(e)}")
            url = self._public_url(key)
            logger.info(f"Uploaded {filename} to object storage as {key}")

        return UploadResponse(
            url=url,
            key=key,
            name=filename,
            path=key,
            mime=content_type,
            size=size,
            width=width,
            height=height,
            size_label=format_file_size(size),
        )
