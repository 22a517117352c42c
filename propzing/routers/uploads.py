"""
Upload endpoints for listing media.
Both routes require the shared X-Upload-Secret header.
"""

from fastapi import APIRouter, Depends, UploadFile, File, Form, status

from propzing.services.storage import StorageService
from propzing.schemas.upload import PresignRequest, PresignResponse, UploadResponse
from propzing.schemas.error import get_upload_error_responses
from propzing.utils.dependencies import get_storage_service, verify_upload_secret
from propzing.utils.exceptions import FileUploadError


router = APIRouter(
    prefix="/uploads",
    tags=["Uploads"],
    dependencies=[Depends(verify_upload_secret)],
)


@router.post(
    "/presign",
    response_model=PresignResponse,
    summary="Get a presigned upload URL",
    description="Sign a PUT URL for uploading one file straight to object storage",
    responses=get_upload_error_responses()
)
async def create_presigned_upload(
    request: PresignRequest,
    storage_service: StorageService = Depends(get_storage_service)
) -> PresignResponse:
    return storage_service.create_presigned_upload(request)


@router.post(
    "",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a file",
    description="Upload a file through the API; images are returned with their dimensions",
    responses=get_upload_error_responses()
)
async def upload_file(
    file: UploadFile = File(..., description="File to upload"),
    category: str = Form("image", description="image, video, document or file"),
    storage_service: StorageService = Depends(get_storage_service)
) -> UploadResponse:
    if not file.filename:
        raise FileUploadError("No file provided")

    content = await file.read()
    return await storage_service.upload_file(
        filename=file.filename,
        content_type=file.content_type or "application/octet-stream",
        content=content,
        category=category,
    )
