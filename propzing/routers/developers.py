"""
Partner developer management endpoints for the admin dashboard.
Every route requires a dashboard session.
"""

from fastapi import APIRouter, Depends, status, Path

from propzing.services.developer import DeveloperService
from propzing.schemas.developer import (
    DeveloperCreate,
    DeveloperUpdate,
    DeveloperResponse,
    DeveloperListResponse,
)
from propzing.schemas.error import get_crud_error_responses, get_error_responses
from propzing.utils.dependencies import get_dashboard_session, get_developer_service


router = APIRouter(
    prefix="/developers",
    tags=["Developers"],
    dependencies=[Depends(get_dashboard_session)],
)


@router.get(
    "",
    response_model=DeveloperListResponse,
    summary="List developers",
    responses=get_error_responses(401)
)
async def list_developers(
    developer_service: DeveloperService = Depends(get_developer_service)
) -> DeveloperListResponse:
    developers = await developer_service.list_developers()
    return DeveloperListResponse(
        developers=[DeveloperResponse(**developer.to_dict()) for developer in developers],
        total=len(developers),
    )


@router.post(
    "",
    response_model=DeveloperResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create developer",
    responses=get_crud_error_responses()
)
async def create_developer(
    data: DeveloperCreate,
    developer_service: DeveloperService = Depends(get_developer_service)
) -> DeveloperResponse:
    """
    Create a partner developer.

    Names are unique; blank optional fields are stored as null.
    """
    developer = await developer_service.create_developer(data)
    return DeveloperResponse(**developer.to_dict())


@router.get(
    "/{developer_id}",
    response_model=DeveloperResponse,
    summary="Get developer",
    responses=get_error_responses(401, 404)
)
async def get_developer(
    developer_id: int = Path(..., description="Developer ID"),
    developer_service: DeveloperService = Depends(get_developer_service)
) -> DeveloperResponse:
    developer = await developer_service.get_developer(developer_id)
    return DeveloperResponse(**developer.to_dict())


@router.put(
    "/{developer_id}",
    response_model=DeveloperResponse,
    summary="Update developer",
    responses=get_crud_error_responses()
)
async def update_developer(
    data: DeveloperUpdate,
    developer_id: int = Path(..., description="Developer ID"),
    developer_service: DeveloperService = Depends(get_developer_service)
) -> DeveloperResponse:
    developer = await developer_service.update_developer(developer_id, data)
    return DeveloperResponse(**developer.to_dict())


@router.delete(
    "/{developer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete developer",
    description="Refused while any property still references the developer",
    responses=get_crud_error_responses()
)
async def delete_developer(
    developer_id: int = Path(..., description="Developer ID"),
    developer_service: DeveloperService = Depends(get_developer_service)
) -> None:
    await developer_service.delete_developer(developer_id)
