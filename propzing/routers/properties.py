"""
Property endpoints: wizard submission, bulk entry, payload preview, search, details, updates and deletion.
"""

from fastapi import APIRouter, Depends, status, Query, Path
from fastapi.responses import JSONResponse
from typing import Optional

from propzing.repositories.property import PropertySearchFilters
from propzing.services.property import PropertyService
from propzing.services.submission import PropertySubmissionService
from propzing.services.entry import PropertyEntryService
from propzing.schemas.wizard import WizardFormData, WizardValidationResponse
from propzing.schemas.submission import SubmissionResult
from propzing.schemas.entry import PropertyEntryRequest, PropertyEntryResponse
from propzing.schemas.property_form import PropertyFormData, PayloadPreviewResponse
from propzing.schemas.property import (
    PropertyDetailsResponse,
    PropertyListResponse,
    PropertyFilterOptions,
    PropertyResponse,
    PropertyUpdate,
    PropertyDeleteResponse,
)
from propzing.schemas.error import get_crud_error_responses, get_common_error_responses, get_error_responses
from propzing.utils.auth import DashboardSession
from propzing.utils.adapters import convert_to_wizard_form_data
from propzing.utils.validators import validate_form_data, format_validation_errors
from propzing.utils.dependencies import (
    get_dashboard_session,
    get_property_service,
    get_submission_service,
    get_entry_service,
)
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/properties", tags=["Properties"])


@router.post(
    "/submit",
    response_model=SubmissionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Submit the property wizard",
    description="Validate the wizard and store the property with its related rows. "
                "Validation and fatal insert failures answer 400 with success false.",
    responses=get_error_responses(400, 422, 500)
)
async def submit_property(
    form: WizardFormData,
    submission_service: PropertySubmissionService = Depends(get_submission_service)
):
    result = await submission_service.submit_property(form)
    if not result.success:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=result.model_dump(mode="json"))
    return result


@router.post(
    "/entry",
    response_model=PropertyEntryResponse,
    status_code=status.HTTP_200_OK,
    summary="Add a property from a structured entry",
    responses=get_error_responses(400, 422, 500)
)
async def add_property_entry(
    request: PropertyEntryRequest,
    entry_service: PropertyEntryService = Depends(get_entry_service)
):
    """
    Store a whole project in one request.

    Related sections are best-effort; their outcome is listed in `sections`.
    """
    result = await entry_service.ingest(request)
    if not result.success:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=result.model_dump(mode="json"))
    return result


@router.post(
    "/payload",
    response_model=PayloadPreviewResponse,
    summary="Preview the storage payload for a property form",
    responses=get_error_responses(422)
)
async def preview_payload(
    form: PropertyFormData,
    property_service: PropertyService = Depends(get_property_service)
) -> PayloadPreviewResponse:
    return property_service.preview_payload(form)


@router.post(
    "/wizard/payload",
    response_model=PayloadPreviewResponse,
    summary="Preview the storage payload for a wizard submission",
    responses=get_error_responses(422)
)
async def preview_wizard_payload(
    form: WizardFormData,
    property_service: PropertyService = Depends(get_property_service)
) -> PayloadPreviewResponse:
    return property_service.preview_wizard_payload(form)


@router.post(
    "/form/wizard",
    response_model=WizardFormData,
    response_model_by_alias=False,
    summary="Convert a structured property form into wizard state",
    responses=get_error_responses(422)
)
async def convert_form_to_wizard(form: PropertyFormData) -> WizardFormData:
    return convert_to_wizard_form_data(form)


@router.post(
    "/validate",
    response_model=WizardValidationResponse,
    summary="Validate a wizard submission without storing it",
    responses=get_error_responses(422)
)
async def validate_wizard(form: WizardFormData) -> WizardValidationResponse:
    errors = validate_form_data(form)
    return WizardValidationResponse(
        valid=not errors,
        errors=errors,
        message=format_validation_errors(errors),
    )


@router.get(
    "",
    response_model=PropertyListResponse,
    summary="Search properties",
    description="Case-insensitive search over name, developer, area and external ID, newest first",
    responses=get_common_error_responses()
)
async def list_properties(
    search: Optional[str] = Query(None, description="Search text"),
    status_filter: Optional[str] = Query(None, alias="status", description="Exact status"),
    area: Optional[str] = Query(None, description="Exact area"),
    developer: Optional[str] = Query(None, description="Exact developer name"),
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    page_size: Optional[int] = Query(None, ge=1, le=100, description="Properties per page"),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyListResponse:
    filters = PropertySearchFilters(search_text=search, status=status_filter, area=area, developer=developer)
    return await property_service.list_properties(filters, page=page, page_size=page_size)


@router.get(
    "/filters",
    response_model=PropertyFilterOptions,
    summary="Values available to the property filters"
)
async def get_filter_options(
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyFilterOptions:
    return await property_service.get_filter_options()


@router.get(
    "/{identifier}",
    response_model=PropertyDetailsResponse,
    summary="Property details",
    description="Look up a property by numeric ID or by slug, with all related rows",
    responses=get_error_responses(404)
)
async def get_property(
    identifier: str = Path(..., description="Property ID or slug"),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyDetailsResponse:
    return await property_service.get_property_details(identifier)


@router.put(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Update a property",
    description="Apply the supplied fields and record each changed value in the property changelog",
    responses=get_crud_error_responses()
)
async def update_property(
    data: PropertyUpdate,
    property_id: int = Path(..., description="Property ID"),
    session: DashboardSession = Depends(get_dashboard_session),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    logger.info(f"Dashboard session {session.session_id} updating property {property_id}")
    return await property_service.update_property(property_id, data)


@router.delete(
    "/{property_id}",
    response_model=PropertyDeleteResponse,
    summary="Delete a property and its related rows",
    responses=get_crud_error_responses()
)
async def delete_property(
    property_id: int = Path(..., description="Property ID"),
    session: DashboardSession = Depends(get_dashboard_session),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyDeleteResponse:
    logger.info(f"Dashboard session {session.session_id} deleting property {property_id}")
    await property_service.delete_property(property_id)
    return PropertyDeleteResponse(message=f"Property {property_id} deleted successfully")
