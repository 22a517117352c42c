"""
Property service for the dashboard: details, search, updates with changelog, deletion and payload preview.
"""

from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from propzing.repositories.property import PropertyRepository, PropertySearchFilters
from propzing.repositories.developer import DeveloperRepository
from propzing.models.property import Property, CHANGELOG_EXCLUDED_FIELDS
from propzing.schemas.property import (
    PropertyDetailsResponse,
    PropertyListItem,
    PropertyListResponse,
    PropertyFilterOptions,
    PropertyResponse,
    PropertyUpdate,
)
from propzing.schemas.developer import DeveloperResponse
from propzing.schemas.property_form import PropertyFormData, PayloadPreviewResponse
from propzing.schemas.wizard import WizardFormData
from propzing.services.payload import build_property_payload, validate_property_form
from propzing.utils.adapters import convert_to_property_form_data
from propzing.utils.exceptions import (
    APIException,
    BadRequestError,
    PropertyNotFoundError,
    DeveloperNotFoundError,
)
from propzing.config import settings
import logging

logger = logging.getLogger(__name__)

CHANGELOG_TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def changelog_text(value: Any) -> Optional[str]:
    """Text form of a column value as recorded in the changelog."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_changelog_entries(
    current: Dict[str, Any],
    changes: Dict[str, Any],
    now: Optional[datetime] = None
) -> List[Dict[str, Any]]:
    """
    Changelog entries for the columns whose text value changes.

    Args:
        current: Current column values
        changes: New column values
        now: Timestamp for the entries, defaults to the current UTC time
    """
    timestamp = (now or datetime.now(timezone.utc)).strftime(CHANGELOG_TIME_FORMAT)
    entries = []
    for field, new_value in changes.items():
        if field in CHANGELOG_EXCLUDED_FIELDS:
            continue
        old_text = changelog_text(current.get(field))
        new_text = changelog_text(new_value)
        if old_text != new_text:
            entries.append({
                "date_and_time": timestamp,
                "field": field,
                "old_value": old_text,
                "new_value": new_text,
                "metadata": "",
            })
    return entries


class PropertyService:
    """
    Property service for the admin dashboard.
    Reads go through the repository; updates record a field-level changelog.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.developer_repo = DeveloperRepository(db_session)

    async def _resolve(self, identifier: str) -> Property:
        """Numeric identifiers are ids (hash ids are negative), anything else is a slug."""
        property_obj = None
        try:
            property_id = int(identifier)
        except ValueError:
            property_id = None

        if property_id is not None:
            property_obj = await self.property_repo.get_with_details(property_id)
        else:
            by_slug = await self.property_repo.get_by_slug(identifier)
            if by_slug:
                property_obj = await self.property_repo.get_with_details(by_slug.id)

        if not property_obj:
            raise PropertyNotFoundError(identifier)
        return property_obj

    async def get_property_details(self, identifier: str) -> PropertyDetailsResponse:
        """
        Get a property with every related row.

        Args:
            identifier: Property id or slug

        Raises:
            PropertyNotFoundError: If no property matches
        """
        try:
            property_obj = await self._resolve(str(identifier))
            return PropertyDetailsResponse(
                property=PropertyResponse(**property_obj.to_dict()),
                developer=DeveloperResponse(**property_obj.developer.to_dict()) if property_obj.developer else None,
                images=[image.to_dict() for image in property_obj.images],
                unit_blocks=[block.to_dict() for block in property_obj.unit_blocks],
                buildings=[building.to_dict() for building in property_obj.buildings],
                facilities=[link.to_dict() for link in property_obj.facility_links],
                map_points=[point.to_dict() for point in property_obj.map_points],
                payment_plans=[plan.to_dict() for plan in property_obj.payment_plans],
            )
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to get property {identifier}: {e}")
            raise BadRequestError(f"Failed to retrieve property: {str(e)}")

    async def list_properties(
        self,
        filters: PropertySearchFilters,
        page: int = 1,
        page_size: Optional[int] = None
    ) -> PropertyListResponse:
        """
        Search properties for the dashboard table, newest first.

        Args:
            filters: Search text and exact-match filters
            page: 1-based page number
            page_size: Rows per page, capped at the configured maximum
        """
        try:
            page = max(page, 1)
            page_size = min(page_size or settings.default_page_size, settings.max_page_size)
            skip = (page - 1) * page_size

            properties, total = await self.property_repo.search_properties(filters, skip=skip, limit=page_size)
            total_pages = (total + page_size - 1) // page_size if total else 0

            items = []
            for property_obj in properties:
                data = property_obj.to_dict()
                items.append(PropertyListItem(**{field: data.get(field) for field in PropertyListItem.model_fields}))

            return PropertyListResponse(
                properties=items,
                total=total,
                page=page,
                page_size=page_size,
                total_pages=total_pages,
                has_next=page < total_pages,
                has_previous=page > 1,
            )
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to search properties: {e}")
            raise BadRequestError(f"Failed to search properties: {str(e)}")

    async def get_filter_options(self) -> PropertyFilterOptions:
        """Distinct areas, statuses and developer names for the dashboard filters."""
        try:
            return PropertyFilterOptions(
                areas=await self.property_repo.get_distinct_values("area"),
                statuses=await self.property_repo.get_distinct_values("status"),
                developers=await self.developer_repo.list_names(),
            )
        except Exception as e:
            logger.error(f"Failed to load filter options: {e}")
            raise BadRequestError(f"Failed to load filter options: {str(e)}")

    async def update_property(self, property_id: int, data: PropertyUpdate) -> PropertyResponse:
        """
        Apply a partial update and append changelog entries for changed fields.

        Raises:
            PropertyNotFoundError: If the property doesn't exist
            DeveloperNotFoundError: If a new developer_id doesn't exist
        """
        try:
            property_obj = await self.property_repo.get_by_id(property_id)
            if not property_obj:
                raise PropertyNotFoundError(str(property_id))

            changes = data.model_dump(exclude_unset=True)
            if changes.get("developer_id") is not None:
                if not await self.developer_repo.exists(changes["developer_id"]):
                    raise DeveloperNotFoundError(str(changes["developer_id"]))

            current = {field: getattr(property_obj, field) for field in changes}
            entries = build_changelog_entries(current, changes)
            if entries:
                changes["changelog"] = list(property_obj.changelog or []) + entries

            updated = await self.property_repo.update(property_obj, changes)
            logger.info(f"Property updated: {property_id} ({len(entries)} field changes)")
            return PropertyResponse(**updated.to_dict())

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to update property {property_id}: {e}")
            raise BadRequestError(f"Failed to update property: {str(e)}")

    async def delete_property(self, property_id: int) -> bool:
        """
        Delete a property and its related rows.

        Raises:
            PropertyNotFoundError: If the property doesn't exist
        """
        try:
            deleted = await self.property_repo.delete(property_id)
            if not deleted:
                raise PropertyNotFoundError(str(property_id))

            logger.info(f"Property deleted: {property_id}")
            return True

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to delete property {property_id}: {e}")
            raise BadRequestError(f"Failed to delete property: {str(e)}")

    def preview_payload(self, form: PropertyFormData) -> PayloadPreviewResponse:
        """Build the storage payload and list the form's issues without storing anything."""
        issues = validate_property_form(form)
        return PayloadPreviewResponse(
            payload=build_property_payload(form),
            issues=issues,
            valid=not any(issue.severity == "error" for issue in issues),
        )

    def preview_wizard_payload(self, wizard: WizardFormData) -> PayloadPreviewResponse:
        """Same as preview_payload for a wizard submission, mapped onto the structured form first."""
        return self.preview_payload(convert_to_property_form_data(wizard))
