"""
Developer service for managing partner developers.
Handles name uniqueness, field cleanup and the in-use check before deletion.
"""

from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from propzing.repositories.developer import DeveloperRepository
from propzing.models.developer import PartnerDeveloper
from propzing.schemas.developer import DeveloperBase, DeveloperCreate, DeveloperUpdate
from propzing.utils.conversions import clean_str
from propzing.utils.validators import is_valid_email
from propzing.utils.exceptions import (
    APIException,
    ValidationError,
    BadRequestError,
    DeveloperNotFoundError,
    DuplicateDeveloperError,
    DeveloperInUseError,
)
import json
import logging

logger = logging.getLogger(__name__)


def parse_working_hours(value: Any) -> Optional[Any]:
    """
    Normalize working hours for JSON storage.

    JSON strings are parsed, other strings are wrapped as {"text": value},
    objects and arrays pass through, and empty values become None.
    """
    if not value:
        return None
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            return {"text": value}
    return value


class DeveloperService:
    """Partner developer management for the dashboard."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.developer_repo = DeveloperRepository(db_session)

    async def list_developers(self) -> List[PartnerDeveloper]:
        """All developers ordered by name."""
        try:
            return await self.developer_repo.list_ordered()
        except Exception as e:
            logger.error(f"Failed to list developers: {e}")
            raise BadRequestError(f"Failed to retrieve developers: {str(e)}")

    async def get_developer(self, developer_id: int) -> PartnerDeveloper:
        developer = await self.developer_repo.get_by_id(developer_id)
        if not developer:
            raise DeveloperNotFoundError(str(developer_id))
        return developer

    def _prepare(self, data: DeveloperBase) -> Dict[str, Any]:
        """Trim and clean the submitted fields; raises for a blank name."""
        name = (data.name or "").strip()
        if not name:
            raise ValidationError(
                "Developer name is required",
                field_errors=[{"field": "name", "message": "Developer name is required", "type": "value_error.missing"}]
            )

        # Stored as entered; a malformed address is logged, not rejected
        email = clean_str(data.email)
        if not is_valid_email(email):
            logger.warning(f"Developer {name} saved with a malformed email: {email}")

        return {
            "name": name,
            "email": email,
            "phone": clean_str(data.phone),
            "office_address": clean_str(data.office_address),
            "website": clean_str(data.website),
            "logo_url": clean_str(data.logo_url),
            "description": clean_str(data.description),
            "working_hours": parse_working_hours(data.working_hours),
            "source_id": data.source_id or None,
        }

    async def create_developer(self, data: DeveloperCreate) -> PartnerDeveloper:
        """
        Create a developer.

        Raises:
            ValidationError: If the name is blank or the email is malformed
            DuplicateDeveloperError: If a developer with the same name exists
        """
        try:
            values = self._prepare(data)

            if await self.developer_repo.get_by_name(values["name"]):
                raise DuplicateDeveloperError(data.name)

            developer = await self.developer_repo.create(values)
            logger.info(f"Developer created: {developer.name} (ID: {developer.id})")
            return developer

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to create developer: {e}")
            raise BadRequestError(f"Failed to create developer: {str(e)}")

    async def update_developer(self, developer_id: int, data: DeveloperUpdate) -> PartnerDeveloper:
        """
        Replace a developer's fields.

        Raises:
            DeveloperNotFoundError: If the developer doesn't exist
            DuplicateDeveloperError: If another developer already uses the name
        """
        try:
            values = self._prepare(data)
            developer = await self.get_developer(developer_id)

            if await self.developer_repo.name_taken_by_other(values["name"], developer_id):
                raise DuplicateDeveloperError(data.name, another=True)

            updated = await self.developer_repo.update(developer, values)
            logger.info(f"Developer updated: {updated.name} (ID: {developer_id})")
            return updated

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to update developer {developer_id}: {e}")
            raise BadRequestError(f"Failed to update developer: {str(e)}")

    async def delete_developer(self, developer_id: int) -> bool:
        """
        Delete a developer that no property references.

        Raises:
            DeveloperNotFoundError: If the developer doesn't exist
            DeveloperInUseError: If properties still reference it
        """
        try:
            await self.get_developer(developer_id)

            if await self.developer_repo.has_properties(developer_id):
                raise DeveloperInUseError()

            deleted = await self.developer_repo.delete(developer_id)
            logger.info(f"Developer deleted: {developer_id}")
            return deleted

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to delete developer {developer_id}: {e}")
            raise BadRequestError(f"Failed to delete developer: {str(e)}")
