"""
Read-only queries behind the analytics and home dashboards.
Aggregation happens in the analytics service; these methods only fetch counts and rows.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, desc
from propzing.models.analytics import VisitorFingerprint, UserSession, UserActivityEvent
from propzing.models.property import Property
from propzing.models.developer import PartnerDeveloper
from datetime import datetime
from typing import Optional, List, Dict, Iterable, Tuple
import logging

logger = logging.getLogger(__name__)


class AnalyticsRepository:
    """Queries over visitor fingerprints, sessions, activity events and properties."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _scalar_count(self, query) -> int:
        try:
            result = await self.db.execute(query)
            return result.scalar() or 0
        except Exception as e:
            logger.error(f"Analytics count query failed: {e}")
            raise

    async def _rows(self, query) -> List:
        try:
            result = await self.db.execute(query)
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"Analytics query failed: {e}")
            raise

    # Visitors

    async def count_visitors(
        self,
        linked_only: bool = False,
        first_seen_since: Optional[datetime] = None
    ) -> int:
        query = select(func.count(VisitorFingerprint.id))
        if linked_only:
            query = query.where(VisitorFingerprint.linked_user_id.is_not(None))
        if first_seen_since is not None:
            query = query.where(VisitorFingerprint.first_seen_at >= first_seen_since)
        return await self._scalar_count(query)

    async def recent_visitors(self, limit: int = 50) -> List[VisitorFingerprint]:
        query = (
            select(VisitorFingerprint)
            .order_by(desc(VisitorFingerprint.last_seen_at), desc(VisitorFingerprint.id))
            .limit(limit)
        )
        return await self._rows(query)

    async def visitors_seen_since(self, since: Optional[datetime] = None) -> List[VisitorFingerprint]:
        query = select(VisitorFingerprint)
        if since is not None:
            query = query.where(VisitorFingerprint.last_seen_at >= since)
        return await self._rows(query)

    # Sessions

    async def count_sessions(self, started_since: Optional[datetime] = None) -> int:
        query = select(func.count(UserSession.id))
        if started_since is not None:
            query = query.where(UserSession.started_at >= started_since)
        return await self._scalar_count(query)

    async def count_active_sessions(self, active_since: datetime) -> int:
        query = select(func.count(UserSession.id)).where(
            UserSession.is_active.is_(True),
            UserSession.last_activity_at >= active_since
        )
        return await self._scalar_count(query)

    async def active_sessions(self, active_since: datetime, limit: int = 20) -> List[UserSession]:
        query = (
            select(UserSession)
            .where(UserSession.is_active.is_(True), UserSession.last_activity_at >= active_since)
            .order_by(desc(UserSession.last_activity_at))
            .limit(limit)
        )
        return await self._rows(query)

    async def ended_sessions(self, limit: int = 1000) -> List[UserSession]:
        query = select(UserSession).where(UserSession.ended_at.is_not(None)).limit(limit)
        return await self._rows(query)

    # Events

    async def count_events(
        self,
        since: Optional[datetime] = None,
        event_types: Optional[Iterable[str]] = None
    ) -> int:
        query = select(func.count(UserActivityEvent.id))
        if since is not None:
            query = query.where(UserActivityEvent.created_at >= since)
        if event_types is not None:
            query = query.where(UserActivityEvent.event_type.in_(list(event_types)))
        return await self._scalar_count(query)

    async def list_events(
        self,
        since: Optional[datetime] = None,
        event_types: Optional[Iterable[str]] = None,
        with_property: bool = False,
        limit: Optional[int] = None
    ) -> List[UserActivityEvent]:
        """Events in a window, optionally limited to types or to property events."""
        query = select(UserActivityEvent)
        if since is not None:
            query = query.where(UserActivityEvent.created_at >= since)
        if event_types is not None:
            query = query.where(UserActivityEvent.event_type.in_(list(event_types)))
        if with_property:
            query = query.where(UserActivityEvent.property_id.is_not(None))
        if limit is not None:
            query = query.limit(limit)
        return await self._rows(query)

    async def latest_events(self, limit: int) -> List[UserActivityEvent]:
        query = (
            select(UserActivityEvent)
            .order_by(desc(UserActivityEvent.created_at), desc(UserActivityEvent.id))
            .limit(limit)
        )
        return await self._rows(query)

    # Properties

    async def property_labels(self, property_ids: Iterable[int]) -> Dict[int, Tuple[str, Optional[str]]]:
        """Map property id to (name, slug) for the ids that still exist."""
        ids = list(set(property_ids))
        if not ids:
            return {}
        try:
            query = select(Property.id, Property.name, Property.slug).where(Property.id.in_(ids))
            result = await self.db.execute(query)
            return {row.id: (row.name, row.slug) for row in result.all()}
        except Exception as e:
            logger.error(f"Failed to load property names: {e}")
            raise

    async def count_properties(self, status: Optional[str] = None) -> int:
        query = select(func.count(Property.id))
        if status is not None:
            query = query.where(Property.status == status)
        return await self._scalar_count(query)

    async def recent_properties(self, limit: int = 5) -> List[Property]:
        query = select(Property).order_by(desc(Property.created_at), desc(Property.id)).limit(limit)
        return await self._rows(query)

    async def property_developer_names(self) -> List[Optional[str]]:
        """Developer name for every property that has a developer."""
        query = (
            select(PartnerDeveloper.name)
            .select_from(Property)
            .outerjoin(PartnerDeveloper, Property.developer_id == PartnerDeveloper.id)
            .where(Property.developer_id.is_not(None))
        )
        return await self._rows(query)

    async def property_countries(self) -> List[Optional[str]]:
        try:
            result = await self.db.execute(select(Property.country))
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"Failed to load property countries: {e}")
            raise
