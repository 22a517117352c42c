"""
Analytics service behind the dashboard pages.
Counts come from the database; grouping and ranking happen here over the fetched rows.
"""

import csv
import io
from collections import Counter, defaultdict
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from propzing.repositories.analytics import AnalyticsRepository
from propzing.models.analytics import EventType
from propzing.schemas.analytics import (
    DateRange,
    PropertySort,
    NameValue,
    OverviewStats,
    RecentEvent,
    TopProperty,
    DailyTrend,
    OverviewResponse,
    PropertyStats,
    PropertyAnalyticsResponse,
    UserStats,
    VisitorData,
    DailyVisitors,
    UserAnalyticsResponse,
    RealtimeStats,
    LiveEvent,
    ActiveSession,
    RealtimeResponse,
    DeveloperCount,
    RecentProperty,
    HomeStatsResponse,
)
from propzing.utils.exceptions import APIException, BadRequestError
import logging

logger = logging.getLogger(__name__)

EVENT_LABELS = {
    "property_card_click": "Card Click",
    "property_view_details": "View Details",
    "property_map_marker_click": "Map Click",
    "property_save": "Save",
    "property_unsave": "Unsave",
    "property_share": "Share",
    "page_view": "Page View",
    "search_query": "Search",
}

CSV_HEADERS = [
    "Property Name",
    "Total Views",
    "Card Clicks",
    "Detail Views",
    "Map Clicks",
    "Saves",
    "Shares",
    "Unique Visitors",
    "Avg View Duration (s)",
]

PROPERTY_STATUSES = {
    "under_construction": "Under construction",
    "completed": "Completed",
    "on_sale": "On Sale",
}

ACTIVE_WINDOW = timedelta(minutes=2)
DEVELOPER_NAME_LIMIT = 30


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    """Naive timestamps from the database are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_midnight(now: Optional[datetime] = None) -> datetime:
    """Start of the current local day, expressed in UTC."""
    local_now = (now or _utcnow()).astimezone()
    midnight = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight.astimezone(timezone.utc)


def range_start(date_range: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Lower bound for a dashboard date range.

    Returns:
        UTC datetime, or None for "all"
    """
    now = now or _utcnow()
    if date_range == "today":
        return local_midnight(now)
    if date_range == "7days":
        return now - timedelta(days=7)
    if date_range == "30days":
        return now - timedelta(days=30)
    return None


def _day(value: datetime) -> str:
    return _as_utc(value).strftime("%Y-%m-%d")


def _name_label(name: Optional[str], property_id: int) -> str:
    return name or f"Property #{property_id}"


class AnalyticsService:
    """Dashboard analytics over visitor tracking data and the property catalogue."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.analytics_repo = AnalyticsRepository(db_session)

    async def overview(self, date_range: DateRange = "7days") -> OverviewResponse:
        """
        Headline numbers, event mix, recent events, top properties and daily trends.

        Args:
            date_range: today, 7days, 30days or all
        """
        try:
            repo = self.analytics_repo
            since = range_start(date_range)

            stats = OverviewStats(
                total_visitors=await repo.count_visitors(),
                total_sessions=await repo.count_sessions(started_since=since),
                total_events=await repo.count_events(since=since),
                total_property_views=await repo.count_events(
                    since=since,
                    event_types=[EventType.PROPERTY_CARD_CLICK.value, EventType.PROPERTY_VIEW_DETAILS.value]
                ),
                total_saves=await repo.count_events(since=since, event_types=[EventType.PROPERTY_SAVE.value]),
                total_shares=await repo.count_events(since=since, event_types=[EventType.PROPERTY_SHARE.value]),
                active_users_today=await repo.count_sessions(started_since=local_midnight()),
            )

            events = await repo.list_events(since=since)
            type_counts = Counter(event.event_type for event in events)
            distribution = [
                NameValue(name=EVENT_LABELS.get(event_type, event_type), value=count)
                for event_type, count in type_counts.most_common()
            ]

            recent = [
                RecentEvent(
                    id=event.id,
                    event_type=event.event_type,
                    property_id=event.property_id,
                    created_at=_as_utc(event.created_at),
                    device_type=event.device_type or "unknown",
                    is_logged_in=bool(event.user_id),
                )
                for event in await repo.latest_events(20)
            ]
            stats.logged_in_users = sum(1 for event in recent if event.is_logged_in)
            stats.anonymous_visitors = len(recent) - stats.logged_in_users

            return OverviewResponse(
                range=date_range,
                stats=stats,
                event_distribution=distribution,
                recent_events=recent,
                top_properties=await self._top_properties(since),
                daily_trends=await self._daily_trends(since),
            )
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to build analytics overview: {e}")
            raise BadRequestError(f"Failed to load analytics overview: {str(e)}")

    async def _top_properties(self, since: Optional[datetime], limit: int = 5) -> List[TopProperty]:
        events = await self.analytics_repo.list_events(since=since, with_property=True)

        totals: Dict[int, TopProperty] = {}
        for event in events:
            entry = totals.setdefault(event.property_id, TopProperty(property_id=event.property_id, property_name=""))
            if event.event_type == EventType.PROPERTY_VIEW_DETAILS.value:
                entry.views += 1
            elif event.event_type == EventType.PROPERTY_CARD_CLICK.value:
                entry.clicks += 1
            elif event.event_type == EventType.PROPERTY_SAVE.value:
                entry.saves += 1

        ranked = sorted(totals.values(), key=lambda p: p.views + p.clicks + p.saves, reverse=True)[:limit]
        labels = await self.analytics_repo.property_labels(p.property_id for p in ranked)
        for entry in ranked:
            name = labels.get(entry.property_id, (None, None))[0]
            entry.property_name = _name_label(name, entry.property_id)
        return ranked

    async def _daily_trends(self, since: Optional[datetime]) -> List[DailyTrend]:
        events = await self.analytics_repo.list_events(
            since=since,
            event_types=[
                EventType.PROPERTY_VIEW_DETAILS.value,
                EventType.PROPERTY_CARD_CLICK.value,
                EventType.PROPERTY_SAVE.value,
            ]
        )

        days: Dict[str, DailyTrend] = {}
        for event in events:
            date = _day(event.created_at)
            trend = days.setdefault(date, DailyTrend(date=date))
            if event.event_type == EventType.PROPERTY_VIEW_DETAILS.value:
                trend.views += 1
            elif event.event_type == EventType.PROPERTY_CARD_CLICK.value:
                trend.clicks += 1
            else:
                trend.saves += 1
        return [days[date] for date in sorted(days)]

    async def property_analytics(
        self,
        date_range: DateRange = "30days",
        sort_by: PropertySort = "views"
    ) -> PropertyAnalyticsResponse:
        """
        Per-property engagement for the properties with any tracked events.

        Args:
            date_range: today, 7days, 30days or all
            sort_by: views, saves or clicks; always descending
        """
        try:
            events = await self.analytics_repo.list_events(since=range_start(date_range), with_property=True)

            counters: Dict[int, Counter] = defaultdict(Counter)
            visitors: Dict[int, set] = defaultdict(set)
            durations: Dict[int, List[int]] = defaultdict(list)
            for event in events:
                counters[event.property_id][event.event_type] += 1
                if event.visitor_fingerprint_id:
                    visitors[event.property_id].add(event.visitor_fingerprint_id)
                if event.event_type == EventType.PROPERTY_DETAIL_VIEW_END.value and event.duration_seconds:
                    durations[event.property_id].append(event.duration_seconds)

            labels = await self.analytics_repo.property_labels(counters.keys())
            rows = []
            for property_id, counts in counters.items():
                name, slug = labels.get(property_id, (None, None))
                card_clicks = counts[EventType.PROPERTY_CARD_CLICK.value]
                detail_views = counts[EventType.PROPERTY_VIEW_DETAILS.value]
                map_clicks = counts[EventType.PROPERTY_MAP_MARKER_CLICK.value]
                times = durations[property_id]
                rows.append(PropertyStats(
                    id=property_id,
                    name=_name_label(name, property_id),
                    slug=slug,
                    total_views=card_clicks + detail_views + map_clicks,
                    card_clicks=card_clicks,
                    detail_views=detail_views,
                    map_clicks=map_clicks,
                    saves=counts[EventType.PROPERTY_SAVE.value],
                    shares=counts[EventType.PROPERTY_SHARE.value],
                    unique_visitors=len(visitors[property_id]),
                    avg_view_duration=round(sum(times) / len(times)) if times else 0,
                ))

            sort_field = {"views": "total_views", "saves": "saves", "clicks": "card_clicks"}[sort_by]
            rows.sort(key=lambda row: getattr(row, sort_field), reverse=True)

            return PropertyAnalyticsResponse(range=date_range, sort_by=sort_by, properties=rows)
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to build property analytics: {e}")
            raise BadRequestError(f"Failed to load property analytics: {str(e)}")

    async def property_analytics_csv(
        self,
        date_range: DateRange = "30days",
        sort_by: PropertySort = "views"
    ) -> str:
        """Property analytics rows as CSV text with a header line."""
        report = await self.property_analytics(date_range, sort_by)

        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(CSV_HEADERS)
        for row in report.properties:
            writer.writerow([
                row.name,
                row.total_views,
                row.card_clicks,
                row.detail_views,
                row.map_clicks,
                row.saves,
                row.shares,
                row.unique_visitors,
                row.avg_view_duration,
            ])
        return buffer.getvalue()

    async def user_analytics(self, date_range: DateRange = "7days") -> UserAnalyticsResponse:
        """
        Visitor numbers, session averages, devices, browsers and daily new versus returning visitors.

        Args:
            date_range: today, 7days, 30days or all; limits the daily visitor breakdown
        """
        try:
            repo = self.analytics_repo

            total = await repo.count_visitors()
            new_today = await repo.count_visitors(first_seen_since=local_midnight())
            stats = UserStats(
                total_visitors=total,
                total_logged_in_users=await repo.count_visitors(linked_only=True),
                new_visitors_today=new_today,
                returning_visitors=max(total - new_today, 0),
            )

            sessions = await repo.ended_sessions(limit=1000)
            if sessions:
                seconds = [
                    (_as_utc(session.ended_at) - _as_utc(session.started_at)).total_seconds()
                    for session in sessions
                ]
                stats.avg_session_duration = round(sum(seconds) / len(seconds))
                pages = sum(session.page_views or 0 for session in sessions) / len(sessions)
                stats.avg_pages_per_session = round(pages * 10) / 10

            events = await repo.list_events(limit=5000)
            device_counts = Counter({"desktop": 0, "mobile": 0, "tablet": 0})
            browser_counts = Counter()
            for event in events:
                if event.device_type:
                    device_counts[event.device_type] += 1
                if event.browser:
                    browser_counts[event.browser] += 1
            devices = [
                NameValue(name=device.capitalize(), value=count)
                for device, count in device_counts.items()
                if count > 0
            ]
            browsers = [NameValue(name=name, value=count) for name, count in browser_counts.most_common(5)]

            visitors = [
                VisitorData(
                    id=visitor.id,
                    fingerprint_hash=f"{visitor.fingerprint_hash[:8]}...",
                    first_seen=_as_utc(visitor.first_seen_at),
                    last_seen=_as_utc(visitor.last_seen_at),
                    platform=visitor.platform or "Unknown",
                    language=visitor.language or "Unknown",
                    linked_user_id=visitor.linked_user_id,
                )
                for visitor in await repo.recent_visitors(limit=50)
            ]

            return UserAnalyticsResponse(
                range=date_range,
                stats=stats,
                devices=devices,
                browsers=browsers,
                visitors=visitors,
                daily_visitors=await self._daily_visitors(range_start(date_range)),
            )
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to build user analytics: {e}")
            raise BadRequestError(f"Failed to load user analytics: {str(e)}")

    async def _daily_visitors(self, since: Optional[datetime], days: int = 14) -> List[DailyVisitors]:
        visitors = await self.analytics_repo.visitors_seen_since(since)

        daily: Dict[str, DailyVisitors] = {}
        for visitor in visitors:
            date = _day(visitor.last_seen_at)
            entry = daily.setdefault(date, DailyVisitors(date=date))
            if _day(visitor.first_seen_at) == date:
                entry.new += 1
            else:
                entry.returning += 1
        return [daily[date] for date in sorted(daily)][-days:]

    async def realtime(self) -> RealtimeResponse:
        """Live view: active sessions and the latest events."""
        try:
            repo = self.analytics_repo
            now = _utcnow()
            active_since = now - ACTIVE_WINDOW

            stats = RealtimeStats(
                active_now=await repo.count_active_sessions(active_since),
                events_last_minute=await repo.count_events(since=now - timedelta(minutes=1)),
                last_5_min=await repo.count_events(since=now - timedelta(minutes=5)),
                last_15_min=await repo.count_events(since=now - timedelta(minutes=15)),
            )

            events = await repo.latest_events(50)
            labels = await repo.property_labels(e.property_id for e in events if e.property_id is not None)
            live_events = [
                LiveEvent(
                    id=event.id,
                    event_type=event.event_type,
                    property_id=event.property_id,
                    property_name=labels.get(event.property_id, (None, None))[0],
                    created_at=_as_utc(event.created_at),
                    device_type=event.device_type or "unknown",
                    browser=event.browser or "unknown",
                    source_page=event.source_page or "/",
                    is_logged_in=bool(event.user_id),
                )
                for event in events
            ]

            sessions = [
                ActiveSession(
                    id=session.id,
                    device_type=session.device_type or "unknown",
                    last_activity_at=_as_utc(session.last_activity_at),
                    page_views=session.page_views or 0,
                    property_views=session.property_views or 0,
                    is_logged_in=bool(session.user_id),
                )
                for session in await repo.active_sessions(active_since, limit=20)
            ]

            return RealtimeResponse(stats=stats, live_events=live_events, active_sessions=sessions)
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to build realtime analytics: {e}")
            raise BadRequestError(f"Failed to load realtime analytics: {str(e)}")

    async def home_stats(self) -> HomeStatsResponse:
        """Catalogue summary for the dashboard home page."""
        try:
            repo = self.analytics_repo

            response = HomeStatsResponse(total_properties=await repo.count_properties())
            for field, status in PROPERTY_STATUSES.items():
                setattr(response, field, await repo.count_properties(status=status))

            recent = await repo.recent_properties(limit=5)
            prices = [p.min_price for p in recent if p.min_price and p.min_price > 0]
            if prices:
                response.avg_price = round(sum(prices) / len(prices))

            response.recent_properties = [
                RecentProperty(
                    id=p.id,
                    name=p.name,
                    slug=p.slug,
                    status=p.status,
                    country=p.country,
                    min_price=p.min_price,
                    price_currency=p.price_currency,
                    developer_name=p.developer_name or "Unknown",
                    created_at=_as_utc(p.created_at).isoformat() if p.created_at else None,
                )
                for p in recent
            ]

            developer_counts = Counter(name or "Unknown" for name in await repo.property_developer_names())
            response.developer_stats = [
                DeveloperCount(
                    name=name if len(name) <= DEVELOPER_NAME_LIMIT else f"{name[:DEVELOPER_NAME_LIMIT]}...",
                    properties=count,
                )
                for name, count in developer_counts.most_common(5)
            ]

            country_counts = Counter(country or "Unknown" for country in await repo.property_countries())
            response.country_stats = [
                NameValue(name=name, value=count) for name, count in country_counts.most_common(10)
            ]

            return response
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to build home stats: {e}")
            raise BadRequestError(f"Failed to load home statistics: {str(e)}")
