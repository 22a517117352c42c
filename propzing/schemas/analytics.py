"""
Pydantic schemas for the analytics dashboards.
"""

from pydantic import BaseModel, Field
from typing import List, Literal, Optional
from datetime import datetime

DateRange = Literal["today", "7days", "30days", "all"]
PropertySort = Literal["views", "saves", "clicks"]


class NameValue(BaseModel):
    name: str
    value: int


class OverviewStats(BaseModel):
    total_visitors: int = 0
    total_sessions: int = 0
    total_events: int = 0
    total_property_views: int = 0
    total_saves: int = 0
    total_shares: int = 0
    active_users_today: int = 0
    anonymous_visitors: int = Field(0, description="Anonymous events among the recent events")
    logged_in_users: int = Field(0, description="Logged-in events among the recent events")


class RecentEvent(BaseModel):
    id: int
    event_type: str
    property_id: Optional[int] = None
    created_at: datetime
    device_type: str
    is_logged_in: bool


class TopProperty(BaseModel):
    property_id: int
    property_name: str
    views: int = 0
    clicks: int = 0
    saves: int = 0


class DailyTrend(BaseModel):
    date: str = Field(..., examples=["2025-01-31"])
    views: int = 0
    clicks: int = 0
    saves: int = 0


class OverviewResponse(BaseModel):
    range: DateRange
    stats: OverviewStats
    event_distribution: List[NameValue] = Field(default_factory=list)
    recent_events: List[RecentEvent] = Field(default_factory=list)
    top_properties: List[TopProperty] = Field(default_factory=list)
    daily_trends: List[DailyTrend] = Field(default_factory=list)


class PropertyStats(BaseModel):
    id: int
    name: str
    slug: Optional[str] = None
    total_views: int = 0
    card_clicks: int = 0
    detail_views: int = 0
    map_clicks: int = 0
    saves: int = 0
    shares: int = 0
    unique_visitors: int = 0
    avg_view_duration: int = Field(0, description="Average detail view duration in seconds")


class PropertyAnalyticsResponse(BaseModel):
    range: DateRange
    sort_by: PropertySort
    properties: List[PropertyStats] = Field(default_factory=list)


class UserStats(BaseModel):
    total_visitors: int = 0
    total_logged_in_users: int = 0
    new_visitors_today: int = 0
    returning_visitors: int = 0
    avg_session_duration: int = Field(0, description="Seconds")
    avg_pages_per_session: float = 0


class VisitorData(BaseModel):
    id: int
    fingerprint_hash: str
    first_seen: datetime
    last_seen: datetime
    platform: str
    language: str
    linked_user_id: Optional[str] = None


class DailyVisitors(BaseModel):
    date: str
    new: int = 0
    returning: int = 0


class UserAnalyticsResponse(BaseModel):
    range: DateRange
    stats: UserStats
    devices: List[NameValue] = Field(default_factory=list)
    browsers: List[NameValue] = Field(default_factory=list)
    visitors: List[VisitorData] = Field(default_factory=list)
    daily_visitors: List[DailyVisitors] = Field(default_factory=list)


class RealtimeStats(BaseModel):
    active_now: int = 0
    events_last_minute: int = 0
    last_5_min: int = 0
    last_15_min: int = 0


class LiveEvent(BaseModel):
    id: int
    event_type: str
    property_id: Optional[int] = None
    property_name: Optional[str] = None
    created_at: datetime
    device_type: str
    browser: str
    source_page: str
    is_logged_in: bool


class ActiveSession(BaseModel):
    id: int
    device_type: str
    last_activity_at: datetime
    page_views: int = 0
    property_views: int = 0
    is_logged_in: bool


class RealtimeResponse(BaseModel):
    stats: RealtimeStats
    live_events: List[LiveEvent] = Field(default_factory=list)
    active_sessions: List[ActiveSession] = Field(default_factory=list)


class DeveloperCount(BaseModel):
    name: str
    properties: int


class RecentProperty(BaseModel):
    id: int
    name: str
    slug: Optional[str] = None
    status: Optional[str] = None
    country: Optional[str] = None
    min_price: Optional[float] = None
    price_currency: Optional[str] = None
    developer_name: str = "Unknown"
    created_at: Optional[str] = None


class HomeStatsResponse(BaseModel):
    total_properties: int = 0
    under_construction: int = 0
    completed: int = 0
    on_sale: int = 0
    avg_price: int = 0
    recent_properties: List[RecentProperty] = Field(default_factory=list)
    developer_stats: List[DeveloperCount] = Field(default_factory=list)
    country_stats: List[NameValue] = Field(default_factory=list)
