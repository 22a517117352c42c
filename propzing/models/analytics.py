"""
Visitor tracking models read by the analytics dashboards.
Rows are written by the public site; this service only aggregates them.
"""

from sqlalchemy import String, Integer, Boolean, DateTime, ForeignKey, BigInteger, Index, func
from sqlalchemy.orm import Mapped, mapped_column
from propzing.database import Base
from datetime import datetime
import enum
from typing import Optional


class EventType(str, enum.Enum):
    """Tracked user activity event types."""
    PROPERTY_CARD_CLICK = "property_card_click"
    PROPERTY_VIEW_DETAILS = "property_view_details"
    PROPERTY_MAP_MARKER_CLICK = "property_map_marker_click"
    PROPERTY_SAVE = "property_save"
    PROPERTY_SHARE = "property_share"
    PROPERTY_DETAIL_VIEW_END = "property_detail_view_end"
    PAGE_VIEW = "page_view"
    SEARCH = "search"
    FILTER_CHANGE = "filter_change"


class VisitorFingerprint(Base):
    """Anonymous browser fingerprint, optionally linked to a signed-in user."""

    __tablename__ = "visitor_fingerprints"

    fingerprint_hash: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)

    first_seen_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True
    )

    last_seen_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True
    )

    platform: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    language: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    linked_user_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)


class UserSession(Base):
    """Browsing session of a visitor."""

    __tablename__ = "user_sessions"

    visitor_fingerprint_id: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        ForeignKey("visitor_fingerprints.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    user_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True
    )

    ended_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    last_activity_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    page_views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    property_views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    device_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)


class UserActivityEvent(Base):
    """Single tracked interaction, optionally about a property."""

    __tablename__ = "user_activity_events"

    event_type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    # Plain column: events may reference properties that were since removed
    property_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True, index=True)

    visitor_fingerprint_id: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        ForeignKey("visitor_fingerprints.id", ondelete="SET NULL"),
        nullable=True
    )

    session_id: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        ForeignKey("user_sessions.id", ondelete="SET NULL"),
        nullable=True
    )

    user_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    device_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    browser: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    source_page: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    duration_seconds: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


event_created_index = Index(
    "idx_activity_events_type_created",
    UserActivityEvent.event_type,
    UserActivityEvent.created_at
)
