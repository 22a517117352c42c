"""
Test configuration and fixtures for the listing admin API.
Provides database fixtures, test data factories, and common test utilities.
"""

import os

# Settings are read once at import time, so the test environment goes in first
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-key-for-dashboard-sessions-0001")
os.environ.setdefault("UPLOAD_SECRET", "test-upload-secret")

import pytest
import uuid
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from propzing.main import app
from propzing.database import Base, get_db
from propzing.models.developer import PartnerDeveloper
from propzing.models.property import Property
from propzing.models.analytics import VisitorFingerprint, UserSession, UserActivityEvent
from propzing.repositories.property import PropertyRepository
from propzing.repositories.developer import DeveloperRepository
from propzing.repositories.analytics import AnalyticsRepository
from propzing.services.property import PropertyService
from propzing.services.developer import DeveloperService
from propzing.services.submission import PropertySubmissionService
from propzing.services.entry import PropertyEntryService
from propzing.services.analytics import AnalyticsService
from propzing.services.auth import DashboardAuthService
from propzing.schemas.wizard import WizardFormData
from propzing.utils.auth import create_dashboard_token


# Test database configuration
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest.fixture
async def test_engine():
    """Fresh schema per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False} if "sqlite" in TEST_DATABASE_URL else {}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database session override."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict:
    """Bearer header for a verified dashboard session."""
    return {"Authorization": f"Bearer {create_dashboard_token()}"}


@pytest.fixture
def upload_headers() -> dict:
    return {"X-Upload-Secret": os.environ["UPLOAD_SECRET"]}


# Repository fixtures
@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    return PropertyRepository(db_session)


@pytest.fixture
def developer_repository(db_session: AsyncSession) -> DeveloperRepository:
    return DeveloperRepository(db_session)


@pytest.fixture
def analytics_repository(db_session: AsyncSession) -> AnalyticsRepository:
    return AnalyticsRepository(db_session)


# Service fixtures
@pytest.fixture
def property_service(db_session: AsyncSession) -> PropertyService:
    return PropertyService(db_session)


@pytest.fixture
def developer_service(db_session: AsyncSession) -> DeveloperService:
    return DeveloperService(db_session)


@pytest.fixture
def submission_service(db_session: AsyncSession) -> PropertySubmissionService:
    return PropertySubmissionService(db_session)


@pytest.fixture
def entry_service(db_session: AsyncSession) -> PropertyEntryService:
    return PropertyEntryService(db_session)


@pytest.fixture
def analytics_service(db_session: AsyncSession) -> AnalyticsService:
    return AnalyticsService(db_session)


@pytest.fixture
def auth_service(db_session: AsyncSession) -> DashboardAuthService:
    return DashboardAuthService(db_session)


# Test data factories
class DeveloperFactory:
    """Factory for creating test developers."""

    @staticmethod
    def create_developer_data(name: Optional[str] = None, **overrides) -> dict:
        data = {
            "name": name or f"Developer {uuid.uuid4().hex[:8]}",
            "email": "sales@emaar.ae",
            "phone": "+971 4 000 0000",
            "website": "https://emaar.ae",
        }
        data.update(overrides)
        return data

    @staticmethod
    async def create_developer(
        developer_repo: DeveloperRepository,
        name: Optional[str] = None,
        **overrides
    ) -> PartnerDeveloper:
        return await developer_repo.create(DeveloperFactory.create_developer_data(name, **overrides))


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        name: str = "Marina Heights",
        external_id: Optional[str] = None,
        slug: Optional[str] = None,
        developer_id: Optional[int] = None,
        area: str = "Dubai Marina",
        status: str = "On Sale",
        **overrides
    ) -> dict:
        suffix = uuid.uuid4().hex[:8]
        data = {
            "external_id": external_id or f"PRJ-{suffix}",
            "name": name,
            "slug": slug or f"marina-heights-{suffix}",
            "developer_id": developer_id,
            "area": area,
            "city": "Dubai",
            "country": "UAE",
            "status": status,
            "min_price": 1200000.0,
            "max_price": 3500000.0,
            "min_price_aed": 1200000.0,
            "max_price_aed": 3500000.0,
            "price_currency": "AED",
            "area_unit": "sqft",
            "has_escrow": True,
            "changelog": [],
        }
        data.update(overrides)
        return data

    @staticmethod
    async def create_property(property_repo: PropertyRepository, **kwargs) -> Property:
        return await property_repo.create(PropertyFactory.create_property_data(**kwargs))


class WizardFactory:
    """Factory for wizard submissions."""

    @staticmethod
    def create_wizard_data(**overrides) -> dict:
        """Valid wizard payload using the camelCase list keys the UI sends."""
        suffix = uuid.uuid4().hex[:8]
        data = {
            "external_id": f"WIZ-{suffix}",
            "name": "Creek Vista",
            "slug": f"creek-vista-{suffix}",
            "developer": "Sobha Realty",
            "area": "Dubai Creek Harbour",
            "city": "Dubai",
            "country": "UAE",
            "coordinates": "25.2048, 55.2708",
            "status": "Under construction",
            "permit_id": "RERA-12345",
            "min_price": 1000000,
            "max_price": 2000000,
            "price_currency": "AED",
            "area_unit": "sqft",
            "unitTypes": [
                {
                    "id": "unit-1",
                    "unit_type": "Apartment",
                    "normalized_type": "1BR",
                    "unit_bedrooms": "1",
                    "units_amount": 40,
                    "units_price_from": 1000000,
                    "units_price_to": 1400000,
                }
            ],
            "buildings": [{"id": "b-1", "building_name": "Tower A"}],
            "facilities": [{"id": "f-1", "facility_name": "Pool", "facility_image_url": "https://cdn.emaar.ae/pool.jpg"}],
            "mapPoints": [
                {"id": "m-1", "poi_name": "Dubai Mall", "distance_km": 5.5},
                {"id": "m-2", "poi_name": "DXB Airport", "distance_km": 12},
            ],
            "cover_url": "https://cdn.emaar.ae/cover.jpg",
            "image_urls": "https://cdn.emaar.ae/1.jpg, https://cdn.emaar.ae/2.jpg",
            "paymentPlans": [
                {
                    "id": "p-1",
                    "payment_plan_name": "60/40",
                    "payment_steps": "10% booking, 50% construction, 40% handover",
                }
            ],
            "parking_specs": "  1 space per unit  ",
        }
        data.update(overrides)
        return data

    @staticmethod
    def create_wizard_form(**overrides) -> WizardFormData:
        return WizardFormData.model_validate(WizardFactory.create_wizard_data(**overrides))


class AnalyticsFactory:
    """Factory for visitor tracking rows."""

    @staticmethod
    async def create_visitor(
        db: AsyncSession,
        fingerprint_hash: Optional[str] = None,
        first_seen_at: Optional[datetime] = None,
        last_seen_at: Optional[datetime] = None,
        **overrides
    ) -> VisitorFingerprint:
        now = datetime.now(timezone.utc)
        visitor = VisitorFingerprint(
            fingerprint_hash=fingerprint_hash or uuid.uuid4().hex,
            first_seen_at=first_seen_at or now,
            last_seen_at=last_seen_at or now,
            **overrides
        )
        db.add(visitor)
        await db.commit()
        await db.refresh(visitor)
        return visitor

    @staticmethod
    async def create_session(db: AsyncSession, **fields) -> UserSession:
        now = datetime.now(timezone.utc)
        fields.setdefault("started_at", now)
        fields.setdefault("last_activity_at", now)
        session = UserSession(**fields)
        db.add(session)
        await db.commit()
        await db.refresh(session)
        return session

    @staticmethod
    async def create_event(
        db: AsyncSession,
        event_type: str,
        property_id: Optional[int] = None,
        created_at: Optional[datetime] = None,
        **fields
    ) -> UserActivityEvent:
        event = UserActivityEvent(
            event_type=event_type,
            property_id=property_id,
            created_at=created_at or datetime.now(timezone.utc),
            **fields
        )
        db.add(event)
        await db.commit()
        await db.refresh(event)
        return event
