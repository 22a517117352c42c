"""
Analytics dashboard endpoints.
Every route requires a dashboard session.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from propzing.services.analytics import AnalyticsService
from propzing.schemas.analytics import (
    DateRange,
    PropertySort,
    OverviewResponse,
    PropertyAnalyticsResponse,
    UserAnalyticsResponse,
    RealtimeResponse,
    HomeStatsResponse,
)
from propzing.schemas.error import get_error_responses
from propzing.utils.dependencies import get_dashboard_session, get_analytics_service


router = APIRouter(
    prefix="/analytics",
    tags=["Analytics"],
    dependencies=[Depends(get_dashboard_session)],
    responses=get_error_responses(400, 401, 422),
)


@router.get("/overview", response_model=OverviewResponse, summary="Analytics overview")
async def get_overview(
    date_range: DateRange = Query("7days", alias="range", description="today, 7days, 30days or all"),
    analytics_service: AnalyticsService = Depends(get_analytics_service)
) -> OverviewResponse:
    return await analytics_service.overview(date_range)


@router.get("/properties", response_model=PropertyAnalyticsResponse, summary="Per-property engagement")
async def get_property_analytics(
    date_range: DateRange = Query("30days", alias="range", description="today, 7days, 30days or all"),
    sort_by: PropertySort = Query("views", description="views, saves or clicks"),
    analytics_service: AnalyticsService = Depends(get_analytics_service)
) -> PropertyAnalyticsResponse:
    return await analytics_service.property_analytics(date_range, sort_by)


@router.get(
    "/properties.csv",
    summary="Per-property engagement as CSV",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}}}
)
async def export_property_analytics(
    date_range: DateRange = Query("30days", alias="range", description="today, 7days, 30days or all"),
    sort_by: PropertySort = Query("views", description="views, saves or clicks"),
    analytics_service: AnalyticsService = Depends(get_analytics_service)
) -> Response:
    content = await analytics_service.property_analytics_csv(date_range, sort_by)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="property-analytics-{date_range}.csv"'},
    )


@router.get("/users", response_model=UserAnalyticsResponse, summary="Visitor analytics")
async def get_user_analytics(
    date_range: DateRange = Query("7days", alias="range", description="today, 7days, 30days or all"),
    analytics_service: AnalyticsService = Depends(get_analytics_service)
) -> UserAnalyticsResponse:
    return await analytics_service.user_analytics(date_range)


@router.get("/realtime", response_model=RealtimeResponse, summary="Live activity")
async def get_realtime(
    analytics_service: AnalyticsService = Depends(get_analytics_service)
) -> RealtimeResponse:
    return await analytics_service.realtime()


@router.get("/home", response_model=HomeStatsResponse, summary="Dashboard home statistics")
async def get_home_stats(
    analytics_service: AnalyticsService = Depends(get_analytics_service)
) -> HomeStatsResponse:
    return await analytics_service.home_stats()
