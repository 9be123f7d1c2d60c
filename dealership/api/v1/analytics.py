"""
Analytics API Routes (admin)

Endpoints for the admin console:
- GET /dashboard - Headline numbers and per-resource stats
- GET /sales - Sales by day, month or year
- GET /inventory - Stock by category and brand
- GET /customers - Engagement and top buyers
"""
from fastapi import APIRouter, Depends, Query
from typing import List, Literal

from dealership.core.dependencies import get_analytics_service, require_admin
from dealership.schemas.analytics import (
    CustomerAnalyticsSchema,
    DashboardSchema,
    InventoryAnalyticsSchema,
    SalesPointSchema,
)
from dealership.services.analytics_service import AnalyticsService

router = APIRouter()


@router.get(
    "/dashboard",
    response_model=DashboardSchema,
    summary="Dashboard overview"
)
async def dashboard(
    service: AnalyticsService = Depends(get_analytics_service),
    _admin=Depends(require_admin)
):
    return await service.dashboard()


@router.get(
    "/sales",
    response_model=List[SalesPointSchema],
    summary="Sales over time"
)
async def sales(
    period: Literal["day", "month", "year"] = Query("month"),
    service: AnalyticsService = Depends(get_analytics_service),
    _admin=Depends(require_admin)
):
    return await service.sales(period)


@router.get(
    "/inventory",
    response_model=InventoryAnalyticsSchema,
    summary="Inventory analytics"
)
async def inventory(
    service: AnalyticsService = Depends(get_analytics_service),
    _admin=Depends(require_admin)
):
    return await service.inventory()


@router.get(
    "/customers",
    response_model=CustomerAnalyticsSchema,
    summary="Customer analytics"
)
async def customers(
    service: AnalyticsService = Depends(get_analytics_service),
    _admin=Depends(require_admin)
):
    return await service.customers()
