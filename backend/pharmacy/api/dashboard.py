"""Dashboard read endpoints. All numbers are computed from stored transactions."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from pharmacy.core.config import Settings
from pharmacy.core.deps import get_app_settings, get_dashboard
from pharmacy.schemas import CategoryShare, DashboardStats, RecentTransaction, SalesPeriod, SalesPoint
from pharmacy.services.dashboard import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(dashboard: DashboardService = Depends(get_dashboard)):
    """Headline totals and counts for the dashboard cards."""
    return await dashboard.dashboard_stats()


@router.get("/sales", response_model=list[SalesPoint])
async def get_sales_series(
    period: SalesPeriod = Query(SalesPeriod.DAILY),
    dashboard: DashboardService = Depends(get_dashboard),
):
    """Sales totals bucketed by day, ISO week or month, oldest first."""
    return await dashboard.sales_series(period)


@router.get("/categories", response_model=list[CategoryShare])
async def get_category_share(dashboard: DashboardService = Depends(get_dashboard)):
    """Share of sold value per product category, in whole percent."""
    return await dashboard.category_share()


@router.get("/recent-transactions", response_model=list[RecentTransaction])
async def get_recent_transactions(
    limit: Optional[int] = Query(None, ge=1, le=100),
    dashboard: DashboardService = Depends(get_dashboard),
    settings: Settings = Depends(get_app_settings),
):
    """Newest transactions with a customer summary."""
    return await dashboard.recent_transactions(limit or settings.RECENT_TRANSACTIONS_DEFAULT)
