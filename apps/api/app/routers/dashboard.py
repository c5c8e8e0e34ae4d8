from fastapi import APIRouter, Depends, Query

from app.auth.dependencies import StaffContext, require_staff
from app.dependencies import get_order_store
from app.schemas.dashboard import DashboardStatsResponse
from app.services.dashboard_service import dashboard_stats
from app.services.store import OrderStore

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStatsResponse, summary="Dashboard statistics")
def dashboard_stats_endpoint(
    days: int = Query(default=7, ge=1, le=365),
    store: OrderStore = Depends(get_order_store),
    _staff: StaffContext = Depends(require_staff),
) -> DashboardStatsResponse:
    return dashboard_stats(store, days=days)
