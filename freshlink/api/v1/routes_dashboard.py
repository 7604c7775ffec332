# File: freshlink/api/v1/routes_dashboard.py

from fastapi import APIRouter, Depends, HTTPException, Query, status

from freshlink.api.deps import get_dashboard_service
from freshlink.schemas.dashboard import BuyerDashboardData, SellerDashboardData
from freshlink.services.dashboard_service import DashboardService

router = APIRouter()

NOT_FOUND = "No dashboard data found for that user."


@router.get("/buyer", response_model=BuyerDashboardData, summary="Buyer dashboard")
def buyer_dashboard(
    user_id: str = Query(..., alias="userId", min_length=1),
    dashboards: DashboardService = Depends(get_dashboard_service),
):
    """Personalized pantry metrics, offers and coaching for a buyer."""
    dashboard = dashboards.build_buyer_dashboard(user_id)
    if dashboard is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return dashboard


@router.get("/seller", response_model=SellerDashboardData, summary="Seller dashboard")
def seller_dashboard(
    user_id: str = Query(..., alias="userId", min_length=1),
    dashboards: DashboardService = Depends(get_dashboard_service),
):
    """Stock health metrics, offers and forecast insights for a seller."""
    dashboard = dashboards.build_seller_dashboard(user_id)
    if dashboard is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return dashboard
