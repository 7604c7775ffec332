# File: freshlink/api/v1/routes_seller.py

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from freshlink.api.deps import get_dashboard_service
from freshlink.db.profile_store import ProfileNotFoundError
from freshlink.schemas.dashboard import SellerDashboardData
from freshlink.schemas.seller import SellerInventoryInput
from freshlink.services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/inventory",
    response_model=SellerDashboardData,
    status_code=status.HTTP_201_CREATED,
    summary="Add stock to a seller inventory",
)
def add_inventory(
    payload: SellerInventoryInput,
    dashboards: DashboardService = Depends(get_dashboard_service),
):
    """Append a SKU to the seller inventory and return the rebuilt dashboard."""
    try:
        dashboards.add_seller_inventory(payload)
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        logger.exception("[seller] Unable to add inventory for %s", payload.user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to add inventory item.",
        )

    dashboard = dashboards.build_seller_dashboard(payload.user_id)
    if dashboard is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found for seller",
        )
    return dashboard
