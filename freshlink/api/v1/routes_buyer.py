# File: freshlink/api/v1/routes_buyer.py

"""
Buyer pantry mutations.

Every endpoint applies one change to the stored profile and answers with the
freshly rebuilt buyer dashboard, so the frontend can re-render in one trip.
"""

import logging
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, status

from freshlink.api.deps import get_dashboard_service
from freshlink.db.profile_store import ProfileNotFoundError
from freshlink.schemas.buyer import BuyerInventoryInput, InventoryRemoveRequest, ShoppingListAddRequest
from freshlink.schemas.dashboard import BuyerDashboardData
from freshlink.services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)

router = APIRouter()


def _apply(
    dashboards: DashboardService,
    user_id: str,
    mutation: Callable[[], object],
    failure: str,
) -> BuyerDashboardData:
    try:
        mutation()
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        logger.exception("[buyer] %s for %s", failure, user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"{failure}.",
        )

    dashboard = dashboards.build_buyer_dashboard(user_id)
    if dashboard is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found for buyer",
        )
    return dashboard


@router.post(
    "/inventory",
    response_model=BuyerDashboardData,
    status_code=status.HTTP_201_CREATED,
    summary="Add a pantry item",
)
def add_inventory(
    payload: BuyerInventoryInput,
    dashboards: DashboardService = Depends(get_dashboard_service),
):
    return _apply(
        dashboards,
        payload.user_id,
        lambda: dashboards.add_buyer_inventory(payload),
        "Unable to add inventory item",
    )


@router.post(
    "/inventory-remove",
    response_model=BuyerDashboardData,
    summary="Remove a pantry item",
)
def remove_inventory(
    payload: InventoryRemoveRequest,
    dashboards: DashboardService = Depends(get_dashboard_service),
):
    return _apply(
        dashboards,
        payload.user_id,
        lambda: dashboards.remove_buyer_inventory(payload.user_id, payload.inventory_id),
        "Unable to remove inventory item",
    )


@router.post(
    "/ai-add-to-list",
    response_model=BuyerDashboardData,
    status_code=status.HTTP_201_CREATED,
    summary="Add a suggested item to the shopping list",
)
def add_to_shopping_list(
    payload: ShoppingListAddRequest,
    dashboards: DashboardService = Depends(get_dashboard_service),
):
    """
    Used by the "add to list" buttons next to AI suggestions. The item lands
    on the first event that still needs shopping.
    """
    return _apply(
        dashboards,
        payload.user_id,
        lambda: dashboards.add_to_shopping_list(
            payload.user_id, payload.item, quantity=payload.quantity, unit=payload.unit
        ),
        "Unable to update shopping list",
    )
