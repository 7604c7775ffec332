from fastapi import APIRouter

from freshlink.api.v1.routes_auth import router as auth_router
from freshlink.api.v1.routes_buyer import router as buyer_router
from freshlink.api.v1.routes_dashboard import router as dashboard_router
from freshlink.api.v1.routes_seller import router as seller_router


api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(buyer_router, prefix="/buyer", tags=["buyer"])
api_router.include_router(seller_router, prefix="/seller", tags=["seller"])
