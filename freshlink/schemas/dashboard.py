# File: freshlink/schemas/dashboard.py

from typing import List

from freshlink.schemas.base import CamelModel
from freshlink.schemas.buyer import BuyerProfile
from freshlink.schemas.insights import BuyerAiInsights, SellerAiInsights
from freshlink.schemas.offer import StoreOffer
from freshlink.schemas.seller import SellerProfile


class BuyerDashboardMetrics(CamelModel):
    waste_risk: int
    pantry_health: int
    budget_health: int
    event_readiness: int


class SellerDashboardMetrics(CamelModel):
    sell_through: int
    spoilage_risk: int
    promotion_momentum: int
    demand_confidence: int


class BuyerDashboardData(CamelModel):
    profile: BuyerProfile
    metrics: BuyerDashboardMetrics
    ai: BuyerAiInsights
    offers: List[StoreOffer] = []
    empty_inventory: bool
    shopping_focus: List[str] = []


class SellerDashboardData(CamelModel):
    profile: SellerProfile
    metrics: SellerDashboardMetrics
    ai: SellerAiInsights
    offers: List[StoreOffer] = []
    empty_inventory: bool
