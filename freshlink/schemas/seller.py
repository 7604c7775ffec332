# File: freshlink/schemas/seller.py

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field

from freshlink.schemas.base import CamelModel

SellerItemStatus = Literal["healthy", "risk", "critical"]
PromotionStatus = Literal["draft", "active", "recommended"]
PromotionChannel = Literal["app", "in-store", "flyer"]
StoreFormat = Literal["grocery", "market", "warehouse"]


class SellerInventoryItem(CamelModel):
    sku: str
    name: str
    category: str
    stock: float
    par_level: float
    days_on_hand: float
    status: SellerItemStatus
    spoilage_risk: float
    margin: float


class SellerDemandSignal(CamelModel):
    id: str
    zip: str
    start_date: str
    end_date: str
    expected_lift: float
    focus_items: List[str] = []


class SellerPromotionIdea(CamelModel):
    id: str
    name: str
    status: PromotionStatus
    channel: PromotionChannel
    discount: str
    focus_items: List[str] = []


class StoreInfo(CamelModel):
    name: str
    zip: str
    region: str
    format: StoreFormat = "market"


class SellerGoals(CamelModel):
    reduce_spoilage: int = 60
    increase_sell_through: int = 60
    grow_bundles: int = 60


class NearbyBuyerInsight(CamelModel):
    zip: str
    upcoming_events: int
    top_items: List[str] = []


class SalesPerformanceWeek(CamelModel):
    week_of: str
    revenue: float
    gross_margin: float
    waste_avoided: float


class SellerProfile(CamelModel):
    user_id: str
    display_name: str
    store: StoreInfo
    goals: SellerGoals = Field(default_factory=SellerGoals)
    inventory: List[SellerInventoryItem] = []
    demand_signals: List[SellerDemandSignal] = []
    promotions: List[SellerPromotionIdea] = []
    nearby_buyer_insights: List[NearbyBuyerInsight] = []
    sales_performance: List[SalesPerformanceWeek] = []
    last_updated: str


class SellerInventoryInput(CamelModel):
    user_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    stock: float = Field(gt=0)
    sku: Optional[str] = None
    category: str = "General"
    par_level: float = 0
    days_on_hand: float = 0
    margin: float = 0.2
    spoilage_risk: Optional[float] = Field(default=None, ge=0, le=100)
