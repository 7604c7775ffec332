# File: freshlink/services/dashboard_service.py

"""
Dashboard assembly.

Metrics are plain arithmetic over the stored profile, clamped to 0-100.
Buyer items are re-dated against today before anything is computed so a
stale ``status`` on disk never leaks into the scores.
"""

import logging
import math
from typing import List, Optional

from freshlink.db.profile_store import ProfileStore, refresh_buyer_inventory
from freshlink.schemas.buyer import BuyerInventoryInput, BuyerProfile
from freshlink.schemas.dashboard import (
    BuyerDashboardData,
    BuyerDashboardMetrics,
    SellerDashboardData,
    SellerDashboardMetrics,
)
from freshlink.schemas.seller import SellerInventoryInput, SellerProfile
from freshlink.services.insight_service import InsightGenerator

logger = logging.getLogger(__name__)

SHOPPING_FOCUS_LIMIT = 6


def clamp_score(value: float) -> int:
    # Rounds half up (62.5 -> 63).
    return max(0, min(100, math.floor(value + 0.5)))


def compute_buyer_metrics(profile: BuyerProfile) -> BuyerDashboardMetrics:
    inventory = profile.inventory
    total = len(inventory)
    expiring = sum(1 for item in inventory if item.status == "use-soon")
    healthy = sum(1 for item in inventory if item.status == "healthy")
    restock = sum(1 for item in inventory if item.status == "restock")

    waste_risk = clamp_score(100 - expiring * 18)
    pantry_health = 0 if total == 0 else clamp_score(healthy / total * 100 - restock * 5)

    recent_spend = sum(purchase.total for purchase in profile.purchases[:4])
    budget = profile.budget_per_week
    if budget > 0:
        budget_health = clamp_score(100 - (recent_spend - budget) / budget * 40)
    else:
        budget_health = 100 if recent_spend <= 0 else 0

    events = profile.events
    ready = sum(1 for event in events if event.status == "on-track")
    event_readiness = 50 if not events else clamp_score(ready / len(events) * 100)

    return BuyerDashboardMetrics(
        waste_risk=waste_risk,
        pantry_health=pantry_health,
        budget_health=budget_health,
        event_readiness=event_readiness,
    )


def compute_seller_metrics(profile: SellerProfile) -> SellerDashboardMetrics:
    risky = [item for item in profile.inventory if item.status != "healthy"]
    total = len(profile.inventory) or 1

    sell_through = clamp_score((1 - len(risky) / total) * 100)
    average_risk = sum(item.spoilage_risk for item in risky) / max(1, len(risky))
    spoilage_risk = clamp_score(average_risk or 20)

    live_promotions = sum(1 for promo in profile.promotions if promo.status != "draft")
    promotion_momentum = clamp_score(live_promotions * 25 + profile.goals.grow_bundles)

    signals = profile.demand_signals
    demand_confidence = clamp_score(
        sum(signal.expected_lift * 100 for signal in signals) / max(1, len(signals))
    )

    return SellerDashboardMetrics(
        sell_through=sell_through,
        spoilage_risk=spoilage_risk,
        promotion_momentum=promotion_momentum,
        demand_confidence=demand_confidence,
    )


def derive_shopping_focus(profile: BuyerProfile) -> List[str]:
    focus: List[str] = []
    for event in profile.events:
        for entry in event.shopping_list:
            if entry.status == "covered":
                continue
            label = f"{entry.name} • {entry.quantity:g} {entry.unit}"
            if label not in focus:
                focus.append(label)
    return focus[:SHOPPING_FOCUS_LIMIT]


class DashboardService:
    def __init__(self, profiles: ProfileStore, insights: InsightGenerator):
        self.profiles = profiles
        self.insights = insights

    def build_buyer_dashboard(self, user_id: str) -> Optional[BuyerDashboardData]:
        stored = self.profiles.get_buyer_profile(user_id)
        if stored is None:
            return None

        profile = refresh_buyer_inventory(stored, self.profiles.today())
        offers = self.profiles.list_offers_for_zip(profile.zip)

        return BuyerDashboardData(
            profile=profile,
            metrics=compute_buyer_metrics(profile),
            ai=self.insights.generate_buyer_insights(profile, offers),
            offers=offers,
            empty_inventory=not profile.inventory,
            shopping_focus=derive_shopping_focus(profile),
        )

    def build_seller_dashboard(self, user_id: str) -> Optional[SellerDashboardData]:
        profile = self.profiles.get_seller_profile(user_id)
        if profile is None:
            return None

        offers = self.profiles.list_offers_for_zip(profile.store.zip)

        return SellerDashboardData(
            profile=profile,
            metrics=compute_seller_metrics(profile),
            ai=self.insights.generate_seller_insights(profile, offers),
            offers=offers,
            empty_inventory=not profile.inventory,
        )

    def add_buyer_inventory(self, data: BuyerInventoryInput) -> BuyerProfile:
        profile = self.profiles.append_buyer_inventory_item(data)
        logger.info("[dashboard] Buyer %s added %s", data.user_id, data.name)
        return profile

    def add_seller_inventory(self, data: SellerInventoryInput) -> SellerProfile:
        profile = self.profiles.add_seller_inventory_entry(data)
        logger.info("[dashboard] Seller %s added %s", data.user_id, data.name)
        return profile

    def remove_buyer_inventory(self, user_id: str, inventory_id: str) -> BuyerProfile:
        profile = self.profiles.remove_buyer_inventory_item(user_id, inventory_id)
        logger.info("[dashboard] Buyer %s removed %s", user_id, inventory_id)
        return profile

    def add_to_shopping_list(
        self, user_id: str, item: str, quantity: float = 1, unit: str = "each"
    ) -> BuyerProfile:
        return self.profiles.add_buyer_shopping_item(user_id, item, quantity=quantity, unit=unit)
