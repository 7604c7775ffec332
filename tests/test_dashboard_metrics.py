# File: tests/test_dashboard_metrics.py

import pytest

from freshlink.schemas.buyer import (
    BuyerEventPlan,
    BuyerInventoryItem,
    BuyerProfile,
    BuyerPurchaseRecord,
    ShoppingListEntry,
)
from freshlink.schemas.seller import (
    SellerDemandSignal,
    SellerInventoryItem,
    SellerProfile,
    SellerPromotionIdea,
    StoreInfo,
)
from freshlink.services.dashboard_service import (
    clamp_score,
    compute_buyer_metrics,
    compute_seller_metrics,
    derive_shopping_focus,
)


def _item(name, status):
    return BuyerInventoryItem(
        id=f"inv-{name}",
        name=name,
        quantity=1,
        unit="each",
        category="Pantry",
        status=status,
        added_on="2025-03-01",
    )


def _purchase(total):
    return BuyerPurchaseRecord(id=f"p-{total}", date="2025-03-01", total=total, store="Harbor Greens")


def _event(status, shopping_list=()):
    return BuyerEventPlan(
        id=f"event-{status}",
        name="Dinner",
        date="2025-03-20",
        headcount=4,
        status=status,
        shopping_list=list(shopping_list),
    )


def _buyer(**fields):
    base = dict(user_id="buyer-1", display_name="Ada", zip="07030", budget_per_week=100, last_updated="2025-03-01")
    base.update(fields)
    return BuyerProfile(**base)


@pytest.mark.parametrize(
    "value, expected",
    [(62.5, 63), (62.4, 62), (-10, 0), (140, 100), (0, 0)],
)
def test_clamp_score(value, expected):
    assert clamp_score(value) == expected


def test_buyer_metrics():
    profile = _buyer(
        inventory=[
            _item("milk", "use-soon"),
            _item("rice", "healthy"),
            _item("beans", "healthy"),
            _item("oil", "restock"),
        ],
        # only the first four purchases count
        purchases=[_purchase(120), _purchase(10), _purchase(10), _purchase(10), _purchase(500)],
        events=[_event("on-track"), _event("draft")],
    )

    metrics = compute_buyer_metrics(profile)
    assert metrics.waste_risk == 82
    assert metrics.pantry_health == 45
    assert metrics.budget_health == 80
    assert metrics.event_readiness == 50


def test_buyer_metrics_empty_profile():
    metrics = compute_buyer_metrics(_buyer())
    assert metrics.waste_risk == 100
    assert metrics.pantry_health == 0
    assert metrics.budget_health == 100
    assert metrics.event_readiness == 50


@pytest.mark.parametrize("spend, expected", [([], 100), ([25], 0)])
def test_buyer_metrics_zero_budget(spend, expected):
    profile = _buyer(budget_per_week=0, purchases=[_purchase(total) for total in spend])
    assert compute_buyer_metrics(profile).budget_health == expected


def test_seller_metrics():
    profile = SellerProfile(
        user_id="seller-1",
        display_name="Lee",
        store=StoreInfo(name="Lee's Market", zip="07030", region="Hudson County"),
        inventory=[
            SellerInventoryItem(
                sku="a", name="Kale", category="Produce", stock=10, par_level=5,
                days_on_hand=20, status="critical", spoilage_risk=70, margin=0.3,
            ),
            SellerInventoryItem(
                sku="b", name="Rice", category="Grains", stock=10, par_level=5,
                days_on_hand=2, status="healthy", spoilage_risk=20, margin=0.2,
            ),
        ],
        promotions=[
            SellerPromotionIdea(id="p1", name="Greens", status="active", channel="app", discount="10%"),
            SellerPromotionIdea(id="p2", name="Soup", status="draft", channel="flyer", discount="5%"),
        ],
        demand_signals=[
            SellerDemandSignal(id="d1", zip="07030", start_date="2025-03-01", end_date="2025-03-07", expected_lift=0.3),
            SellerDemandSignal(id="d2", zip="07302", start_date="2025-03-01", end_date="2025-03-07", expected_lift=0.1),
        ],
        last_updated="2025-03-01",
    )

    metrics = compute_seller_metrics(profile)
    assert metrics.sell_through == 50
    assert metrics.spoilage_risk == 70
    # one live promotion plus the default bundle goal of 60
    assert metrics.promotion_momentum == 85
    assert metrics.demand_confidence == 20


def test_shopping_focus_skips_covered_and_dedupes():
    entries = [
        ShoppingListEntry(name="Lemons", quantity=3, unit="each", status="add"),
        ShoppingListEntry(name="Rice", quantity=1, unit="lb", status="covered"),
        ShoppingListEntry(name="Lemons", quantity=3, unit="each", status="reserve"),
        ShoppingListEntry(name="Feta", quantity=0.5, unit="lb", status="reserve"),
    ]
    profile = _buyer(events=[_event("needs-shopping", entries), _event("draft", entries[:1])])

    assert derive_shopping_focus(profile) == ["Lemons • 3 each", "Feta • 0.5 lb"]


def test_shopping_focus_is_capped():
    entries = [ShoppingListEntry(name=f"Item {i}", quantity=1, unit="each", status="add") for i in range(9)]
    profile = _buyer(events=[_event("needs-shopping", entries)])
    assert len(derive_shopping_focus(profile)) == 6
