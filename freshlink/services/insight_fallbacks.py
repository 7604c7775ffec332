# File: freshlink/services/insight_fallbacks.py

"""
Heuristic insights.

Used whole when the model is unavailable and field-by-field whenever a
model reply is missing or unusable for a section. Everything here is
derived from the profile and nearby offers only.
"""

from typing import Dict, List, Optional

from freshlink.schemas.buyer import BuyerInventoryItem, BuyerProfile
from freshlink.schemas.insights import (
    BuyerAiInsights,
    BuyerKpiCallout,
    DietScheduleSuggestion,
    HighlightedInsight,
    InventoryAnnotation,
    MealPlanSuggestion,
    Mood,
    NutritionRecommendation,
    PantryNutritionSummary,
    SellerAiInsights,
)
from freshlink.schemas.offer import StoreOffer
from freshlink.schemas.seller import SellerProfile
from freshlink.services.insight_parsers import KPI_HEADLINES, format_insight

BUYER_STATUS_MOOD: Dict[str, Mood] = {
    "healthy": "green",
    "use-soon": "amber",
    "restock": "red",
    "overflow": "amber",
}

SELLER_STATUS_MOOD: Dict[str, Mood] = {
    "healthy": "green",
    "risk": "amber",
    "critical": "red",
}

STATUS_LABELS = {
    "healthy": "Healthy",
    "use-soon": "Use Soon",
    "restock": "Restock Soon",
    "overflow": "Overflow",
}

# (label, category keywords, name keywords), first match wins
CATEGORY_RULES = [
    ("Fresh produce", ("produce", "vegetable", "greens"), ("kale", "spinach")),
    ("Protein source", ("protein",), ("tofu", "egg", "chicken", "bean", "lentil")),
    ("Whole-grain staple", ("grain",), ("rice", "pasta", "oat")),
    ("Snack", ("snack", "treat"), ()),
    ("Dairy & calcium", ("dairy",), ("milk", "yogurt")),
]

PRODUCE_CATEGORIES = ("produce", "vegetable", "greens", "fruit")
PROTEIN_NAMES = ("egg", "tofu", "chickpea", "bean", "lentil")
GRAIN_NAMES = ("rice", "oat", "quinoa")

MISSING_PRODUCE = "Fresh produce for vitamins A & C"
MISSING_PROTEIN = "Lean protein options to balance meals"
MISSING_GRAINS = "Whole grains for sustained energy"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" + ("" if count == 1 else "s")


def _store_of(offers: List[StoreOffer], index: int) -> Optional[str]:
    return offers[index].store_name if len(offers) > index else None


def category_label(item: BuyerInventoryItem) -> str:
    category = (item.category or "").lower()
    name = item.name.lower()
    for label, categories, names in CATEGORY_RULES:
        if any(c in category for c in categories) or any(n in name for n in names):
            return label
    return "Pantry staple"


def inventory_suggestion(item: BuyerInventoryItem) -> Optional[str]:
    if item.status == "use-soon":
        days = item.days_left if item.days_left is not None else 2
        return f"Use within {days} days: fold into quick meals or snacks."
    if item.status == "restock":
        return "Add to this week's shopping list to avoid low inventory."
    if item.status == "overflow":
        return "Plan recipes to work through extras before storage fills up."
    return None


def _missing_nutrients(profile: BuyerProfile) -> List[str]:
    categories = {(item.category or "").lower() for item in profile.inventory}
    names = {item.name.lower() for item in profile.inventory}

    def mentions(pool, words) -> bool:
        return any(word in entry for entry in pool for word in words)

    missing = []
    if not mentions(categories, PRODUCE_CATEGORIES):
        missing.append(MISSING_PRODUCE)
    if not (mentions(names, PROTEIN_NAMES) or mentions(categories, ("protein",))):
        missing.append(MISSING_PROTEIN)
    if not (mentions(names, GRAIN_NAMES) or mentions(categories, ("grain",))):
        missing.append(MISSING_GRAINS)
    return missing


def _nutrition_recommendations(
    missing: List[str], offers: List[StoreOffer]
) -> List[NutritionRecommendation]:
    first_store, second_store = _store_of(offers, 0), _store_of(offers, 1)
    recs: List[NutritionRecommendation] = []

    if MISSING_PRODUCE in missing:
        recs.append(
            NutritionRecommendation(
                item="Leafy greens mix",
                reason="Boosts vitamins, fiber, and freshness alongside pantry grains.",
                store_suggestion=f"Check {first_store} produce bundles." if first_store else None,
                mood="green",
            )
        )
    if MISSING_PROTEIN in missing:
        recs.append(
            NutritionRecommendation(
                item="Plant-based protein",
                reason="Adds versatile protein to balance legumes and grains.",
                store_suggestion=f"See {second_store} markdowns." if second_store else None,
                mood="amber",
            )
        )
    if MISSING_GRAINS in missing:
        recs.append(
            NutritionRecommendation(
                item="Whole-grain wraps",
                reason="Supports quick lunches and balances macros.",
                store_suggestion=f"Browse the bakery aisle at {first_store}." if first_store else None,
                mood="green",
            )
        )
    if not recs and offers:
        offer = offers[0]
        recs.append(
            NutritionRecommendation(
                item=offer.items[0] if offer.items else "Seasonal produce bundle",
                reason="Adds freshness to current pantry-heavy meals.",
                store_suggestion=f"Use the {offer.store_name} offer before {offer.valid_through}.",
                mood="green",
            )
        )
    return recs


def _meal_plan(has_inventory: bool) -> List[MealPlanSuggestion]:
    def add_ons(keyword: str, detail: str) -> Optional[List[HighlightedInsight]]:
        return None if has_inventory else [format_insight(keyword, "green", detail)]

    return [
        MealPlanSuggestion(
            day="Day 1",
            meals=[
                format_insight(
                    "BREAKFAST", "green",
                    f"Greek yogurt parfait with {'pantry' if has_inventory else 'local'} granola and berries.",
                ),
                format_insight(
                    "LUNCH", "green",
                    f"{'Chickpea' if has_inventory else 'Market'} grain bowl with roasted veggies and citrus dressing.",
                ),
                format_insight(
                    "DINNER", "amber" if has_inventory else "green",
                    f"{'Use-soon' if has_inventory else 'Roasted'} sweet potatoes with herb chimichurri.",
                ),
            ],
            add_ons=add_ons("GROCERY BOOST", "Pick up pre-washed greens and canned beans to support tomorrow's meals."),
        ),
        MealPlanSuggestion(
            day="Day 2",
            meals=[
                format_insight("BREAKFAST", "green", "Spinach smoothie with frozen fruit and flaxseed."),
                format_insight("LUNCH", "green", "Whole-grain wrap with hummus, crunchy veggies, and citrus slaw."),
                format_insight("DINNER", "amber", "One-pan tofu stir-fry featuring leafy greens and peppers."),
            ],
            add_ons=add_ons("MARKET PICKUP", "Add a stir-fry veggie pack and tofu from nearby markdowns."),
        ),
        MealPlanSuggestion(
            day="Day 3",
            meals=[
                format_insight("BRUNCH", "green", "Veggie frittata with herbs and leftover roast veg."),
                format_insight("SNACK", "green", "Cranberry spritzer with sparkling water for hydration."),
                format_insight("DINNER", "green", "Sheet-pan citrus salmon with sweet potatoes (swap lentils if plant-based)."),
            ],
            add_ons=add_ons("BUNDLE SAVE", "Grab omega-rich salmon or lentils from a heart-healthy bundle."),
        ),
    ]


def _diet_schedule() -> List[DietScheduleSuggestion]:
    return [
        DietScheduleSuggestion(
            day="Day 1",
            focus=format_insight("FIBER FOCUS", "green", "Combine legumes with leafy greens to support digestion."),
            tip=format_insight("PROTEIN BOOST", "green", "Add Greek yogurt or tofu to each meal to stay full."),
        ),
        DietScheduleSuggestion(
            day="Day 2",
            focus=format_insight("HYDRATION", "green", "Sip infused water or spritzers between meals."),
            tip=format_insight("CARB BALANCE", "amber", "Pair whole grains with veggies to stabilize energy."),
        ),
        DietScheduleSuggestion(
            day="Day 3",
            focus=format_insight("SOCIAL BALANCE", "green", "Pre-portion servings before gatherings to stay on target."),
            tip=format_insight("TREAT SMART", "amber", "Use fruit-forward desserts to curb sugar spikes."),
        ),
    ]


def fallback_buyer_insights(profile: BuyerProfile, offers: List[StoreOffer]) -> BuyerAiInsights:
    inventory = profile.inventory
    expiring = [item for item in inventory if item.status == "use-soon"]
    restock = [item for item in inventory if item.status == "restock"]
    healthiest = [item for item in inventory if item.status == "healthy"]
    has_inventory = bool(inventory)

    recent_spend = sum(purchase.total for purchase in profile.purchases[:3])
    budget_delta = profile.budget_per_week - recent_spend
    active_events = len(profile.events)
    upcoming_needs = [
        f"{entry.name} • {entry.quantity:g} {entry.unit}"
        for event in profile.events
        for entry in event.shopping_list
        if entry.status != "covered"
    ]

    staple_names = ", ".join(item.name for item in healthiest[:2]) or "pantry staples"
    urgent_names = ", ".join(item.name for item in expiring[:2])

    if not has_inventory:
        hero_summary = "Pantry is empty. Add a few essentials to unlock smarter plans and budget tracking."
        overview = "Add what's in your fridge or pantry so we can balance budgets, meal plans, and offers for you."
    else:
        if urgent_names:
            hero_summary = (
                f"Good staples ({staple_names}) but fresh items ({urgent_names}) "
                "need immediate attention to prevent waste."
            )
        else:
            hero_summary = f"Pantry staples ({staple_names}) look solid. Keep rotating them into this week's meals."
        budget_note = (
            "leaves room for targeted produce pickups."
            if budget_delta >= 0
            else "is running hot, so lean on pantry items first."
        )
        event_note = (
            f"Event readiness tracks {_plural(active_events, 'upcoming plan')}."
            if active_events
            else "No events on deck, so use the window for batch cooking."
        )
        overview = (
            f"Recent spend ${recent_spend:.2f} of ${profile.budget_per_week:g} budget {budget_note} {event_note}"
        )

    waste_mood: Mood = "amber" if not has_inventory or expiring else "green"
    budget_mood: Mood = "green" if budget_delta >= 0 else "amber"
    event_mood: Mood = "amber" if active_events and upcoming_needs else "green"

    if expiring:
        waste_detail = "High waste risk: {} need to be used first.".format(
            ", ".join(f"{item.name} ({item.expiration_date or 'soon'})" for item in expiring[:2])
        )
    else:
        waste_detail = "Waste risk is low. Keep rotating older items to maintain the score."

    kpi_callouts = [
        BuyerKpiCallout(
            metric="pantryHealth",
            headline=KPI_HEADLINES["pantryHealth"],
            mood="green" if has_inventory else "amber",
            detail=(
                f"{len(inventory)} tracked items • {len(expiring)} use-soon • {len(restock)} to restock."
                if has_inventory
                else "No pantry items logged yet. Add a few staples to kickstart personalized coaching."
            ),
        ),
        BuyerKpiCallout(
            metric="wasteRisk",
            headline=KPI_HEADLINES["wasteRisk"],
            mood=waste_mood,
            detail=waste_detail,
        ),
        BuyerKpiCallout(
            metric="budgetHealth",
            headline=KPI_HEADLINES["budgetHealth"],
            mood=budget_mood,
            detail=(
                f"Tracking under budget with ${abs(budget_delta):.2f} to spare for strategic produce or proteins."
                if budget_delta >= 0
                else f"Spending exceeded budget by ${abs(budget_delta):.2f}. Prioritize pantry-first meals this week."
            ),
        ),
        BuyerKpiCallout(
            metric="eventReadiness",
            headline=KPI_HEADLINES["eventReadiness"],
            mood=event_mood,
            detail=(
                f"{_plural(active_events, 'upcoming plan')}; finalize menus and cover "
                f"{', '.join(upcoming_needs[:3]) or 'remaining staples'} for full readiness."
                if active_events
                else "No events scheduled. Use the flexibility to experiment with new meal prep routines."
            ),
        ),
    ]

    if expiring:
        first_insight = format_insight(
            "USE SOON",
            "red",
            "Plan meals around {} in the next {} days.".format(
                " and ".join(item.name for item in expiring),
                expiring[0].days_left if expiring[0].days_left is not None else 2,
            ),
        )
    elif has_inventory:
        first_insight = format_insight(
            "INVENTORY CHECK", "green", "Quick shelf scan to confirm quantities keeps waste in check."
        )
    else:
        first_insight = format_insight(
            "INVENTORY CHECK", "amber", "Log staples like grains, legumes, and greens to unlock smarter tips."
        )

    if restock:
        second_insight = format_insight(
            "RESTOCK",
            BUYER_STATUS_MOOD["restock"],
            f"Add {', '.join(item.name for item in restock)} to the next trip to keep meals balanced.",
        )
    else:
        featured = healthiest[0].name if healthiest else "Leafy greens"
        second_insight = format_insight(
            "KEEP ROTATING",
            BUYER_STATUS_MOOD["healthy"],
            f"Feature {featured} in upcoming meals while it is at its best.",
        )

    recommendations = [
        first_insight,
        second_insight,
        format_insight(
            "PLAN AHEAD",
            "amber",
            "Finalize event dishes and align the shopping list with pantry items to minimize spend."
            if active_events
            else "No events scheduled. Consider planning a gathering around pantry staples.",
        ),
    ]

    offer_highlights = [
        format_insight(
            "BUNDLE" if offer.type == "bundle" else "MARKDOWN",
            "green" if offer.discount_percent >= 15 else "amber",
            f"{offer.store_name}: {offer.description} • Ends {offer.valid_through}.",
        )
        for offer in offers[:3]
    ]

    inventory_suggestions = list(offer_highlights)
    if not has_inventory:
        inventory_suggestions += [
            format_insight("STARTER STAPLES", "green", "Add chickpeas, brown rice, and spinach for versatile bowls and salads."),
            format_insight("LEAN PROTEIN", "green", "Pick up tofu or rotisserie chicken from nearby bundles for quick dinners."),
        ]

    annotations = [
        InventoryAnnotation(
            name=item.name,
            mood=BUYER_STATUS_MOOD.get(item.status, "amber"),
            status_label=STATUS_LABELS.get(item.status, item.status.replace("-", " ")),
            category_label=category_label(item),
            suggestion=inventory_suggestion(item),
        )
        for item in inventory
    ]

    missing = _missing_nutrients(profile)
    pantry_nutrition = PantryNutritionSummary(
        macro_balance=(
            f"Pantry leans on {staple_names.lower()}. Pair with fresh greens to round out meals."
            if has_inventory
            else "Macro balance unavailable until pantry items are logged."
        ),
        missing_nutrients=missing,
        recommended_additions=_nutrition_recommendations(missing, offers),
        overall_mood="amber" if len(missing) > 1 else "green",
    )

    deal_highlights = list(offer_highlights) or [
        format_insight("LOCAL TIP", "amber", "Check your grocer's weekly ad for produce bundles aligned to your meal plan.")
    ]
    if not has_inventory and len(deal_highlights) < 3:
        deal_highlights.append(
            format_insight("COMMUNITY CO-OP", "green", "Join a local CSA pickup for seasonal produce under $25/week.")
        )

    return BuyerAiInsights(
        hero_summary=hero_summary,
        overview_commentary=overview,
        kpi_callouts=kpi_callouts,
        recommendations=recommendations,
        inventory_annotations=annotations,
        inventory_suggestions=inventory_suggestions,
        pantry_nutrition=pantry_nutrition,
        meal_plan=_meal_plan(has_inventory),
        diet_schedule=_diet_schedule(),
        deal_highlights=deal_highlights,
    )


def fallback_seller_insights(profile: SellerProfile, offers: List[StoreOffer]) -> SellerAiInsights:
    risky = [item for item in profile.inventory if item.status != "healthy"]
    top_signals = profile.demand_signals[:2]
    lead_signal = top_signals[0] if top_signals else None

    lift = lead_signal.expected_lift if lead_signal else 0.18
    zips = ", ".join(signal.zip for signal in top_signals) or profile.store.zip
    summary = [
        format_insight(
            "SKU COVERAGE",
            "amber" if risky else "green",
            f"{len(profile.inventory)} tracked items • {len(risky)} need action.",
        ),
        format_insight("DEMAND LIFT", "green", f"{lift * 100:.0f}% upside forecast across {zips}."),
    ]

    if risky:
        offer_name = offers[0].description if offers else "flash bundle"
        first_action = format_insight(
            "SPOILAGE RISK",
            "red",
            f"Launch {offer_name} to move {risky[0].name} within {risky[0].days_on_hand + 2:g} days.",
        )
    else:
        first_action = format_insight("INVENTORY HEALTH", "green", "All monitored SKUs look healthy. Maintain cadence.")

    focus_item = lead_signal.focus_items[0] if lead_signal and lead_signal.focus_items else "seasonal produce"
    window = lead_signal.start_date if lead_signal else "the demand window"
    featured = offers[1].items[0] if len(offers) > 1 and offers[1].items else "meal bundles"
    recommended_actions = [
        first_action,
        format_insight("SUPPLY SYNC", "amber", f"Align vendors on {focus_item} ahead of {window}."),
        format_insight("BUYER ALIGNMENT", "green", f"Feature {featured} in-app to match nearby buyer meal plans."),
    ]

    bundle_ideas = [
        format_insight("BUNDLE IDEA", "green", f"{offer.store_name} × {profile.store.name}: {offer.description}")
        for offer in offers
    ] or [format_insight("COMMUNITY EVENT", "amber", "Partner with a local CSA to feature farm boxes in-app.")]

    restock_alerts = [
        format_insight(
            item.name,
            SELLER_STATUS_MOOD.get(item.status, "amber"),
            f"{item.days_on_hand:g} days on hand • Status {item.status} • Margin {round(item.margin * 100)}%.",
        )
        for item in risky
    ] or [format_insight("FORECAST SCAN", "green", "No critical risks detected. Monitor lift in upcoming demand zips.")]

    return SellerAiInsights(
        summary=summary,
        recommended_actions=recommended_actions,
        bundle_ideas=bundle_ideas,
        restock_alerts=restock_alerts,
    )
