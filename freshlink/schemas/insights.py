# File: freshlink/schemas/insights.py

"""
Typed shapes for dashboard coaching / forecast snippets.

Both the LLM path and the heuristic path must produce exactly these
models, so the frontend never has to care where an insight came from.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from freshlink.schemas.base import CamelModel

Mood = Literal["green", "amber", "red"]
BuyerKpiMetric = Literal["wasteRisk", "pantryHealth", "budgetHealth", "eventReadiness"]


class HighlightedInsight(CamelModel):
    keyword: str
    mood: Mood
    detail: str


class BuyerKpiCallout(CamelModel):
    metric: BuyerKpiMetric
    headline: str
    mood: Mood
    detail: str


class InventoryAnnotation(CamelModel):
    name: str
    mood: Mood
    status_label: str
    category_label: str
    suggestion: Optional[str] = None


class NutritionRecommendation(CamelModel):
    item: str
    reason: str
    store_suggestion: Optional[str] = None
    mood: Mood = "green"


class NutritionGridEntry(CamelModel):
    id: str
    label: str
    score: int
    mood: Mood


class PantryNutritionSummary(CamelModel):
    macro_balance: str
    missing_nutrients: List[str] = []
    recommended_additions: List[NutritionRecommendation] = []
    overall_mood: Mood = "amber"
    nutrition_grid: Optional[List[NutritionGridEntry]] = None


class MealPlanSuggestion(CamelModel):
    day: str
    meals: List[HighlightedInsight] = []
    add_ons: Optional[List[HighlightedInsight]] = None


class DietScheduleSuggestion(CamelModel):
    day: str
    focus: HighlightedInsight
    tip: HighlightedInsight


class BuyerAiInsights(CamelModel):
    hero_summary: str
    overview_commentary: str
    kpi_callouts: List[BuyerKpiCallout] = []
    recommendations: List[HighlightedInsight] = []
    inventory_annotations: List[InventoryAnnotation] = []
    inventory_suggestions: List[HighlightedInsight] = []
    pantry_nutrition: PantryNutritionSummary
    meal_plan: List[MealPlanSuggestion] = []
    diet_schedule: List[DietScheduleSuggestion] = []
    deal_highlights: List[HighlightedInsight] = []


class SellerAiInsights(CamelModel):
    summary: List[HighlightedInsight] = []
    recommended_actions: List[HighlightedInsight] = []
    bundle_ideas: List[HighlightedInsight] = []
    restock_alerts: List[HighlightedInsight] = []
