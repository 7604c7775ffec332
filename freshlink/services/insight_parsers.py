# File: freshlink/services/insight_parsers.py

"""
Coerce loosely-shaped model output into typed insight records.

Every parser accepts ``Any`` and never raises: entries missing a required
field are dropped, unknown moods become the caller's default, and an
input of the wrong type yields an empty result.
"""

from typing import Any, Dict, List, Optional

from freshlink.schemas.insights import (
    BuyerKpiCallout,
    BuyerKpiMetric,
    DietScheduleSuggestion,
    HighlightedInsight,
    InventoryAnnotation,
    MealPlanSuggestion,
    Mood,
    NutritionGridEntry,
    NutritionRecommendation,
    PantryNutritionSummary,
)

MOODS = ("green", "amber", "red")

KPI_METRICS: List[BuyerKpiMetric] = ["wasteRisk", "pantryHealth", "budgetHealth", "eventReadiness"]

KPI_HEADLINES: Dict[str, str] = {
    "wasteRisk": "WASTE RISK",
    "pantryHealth": "PANTRY LOAD",
    "budgetHealth": "BUDGET HEALTH",
    "eventReadiness": "EVENT READINESS",
}

DEFAULT_NUTRITION_SCORE = 72


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _optional_text(value: Any) -> Optional[str]:
    return _text(value) or None


def ensure_mood(value: Any, fallback: Mood = "amber") -> Mood:
    if isinstance(value, str) and value.strip().lower() in MOODS:
        return value.strip().lower()  # type: ignore[return-value]
    return fallback


def score_mood(score: float) -> Mood:
    if score >= 75:
        return "green"
    if score >= 45:
        return "amber"
    return "red"


def format_insight(keyword: str, mood: Mood, detail: str) -> HighlightedInsight:
    return HighlightedInsight(keyword=keyword.strip().upper(), mood=mood, detail=detail.strip())


def parse_insight(value: Any) -> Optional[HighlightedInsight]:
    if not isinstance(value, dict):
        return None
    keyword = _text(value.get("keyword"))
    detail = _text(value.get("detail"))
    if not keyword or not detail:
        return None
    return HighlightedInsight(keyword=keyword.upper(), mood=ensure_mood(value.get("mood")), detail=detail)


def parse_insight_array(value: Any) -> List[HighlightedInsight]:
    if not isinstance(value, list):
        return []
    return [insight for insight in map(parse_insight, value) if insight is not None]


def parse_meal_plan(value: Any) -> List[MealPlanSuggestion]:
    if not isinstance(value, list):
        return []

    plan = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        day = _text(entry.get("day"))
        if not day:
            continue
        add_ons = parse_insight_array(entry.get("addOns"))
        plan.append(
            MealPlanSuggestion(
                day=day,
                meals=parse_insight_array(entry.get("meals")),
                add_ons=add_ons or None,
            )
        )
    return plan


def parse_diet_schedule(value: Any) -> List[DietScheduleSuggestion]:
    if not isinstance(value, list):
        return []

    schedule = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        day = _text(entry.get("day"))
        focus = parse_insight(entry.get("focus"))
        tip = parse_insight(entry.get("tip"))
        if day and focus and tip:
            schedule.append(DietScheduleSuggestion(day=day, focus=focus, tip=tip))
    return schedule


def ensure_kpi_metric(value: Any) -> BuyerKpiMetric:
    if isinstance(value, str) and value in KPI_METRICS:
        return value  # type: ignore[return-value]
    return "wasteRisk"


def parse_kpi_callouts(value: Any) -> List[BuyerKpiCallout]:
    if not isinstance(value, list):
        return []

    callouts = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        detail = _text(entry.get("detail"))
        if not detail:
            continue
        metric = ensure_kpi_metric(entry.get("metric"))
        headline = _text(entry.get("headline"))
        callouts.append(
            BuyerKpiCallout(
                metric=metric,
                headline=headline.upper() if headline else KPI_HEADLINES[metric],
                mood=ensure_mood(entry.get("mood")),
                detail=detail,
            )
        )
    return callouts


def parse_inventory_annotations(value: Any) -> List[InventoryAnnotation]:
    if not isinstance(value, list):
        return []

    annotations = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        name = _text(entry.get("name"))
        status_label = _text(entry.get("statusLabel"))
        category_label = _text(entry.get("categoryLabel"))
        if not name or not status_label or not category_label:
            continue
        annotations.append(
            InventoryAnnotation(
                name=name,
                mood=ensure_mood(entry.get("mood")),
                status_label=status_label,
                category_label=category_label,
                suggestion=_optional_text(entry.get("suggestion")),
            )
        )
    return annotations


def parse_nutrition_recommendations(value: Any) -> List[NutritionRecommendation]:
    if not isinstance(value, list):
        return []

    recommendations = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        item = _text(entry.get("item"))
        reason = _text(entry.get("reason"))
        if not item or not reason:
            continue
        recommendations.append(
            NutritionRecommendation(
                item=item,
                reason=reason,
                store_suggestion=_optional_text(entry.get("storeSuggestion")),
                mood=ensure_mood(entry.get("mood"), "green"),
            )
        )
    return recommendations


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [s for s in (_text(item) for item in value) if s]


def parse_pantry_nutrition(value: Any) -> Optional[PantryNutritionSummary]:
    if not isinstance(value, dict):
        return None

    macro_balance = _text(value.get("macroBalance"))
    missing = _string_list(value.get("missingNutrients"))
    additions = parse_nutrition_recommendations(value.get("recommendedAdditions"))
    if not macro_balance and not missing and not additions:
        return None

    return PantryNutritionSummary(
        macro_balance=macro_balance or "No macro balance insight available.",
        missing_nutrients=missing,
        recommended_additions=additions,
        overall_mood=ensure_mood(value.get("overallMood")),
    )


def _score(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return max(0, min(100, round(value)))


def parse_nutrition_grid(value: Any) -> List[NutritionGridEntry]:
    if not isinstance(value, list):
        return []

    grid = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        score = _score(entry.get("score"))
        grid.append(
            NutritionGridEntry(
                id=_text(entry.get("id")),
                label=_text(entry.get("label")),
                score=score,
                mood=score_mood(score),
            )
        )
    return grid


def parse_nutrition_rating(
    value: Any,
    base: Optional[PantryNutritionSummary] = None,
) -> Optional[PantryNutritionSummary]:
    """
    Turn the dedicated nutrition-rating reply into a pantry summary.

    Missing pieces are borrowed from ``base`` (the narrative prompt's
    pantryNutrition block, if any). The overall mood is driven by the
    average category score.
    """
    if not isinstance(value, dict):
        return None

    grid = parse_nutrition_grid(value.get("categories"))
    if grid:
        average = round(sum(entry.score for entry in grid) / len(grid))
    elif base is not None and base.nutrition_grid:
        average = round(sum(entry.score for entry in base.nutrition_grid) / len(base.nutrition_grid))
    else:
        average = DEFAULT_NUTRITION_SCORE

    summary = _text(value.get("summaryText"))
    if isinstance(value.get("potentialGaps"), list):
        missing = _string_list(value.get("potentialGaps"))
    else:
        missing = list(base.missing_nutrients) if base else []
    if isinstance(value.get("recommendedAdditions"), list):
        additions = parse_nutrition_recommendations(value.get("recommendedAdditions"))
    else:
        additions = list(base.recommended_additions) if base else []

    return PantryNutritionSummary(
        macro_balance=summary or (base.macro_balance if base else ""),
        missing_nutrients=missing,
        recommended_additions=additions,
        overall_mood=score_mood(average),
        nutrition_grid=grid,
    )
