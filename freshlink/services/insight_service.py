# File: freshlink/services/insight_service.py

"""
AI insight generator.

Builds prompts from a profile plus nearby offers, asks the model for JSON,
repairs and coerces the reply, and fills every section the model did not
deliver from the heuristic payload. Buyers get three prompts (narrative,
meal plan, nutrition rating); sellers get one.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from freshlink.schemas.buyer import BuyerProfile
from freshlink.schemas.insights import BuyerAiInsights, PantryNutritionSummary, SellerAiInsights
from freshlink.schemas.offer import StoreOffer
from freshlink.schemas.seller import SellerProfile
from freshlink.services.ai_client import CompletionClient
from freshlink.services.insight_fallbacks import fallback_buyer_insights, fallback_seller_insights
from freshlink.services.insight_parsers import (
    parse_diet_schedule,
    parse_insight_array,
    parse_inventory_annotations,
    parse_kpi_callouts,
    parse_meal_plan,
    parse_nutrition_rating,
    parse_pantry_nutrition,
)
from freshlink.services.json_repair import parse_json_reply

logger = logging.getLogger(__name__)


BUYER_NARRATIVE_PROMPT = """You are a culinary strategist. Using the buyer profile and nearby offers, craft structured coaching with mood colours.

Return ONLY JSON shaped exactly like:
{{
  "heroSummary": "...",
  "overviewCommentary": "...",
  "kpiCallouts": [ {{ "metric": "pantryHealth|wasteRisk|budgetHealth|eventReadiness", "headline": "...", "mood": "green|amber|red", "detail": "..." }} ],
  "recommendations": [ {{ "keyword": "...", "mood": "green|amber|red", "detail": "..." }} ],
  "inventoryAnnotations": [ {{ "name": "...", "mood": "green|amber|red", "statusLabel": "...", "categoryLabel": "...", "suggestion": "..." }} ],
  "inventorySuggestions": [ {{ "keyword": "...", "mood": "green|amber|red", "detail": "..." }} ],
  "pantryNutrition": {{
    "macroBalance": "...",
    "missingNutrients": ["..."],
    "recommendedAdditions": [ {{ "item": "...", "reason": "...", "storeSuggestion": "...", "mood": "green|amber|red" }} ],
    "overallMood": "green|amber|red"
  }},
  "dealHighlights": [ {{ "keyword": "...", "mood": "green|amber|red", "detail": "..." }} ]
}}

Rules:
- heroSummary: 1-2 sentences contrasting pantry strengths vs urgent risks. Stay under 260 characters.
- overviewCommentary: budget delta + upcoming events + next focus in <= 2 sentences.
- Provide 3-4 kpiCallouts covering each metric once; detail <= 26 words, headline in Title Case.
- recommendations: 3 actionable coaching steps tied to inventory or goals. Use RED for urgent waste/restock, AMBER for watch, GREEN for healthy wins.
- inventoryAnnotations: include at least 5 items when inventory exists; omit suggestion or set to "" if nothing to add. Use precise status and category labels.
- inventorySuggestions: cite offers or starter staples; if no offers, recommend community resources.
- pantryNutrition: tailor missing nutrients to actual inventory; recommendedAdditions can be empty when coverage is strong.
- dealHighlights: spotlight strongest offers; if none, suggest alternative savings route. Keep every detail grounded in context.
- Never output null; use empty arrays when needed. Do not include markdown or commentary outside JSON.

Context JSON:
{context}"""

BUYER_MEAL_PROMPT = """You are a culinary meal-planning expert. Build a short plan using buyer inventory, dietary goals, and offers.

Return ONLY JSON shaped exactly like:
{{
  "mealPlan": [
    {{
      "day": "Day 1",
      "meals": [ {{ "keyword": "...", "mood": "green|amber|red", "detail": "..." }} ],
      "addOns": [ {{ "keyword": "...", "mood": "...", "detail": "..." }} ]
    }}
  ],
  "dietSchedule": [
    {{
      "day": "Day 1",
      "focus": {{ "keyword": "...", "mood": "...", "detail": "..." }},
      "tip": {{ "keyword": "...", "mood": "...", "detail": "..." }}
    }}
  ]
}}

Rules:
- Provide mealPlan for three consecutive days (Day 1-3). Each day must include breakfast/lunch/dinner (and optional snacks) referencing available or recommended items. Use GREEN when meal aligns to goals, AMBER when watch portions, RED only for urgent clearance items.
- Always include addOns when inventory is empty or thin; link suggestions to nearby stores or bundles from offers.
- Diet schedule must have three entries matching Day 1-3 with concise coaching statements.
- Avoid markdown, explanations, or nulls. Omit addOns array when not needed.

Context JSON:
{context}"""

BUYER_NUTRITION_PROMPT = """You are a nutrition analyst. Using the buyer profile (inventory) and upcoming event plans (shoppingList entries), rate the buyer's pantry across these categories: Protein, Produce & fiber, Healthy fats, Whole grains, Hydration & electrolytes.

Return ONLY JSON shaped EXACTLY like:
{{
  "summaryText": "...",
  "categories": [
    {{ "id": "protein", "label": "Protein balance", "score": 0, "detail": "..." }},
    {{ "id": "produce", "label": "Produce & fiber", "score": 0, "detail": "..." }},
    {{ "id": "healthy-fats", "label": "Healthy fats", "score": 0, "detail": "..." }},
    {{ "id": "whole-grains", "label": "Whole grains", "score": 0, "detail": "..." }},
    {{ "id": "hydration", "label": "Hydration & electrolytes", "score": 0, "detail": "..." }}
  ],
  "potentialGaps": ["Vitamin C", "Fiber"],
  "recommendedAdditions": [ {{ "item": "Berries", "reason": "Good source of Vitamin C and fiber, great with yogurt.", "storeSuggestion": "..." }} ]
}}

Rules:
- Use the full inventory array and any shoppingList items from upcoming events as context; do NOT assume access to any other data.
- Scores are integers 0-100 and reflect coverage in the pantry + near-term events.
- summaryText is a concise 1-2 sentence summary (<= 220 chars).
- recommendedAdditions should include storeSuggestion when a local offer or store is present in context; otherwise suggest a generic local grocer.
- Never output markdown or extra text outside the raw JSON object.

Context JSON:
{context}"""

SELLER_PROMPT = """You are a grocery retail strategist. Produce JSON insights with explicit mood colours.

Return ONLY JSON shaped exactly like:
{{
  "summary": [ {{ "keyword": "...", "mood": "green|amber|red", "detail": "..." }} ],
  "recommendedActions": [ {{ "keyword": "...", "mood": "...", "detail": "..." }} ],
  "bundleIdeas": [ {{ "keyword": "...", "mood": "...", "detail": "..." }} ],
  "restockAlerts": [ {{ "keyword": "...", "mood": "...", "detail": "..." }} ]
}}

Rules:
- Provide at least 2 summary insights focusing on inventory coverage and demand signals.
- Create 3 recommendedActions tied to spoilage risk, supply planning, and buyer demand. Use RED for critical stock, AMBER for watch items, GREEN for wins.
- bundleIdeas should reference offers or propose co-marketing opportunities when offers array is empty.
- restockAlerts must highlight risky SKUs with actionable guidance; if none exist, suggest proactive monitoring.
- Avoid markdown or narrative text; only the JSON object.

Context JSON:
{context}"""


def build_context(profile: Any, offers: List[StoreOffer]) -> str:
    return json.dumps(
        {"profile": profile.to_json_dict(), "offers": [offer.to_json_dict() for offer in offers]},
        indent=2,
        ensure_ascii=False,
    )


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _pick(primary: Any, fallback: Any) -> Any:
    return primary if primary else fallback


class InsightGenerator:
    def __init__(self, client: Optional[CompletionClient] = None):
        self.client = client

    @property
    def live(self) -> bool:
        return self.client is not None

    def _ask_json(self, prompt: str) -> Optional[Dict[str, Any]]:
        if self.client is None:
            return None

        try:
            raw = self.client.complete(prompt)
        except Exception as e:
            logger.warning("[ai] Completion client failed, using heuristics instead: %s", e)
            return None
        if not raw:
            return None

        parsed = parse_json_reply(raw)
        if parsed is not None and not isinstance(parsed, dict):
            logger.warning("[ai] Expected a JSON object, got %s", type(parsed).__name__)
            return None
        return parsed

    def generate_buyer_insights(
        self, profile: BuyerProfile, offers: List[StoreOffer]
    ) -> BuyerAiInsights:
        fallback = fallback_buyer_insights(profile, offers)
        if not self.live:
            return fallback

        context = build_context(profile, offers)
        narrative = self._ask_json(BUYER_NARRATIVE_PROMPT.format(context=context)) or {}
        meals = self._ask_json(BUYER_MEAL_PROMPT.format(context=context)) or {}
        nutrition = self._ask_json(BUYER_NUTRITION_PROMPT.format(context=context))

        narrative_nutrition = parse_pantry_nutrition(narrative.get("pantryNutrition"))
        pantry_nutrition: Optional[PantryNutritionSummary] = (
            parse_nutrition_rating(nutrition, base=narrative_nutrition) or narrative_nutrition
        )
        if pantry_nutrition is None:
            pantry_nutrition = fallback.pantry_nutrition
        elif not pantry_nutrition.macro_balance:
            pantry_nutrition = pantry_nutrition.model_copy(
                update={"macro_balance": fallback.pantry_nutrition.macro_balance}
            )

        return BuyerAiInsights(
            hero_summary=_pick(_text(narrative.get("heroSummary")), fallback.hero_summary),
            overview_commentary=_pick(
                _text(narrative.get("overviewCommentary")), fallback.overview_commentary
            ),
            kpi_callouts=_pick(parse_kpi_callouts(narrative.get("kpiCallouts")), fallback.kpi_callouts),
            recommendations=_pick(
                parse_insight_array(narrative.get("recommendations")), fallback.recommendations
            ),
            inventory_annotations=_pick(
                parse_inventory_annotations(narrative.get("inventoryAnnotations")),
                fallback.inventory_annotations,
            ),
            inventory_suggestions=_pick(
                parse_insight_array(narrative.get("inventorySuggestions")),
                fallback.inventory_suggestions,
            ),
            pantry_nutrition=pantry_nutrition,
            meal_plan=_pick(parse_meal_plan(meals.get("mealPlan")), fallback.meal_plan),
            diet_schedule=_pick(parse_diet_schedule(meals.get("dietSchedule")), fallback.diet_schedule),
            deal_highlights=_pick(
                parse_insight_array(narrative.get("dealHighlights")), fallback.deal_highlights
            ),
        )

    def generate_seller_insights(
        self, profile: SellerProfile, offers: List[StoreOffer]
    ) -> SellerAiInsights:
        fallback = fallback_seller_insights(profile, offers)
        if not self.live:
            return fallback

        parsed = self._ask_json(SELLER_PROMPT.format(context=build_context(profile, offers)))
        if not parsed:
            return fallback

        return SellerAiInsights(
            summary=_pick(parse_insight_array(parsed.get("summary")), fallback.summary),
            recommended_actions=_pick(
                parse_insight_array(parsed.get("recommendedActions")), fallback.recommended_actions
            ),
            bundle_ideas=_pick(parse_insight_array(parsed.get("bundleIdeas")), fallback.bundle_ideas),
            restock_alerts=_pick(
                parse_insight_array(parsed.get("restockAlerts")), fallback.restock_alerts
            ),
        )

