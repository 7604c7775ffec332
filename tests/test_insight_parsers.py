# File: tests/test_insight_parsers.py

import pytest

from freshlink.schemas.insights import PantryNutritionSummary
from freshlink.services.insight_parsers import (
    ensure_mood,
    parse_diet_schedule,
    parse_insight_array,
    parse_inventory_annotations,
    parse_kpi_callouts,
    parse_meal_plan,
    parse_nutrition_rating,
    parse_pantry_nutrition,
    score_mood,
)


@pytest.mark.parametrize(
    "value, expected",
    [("green", "green"), (" RED ", "red"), ("purple", "amber"), (None, "amber"), (3, "amber")],
)
def test_ensure_mood(value, expected):
    assert ensure_mood(value) == expected


@pytest.mark.parametrize("score, expected", [(75, "green"), (74, "amber"), (45, "amber"), (44, "red")])
def test_score_mood(score, expected):
    assert score_mood(score) == expected


def test_insight_array_drops_incomplete_entries():
    parsed = parse_insight_array(
        [
            {"keyword": "use soon", "mood": "red", "detail": " Cook the spinach tonight. "},
            {"keyword": "no detail", "mood": "green"},
            "not an object",
            {"keyword": "restock", "mood": "violet", "detail": "Buy oats."},
        ]
    )
    assert [(i.keyword, i.mood, i.detail) for i in parsed] == [
        ("USE SOON", "red", "Cook the spinach tonight."),
        ("RESTOCK", "amber", "Buy oats."),
    ]


def test_insight_array_rejects_non_lists():
    assert parse_insight_array({"keyword": "x", "detail": "y"}) == []


def test_kpi_callouts_fill_headline_and_metric():
    callouts = parse_kpi_callouts(
        [
            {"metric": "budgetHealth", "mood": "green", "detail": "Under budget by $12."},
            {"metric": "mystery", "headline": "Food waste", "detail": "Two items expire soon."},
            {"metric": "pantryHealth", "detail": ""},
        ]
    )
    assert len(callouts) == 2
    assert callouts[0].headline == "BUDGET HEALTH"
    assert callouts[1].metric == "wasteRisk"
    assert callouts[1].headline == "FOOD WASTE"


def test_inventory_annotations_need_labels():
    annotations = parse_inventory_annotations(
        [
            {"name": "Spinach", "mood": "amber", "statusLabel": "Use Soon", "categoryLabel": "Fresh produce", "suggestion": ""},
            {"name": "Rice", "statusLabel": "Healthy"},
        ]
    )
    assert len(annotations) == 1
    assert annotations[0].suggestion is None


def test_meal_plan_and_diet_schedule():
    plan = parse_meal_plan(
        [
            {"day": "Day 1", "meals": [{"keyword": "breakfast", "mood": "green", "detail": "Oats."}]},
            {"meals": []},
            {
                "day": "Day 2",
                "meals": [],
                "addOns": [{"keyword": "grocery boost", "mood": "green", "detail": "Greens."}],
            },
        ]
    )
    assert [day.day for day in plan] == ["Day 1", "Day 2"]
    assert plan[0].add_ons is None
    assert plan[1].add_ons[0].keyword == "GROCERY BOOST"

    schedule = parse_diet_schedule(
        [
            {
                "day": "Day 1",
                "focus": {"keyword": "fiber", "mood": "green", "detail": "Beans."},
                "tip": {"keyword": "hydrate", "mood": "green", "detail": "Water."},
            },
            {"day": "Day 2", "focus": {"keyword": "fiber", "detail": "Beans."}},
        ]
    )
    assert len(schedule) == 1
    assert schedule[0].tip.keyword == "HYDRATE"


def test_pantry_nutrition_requires_some_content():
    assert parse_pantry_nutrition({"overallMood": "green"}) is None

    summary = parse_pantry_nutrition({"missingNutrients": ["Vitamin C", " ", 4]})
    assert summary.missing_nutrients == ["Vitamin C"]
    assert summary.macro_balance == "No macro balance insight available."


def test_nutrition_rating_uses_average_score():
    summary = parse_nutrition_rating(
        {
            "summaryText": "Strong protein, light on produce.",
            "categories": [
                {"id": "protein", "label": "Protein balance", "score": 90},
                {"id": "produce", "label": "Produce & fiber", "score": 40},
                {"id": "hydration", "label": "Hydration", "score": 130},
            ],
            "potentialGaps": ["Vitamin C"],
            "recommendedAdditions": [{"item": "Berries", "reason": "Vitamin C.", "storeSuggestion": "Harbor Greens"}],
        }
    )
    assert summary.macro_balance == "Strong protein, light on produce."
    assert [(e.score, e.mood) for e in summary.nutrition_grid] == [(90, "green"), (40, "red"), (100, "green")]
    # (90 + 40 + 100) / 3 = 77
    assert summary.overall_mood == "green"
    assert summary.recommended_additions[0].store_suggestion == "Harbor Greens"


def test_nutrition_rating_borrows_from_base():
    base = PantryNutritionSummary(
        macro_balance="Grain heavy.",
        missing_nutrients=["Fiber"],
        overall_mood="green",
    )
    summary = parse_nutrition_rating({"categories": []}, base=base)

    assert summary.macro_balance == "Grain heavy."
    assert summary.missing_nutrients == ["Fiber"]
    # no scores anywhere: default 72 is amber
    assert summary.overall_mood == "amber"


def test_nutrition_rating_rejects_non_objects():
    assert parse_nutrition_rating(["nope"]) is None
