"""Tests for the LLM-backed planner service."""

import asyncio

import pytest
from pydantic import ValidationError

from meal_planner.domain.meals import MealType
from meal_planner.domain.models import UserProfile
from meal_planner.services.planner import PlannerService
from tests.conftest import FakeStructuredClient, make_day_plan


def _generated(meal_type: str, name: str, calories: float) -> dict[str, object]:
    return {
        "type": meal_type,
        "name": name,
        "calories": calories,
        "protein": 30,
        "carbs": 40,
        "fat": 12,
        "fiber": None,
        "description": f"{name} for the day",
        "prep_time": "15min",
        "difficulty": "Easy",
        "emoji": None,
        "ingredients": ["oats", "milk"],
    }


def _service(client: FakeStructuredClient) -> PlannerService:
    return PlannerService(
        client=client, model="gpt-5.2", reasoning_effort="low", store=False
    )


def test_generate_full_day_plan_summarizes_then_plans(profile: UserProfile) -> None:
    client = FakeStructuredClient(
        payloads={
            "profile_summary": "Active adult aiming to maintain weight.",
            "day_plan": {
                "meals": [
                    _generated("Breakfast", "Oats", 400),
                    _generated("lunch", "Chicken Wrap", 650),
                    _generated("Brunch", "Mystery", 300),
                    _generated("Dinner", "Salmon", 700),
                ]
            },
        }
    )

    meals = asyncio.run(_service(client).generate_full_day_plan(profile, "Today"))

    assert [call["schema_name"] for call in client.calls] == [
        "profile_summary",
        "day_plan",
    ]
    assert "Active adult aiming to maintain weight." in str(client.calls[1]["prompt"])
    assert "Planning for: Today." in str(client.calls[1]["prompt"])
    assert [(meal.id, meal.type) for meal in meals] == [
        ("Today-0", MealType.BREAKFAST),
        ("Today-1", MealType.LUNCH),
        ("Today-3", MealType.DINNER),
    ]
    assert meals[0].ingredients == ("oats", "milk")


def test_generate_full_day_plan_rejects_malformed_payload(
    profile: UserProfile,
) -> None:
    client = FakeStructuredClient(
        payloads={"profile_summary": "summary", "day_plan": {"plan": []}}
    )

    with pytest.raises(ValidationError):
        asyncio.run(_service(client).generate_full_day_plan(profile, "Today"))


def test_rebalance_keeps_future_meal_ids(profile: UserProfile) -> None:
    future = [meal for meal in make_day_plan() if meal.type in {
        MealType.SNACK,
        MealType.DINNER,
    }]
    client = FakeStructuredClient(
        payloads={
            "rebalanced_meals": {
                "meals": [
                    _generated("Dinner", "Veggie Soup", 350),
                    _generated("Breakfast", "Pancakes", 500),
                    _generated("Snack", "Apple", 80),
                ]
            }
        }
    )

    meals = asyncio.run(
        _service(client).rebalance_remaining_meals(
            profile, "Pasta", 650, 550, future
        )
    )

    prompt = str(client.calls[0]["prompt"])
    assert '"Pasta" (650 kcal)' in prompt
    assert "550 kcal remaining" in prompt
    assert "Snack: Snack, Dinner: Dinner" in prompt
    assert [(meal.id, meal.name) for meal in meals] == [
        ("today-dinner", "Veggie Soup"),
        ("today-snack", "Apple"),
    ]
