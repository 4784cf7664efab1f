"""Meal plan generation and rebalancing using LLMs."""

import json
import logging
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Protocol

from meal_planner.domain.meals import Meal, MealType
from meal_planner.domain.models import UserProfile
from meal_planner.domain.planning import GeneratedMeal, MealPlanExtract
from meal_planner.services.structured import StructuredOutputClient

_logger = logging.getLogger(__name__)


def _nullable(schema: dict[str, object]) -> dict[str, object]:
    return {"anyOf": [schema, {"type": "null"}]}


_MEAL_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "type": {"type": "string", "enum": [meal_type.value for meal_type in MealType]},
        "name": {"type": "string"},
        "calories": {"type": "number", "minimum": 0},
        "protein": {"type": "number", "minimum": 0},
        "carbs": _nullable({"type": "number", "minimum": 0}),
        "fat": _nullable({"type": "number", "minimum": 0}),
        "fiber": _nullable({"type": "number", "minimum": 0}),
        "description": {"type": "string"},
        "prep_time": _nullable({"type": "string"}),
        "difficulty": _nullable({"type": "string"}),
        "emoji": _nullable({"type": "string"}),
        "ingredients": {"type": "array", "items": {"type": "string"}},
    },
    "required": [
        "type",
        "name",
        "calories",
        "protein",
        "carbs",
        "fat",
        "fiber",
        "description",
        "prep_time",
        "difficulty",
        "emoji",
        "ingredients",
    ],
    "additionalProperties": False,
}

MEAL_PLAN_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {"meals": {"type": "array", "items": _MEAL_SCHEMA}},
    "required": ["meals"],
    "additionalProperties": False,
}


class MealPlanner(Protocol):
    """Interface for generating and rebalancing day plans."""

    async def generate_full_day_plan(
        self, profile: UserProfile, day_label: str
    ) -> list[Meal]:
        """Return a full day plan; an empty list means no plan is available."""

    async def rebalance_remaining_meals(
        self,
        profile: UserProfile,
        logged_food_name: str,
        logged_calories: float,
        new_remaining_budget: float,
        future_meals: Sequence[Meal],
    ) -> list[Meal]:
        """Return rewritten versions of ``future_meals`` matched by type."""


@dataclass
class PlannerService(MealPlanner):
    """Service that prompts the model for day plans and validates results."""

    client: StructuredOutputClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def summarize_profile(self, profile: UserProfile) -> str:
        """Condense the profile into a short health summary for planning."""
        prompt = (
            "Role: Nutrition coach.\n"
            "Task: Create a concise user health profile from this raw data.\n"
            f"Data: {json.dumps(asdict(profile))}\n"
            "Output: One dense paragraph summarizing metabolic needs, constraints, "
            f"local food context ({profile.location or 'unknown'}) and lifestyle."
        )
        summary = await self.client.complete(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=prompt,
            schema=None,
            schema_name="profile_summary",
        )
        return str(summary).strip()

    async def generate_full_day_plan(
        self, profile: UserProfile, day_label: str
    ) -> list[Meal]:
        """Generate four meals for the labelled day."""
        summary = await self.summarize_profile(profile)
        prompt = (
            "You are a meal planning assistant.\n"
            f"User context: {summary}\n"
            f"Planning for: {day_label}.\n"
            f"Goal: {profile.goal}. Daily calories: {profile.daily_calories}. "
            f"Protein: {profile.daily_protein}g.\n"
            "Task: Generate a one-day meal plan with exactly one Breakfast, Lunch, "
            "Snack and Dinner.\n"
            f"Constraints: local ingredients for {profile.location or 'the user'}; "
            "high protein and tasty; no cooking steps; list ingredient names only"
            f"{_restrictions_clause(profile)}."
        )
        raw = await self.client.complete(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=prompt,
            schema=MEAL_PLAN_SCHEMA,
            schema_name="day_plan",
        )
        extract = MealPlanExtract.model_validate(raw)
        return [
            _to_meal(item, fallback_id=f"{day_label}-{index}")
            for index, item in enumerate(extract.meals)
            if _parse_type(item.type) is not None
        ]

    async def rebalance_remaining_meals(
        self,
        profile: UserProfile,
        logged_food_name: str,
        logged_calories: float,
        new_remaining_budget: float,
        future_meals: Sequence[Meal],
    ) -> list[Meal]:
        """Rewrite upcoming meals so the day fits the new budget."""
        upcoming = ", ".join(f"{meal.type.value}: {meal.name}" for meal in future_meals)
        prompt = (
            "You are a nutrition assistant rebalancing a day plan.\n"
            f'Event: the user ate "{logged_food_name}" ({logged_calories:g} kcal).\n'
            f"New budget: {new_remaining_budget:g} kcal remaining for today.\n"
            f"Upcoming meals: {upcoming}.\n"
            "Task: Rewrite only the upcoming meals to fit the new budget, keeping "
            "each meal's type. Reduce portions or change dishes. Keep it simple, "
            "no steps and no detailed ingredients."
        )
        raw = await self.client.complete(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=prompt,
            schema=MEAL_PLAN_SCHEMA,
            schema_name="rebalanced_meals",
        )
        extract = MealPlanExtract.model_validate(raw)
        ids_by_type = {meal.type: meal.id for meal in future_meals}
        rebalanced: list[Meal] = []
        for item in extract.meals:
            meal_type = _parse_type(item.type)
            if meal_type not in ids_by_type:
                _logger.warning("Dropping rebalanced meal with type %r", item.type)
                continue
            rebalanced.append(_to_meal(item, fallback_id=ids_by_type[meal_type]))
        return rebalanced


def _restrictions_clause(profile: UserProfile) -> str:
    parts = []
    if profile.dietary_restrictions:
        parts.append(f"; respect: {', '.join(profile.dietary_restrictions)}")
    if profile.preferred_cuisines:
        parts.append(f"; preferred cuisines: {', '.join(profile.preferred_cuisines)}")
    return "".join(parts)


def _parse_type(value: str) -> MealType | None:
    normalized = value.strip().capitalize()
    try:
        return MealType(normalized)
    except ValueError:
        return None


def _to_meal(item: GeneratedMeal, *, fallback_id: str) -> Meal:
    meal_type = _parse_type(item.type)
    if meal_type is None:
        raise ValueError(f"unknown meal type: {item.type}")
    return Meal(
        id=item.id or fallback_id,
        type=meal_type,
        name=item.name,
        calories=item.calories,
        protein=item.protein,
        carbs=item.carbs,
        fat=item.fat,
        fiber=item.fiber,
        description=item.description,
        ingredients=tuple(item.ingredients),
        prep_time=item.prep_time,
        difficulty=item.difficulty,
        emoji=item.emoji,
    )
