"""Request and response models for the HTTP API."""

from dataclasses import asdict
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from meal_planner.domain.meals import Meal, MealType
from meal_planner.domain.models import UserProfile
from meal_planner.domain.vision import FoodAnalysis
from meal_planner.domain.workouts import WorkoutLog


class MealPayload(BaseModel):
    """Meal as exchanged over HTTP."""

    id: str
    type: MealType
    name: str
    calories: float = Field(ge=0.0)
    protein: float = Field(ge=0.0)
    carbs: float | None = Field(default=None, ge=0.0)
    fat: float | None = Field(default=None, ge=0.0)
    fiber: float | None = Field(default=None, ge=0.0)
    description: str = ""
    ingredients: list[str] = Field(default_factory=list)
    prep_time: str | None = None
    difficulty: str | None = None
    emoji: str | None = None

    @classmethod
    def from_meal(cls, meal: Meal) -> "MealPayload":
        return cls.model_validate(asdict(meal))

    def to_meal(self) -> Meal:
        data = self.model_dump()
        data["ingredients"] = tuple(self.ingredients)
        return Meal(**data)


class ProfilePayload(BaseModel):
    """User profile submitted once onboarding completes."""

    name: str
    daily_calories: int = Field(gt=0)
    daily_protein: int = Field(ge=0)
    goal: str = "Maintain"
    location: str = ""
    dietary_restrictions: list[str] = Field(default_factory=list)
    preferred_cuisines: list[str] = Field(default_factory=list)

    def to_profile(self) -> UserProfile:
        return UserProfile(
            name=self.name,
            daily_calories=self.daily_calories,
            daily_protein=self.daily_protein,
            goal=self.goal,
            location=self.location,
            dietary_restrictions=tuple(self.dietary_restrictions),
            preferred_cuisines=tuple(self.preferred_cuisines),
        )


class PlanResponse(BaseModel):
    """Meals of one day plus the background activity signal."""

    offset: int
    meals: list[MealPayload]
    is_generating: bool


class BudgetResponse(BaseModel):
    """Today's calorie budget."""

    daily_calories: int
    consumed: float
    remaining: float
    is_generating: bool


class FoodLogResponse(BaseModel):
    """Outcome of logging a food: the plan as optimistically updated."""

    food_name: str
    calories: float
    rebalancing: bool
    plan: PlanResponse


class FoodLogRequest(FoodAnalysis):
    """Analyzed food plus the user's local time of eating.

    Without ``logged_at`` the server clock picks the slot.
    """

    logged_at: datetime | None = None

    def to_analysis(self) -> FoodAnalysis:
        return FoodAnalysis.model_validate(self.model_dump(exclude={"logged_at"}))


class WorkoutRequest(BaseModel):
    """Finished exercise set; burn is estimated when omitted."""

    exercise_name: str = Field(min_length=1)
    duration_seconds: int = Field(default=0, ge=0)
    calories_burned: float | None = Field(default=None, ge=0.0)
    logged_at: datetime | None = None


class WorkoutLogPayload(BaseModel):
    id: UUID
    exercise_name: str
    duration_seconds: int
    calories_burned: float
    logged_at: datetime

    @classmethod
    def from_log(cls, log: WorkoutLog) -> "WorkoutLogPayload":
        return cls.model_validate(asdict(log))


class WorkoutSummaryResponse(BaseModel):
    """Today's exercise sets and their totals."""

    logs: list[WorkoutLogPayload]
    burned_calories: float
    active_minutes: int
