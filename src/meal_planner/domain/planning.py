"""Structured output models for generated meal plans."""

from pydantic import BaseModel, Field


class GeneratedMeal(BaseModel):
    """Meal as returned by the planning model."""

    id: str | None = None
    type: str
    name: str
    calories: float = Field(ge=0.0)
    protein: float = Field(ge=0.0)
    carbs: float | None = Field(default=None, ge=0.0)
    fat: float | None = Field(default=None, ge=0.0)
    fiber: float | None = Field(default=None, ge=0.0)
    description: str = ""
    prep_time: str | None = None
    difficulty: str | None = None
    emoji: str | None = None
    ingredients: list[str] = Field(default_factory=list)


class MealPlanExtract(BaseModel):
    """Structured output for a full day plan or a rebalanced subset."""

    meals: list[GeneratedMeal]
