"""Models for food photo analysis results."""

from pydantic import BaseModel, Field


class FoodAnalysis(BaseModel):
    """Calorie and macro estimate for a photographed food."""

    food_name: str = "Unknown Food"
    calories: float = Field(default=0.0, ge=0.0)
    protein: float = Field(default=0.0, ge=0.0)
    carbs: float = Field(default=0.0, ge=0.0)
    fat: float = Field(default=0.0, ge=0.0)
    reasoning: str = "Visual Estimate"
