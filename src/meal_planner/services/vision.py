"""Food photo analysis using LLMs."""

import base64
from dataclasses import dataclass

from meal_planner.domain.vision import FoodAnalysis
from meal_planner.services.structured import StructuredOutputClient

ANALYSIS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "food_name": {"type": "string"},
        "calories": {"type": "number", "minimum": 0},
        "protein": {"type": "number", "minimum": 0},
        "carbs": {"type": "number", "minimum": 0},
        "fat": {"type": "number", "minimum": 0},
        "reasoning": {"type": "string"},
    },
    "required": ["food_name", "calories", "protein", "carbs", "fat", "reasoning"],
    "additionalProperties": False,
}

_PROMPT = (
    "Analyze this image of food. Return the food name, its estimated calories, "
    "protein, carbs and fat in grams, and a one-sentence reasoning for the estimate."
)


@dataclass
class FoodVisionService:
    """Service that prepares vision prompts and validates results."""

    client: StructuredOutputClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def analyze(self, image_bytes: bytes) -> FoodAnalysis:
        """Estimate calories and macros of the food in an image."""
        raw = await self.client.complete(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=_PROMPT,
            schema=ANALYSIS_SCHEMA,
            schema_name="food_analysis",
            image_data_url=_to_data_url(image_bytes),
        )
        if not isinstance(raw, dict):
            raise TypeError("food analysis must be a JSON object")
        # Empty strings and nulls fall back to the model defaults.
        cleaned = {key: value for key, value in raw.items() if value not in (None, "")}
        return FoodAnalysis.model_validate(cleaned)


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
