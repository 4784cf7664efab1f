"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from meal_planner.adapters.openai_client import OpenAIStructuredClient
from meal_planner.config import Settings
from meal_planner.services.planner import MealPlanner, PlannerService
from meal_planner.services.reconciler import DailyPlanReconciler
from meal_planner.services.vision import FoodVisionService
from meal_planner.services.workouts import WorkoutJournal


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    vision_service: FoodVisionService
    planner_service: MealPlanner
    reconciler: DailyPlanReconciler
    workout_journal: WorkoutJournal
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    openai_client = OpenAIStructuredClient.create(
        resolved_settings.openai_api_key,
        timeout_seconds=resolved_settings.openai_timeout_seconds,
    )
    vision_service = FoodVisionService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    planner_service = PlannerService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    reconciler = DailyPlanReconciler(planner=planner_service)

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        vision_service=vision_service,
        planner_service=planner_service,
        reconciler=reconciler,
        workout_journal=WorkoutJournal(),
        close_resources=close_resources,
    )
