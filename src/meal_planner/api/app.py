"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Annotated

from fastapi import FastAPI, HTTPException, Path, Request, status
from fastapi.responses import JSONResponse

from meal_planner.api.schemas import (
    BudgetResponse,
    FoodLogRequest,
    FoodLogResponse,
    MealPayload,
    PlanResponse,
    ProfilePayload,
    WorkoutLogPayload,
    WorkoutRequest,
    WorkoutSummaryResponse,
)
from meal_planner.app_logging import configure_logging
from meal_planner.containers import AppContainer
from meal_planner.domain.vision import FoodAnalysis
from meal_planner.services.reconciler import (
    TODAY,
    DailyPlanReconciler,
    MealAlreadyEatenError,
    ProfileNotLoadedError,
)
from meal_planner.services.workouts import WorkoutJournal

DayOffset = Annotated[int, Path(ge=0)]


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        state_container: AppContainer = app.state.container
        await state_container.reconciler.wait_for_background()
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(ProfileNotLoadedError)
    async def profile_not_loaded(
        request: Request, exc: ProfileNotLoadedError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": "Complete the profile setup first."},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/profile")
    async def submit_profile(payload: ProfilePayload, request: Request) -> PlanResponse:
        """Install the profile and generate today's plan."""
        reconciler = _reconciler(request)
        await reconciler.on_profile_ready(payload.to_profile())
        return _plan_response(reconciler, TODAY)

    @app.get("/plans/{offset}")
    async def get_plan(offset: DayOffset, request: Request) -> PlanResponse:
        """Return the stored plan for a day offset."""
        return _plan_response(_reconciler(request), offset)

    @app.put("/plans/{offset}")
    async def replace_plan(
        offset: DayOffset, meals: list[MealPayload], request: Request
    ) -> PlanResponse:
        """Replace a day's plan with manually edited meals."""
        reconciler = _reconciler(request)
        reconciler.set_meals(offset, [meal.to_meal() for meal in meals])
        return _plan_response(reconciler, offset)

    @app.post("/days/{offset}")
    async def navigate_day(offset: DayOffset, request: Request) -> PlanResponse:
        """Select a day, generating its plan on first visit."""
        reconciler = _reconciler(request)
        await reconciler.on_day_navigated(offset)
        return _plan_response(reconciler, offset)

    @app.get("/budget")
    async def get_budget(request: Request) -> BudgetResponse:
        """Return today's consumed and remaining calories."""
        return _budget_response(_reconciler(request))

    @app.get("/next-meal")
    async def get_next_meal(
        request: Request, at: datetime | None = None
    ) -> MealPayload | None:
        """Return the upcoming meal of the selected day at the user's time."""
        meal = _reconciler(request).next_meal(at)
        return MealPayload.from_meal(meal) if meal else None

    @app.post("/meals/{meal_id}/eaten")
    async def mark_meal_eaten(meal_id: str, request: Request) -> BudgetResponse:
        """Record a planned meal from today's plan as eaten."""
        reconciler = _reconciler(request)
        reconciler.require_profile()
        meal = reconciler.find_meal(meal_id)
        if meal is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        try:
            reconciler.log_meal_eaten(meal)
        except MealAlreadyEatenError:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Meal already logged.",
            ) from None
        return _budget_response(reconciler)

    @app.post("/food-logs")
    async def log_food(payload: FoodLogRequest, request: Request) -> FoodLogResponse:
        """Log an analyzed food and rebalance the rest of today."""
        return _log_food(
            _reconciler(request), payload.to_analysis(), payload.logged_at
        )

    @app.post("/food-logs/photo")
    async def log_food_photo(
        request: Request, at: datetime | None = None
    ) -> FoodLogResponse:
        """Analyze a raw food photo body, then log it."""
        state_container: AppContainer = request.app.state.container
        state_container.reconciler.require_profile()
        image_bytes = await request.body()
        if not image_bytes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Empty image body."
            )
        try:
            analysis = await state_container.vision_service.analyze(image_bytes)
        except Exception:
            logger.exception("Food photo analysis failed")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Analysis failed. Try again.",
            ) from None
        return _log_food(state_container.reconciler, analysis, at)

    @app.post("/workouts", status_code=status.HTTP_201_CREATED)
    async def log_workout(
        payload: WorkoutRequest, request: Request
    ) -> WorkoutLogPayload:
        """Record a finished exercise set."""
        entry = _journal(request).log(
            payload.exercise_name,
            payload.duration_seconds,
            payload.calories_burned,
            at=payload.logged_at,
        )
        return WorkoutLogPayload.from_log(entry)

    @app.get("/workouts")
    async def list_workouts(request: Request) -> WorkoutSummaryResponse:
        """Return today's exercise sets with burned calories and active minutes."""
        journal = _journal(request)
        return WorkoutSummaryResponse(
            logs=[WorkoutLogPayload.from_log(log) for log in journal.logs_for()],
            burned_calories=journal.burned_calories(),
            active_minutes=journal.active_minutes(),
        )

    return app


def _reconciler(request: Request) -> DailyPlanReconciler:
    state_container: AppContainer = request.app.state.container
    return state_container.reconciler


def _journal(request: Request) -> WorkoutJournal:
    state_container: AppContainer = request.app.state.container
    return state_container.workout_journal


def _log_food(
    reconciler: DailyPlanReconciler, analysis: FoodAnalysis, at: datetime | None
) -> FoodLogResponse:
    profile = reconciler.require_profile()
    task = reconciler.on_food_logged(profile, analysis, at=at)
    return FoodLogResponse(
        food_name=analysis.food_name,
        calories=analysis.calories,
        rebalancing=task is not None,
        plan=_plan_response(reconciler, TODAY),
    )


def _plan_response(reconciler: DailyPlanReconciler, offset: int) -> PlanResponse:
    return PlanResponse(
        offset=offset,
        meals=[MealPayload.from_meal(meal) for meal in reconciler.get_plan(offset)],
        is_generating=reconciler.is_generating,
    )


def _budget_response(reconciler: DailyPlanReconciler) -> BudgetResponse:
    profile = reconciler.require_profile()
    return BudgetResponse(
        daily_calories=profile.daily_calories,
        consumed=reconciler.consumed_calories,
        remaining=reconciler.get_remaining_budget(),
        is_generating=reconciler.is_generating,
    )
