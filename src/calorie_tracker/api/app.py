"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator, Awaitable
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import (
    Depends,
    FastAPI,
    File,
    Header,
    HTTPException,
    Query,
    Request,
    UploadFile,
    status,
)
from fastapi.middleware.cors import CORSMiddleware

from calorie_tracker.api.models import (
    MealCreate,
    MealUpdate,
    ProfileUpdate,
    TargetsPreviewRequest,
    TextAnalysisRequest,
    WeightCreate,
)
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.config import parse_allowed_origins
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.models import (
    AuthUser,
    DailyTotals,
    MealRecord,
    UserProfile,
)
from calorie_tracker.domain.nutrition import NutritionRecord
from calorie_tracker.services.analysis import AnalysisError
from calorie_tracker.services.parsing import ParseError
from calorie_tracker.services.targets import (
    activity_level_to_string,
    compute_daily_calories,
    compute_macros,
    goal_to_label,
)

ANALYSIS_FAILED_MESSAGE = "Analysis failed, try again or enter the meal manually."

_NON_NULLABLE_MEAL_FIELDS = ("meal_name", "calories", "protein", "carbs", "fat")

logger = logging.getLogger(__name__)


def _get_container(request: Request) -> AppContainer:
    return request.app.state.container


async def require_user(
    authorization: str | None = Header(default=None),
    container: AppContainer = Depends(_get_container),
) -> AuthUser:
    """Resolve the bearer token to an authenticated user."""
    user = container.auth_service.authenticate(authorization)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def create_app(container: AppContainer) -> FastAPI:  # noqa: C901, PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title=container.settings.app_title, lifespan=lifespan)
    app.state.container = container

    origins = parse_allowed_origins(container.settings.allowed_origins)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/targets/preview")
    async def preview_targets(payload: TargetsPreviewRequest) -> dict[str, object]:
        """Compute targets for a profile without storing anything."""
        calories = compute_daily_calories(
            payload.weight_kg,
            payload.height_cm,
            payload.age_years,
            payload.sex,
            payload.activity_factor,
            payload.goal_offset_kcal,
        )
        macros = compute_macros(calories, payload.protein_ratio, payload.fat_ratio)
        return {
            **asdict(macros),
            "activity_label": activity_level_to_string(payload.activity_factor),
            "goal_label": goal_to_label(payload.goal_offset_kcal),
        }

    @app.get("/profile")
    async def get_profile(user: AuthUser = Depends(require_user)) -> dict[str, object]:
        """Return the caller's profile, creating a default one if needed."""
        profile = container.profile_service.ensure_profile(user.id, user.email)
        return _profile_json(profile)

    @app.patch("/profile")
    async def update_profile(
        payload: ProfileUpdate, user: AuthUser = Depends(require_user)
    ) -> dict[str, object]:
        """Update the caller's profile and recompute targets."""
        updates = payload.model_dump(exclude_unset=True, exclude_none=True)
        profile = container.profile_service.update_profile(
            user.id, user.email, updates
        )
        return _profile_json(profile)

    @app.post("/analyze/image")
    async def analyze_image(
        image: UploadFile = File(...),
        log: bool = False,
        user: AuthUser = Depends(require_user),
    ) -> dict[str, object]:
        """Estimate nutrition for an uploaded food photo."""
        image_bytes = await image.read()
        record = await _run_analysis(
            container,
            container.analysis_service.analyze_image(image_bytes),
            user,
        )
        meal = container.meal_service.log_record(user.id, record) if log else None
        return _analysis_json(record, meal)

    @app.post("/analyze/text")
    async def analyze_text(
        payload: TextAnalysisRequest, user: AuthUser = Depends(require_user)
    ) -> dict[str, object]:
        """Estimate nutrition for a text description of a meal."""
        record = await _run_analysis(
            container,
            container.analysis_service.analyze_text(payload.description),
            user,
        )
        meal = (
            container.meal_service.log_record(user.id, record)
            if payload.log
            else None
        )
        return _analysis_json(record, meal)

    @app.get("/meals")
    async def list_meals(user: AuthUser = Depends(require_user)) -> dict[str, object]:
        """Return all of the caller's meals, newest first."""
        meals = container.meal_service.list_meals(user.id)
        return {"meals": [_meal_json(meal) for meal in meals]}

    @app.post("/meals", status_code=status.HTTP_201_CREATED)
    async def add_meal(
        payload: MealCreate, user: AuthUser = Depends(require_user)
    ) -> dict[str, object]:
        """Store a manually entered meal."""
        meal = container.meal_service.add_meal(user.id, payload.model_dump())
        return _meal_json(meal)

    @app.get("/meals/today")
    async def today(
        tz: str = "UTC", user: AuthUser = Depends(require_user)
    ) -> dict[str, object]:
        """Return today's meals, totals and the caller's targets."""
        _require_timezone(tz)
        totals, meals = container.meal_service.today(user.id, tz)
        return _day_json(container, user, totals, meals)

    @app.get("/meals/day")
    async def meals_for_day(
        day: date = Query(alias="date"),
        tz: str = "UTC",
        name_filter: str | None = Query(default=None, alias="type"),
        user: AuthUser = Depends(require_user),
    ) -> dict[str, object]:
        """Return one local day's meals and totals, optionally filtered by name."""
        _require_timezone(tz)
        totals, meals = container.meal_service.day(user.id, day, tz, name_filter)
        return _day_json(container, user, totals, meals)

    @app.patch("/meals/{meal_id}")
    async def update_meal(
        meal_id: UUID, payload: MealUpdate, user: AuthUser = Depends(require_user)
    ) -> dict[str, object]:
        """Update one of the caller's meals."""
        updates = payload.model_dump(exclude_unset=True)
        for name in _NON_NULLABLE_MEAL_FIELDS:
            if name in updates and updates[name] is None:
                updates.pop(name)
        if not updates:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No meal fields to update.",
            )
        meal = container.meal_service.update_meal(user.id, meal_id, updates)
        if meal is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return _meal_json(meal)

    @app.delete("/meals/{meal_id}")
    async def delete_meal(
        meal_id: UUID, user: AuthUser = Depends(require_user)
    ) -> dict[str, str]:
        """Delete one of the caller's meals."""
        if not container.meal_service.delete_meal(user.id, meal_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"status": "deleted"}

    @app.get("/weights")
    async def list_weights(user: AuthUser = Depends(require_user)) -> dict[str, object]:
        """Return weight entries and per-day chart points."""
        entries = container.weight_service.list_entries(user.id)
        chart = container.weight_service.chart_data(user.id)
        return {
            "entries": [asdict(entry) for entry in entries],
            "chart": [asdict(point) for point in chart],
        }

    @app.post("/weights", status_code=status.HTTP_201_CREATED)
    async def add_weight(
        payload: WeightCreate, user: AuthUser = Depends(require_user)
    ) -> dict[str, object]:
        """Record a weight measurement."""
        entry = container.weight_service.add_entry(user.id, payload.weight)
        return asdict(entry)

    @app.delete("/weights/{entry_id}")
    async def delete_weight(
        entry_id: UUID, user: AuthUser = Depends(require_user)
    ) -> dict[str, str]:
        """Delete one of the caller's weight entries."""
        if not container.weight_service.delete_entry(user.id, entry_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"status": "deleted"}

    return app


async def _run_analysis(
    container: AppContainer,
    pending: Awaitable[NutritionRecord],
    user: AuthUser,
) -> NutritionRecord:
    """Await an analysis call and translate its failures to HTTP errors."""
    try:
        return await pending
    except ParseError as exc:
        logger.warning(
            "Unparseable analysis response for user %s: %r", user.id, exc.raw_text
        )
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=_error_detail(container, exc, ANALYSIS_FAILED_MESSAGE),
        ) from exc
    except AnalysisError as exc:
        if exc.status_code == status.HTTP_400_BAD_REQUEST:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        logger.exception("Food analysis failed", extra={"user_id": str(user.id)})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=_error_detail(container, exc, ANALYSIS_FAILED_MESSAGE),
        ) from exc


def _error_detail(container: AppContainer, exc: Exception, fallback: str) -> str:
    """Return a user-facing error message with local debug info."""
    if container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback


def _profile_json(profile: UserProfile) -> dict[str, object]:
    return {
        **asdict(profile),
        "activity_label": activity_level_to_string(profile.activity_level),
        "goal_label": goal_to_label(profile.goal_offset),
    }


def _meal_json(meal: MealRecord) -> dict[str, object]:
    return asdict(meal)


def _analysis_json(
    record: NutritionRecord, meal: MealRecord | None
) -> dict[str, object]:
    return {
        "nutrition": record.to_wire(),
        "meal": _meal_json(meal) if meal else None,
    }


def _day_json(
    container: AppContainer,
    user: AuthUser,
    totals: DailyTotals,
    meals: list[MealRecord],
) -> dict[str, object]:
    profile = container.profile_service.ensure_profile(user.id, user.email)
    return {
        "totals": asdict(totals),
        "targets": asdict(profile.targets()),
        "meals": [_meal_json(meal) for meal in meals],
    }


def _require_timezone(value: str) -> None:
    if not _is_valid_timezone(value):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please send a valid timezone like America/Los_Angeles.",
        )


def _is_valid_timezone(value: str) -> bool:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True
