"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_tracker.adapters.openrouter_client import OpenRouterAnalysisClient
from calorie_tracker.adapters.supabase_auth_gateway import SupabaseAuthGateway
from calorie_tracker.adapters.supabase_meal_repository import SupabaseMealRepository
from calorie_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from calorie_tracker.adapters.supabase_weight_repository import (
    SupabaseWeightRepository,
)
from calorie_tracker.config import Settings
from calorie_tracker.services.analysis import AnalysisService
from calorie_tracker.services.auth import AuthService
from calorie_tracker.services.cache import InMemoryCache
from calorie_tracker.services.meals import MealService
from calorie_tracker.services.profiles import ProfileService
from calorie_tracker.services.weights import WeightService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    profile_service: ProfileService
    analysis_service: AnalysisService
    meal_service: MealService
    weight_service: WeightService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    analysis_client = OpenRouterAnalysisClient.create(
        resolved_settings.openrouter_api_key,
        base_url=resolved_settings.openrouter_base_url,
        site_url=resolved_settings.site_url,
        app_title=resolved_settings.app_title,
    )
    analysis_service = AnalysisService(
        client=analysis_client,
        model=resolved_settings.analysis_model,
        temperature=resolved_settings.analysis_temperature,
    )
    profile_service = ProfileService(
        repository=SupabaseProfileRepository(supabase_client),
        cache=InMemoryCache(),
    )

    async def close_resources() -> None:
        await analysis_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=AuthService(SupabaseAuthGateway(supabase_client)),
        profile_service=profile_service,
        analysis_service=analysis_service,
        meal_service=MealService(SupabaseMealRepository(supabase_client)),
        weight_service=WeightService(SupabaseWeightRepository(supabase_client)),
        close_resources=close_resources,
    )
