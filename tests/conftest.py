"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from calorie_tracker.config import Settings
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.models import AuthUser, MealRecord, UserProfile, WeightEntry
from calorie_tracker.services.analysis import AnalysisClient, AnalysisService
from calorie_tracker.services.auth import AuthGateway, AuthService
from calorie_tracker.services.cache import InMemoryCache
from calorie_tracker.services.meals import MealRepository, MealService
from calorie_tracker.services.profiles import ProfileRepository, ProfileService
from calorie_tracker.services.weights import WeightRepository, WeightService

TEST_TOKEN = "valid-token"
AUTH_HEADERS = {"Authorization": f"Bearer {TEST_TOKEN}"}


@dataclass
class FakeAuthGateway(AuthGateway):
    """Auth gateway accepting a fixed set of tokens."""

    users: dict[str, AuthUser] = field(default_factory=dict)

    def get_user(self, access_token: str) -> AuthUser | None:
        return self.users.get(access_token)


@dataclass
class FakeAnalysisClient(AnalysisClient):
    """Analysis client returning canned model text."""

    response: str = (
        '{"mealName": "Chicken Salad", "ingredients": ["Chicken", "Lettuce"], '
        '"portionSize": "medium", "calories": 420, "protein": 38, '
        '"carbs": 12, "fat": 22}'
    )
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        image_data_url: str | None,
        temperature: float,
    ) -> str:
        self.calls.append(
            {
                "model": model,
                "prompt": prompt,
                "image_data_url": image_data_url,
                "temperature": temperature,
            }
        )
        if self.error is not None:
            raise self.error
        return self.response


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, UserProfile] = field(default_factory=dict)
    reads: int = 0

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        self.reads += 1
        return self.profiles.get(user_id)

    def upsert_profile(self, profile: UserProfile) -> UserProfile:
        self.profiles[profile.id] = profile
        return profile


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    meals: dict[UUID, MealRecord] = field(default_factory=dict)

    def list_meals(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[MealRecord]:
        results = [
            meal
            for meal in self.meals.values()
            if meal.user_id == user_id
            and (start is None or meal.created_at >= start)
            and (end is None or meal.created_at < end)
        ]
        return sorted(results, key=lambda meal: meal.created_at, reverse=True)

    def create_meal(self, user_id: UUID, payload: dict[str, object]) -> MealRecord:
        meal = MealRecord(
            id=uuid4(),
            user_id=user_id,
            meal_name=str(payload["meal_name"]),
            ingredients=payload.get("ingredients"),
            calories=float(payload["calories"]),
            protein=float(payload["protein"]),
            carbs=float(payload["carbs"]),
            fat=float(payload["fat"]),
            created_at=payload.get("created_at") or datetime.now(tz=UTC),
            image_url=payload.get("image_url"),
        )
        self.meals[meal.id] = meal
        return meal

    def update_meal(
        self, user_id: UUID, meal_id: UUID, payload: dict[str, object]
    ) -> MealRecord | None:
        meal = self.meals.get(meal_id)
        if meal is None or meal.user_id != user_id:
            return None
        updated = replace(meal, **payload)
        self.meals[meal_id] = updated
        return updated

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        meal = self.meals.get(meal_id)
        if meal is None or meal.user_id != user_id:
            return False
        del self.meals[meal_id]
        return True


@dataclass
class InMemoryWeightRepository(WeightRepository):
    """In-memory weight repository for tests."""

    entries: dict[UUID, WeightEntry] = field(default_factory=dict)

    def list_entries(self, user_id: UUID) -> list[WeightEntry]:
        results = [e for e in self.entries.values() if e.user_id == user_id]
        return sorted(results, key=lambda entry: entry.created_at)

    def create_entry(self, user_id: UUID, weight: float) -> WeightEntry:
        entry = WeightEntry(
            id=uuid4(),
            user_id=user_id,
            weight=weight,
            created_at=datetime.now(tz=UTC),
        )
        self.entries[entry.id] = entry
        return entry

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        entry = self.entries.get(entry_id)
        if entry is None or entry.user_id != user_id:
            return False
        del self.entries[entry_id]
        return True


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        openrouter_api_key="openrouter-key",
        environment="test",
    )


@pytest.fixture
def auth_user() -> AuthUser:
    return AuthUser(id=uuid4(), email="eater@example.com")


@pytest.fixture
def analysis_client() -> FakeAnalysisClient:
    return FakeAnalysisClient()


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def weight_repository() -> InMemoryWeightRepository:
    return InMemoryWeightRepository()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    auth_user: AuthUser,
    analysis_client: FakeAnalysisClient,
    profile_repository: InMemoryProfileRepository,
    meal_repository: InMemoryMealRepository,
    weight_repository: InMemoryWeightRepository,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        auth_service=AuthService(FakeAuthGateway(users={TEST_TOKEN: auth_user})),
        profile_service=ProfileService(profile_repository, InMemoryCache()),
        analysis_service=AnalysisService(
            client=analysis_client, model=settings.analysis_model
        ),
        meal_service=MealService(meal_repository),
        weight_service=WeightService(weight_repository),
        close_resources=close_resources,
    )
