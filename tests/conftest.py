"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from meal_composer.config import Settings
from meal_composer.containers import AppContainer
from meal_composer.domain.analysis import MealAnalysis
from meal_composer.errors import PersistenceError
from meal_composer.services.meal_types import MealType
from meal_composer.services.sessions import CompositionSessionService, MealRepository


@dataclass
class SavedCall:
    user_id: UUID
    record: MealAnalysis
    meal_type: MealType
    logged_at: datetime
    meal_group_id: UUID


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    saved: list[SavedCall] = field(default_factory=list)
    fail: bool = False

    def save_meal(
        self,
        user_id: UUID,
        record: MealAnalysis,
        meal_type: MealType,
        logged_at: datetime,
    ) -> UUID:
        if self.fail:
            raise PersistenceError("Failed to create meal entries")
        meal_group_id = uuid4()
        self.saved.append(
            SavedCall(user_id, record, meal_type, logged_at, meal_group_id)
        )
        return meal_group_id


@dataclass
class FakeClock:
    """Controllable clock for session expiry."""

    now: datetime = field(
        default_factory=lambda: datetime(2024, 5, 14, 12, 30, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now = self.now + timedelta(seconds=seconds)


def turkey_sandwich_payload(is_branded: bool = False) -> dict[str, object]:
    """Hierarchical analysis with one sandwich and four ingredients."""
    return {
        "foods": [
            {
                "name": "Turkey Sandwich",
                "quantity": "1 serving",
                "nutrition": {"calories": 380, "protein": 25, "carbs": 45, "fat": 12},
                "isBranded": is_branded,
                "ingredients": [
                    {
                        "name": "Whole Wheat Bread",
                        "quantity": "2 slices",
                        "nutrition": {
                            "calories": 140,
                            "protein": 6,
                            "carbs": 24,
                            "fat": 2,
                        },
                    },
                    {
                        "name": "Turkey Breast",
                        "quantity": "3 oz",
                        "nutrition": {
                            "calories": 90,
                            "protein": 19,
                            "carbs": 0,
                            "fat": 1,
                        },
                    },
                    {
                        "name": "Lettuce",
                        "quantity": "0.5 cup",
                        "nutrition": {
                            "calories": 4,
                            "protein": 0.5,
                            "carbs": 1,
                            "fat": 0,
                        },
                    },
                    {
                        "name": "Tomato",
                        "quantity": "2 slices",
                        "nutrition": {
                            "calories": 5,
                            "protein": 0.3,
                            "carbs": 1,
                            "fat": 0,
                        },
                    },
                ],
            }
        ],
        "confidence": 0.8,
        "notes": "Lunch at the desk",
        "title": "Turkey lunch",
    }


def flat_lunch_payload() -> dict[str, object]:
    """Flat analysis with a sandwich, two ingredients and a side."""
    return {
        "foods": [
            {
                "name": "Turkey Sandwich",
                "quantity": "1 sandwich",
                "nutrition": {"calories": 380, "protein": 25, "carbs": 45, "fat": 12},
            },
            {
                "name": "Whole Wheat Bread",
                "quantity": "2 slices",
                "nutrition": {"calories": 140, "protein": 6, "carbs": 24, "fat": 2},
            },
            {
                "name": "Turkey Breast",
                "quantity": "3 oz",
                "nutrition": {"calories": 90, "protein": 19, "carbs": 0, "fat": 1},
            },
            {
                "name": "Potato Chips",
                "quantity": "1 bag",
                "nutrition": {"calories": 150, "protein": 2, "carbs": 15, "fat": 10},
            },
        ]
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
    )


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_service(
    settings: Settings, meal_repository: InMemoryMealRepository, clock: FakeClock
) -> CompositionSessionService:
    return CompositionSessionService(
        repository=meal_repository,
        ttl_seconds=settings.session_ttl_seconds,
        favorite_policy=settings.favorite_policy,
        default_confidence=settings.default_confidence,
        default_timezone=settings.default_timezone,
        clock=clock,
    )


@pytest.fixture
def container(
    settings: Settings, session_service: CompositionSessionService
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        session_service=session_service,
        close_resources=close_resources,
    )
