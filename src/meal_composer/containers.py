"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from meal_composer.adapters.supabase_meal_repository import SupabaseMealRepository
from meal_composer.config import Settings
from meal_composer.services.sessions import CompositionSessionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_service: CompositionSessionService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    session_service = CompositionSessionService(
        repository=SupabaseMealRepository(supabase_client),
        ttl_seconds=resolved_settings.session_ttl_seconds,
        favorite_policy=resolved_settings.favorite_policy,
        default_confidence=resolved_settings.default_confidence,
        default_timezone=resolved_settings.default_timezone,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=resolved_settings,
        session_service=session_service,
        close_resources=close_resources,
    )
