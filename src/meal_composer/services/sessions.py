"""Editing sessions that own a composition store until the meal is saved."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID, uuid4

from meal_composer.domain.actions import (
    ChangeServingMultiplier,
    CompositionAction,
    DeleteGroup,
    DeleteIngredient,
    ToggleEditMode,
    ToggleExpanded,
    ToggleFavorite,
)
from meal_composer.domain.analysis import MealAnalysis
from meal_composer.domain.meals import SavedMeal
from meal_composer.errors import SessionNotFoundError
from meal_composer.services.composition import CompositionStore
from meal_composer.services.favorites import FavoritePolicy
from meal_composer.services.meal_types import MealType, auto_meal_type, local_time
from meal_composer.services.serializer import (
    DEFAULT_CONFIDENCE,
    from_record,
    to_record,
)

logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for composed meals."""

    def save_meal(
        self,
        user_id: UUID,
        record: MealAnalysis,
        meal_type: MealType,
        logged_at: datetime,
    ) -> UUID:
        """Persist a meal record and return its meal group id."""


@dataclass
class _SessionEntry:
    store: CompositionStore
    analysis: MealAnalysis
    expires_at: datetime


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class CompositionSessionService:
    """In-memory registry of editing sessions keyed by session id."""

    repository: MealRepository
    ttl_seconds: int = 3600
    favorite_policy: FavoritePolicy = FavoritePolicy.CASCADE
    default_confidence: float = DEFAULT_CONFIDENCE
    default_timezone: str = "UTC"
    clock: Callable[[], datetime] = _utc_now
    _sessions: dict[UUID, _SessionEntry] = field(
        default_factory=dict, init=False, repr=False
    )

    def start(self, analysis: MealAnalysis) -> UUID:
        """Classify an analysis result and open a session for editing it."""
        self._purge_expired()
        store = CompositionStore(favorite_policy=self.favorite_policy)
        store.set_groups(from_record(analysis))
        session_id = uuid4()
        self._sessions[session_id] = _SessionEntry(
            store=store,
            analysis=analysis,
            expires_at=self._expiry(),
        )
        logger.info(
            "Started composition session %s with %d groups",
            session_id,
            len(store.groups),
        )
        return session_id

    def get(self, session_id: UUID) -> CompositionStore:
        """Return the store for a live session."""
        return self._entry(session_id).store

    def apply(self, session_id: UUID, action: CompositionAction) -> CompositionStore:
        """Apply one mutation to a session's store."""
        store = self._entry(session_id).store
        if isinstance(action, ToggleExpanded):
            store.toggle_expanded(action.group_id)
        elif isinstance(action, ToggleEditMode):
            store.toggle_edit_mode()
        elif isinstance(action, ChangeServingMultiplier):
            store.change_serving_multiplier(action.group_id, action.delta)
        elif isinstance(action, DeleteGroup):
            store.delete_group(action.group_id)
        elif isinstance(action, DeleteIngredient):
            store.delete_ingredient(action.group_id, action.ingredient_id)
        elif isinstance(action, ToggleFavorite):
            store.toggle_favorite(action.group_id, action.ingredient_id)
        return store

    def record(self, session_id: UUID) -> MealAnalysis:
        """Serialize the session's current hierarchy."""
        entry = self._entry(session_id)
        return to_record(
            entry.store.groups,
            original=entry.analysis,
            default_confidence=self.default_confidence,
        )

    def discard(self, session_id: UUID) -> None:
        """Drop a session without saving it."""
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id)
        logger.info("Discarded composition session %s", session_id)

    def save(
        self,
        session_id: UUID,
        user_id: UUID,
        meal_type: MealType | None = None,
        logged_at: datetime | None = None,
        timezone_name: str | None = None,
    ) -> SavedMeal:
        """Hand the session's record to persistence and close the session.

        The meal type, when not given, follows the user's local hour: the zone
        named by ``timezone_name``, else the offset of a client ``logged_at``,
        else ``default_timezone``.
        """
        record = self.record(session_id)
        if timezone_name is None and logged_at is None:
            timezone_name = self.default_timezone
        logged_at = local_time(logged_at or self.clock(), timezone_name)
        resolved_type = meal_type or auto_meal_type(logged_at)
        meal_group_id = self.repository.save_meal(
            user_id=user_id,
            record=record,
            meal_type=resolved_type,
            logged_at=logged_at,
        )
        self._sessions.pop(session_id, None)
        logger.info(
            "Saved composition session %s as meal group %s", session_id, meal_group_id
        )
        return SavedMeal(
            meal_group_id=meal_group_id,
            meal_type=resolved_type,
            logged_at=logged_at,
            record=record,
        )

    def _entry(self, session_id: UUID) -> _SessionEntry:
        entry = self._sessions.get(session_id)
        if entry is None:
            raise SessionNotFoundError(session_id)
        if self.clock() >= entry.expires_at:
            self._sessions.pop(session_id, None)
            logger.info("Composition session %s expired", session_id)
            raise SessionNotFoundError(session_id)
        entry.expires_at = self._expiry()
        return entry

    def _expiry(self) -> datetime:
        return self.clock() + timedelta(seconds=self.ttl_seconds)

    def _purge_expired(self) -> None:
        now = self.clock()
        for session_id in [
            key for key, entry in self._sessions.items() if now >= entry.expires_at
        ]:
            self._sessions.pop(session_id, None)
            logger.info("Composition session %s expired", session_id)
