"""Errors raised outside the composition core."""

from uuid import UUID


class MealComposerError(Exception):
    """Base class for meal composer errors."""


class SessionNotFoundError(MealComposerError):
    """Raised when an editing session does not exist or has expired."""

    def __init__(self, session_id: UUID) -> None:
        super().__init__(f"Composition session {session_id} not found")
        self.session_id = session_id


class PersistenceError(MealComposerError):
    """Raised when a meal record could not be stored."""
