"""Composition session endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, HTTPException, Request, status

from meal_composer.api.models import (
    ActionRequest,
    CompositionView,
    SaveMealRequest,
    SaveMealResponse,
    composition_view,
)
from meal_composer.domain.analysis import MealAnalysis
from meal_composer.errors import PersistenceError, SessionNotFoundError

if TYPE_CHECKING:
    from meal_composer.services.sessions import CompositionSessionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/compositions", tags=["compositions"])


def _sessions(request: Request) -> CompositionSessionService:
    return request.app.state.container.session_service


def _not_found(error: SessionNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))


@router.post("", status_code=status.HTTP_201_CREATED)
async def start_composition(
    analysis: MealAnalysis, request: Request
) -> CompositionView:
    """Classify an analysis result and open an editing session for it."""
    sessions = _sessions(request)
    session_id = sessions.start(analysis)
    return composition_view(session_id, sessions.get(session_id))


@router.get("/{session_id}")
async def get_composition(session_id: UUID, request: Request) -> CompositionView:
    """Return the current state of a session."""
    try:
        store = _sessions(request).get(session_id)
    except SessionNotFoundError as error:
        raise _not_found(error) from error
    return composition_view(session_id, store)


@router.post("/{session_id}/actions")
async def apply_action(
    session_id: UUID, payload: ActionRequest, request: Request
) -> CompositionView:
    """Apply a single mutation and return the recomputed state."""
    try:
        store = _sessions(request).apply(session_id, payload.action)
    except SessionNotFoundError as error:
        raise _not_found(error) from error
    return composition_view(session_id, store)


@router.get("/{session_id}/record")
async def get_record(session_id: UUID, request: Request) -> MealAnalysis:
    """Return the flat analysis record for the current state."""
    try:
        return _sessions(request).record(session_id)
    except SessionNotFoundError as error:
        raise _not_found(error) from error


@router.post("/{session_id}/save")
async def save_composition(
    session_id: UUID, payload: SaveMealRequest, request: Request
) -> SaveMealResponse:
    """Persist the session's record and close the session."""
    try:
        saved = _sessions(request).save(
            session_id,
            user_id=payload.user_id,
            meal_type=payload.meal_type,
            logged_at=payload.logged_at,
            timezone_name=payload.timezone,
        )
    except SessionNotFoundError as error:
        raise _not_found(error) from error
    except PersistenceError as error:
        logger.exception("Failed to save composition session %s", session_id)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=str(error)
        ) from error
    return SaveMealResponse(
        meal_group_id=saved.meal_group_id,
        meal_type=saved.meal_type,
        logged_at=saved.logged_at,
        record=saved.record,
    )


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def discard_composition(session_id: UUID, request: Request) -> None:
    """Drop a session without saving."""
    try:
        _sessions(request).discard(session_id)
    except SessionNotFoundError as error:
        raise _not_found(error) from error
