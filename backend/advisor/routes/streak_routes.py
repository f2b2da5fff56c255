"""Daily activity streak."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..auth import UserIdentity, current_user
from ..db.session import session_scope
from ..pipeline import get_today
from ..repositories import streaks
from ..shaping import envelope, shape_streak
from .. import telemetry

router = APIRouter(prefix="/api/streak", tags=["streak"])


@router.get("")
def get_streak(user: UserIdentity = Depends(current_user)) -> Dict[str, Any]:
    with session_scope() as session:
        return envelope(shape_streak(streaks.fetch_or_create(session, user.id)))


@router.post("")
def mark_active(
    user: UserIdentity = Depends(current_user),
    today: date = Depends(get_today),
) -> Dict[str, Any]:
    with session_scope() as session:
        shaped = shape_streak(streaks.mark_active(session, user.id, today))
    telemetry.streak_marked(user.id, shaped.current_streak, today)
    return envelope(shaped)
