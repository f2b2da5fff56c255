"""Streak persistence."""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import update
from sqlalchemy.orm import Session

from ..db.models import StreakModel
from ..streaks import StreakState, advance_streak
from .owned_resources import OwnedResourceStore

logger = logging.getLogger(__name__)

MAX_MARK_ATTEMPTS = 3


class StreakStore(OwnedResourceStore[StreakModel]):
    def __init__(self) -> None:
        super().__init__(StreakModel)

    def fetch_or_create(self, session: Session, user_id: str) -> StreakModel:
        return self.get_or_create(session, user_id, {"current_streak": 0, "last_active_date": None})

    def mark_active(self, session: Session, user_id: str, today: date) -> StreakModel:
        """Advance the streak for ``today``.

        The write is conditional on the ``last_active_date`` that was read, so a
        concurrent mark for the same user is re-evaluated instead of overwritten.
        """
        for attempt in range(1, MAX_MARK_ATTEMPTS + 1):
            model = self.fetch_or_create(session, user_id)
            session.refresh(model)
            current = StreakState(model.current_streak or 0, model.last_active_date)
            advanced = advance_streak(current, today)
            if advanced == current:
                return model

            if current.last_active_date is None:
                unchanged = StreakModel.last_active_date.is_(None)
            else:
                unchanged = StreakModel.last_active_date == current.last_active_date
            stmt = (
                update(StreakModel)
                .where(StreakModel.user_id == user_id, unchanged)
                .values(
                    current_streak=advanced.current_streak,
                    last_active_date=advanced.last_active_date,
                    updated_at=self.clock(),
                )
                .execution_options(synchronize_session=False)
            )
            if session.execute(stmt).rowcount == 1:
                session.refresh(model)
                return model
            logger.info("Streak for user %s changed concurrently (attempt %s)", user_id, attempt)
        raise RuntimeError(f"Could not advance streak for user {user_id}")


streaks = StreakStore()

__all__ = ["MAX_MARK_ATTEMPTS", "StreakStore", "streaks"]
