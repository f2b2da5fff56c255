"""Daily activity streak transitions.

Shared by the API and the client mirror so both sides advance a streak the same
way. Transitions compare calendar dates, never elapsed time.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class StreakPhase(str, Enum):
    NO_HISTORY = "no_history"
    ACTIVE_TODAY = "active_today"
    ACTIVE_YESTERDAY = "active_yesterday"
    STALE = "stale"


@dataclass(frozen=True)
class StreakState:
    current_streak: int
    last_active_date: Optional[date]


def classify(last_active_date: Optional[date], today: date) -> StreakPhase:
    if last_active_date is None:
        return StreakPhase.NO_HISTORY
    if last_active_date == today:
        return StreakPhase.ACTIVE_TODAY
    if last_active_date == today - timedelta(days=1):
        return StreakPhase.ACTIVE_YESTERDAY
    return StreakPhase.STALE


def advance_streak(state: StreakState, today: date) -> StreakState:
    """Apply a "mark active" event on ``today`` and return the next state."""
    phase = classify(state.last_active_date, today)
    if phase is StreakPhase.ACTIVE_TODAY:
        return state
    if phase is StreakPhase.ACTIVE_YESTERDAY:
        return StreakState(current_streak=max(state.current_streak, 0) + 1, last_active_date=today)
    return StreakState(current_streak=1, last_active_date=today)


def today_in(tz_name: str, now: Optional[datetime] = None) -> date:
    """Calendar date in ``tz_name``; unknown zones fall back to UTC."""
    try:
        zone = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        zone = ZoneInfo("UTC")
    moment = now or datetime.now(zone)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=ZoneInfo("UTC"))
    return moment.astimezone(zone).date()


__all__ = ["StreakPhase", "StreakState", "advance_streak", "classify", "today_in"]
