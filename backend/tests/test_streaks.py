from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from advisor.streaks import StreakPhase, StreakState, advance_streak, classify, today_in

TODAY = date(2025, 3, 14)


def test_classify_phases() -> None:
    assert classify(None, TODAY) is StreakPhase.NO_HISTORY
    assert classify(TODAY, TODAY) is StreakPhase.ACTIVE_TODAY
    assert classify(TODAY - timedelta(days=1), TODAY) is StreakPhase.ACTIVE_YESTERDAY
    assert classify(TODAY - timedelta(days=10), TODAY) is StreakPhase.STALE


def test_first_activity_starts_streak() -> None:
    assert advance_streak(StreakState(0, None), TODAY) == StreakState(1, TODAY)


def test_consecutive_day_increments() -> None:
    state = StreakState(4, TODAY - timedelta(days=1))
    assert advance_streak(state, TODAY) == StreakState(5, TODAY)


def test_same_day_is_noop() -> None:
    state = StreakState(5, TODAY)
    assert advance_streak(state, TODAY) is state


def test_gap_resets_to_one() -> None:
    state = StreakState(7, TODAY - timedelta(days=10))
    assert advance_streak(state, TODAY) == StreakState(1, TODAY)


def test_month_boundary_counts_as_consecutive() -> None:
    state = StreakState(2, date(2025, 2, 28))
    assert advance_streak(state, date(2025, 3, 1)) == StreakState(3, date(2025, 3, 1))


def test_today_in_uses_calendar_date_of_zone() -> None:
    moment = datetime(2025, 3, 14, 23, 30, tzinfo=timezone.utc)
    assert today_in("UTC", moment) == date(2025, 3, 14)
    assert today_in("Asia/Tokyo", moment) == date(2025, 3, 15)
    assert today_in("Not/AZone", moment) == date(2025, 3, 14)
