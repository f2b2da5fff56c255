from __future__ import annotations

from datetime import date, timedelta

from advisor.db.models import StreakModel
from advisor.db.session import session_scope



def _seed_streak(user_id: str, current: int, last_active: date) -> None:
    with session_scope() as session:
        session.add(
            StreakModel(
                user_id=user_id,
                current_streak=current,
                last_active_date=last_active,
            )
        )


def test_get_creates_empty_streak(client, auth_headers) -> None:
    response = client.get("/api/streak", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"] == {"current_streak": 0, "last_active_date": None}


def test_first_mark_starts_streak(client, auth_headers, today) -> None:
    data = client.post("/api/streak", headers=auth_headers).json()["data"]
    assert data == {"current_streak": 1, "last_active_date": today.isoformat()}


def test_consecutive_day_increments_once(client, make_user, today) -> None:
    headers = make_user("streaker")
    _seed_streak("streaker", current=4, last_active=today - timedelta(days=1))

    first = client.post("/api/streak", headers=headers).json()["data"]
    assert first == {"current_streak": 5, "last_active_date": today.isoformat()}

    again = client.post("/api/streak", headers=headers).json()["data"]
    assert again["current_streak"] == 5


def test_gap_resets_streak(client, make_user, today) -> None:
    headers = make_user("lapsed")
    _seed_streak("lapsed", current=7, last_active=today - timedelta(days=10))
    data = client.post("/api/streak", headers=headers).json()["data"]
    assert data == {"current_streak": 1, "last_active_date": today.isoformat()}


def test_requires_authentication(client) -> None:
    assert client.post("/api/streak").status_code == 401
