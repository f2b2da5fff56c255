from __future__ import annotations

from datetime import date, timedelta

from sqlalchemy import func, select

from advisor.auth import resolve
from advisor.db.models import AuthSessionModel, ResourceModel, TaskModel
from advisor.db.session import session_scope
from advisor.repositories import streaks
from advisor.seed import CATALOG, DEMO_TOKEN, DEMO_USER_ID, seed_catalog, seed_demo_user
from scripts import seed_demo


def _count(session, model) -> int:
    return session.execute(select(func.count()).select_from(model)).scalar_one()


def test_seed_catalog_is_idempotent(database) -> None:
    with session_scope() as session:
        first = seed_catalog(session)
    with session_scope() as session:
        second = seed_catalog(session)
        assert _count(session, ResourceModel) == len(CATALOG)

    assert [model.title for model in first] == [entry.title for entry in CATALOG]
    assert len(second) == len(CATALOG)


def test_seed_demo_user_populates_account(database) -> None:
    today = date(2025, 3, 14)
    with session_scope() as session:
        seed_demo_user(session, today=today)

    identity = resolve(f"Bearer {DEMO_TOKEN}")
    assert identity is not None
    assert identity.id == DEMO_USER_ID

    with session_scope(commit=False) as session:
        streak = streaks.get(session, DEMO_USER_ID)
        assert streak.current_streak == 15
        assert streak.last_active_date == today - timedelta(days=1)
        assert _count(session, TaskModel) == 5


def test_reseeding_only_refreshes_token(database) -> None:
    with session_scope() as session:
        seed_demo_user(session)
    with session_scope() as session:
        seed_demo_user(session, token_ttl=timedelta(days=-1))

    with session_scope(commit=False) as session:
        assert _count(session, TaskModel) == 5
        assert _count(session, AuthSessionModel) == 1
    assert resolve(f"Bearer {DEMO_TOKEN}") is None


def test_demo_account_is_served_by_api(client) -> None:
    with session_scope() as session:
        seed_demo_user(session)

    headers = {"Authorization": f"Bearer {DEMO_TOKEN}"}
    profile = client.get("/api/profile", headers=headers).json()["data"]
    progress = client.get("/api/progress", headers=headers).json()["data"]

    assert profile["name"] == "Alex Johnson"
    assert profile["skills"]["tech"] == 8
    assert sorted(entry["completion"] for entry in progress) == [30, 75, 100]
    assert all(entry["resource"]["title"] for entry in progress)


def test_seed_script_catalog_only(database) -> None:
    assert seed_demo.main(["--catalog-only"]) == 0
    with session_scope(commit=False) as session:
        assert _count(session, ResourceModel) == len(CATALOG)
