"""Owned-resource store behaviour against a real SQLite database."""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta, timezone
from typing import Iterator

from sqlalchemy import func, select

from advisor.db.models import ProgressModel, ResourceModel, StreakModel, UserModel
from advisor.db.session import session_scope
from advisor.repositories import profiles, streaks, tasks
from advisor.repositories.catalog import search_resources
from advisor.repositories.owned_resources import OwnedResourceStore


def _ticking_clock(start: datetime) -> Iterator[datetime]:
    current = start
    while True:
        yield current
        current += timedelta(minutes=1)


def _user(session, user_id: str = "owner-1") -> str:
    session.add(UserModel(id=user_id, name="Owner"))
    session.flush()
    return user_id


def _resource(session, title: str = "SQL Tutorial", **overrides) -> int:
    values = {"title": title, "url": "https://example.com", "type": "article", "tags": json.dumps(["sql"])}
    values.update(overrides)
    model = ResourceModel(**values)
    session.add(model)
    session.flush()
    return model.id


def test_upsert_updates_in_place_and_keeps_created_at(database) -> None:
    ticks = _ticking_clock(datetime(2025, 1, 1, tzinfo=timezone.utc))
    store = OwnedResourceStore(ProgressModel, key_fields=("user_id", "resource_id"), clock=lambda: next(ticks))

    with session_scope() as session:
        user_id = _user(session)
        resource_id = _resource(session)
        first = store.upsert(session, user_id, {"completion": 50}, secondary_key=resource_id)
        first_id, created_at, first_updated = first.id, first.created_at, first.updated_at

    with session_scope() as session:
        second = store.upsert(session, user_id, {"completion": 50}, secondary_key=resource_id)
        assert second.id == first_id
        assert second.created_at == created_at
        assert second.updated_at > first_updated
        count = session.execute(select(func.count()).select_from(ProgressModel)).scalar_one()
        assert count == 1


def test_upsert_keeps_rows_separate_per_secondary_key(database) -> None:
    store = OwnedResourceStore(ProgressModel, key_fields=("user_id", "resource_id"))
    with session_scope() as session:
        user_id = _user(session)
        a = _resource(session, "A")
        b = _resource(session, "B")
        store.upsert(session, user_id, {"completion": 10}, secondary_key=a)
        store.upsert(session, user_id, {"completion": 90}, secondary_key=b)
        store.upsert(session, user_id, {"completion": 20}, secondary_key=a)
        rows = {row.resource_id: row.completion for row in store.list(session, user_id)}
    assert rows == {a: 20, b: 90}


def test_fetch_or_create_profile_is_singleton(database) -> None:
    with session_scope() as session:
        user_id = _user(session)
        first = profiles.fetch_or_create(session, user_id, name="Owner")
        second = profiles.fetch_or_create(session, user_id)
        assert first.id == second.id
        assert second.name == "Owner"
        assert second.skills == {}
        assert second.language == "en"


def test_apply_updates_without_profile_returns_none(database) -> None:
    with session_scope() as session:
        user_id = _user(session)
        assert profiles.apply_updates(session, user_id, {"name": "x"}) is None


def test_assessment_result_mirrors_scores_into_profile(database) -> None:
    result = {"strengths": ["tech"], "weaknesses": ["leadership"], "scores": {"tech": 6, "leadership": 1}}
    with session_scope() as session:
        user_id = _user(session)
        profiles.fetch_or_create(session, user_id)
        profiles.apply_updates(session, user_id, {"interests": ["ml"]})
        model = profiles.apply_assessment_result(session, user_id, result)
        assert model.skills == {"tech": 6, "leadership": 1}
        assert model.profile == result
        assert model.interests == ["ml"]


def test_mark_active_advances_once_per_day(database) -> None:
    today = date(2025, 3, 14)
    with session_scope() as session:
        user_id = _user(session)
        session.add(StreakModel(user_id=user_id, current_streak=4, last_active_date=today - timedelta(days=1)))

    with session_scope() as session:
        assert streaks.mark_active(session, user_id, today).current_streak == 5
    with session_scope() as session:
        model = streaks.mark_active(session, user_id, today)
        assert (model.current_streak, model.last_active_date) == (5, today)


def test_task_due_filter_runs_in_query(database) -> None:
    today = date(2025, 3, 14)
    with session_scope() as session:
        user_id = _user(session)
        tasks.create_many(session, user_id, [{"label": "today", "due_date": today}])
        tasks.create_many(
            session,
            user_id,
            [{"label": f"later-{index}", "due_date": today + timedelta(days=1)} for index in range(5)],
        )

    with session_scope(commit=False) as session:
        due = tasks.list_for_user(session, user_id, due_on=today, limit=2)
        assert [task.label for task in due] == ["today"]
        assert len(tasks.list_for_user(session, user_id, limit=2)) == 2


def test_owner_scoped_update_and_delete(database) -> None:
    with session_scope() as session:
        owner = _user(session, "owner-1")
        other = _user(session, "owner-2")
        task = tasks.create(session, owner, {"label": "mine"})
        task_id = task.id

    with session_scope() as session:
        assert tasks.update(session, other, task_id, {"done": True}) is None
        assert tasks.delete(session, other, task_id) is None
        updated = tasks.update(session, owner, task_id, {"done": True})
        assert updated is not None and updated.done is True
        assert tasks.delete(session, owner, task_id) is not None


def test_search_resources_filters(database) -> None:
    with session_scope() as session:
        _resource(session, "SQL", tags=json.dumps(["sql", "analysis"]), type="article")
        _resource(session, "Leadership", tags=json.dumps(["leadership"]), type="book", locale="es")
        _resource(session, "NoSQL", tags=json.dumps(["nosql"]), type="video")

    with session_scope(commit=False) as session:
        assert [r.title for r in search_resources(session, tag="sql", limit=10)] == ["SQL"]
        assert [r.title for r in search_resources(session, locale="es", limit=10)] == ["Leadership"]
        assert [r.title for r in search_resources(session, type="book", limit=10)] == ["Leadership"]
        assert len(search_resources(session, limit=1)) == 1
        assert [r.title for r in search_resources(session, tag="nosql", limit=10)] == ["NoSQL"]
