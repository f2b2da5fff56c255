from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Callable, Dict, Iterator, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from advisor.config import get_settings
from advisor.db.base import Base
from advisor.db.models import AuthSessionModel, UserModel
from advisor.db.session import dispose_engine, get_engine, session_scope
from advisor.main import app
from advisor.pipeline import get_today

FIXED_TODAY = date(2025, 3, 14)

HeaderFactory = Callable[..., Dict[str, str]]


@pytest.fixture
def database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Engine]:
    db_path = tmp_path / "advisor.db"
    monkeypatch.setenv("ADVISOR_DATABASE_URL", f"sqlite:///{db_path}")
    get_settings.cache_clear()
    dispose_engine()
    engine = get_engine()
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield engine
    dispose_engine()
    get_settings.cache_clear()


@pytest.fixture
def client(database: Engine) -> Iterator[TestClient]:
    app.dependency_overrides[get_today] = lambda: FIXED_TODAY
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(database: Engine) -> HeaderFactory:
    """Create a user plus bearer session and return request headers for it."""

    def factory(
        user_id: str = "user-1",
        *,
        name: Optional[str] = "Test User",
        token: Optional[str] = None,
        expires_at: Optional[datetime] = None,
    ) -> Dict[str, str]:
        token = token or f"token-{user_id}"
        with session_scope() as session:
            if session.get(UserModel, user_id) is None:
                session.add(UserModel(id=user_id, name=name, email=f"{user_id}@example.com"))
                session.flush()
            session.add(AuthSessionModel(token=token, user_id=user_id, expires_at=expires_at))
        return {"Authorization": f"Bearer {token}"}

    return factory


@pytest.fixture
def auth_headers(make_user: HeaderFactory) -> Dict[str, str]:
    return make_user()


@pytest.fixture
def today() -> date:
    return FIXED_TODAY
