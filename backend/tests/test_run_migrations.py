from __future__ import annotations

import types
from pathlib import Path

import pytest
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from scripts import run_migrations as runner


def _config() -> Config:
    config = Config()
    config.set_main_option("script_location", str(runner.BACKEND_ROOT / "alembic"))
    return config


def test_resolve_database_url_falls_back_to_env(monkeypatch) -> None:
    monkeypatch.setenv("ADVISOR_DATABASE_URL", "sqlite://")
    config = _config()
    assert runner.resolve_database_url(config) == "sqlite://"
    assert config.get_main_option("sqlalchemy.url") == "sqlite://"


def test_resolve_database_url_requires_configuration(monkeypatch) -> None:
    monkeypatch.delenv("ADVISOR_DATABASE_URL", raising=False)
    with pytest.raises(RuntimeError):
        runner.resolve_database_url(_config())


def test_wait_for_database_succeeds_with_sqlite(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'ready.sqlite'}"
    assert runner.wait_for_database(url, timeout=2, poll_interval=0.1) == 1


def test_wait_for_database_times_out(monkeypatch) -> None:
    class DummyEngine:
        def connect(self) -> types.SimpleNamespace:
            raise runner.OperationalError("SELECT 1", {}, Exception("boom"))

        def dispose(self) -> None:
            pass

    monkeypatch.setattr(runner, "create_engine", lambda *_, **__: DummyEngine())
    with pytest.raises(RuntimeError):
        runner.wait_for_database("postgresql://example", timeout=0, poll_interval=0)


def test_run_migrations_invokes_upgrade(monkeypatch) -> None:
    monkeypatch.setenv("ADVISOR_DATABASE_URL", "sqlite://")
    recorded: dict[str, object] = {}

    def fake_wait(url: str, *, timeout: int, poll_interval: float) -> None:
        recorded["wait"] = (url, timeout, poll_interval)

    def fake_upgrade(cfg: Config, revision: str) -> None:
        recorded["revision"] = revision
        recorded["script_location"] = cfg.get_main_option("script_location")

    monkeypatch.setattr(runner, "wait_for_database", fake_wait)
    monkeypatch.setattr(runner.command, "upgrade", fake_upgrade)
    monkeypatch.setattr(runner, "missing_tables", lambda url: [])

    runner.run_migrations("head", timeout=5, poll_interval=0.1, config=_config())

    assert recorded["revision"] == "head"
    assert recorded["wait"][0] == "sqlite://"
    assert str(recorded["script_location"]).endswith("alembic")


def test_upgrade_creates_schema(tmp_path: Path, monkeypatch) -> None:
    url = f"sqlite:///{tmp_path / 'migrated.sqlite'}"
    monkeypatch.setenv("ADVISOR_DATABASE_URL", url)
    config = runner.get_alembic_config(str(runner.BACKEND_ROOT / "alembic.ini"))

    runner.run_migrations("head", timeout=2, poll_interval=0.1, config=config)

    engine = create_engine(url)
    try:
        tables = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
    assert {"users", "auth_sessions", "user_profiles", "tasks", "progress", "ratings"} <= tables


def test_wait_for_database_retries_until_ready(monkeypatch) -> None:
    attempts = {"count": 0}

    class FlakyEngine:
        def connect(self):
            attempts["count"] += 1
            if attempts["count"] < 3:
                raise runner.OperationalError("SELECT 1", {}, Exception("starting up"))
            return create_engine("sqlite://").connect()

        def dispose(self) -> None:
            pass

    monkeypatch.setattr(runner, "create_engine", lambda *_, **__: FlakyEngine())
    monkeypatch.setattr(runner.time, "sleep", lambda _: None)

    assert runner.wait_for_database("postgresql://example", timeout=30, poll_interval=0) == 3


def test_head_upgrade_fails_when_tables_are_missing(monkeypatch) -> None:
    monkeypatch.setenv("ADVISOR_DATABASE_URL", "sqlite://")
    monkeypatch.setattr(runner, "wait_for_database", lambda *_, **__: 1)
    monkeypatch.setattr(runner.command, "upgrade", lambda cfg, revision: None)

    with pytest.raises(RuntimeError, match="missing tables"):
        runner.run_migrations("head", timeout=1, poll_interval=0, config=_config())


def test_main_upgrades_and_seeds_catalog(tmp_path: Path, monkeypatch) -> None:
    url = f"sqlite:///{tmp_path / 'seeded.sqlite'}"
    monkeypatch.setenv("ADVISOR_DATABASE_URL", url)

    assert runner.main(["--timeout", "2", "--poll-interval", "0.1", "--seed-catalog"]) == 0
    assert runner.missing_tables(url) == []
    first = runner.seed_resources(url)
    assert first > 0
    assert runner.seed_resources(url) == first


def test_main_reports_failure(monkeypatch) -> None:
    monkeypatch.delenv("ADVISOR_DATABASE_URL", raising=False)
    assert runner.main(["--timeout", "0"]) == 1
