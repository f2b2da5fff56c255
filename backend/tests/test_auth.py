from __future__ import annotations

from datetime import datetime, timedelta, timezone

from advisor.auth import DatabaseIdentityProvider, parse_bearer, resolve


def test_parse_bearer() -> None:
    assert parse_bearer("Bearer abc") == "abc"
    assert parse_bearer("Bearer ") is None
    assert parse_bearer("Basic abc") is None
    assert parse_bearer(None) is None


def test_resolves_known_token(make_user) -> None:
    make_user("user-7", name="Grace", token="tok-7")
    identity = resolve("Bearer tok-7")
    assert identity is not None
    assert (identity.id, identity.name) == ("user-7", "Grace")


def test_unknown_and_expired_tokens_resolve_to_none(make_user) -> None:
    past = datetime.now(timezone.utc) - timedelta(hours=1)
    make_user("user-8", token="expired", expires_at=past)
    assert resolve("Bearer expired") is None
    assert resolve("Bearer missing") is None


def test_storage_failure_fails_open(monkeypatch) -> None:
    def broken(*_, **__):
        raise RuntimeError("database offline")

    monkeypatch.setattr("advisor.auth.session_scope", broken)
    assert DatabaseIdentityProvider().resolve("anything") is None
