"""Connection-pool counters reported by ``/healthz/database``."""

from __future__ import annotations

import weakref
from dataclasses import asdict, dataclass
from typing import Any, Dict

from sqlalchemy import event
from sqlalchemy.engine import Engine


@dataclass
class PoolCounters:
    connects: int = 0
    checkouts: int = 0
    checkins: int = 0


_COUNTERS: "weakref.WeakKeyDictionary[Engine, PoolCounters]" = weakref.WeakKeyDictionary()


def instrument_engine(engine: Engine) -> PoolCounters:
    """Count pool connects, checkouts and checkins for ``engine``; idempotent."""
    counters = _COUNTERS.get(engine)
    if counters is not None:
        return counters
    counters = _COUNTERS[engine] = PoolCounters()

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record) -> None:  # type: ignore[no-untyped-def]
        counters.connects += 1

    @event.listens_for(engine, "checkout")
    def _on_checkout(dbapi_connection, connection_record, connection_proxy) -> None:  # type: ignore[no-untyped-def]
        counters.checkouts += 1

    @event.listens_for(engine, "checkin")
    def _on_checkin(dbapi_connection, connection_record) -> None:  # type: ignore[no-untyped-def]
        counters.checkins += 1

    return counters


def get_pool_snapshot(engine: Engine) -> Dict[str, Any]:
    counters = _COUNTERS.get(engine) or PoolCounters()
    snapshot: Dict[str, Any] = {"status": _pool_status(engine), **asdict(counters)}
    snapshot["in_use"] = max(counters.checkouts - counters.checkins, 0)
    return snapshot


def _pool_status(engine: Engine) -> str:
    try:
        return engine.pool.status()
    except Exception as exc:  # noqa: BLE001
        return f"unavailable: {exc}"


__all__ = ["PoolCounters", "get_pool_snapshot", "instrument_engine"]
