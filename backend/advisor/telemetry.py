"""Advisor activity events.

Routes report what a learner did through the typed helpers below; each event is
written to the ``advisor.telemetry`` logger as one JSON line and handed to any
in-process listeners.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from threading import RLock
from typing import Any, Callable, Dict, Iterable, List, Optional

logger = logging.getLogger("advisor.telemetry")

ASSESSMENT_RECORDED = "assessment_recorded"
STREAK_MARKED = "streak_marked"
CHAT_REPLY = "chat_reply"
EVENT_NAMES = frozenset({ASSESSMENT_RECORDED, STREAK_MARKED, CHAT_REPLY})


@dataclass(frozen=True)
class TelemetryEvent:
    name: str
    user_id: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict)

    def as_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {"event": self.name}
        if self.user_id is not None:
            record["user_id"] = self.user_id
        record.update(self.payload)
        return record


Listener = Callable[[TelemetryEvent], None]

_listeners: List[Listener] = []
_lock = RLock()


def register_listener(listener: Listener) -> None:
    with _lock:
        _listeners.append(listener)


def clear_listeners() -> None:
    with _lock:
        _listeners.clear()


def _plain(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return value


def emit_event(name: str, *, user_id: Optional[str] = None, **fields: Any) -> TelemetryEvent:
    if name not in EVENT_NAMES:
        raise ValueError(f"Unknown telemetry event {name!r}")
    event = TelemetryEvent(name=name, user_id=user_id, payload={key: _plain(value) for key, value in fields.items()})

    with _lock:
        listeners = list(_listeners)
    for listener in listeners:
        try:
            listener(event)
        except Exception:  # noqa: BLE001
            logger.exception("Telemetry listener failed for %s", name)

    logger.info("TELEMETRY %s", json.dumps(event.as_record(), default=str))
    return event


def assessment_recorded(user_id: str, assessment_id: int, strengths: Iterable[str]) -> TelemetryEvent:
    return emit_event(ASSESSMENT_RECORDED, user_id=user_id, assessment_id=assessment_id, strengths=list(strengths))


def streak_marked(user_id: str, current_streak: int, day: date) -> TelemetryEvent:
    return emit_event(STREAK_MARKED, user_id=user_id, current_streak=current_streak, day=day)


def chat_reply(message: str, matched_keyword: Optional[str]) -> TelemetryEvent:
    # Only the shape of the message is recorded, never its text.
    return emit_event(CHAT_REPLY, message_length=len(message), matched_keyword=matched_keyword)


__all__ = [
    "ASSESSMENT_RECORDED",
    "CHAT_REPLY",
    "EVENT_NAMES",
    "STREAK_MARKED",
    "TelemetryEvent",
    "assessment_recorded",
    "chat_reply",
    "clear_listeners",
    "emit_event",
    "register_listener",
    "streak_marked",
]
