"""File-backed local state for the client mirror."""

from __future__ import annotations

import json
import logging
import os
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


class MirrorTask(BaseModel):
    label: str
    skill: Optional[str] = None
    done: bool = False
    server_id: Optional[int] = None


class MirrorState(BaseModel):
    assessment_result: Optional[Dict[str, Any]] = None
    current_streak: int = 0
    last_active_date: Optional[date] = None
    tasks_day: Optional[date] = None
    tasks: List[MirrorTask] = Field(default_factory=list)
    tasks_seeded_on: Optional[date] = None
    reminder_time: Optional[str] = None
    reminder_ack_date: Optional[date] = None
    chat_count: int = 0


class LocalStore:
    """Loads and saves :class:`MirrorState` as a JSON document."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> MirrorState:
        if not self.path.exists():
            return MirrorState()
        try:
            with self.path.open(encoding="utf-8") as handle:
                return MirrorState.model_validate(json.load(handle))
        except (OSError, ValueError, ValidationError) as exc:
            logger.warning("Discarding unreadable mirror state at %s: %s", self.path, exc)
            return MirrorState()

    def save(self, state: MirrorState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(state.model_dump(mode="json"), handle, indent=2)
        os.replace(tmp_path, self.path)


__all__ = ["LocalStore", "MirrorState", "MirrorTask"]
