"""Local mirror of streak, tasks and assessment state.

The mirror answers from its :class:`LocalStore` first and, when an
authenticated :class:`AdvisorClient` is available, reconciles with the API.
Server state replaces local state whenever the server has any; nothing is merged.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Optional

import httpx

from ..careers import compute_badges, generate_daily_tasks
from ..streaks import StreakState, advance_streak, today_in
from .api import AdvisorApiError, AdvisorClient
from .store import LocalStore, MirrorState, MirrorTask

logger = logging.getLogger(__name__)

REMINDER_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
SYNC_ERRORS = (AdvisorApiError, httpx.HTTPError)


class ClientMirror:
    def __init__(
        self,
        store: LocalStore,
        api: Optional[AdvisorClient] = None,
        *,
        today: Optional[Callable[[], date]] = None,
        timezone: str = "UTC",
    ) -> None:
        self.store = store
        self.api = api
        self._today = today or (lambda: today_in(timezone))
        self.state: MirrorState = store.load()

    def today(self) -> date:
        return self._today()

    def save(self) -> None:
        self.store.save(self.state)

    @property
    def online(self) -> bool:
        return self._session_api() is not None

    def _session_api(self) -> Optional[AdvisorClient]:
        if self.api is not None and self.api.authenticated:
            return self.api
        return None

    def _generated_tasks(self) -> List[MirrorTask]:
        return [
            MirrorTask(label=task.label, skill=task.skill, done=False)
            for task in generate_daily_tasks(self.state.assessment_result)
        ]

    def ensure_today_tasks(self) -> List[MirrorTask]:
        """Return today's tasks, generating a fresh local set on a new day."""
        today = self.today()
        if self.state.tasks_day != today:
            self.state.tasks_day = today
            self.state.tasks = self._generated_tasks()
            self.save()
        return self.state.tasks

    def _apply_server_streak(self, payload: Optional[Mapping[str, Any]]) -> None:
        if not payload:
            return
        self.state.current_streak = int(payload.get("current_streak") or 0)
        raw = payload.get("last_active_date")
        self.state.last_active_date = date.fromisoformat(raw) if isinstance(raw, str) else None

    @staticmethod
    def _from_server(rows: List[Mapping[str, Any]]) -> List[MirrorTask]:
        return [
            MirrorTask(
                label=row.get("label", ""),
                skill=row.get("skill") or "general",
                done=bool(row.get("done")),
                server_id=row.get("id"),
            )
            for row in rows
        ]

    def reconcile(self) -> bool:
        """Pull streak and today's tasks from the API; seed tasks once when it has none.

        Returns ``False`` when offline or when the API could not be reached.
        """
        self.ensure_today_tasks()
        api = self._session_api()
        if api is None:
            return False
        today = self.today()
        try:
            self._apply_server_streak(api.get_streak())
            server_tasks = api.list_tasks(due_date="today", limit=50)
            if server_tasks:
                self.state.tasks = self._from_server(server_tasks)
            elif self.state.tasks_seeded_on != today:
                generated = [
                    {"label": task.label, "skill": task.skill, "done": False, "dueDate": today.isoformat()}
                    for task in self._generated_tasks()
                ]
                self.state.tasks = self._from_server(api.create_tasks(generated))
                self.state.tasks_seeded_on = today
        except SYNC_ERRORS as exc:
            logger.warning("Mirror reconcile failed; keeping local state: %s", exc)
            self.save()
            return False
        self.state.tasks_day = today
        self.save()
        return True

    def mark_active(self) -> int:
        """Advance the streak locally, then let the server's answer win."""
        advanced = advance_streak(
            StreakState(self.state.current_streak, self.state.last_active_date), self.today()
        )
        self.state.current_streak = advanced.current_streak
        self.state.last_active_date = advanced.last_active_date
        api = self._session_api()
        if api is not None:
            try:
                self._apply_server_streak(api.mark_streak())
            except SYNC_ERRORS as exc:
                logger.warning("Streak sync failed: %s", exc)
        self.save()
        return self.state.current_streak

    def toggle_task(self, index: int) -> MirrorTask:
        tasks = self.ensure_today_tasks()
        task = tasks[index]
        task.done = not task.done
        self.save()
        api = self._session_api()
        if api is not None and task.server_id is not None:
            try:
                api.update_task(task.server_id, {"done": task.done})
            except SYNC_ERRORS as exc:
                logger.warning("Task %s sync failed: %s", task.server_id, exc)
        return task

    def set_reminder(self, value: str) -> None:
        if not REMINDER_PATTERN.match(value):
            raise ValueError(f"Reminder time must be HH:MM, got {value!r}")
        self.state.reminder_time = value
        self.save()
        api = self._session_api()
        if api is None:
            return
        try:
            current = api.get_profile() or {}
            profile: Dict[str, Any] = dict(current.get("profile") or {})
            profile["reminderTime"] = value
            api.update_profile({"profile": profile})
        except SYNC_ERRORS as exc:
            logger.warning("Reminder sync failed: %s", exc)

    def record_assessment(self, result: Mapping[str, Any], answers: Any = None) -> None:
        self.state.assessment_result = dict(result)
        self.save()
        api = self._session_api()
        if api is None:
            return
        try:
            api.submit_assessment(answers if answers is not None else {}, result)
        except SYNC_ERRORS as exc:
            logger.warning("Assessment sync failed: %s", exc)

    def record_chat(self) -> int:
        self.state.chat_count += 1
        self.save()
        return self.state.chat_count

    def badges(self) -> List[str]:
        return compute_badges(self.state.assessment_result, self.state.chat_count)

    def completion_percent(self) -> int:
        tasks = self.state.tasks
        if not tasks:
            return 0
        return round(sum(1 for task in tasks if task.done) / len(tasks) * 100)


__all__ = ["ClientMirror", "REMINDER_PATTERN"]
