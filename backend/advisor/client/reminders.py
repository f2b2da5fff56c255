"""Once-a-day reminder check driven by a background ticker."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from .mirror import ClientMirror

logger = logging.getLogger(__name__)

TICK_SECONDS = 30.0


class ReminderTicker:
    """Raises :attr:`due` when the wall clock reaches the configured HH:MM.

    The flag stays raised until :meth:`acknowledge`, and will not be raised
    again on a day that was already acknowledged.
    """

    def __init__(
        self,
        mirror: ClientMirror,
        *,
        interval: float = TICK_SECONDS,
        now: Callable[[], datetime] = datetime.now,
        on_due: Optional[Callable[[], None]] = None,
    ) -> None:
        self.mirror = mirror
        self.interval = interval
        self._now = now
        self._on_due = on_due
        self.due = False
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def check(self) -> bool:
        reminder = self.mirror.state.reminder_time
        if not reminder:
            return False
        moment = self._now()
        if moment.strftime("%H:%M") != reminder:
            return self.due
        if self.mirror.state.reminder_ack_date == moment.date():
            return self.due
        if not self.due:
            self.due = True
            logger.info("Daily reminder due at %s", reminder)
            if self._on_due is not None:
                self._on_due()
        return self.due

    def acknowledge(self) -> None:
        self.due = False
        self.mirror.state.reminder_ack_date = self._now().date()
        self.mirror.save()

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                self.check()
            except Exception:  # noqa: BLE001
                logger.exception("Reminder tick failed")

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="advisor-reminders", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None


__all__ = ["ReminderTicker", "TICK_SECONDS"]
