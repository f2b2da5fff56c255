"""Offline-first client mirror of the advisor API."""

from .api import AdvisorApiError, AdvisorClient
from .mirror import ClientMirror
from .reminders import ReminderTicker
from .store import LocalStore, MirrorState, MirrorTask

__all__ = [
    "AdvisorApiError",
    "AdvisorClient",
    "ClientMirror",
    "LocalStore",
    "MirrorState",
    "MirrorTask",
    "ReminderTicker",
]
