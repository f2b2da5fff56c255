"""Database-backed repositories for owned rows and the resource catalog."""

from .owned_resources import OwnedResourceStore, assessments, progress_entries, ratings, recommendations
from .profiles import profiles
from .streaks import streaks
from .tasks import tasks

__all__ = [
    "OwnedResourceStore",
    "assessments",
    "profiles",
    "progress_entries",
    "ratings",
    "recommendations",
    "streaks",
    "tasks",
]
