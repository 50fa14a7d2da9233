"""
Pizza Menu Watch - Source Package
"""

from .composer import compose, format_list
from .detector import ChangeDetector, diff_menus
from .exceptions import (
    DispatchError,
    ExtractionError,
    FetchError,
    PizzaWatchError,
    StoreError,
)
from .extractor import StateExtractor
from .fetcher import PageFetcher
from .models import EmbeddedState, MenuDiff, MenuItem, Notification, Snapshot
from .notifier import HomeAssistantNotifier
from .projector import MenuProjector
from .runner import RunCoordinator, RunResult
from .scheduler import DailyScheduler, SchedulerState
from .state import SnapshotStore

__all__ = [
    "MenuItem",
    "MenuDiff",
    "Notification",
    "Snapshot",
    "EmbeddedState",
    "StateExtractor",
    "MenuProjector",
    "SnapshotStore",
    "ChangeDetector",
    "diff_menus",
    "compose",
    "format_list",
    "HomeAssistantNotifier",
    "PageFetcher",
    "RunCoordinator",
    "RunResult",
    "DailyScheduler",
    "SchedulerState",
    "PizzaWatchError",
    "FetchError",
    "ExtractionError",
    "StoreError",
    "DispatchError",
]
