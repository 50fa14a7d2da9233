"""
Menu Watch Run Coordinator

One pass of fetch, extract, project, diff, notify and save.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .composer import compose
from .detector import ChangeDetector
from .exceptions import DispatchError
from .extractor import StateExtractor
from .fetcher import PageFetcher
from .models import MenuDiff, Snapshot
from .notifier import HomeAssistantNotifier
from .projector import MenuProjector
from .state import SnapshotStore

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Outcome of a single watch run."""
    current: Snapshot
    diff: MenuDiff
    notified: bool = False
    notification_error: Optional[DispatchError] = None


class RunCoordinator:
    """Runs the menu watch pipeline once per call."""

    def __init__(
        self,
        fetcher: PageFetcher,
        extractor: StateExtractor,
        projector: MenuProjector,
        store: SnapshotStore,
        notifier: HomeAssistantNotifier,
        detector: Optional[ChangeDetector] = None,
    ):
        self.fetcher = fetcher
        self.extractor = extractor
        self.projector = projector
        self.store = store
        self.notifier = notifier
        self.detector = detector or ChangeDetector()

    def run_once(self) -> RunResult:
        """
        Check the menu and notify about changes.

        Fetch, extraction and snapshot-load errors propagate and nothing is
        saved. A failed notification is logged and does not stop the current
        snapshot from being saved.
        """
        html = self.fetcher.fetch()
        state = self.extractor.extract(html)
        current = self.projector.project(state)

        previous = self.store.load()
        diff = self.detector.detect_changes(previous, current)

        result = RunResult(current=current, diff=diff)
        if diff.has_changes:
            notification = compose(diff.added, diff.removed)
            try:
                self.notifier.dispatch(notification)
                # Unconfigured dispatch only logs
                result.notified = bool(self.notifier.configured)
            except DispatchError as e:
                logger.error(f"Error sending notification: {e}")
                result.notification_error = e

        self.store.save(current)
        return result
