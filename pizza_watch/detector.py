"""
Menu Change Detector

Compares two menu snapshots by item name.
"""

import logging

from .models import MenuDiff, Snapshot

logger = logging.getLogger(__name__)


def diff_menus(previous: Snapshot, current: Snapshot) -> MenuDiff:
    """
    Compute the items added to and removed from the menu.

    Identity is the item name only. An item whose description or image
    changed while its name stayed the same is not reported.
    """
    previous_names = {item.name for item in previous}
    current_names = {item.name for item in current}

    return MenuDiff(
        added=tuple(item for item in current if item.name not in previous_names),
        removed=tuple(item for item in previous if item.name not in current_names),
    )


class ChangeDetector:
    """Detects menu additions and removals between runs."""

    def detect_changes(self, previous: Snapshot, current: Snapshot) -> MenuDiff:
        logger.debug(
            f"Comparing menus - Previous: {len(previous)} item(s), Current: {len(current)} item(s)"
        )
        diff = diff_menus(previous, current)

        if diff.has_changes:
            logger.info(
                f"Menu changes detected: {len(diff.added)} added, {len(diff.removed)} removed"
            )
        else:
            logger.info("No menu changes detected")

        return diff
