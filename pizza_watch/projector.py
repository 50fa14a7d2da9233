"""
Menu Projector

Flattens the typed embedded state into a sorted snapshot of the items in one
menu category.
"""

import logging
from typing import Optional

from .models import (
    EmbeddedState,
    GroupRecord,
    ItemRecord,
    MenuItem,
    Snapshot,
    build_snapshot,
)

logger = logging.getLogger(__name__)


class MenuProjector:
    """Projects the items of a named menu group across every menu."""

    def __init__(self, category: str = "pizza", image_size: str = "xl"):
        self.category = category.casefold()
        self.image_size = image_size

    def project(self, state: EmbeddedState) -> Snapshot:
        """
        Collect every item in every group named like the category.

        Malformed groups and items are skipped. Duplicate names keep the
        last one seen, and the result is sorted by name.
        """
        items: list[MenuItem] = []

        for menu in state.menus:
            for group in menu.groups:
                if not isinstance(group, GroupRecord):
                    logger.debug(f"Skipping malformed group in {menu.key}")
                    continue
                if group.name.casefold() != self.category:
                    continue
                for record in group.items:
                    item = self._project_item(record)
                    if item:
                        items.append(item)

        snapshot = build_snapshot(items)
        logger.info(f"Found {len(snapshot)} {self.category} item(s)")
        return snapshot

    def _project_item(self, record) -> Optional[MenuItem]:
        if not isinstance(record, ItemRecord):
            logger.debug("Skipping malformed item record")
            return None

        name = record.name.strip() if isinstance(record.name, str) else ""
        if not name:
            logger.warning(f"Skipping {self.category} item without a name: {record.name!r}")
            return None

        description = record.description if isinstance(record.description, str) else None
        image_url = record.image_urls.get(self.image_size)

        return MenuItem(
            name=name,
            description=description,
            image_url=image_url if isinstance(image_url, str) and image_url else None,
        )
