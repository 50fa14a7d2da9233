"""
Menu Snapshot Store

Persists the last-known menu snapshot as a JSON array.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from .exceptions import StoreError
from .models import MenuItem, Snapshot, build_snapshot

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Loads and atomically saves the comparison baseline."""

    def __init__(self, path: str | Path = "data.json"):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Snapshot:
        """
        Load the previous snapshot.

        A missing file is the first-run case and yields an empty snapshot.
        Any other read or shape problem raises StoreError.
        """
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.info("No previous data file found, treating as first run")
            return ()
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            raise StoreError(f"Failed to read snapshot {self.path}: {e}") from e

        if not isinstance(data, list):
            raise StoreError(f"Snapshot {self.path} is not a JSON array")

        items = []
        for index, entry in enumerate(data):
            if not isinstance(entry, dict) or not isinstance(entry.get("name"), str) or not entry["name"]:
                raise StoreError(f"Snapshot {self.path} entry {index} has no valid name")
            items.append(MenuItem.from_dict(entry))

        snapshot = build_snapshot(items)
        logger.info(f"Loaded {len(snapshot)} item(s) from {self.path}")
        return snapshot

    def save(self, snapshot: Snapshot) -> None:
        """Write the snapshot via a temp file and rename over the target."""
        payload = [item.to_dict() for item in snapshot]
        tmp_path = None
        replaced = False

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_path = Path(tmp.name)
                json.dump(payload, tmp, indent=2, ensure_ascii=False)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_path, self.path)
            replaced = True
        except (OSError, TypeError, ValueError) as e:
            raise StoreError(f"Failed to save snapshot {self.path}: {e}") from e
        finally:
            # Also runs when a shutdown signal interrupts the write
            if not replaced and tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()

        logger.info(f"Saved {len(snapshot)} item(s) to {self.path}")
