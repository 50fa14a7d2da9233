"""
Pizza Menu Watch Data Model

Menu items, snapshots, diffs and the typed view of the page's embedded state.
"""

import unicodedata
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Union


@dataclass(frozen=True)
class MenuItem:
    """A single orderable item, identified by its name."""
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "imageUrl": self.image_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MenuItem":
        return cls(
            name=data["name"],
            description=data.get("description"),
            image_url=data.get("imageUrl"),
        )


# Sorted by collation_key, unique by name
Snapshot = tuple[MenuItem, ...]


def collation_key(name: str) -> tuple[str, str]:
    """
    Sort key approximating locale-aware alphabetical order.

    Accents and case are folded for the primary comparison so that
    "Éclair" sorts next to "eclair". Ties put lowercase before uppercase
    ("apple" before "Apple") and unaccented before accented.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    folded = "".join(c for c in decomposed if not unicodedata.combining(c))
    return folded.casefold(), name.swapcase()


def build_snapshot(items: Iterable[MenuItem]) -> Snapshot:
    """Deduplicate by name (last one wins) and sort."""
    by_name: dict[str, MenuItem] = {}
    for item in items:
        by_name[item.name] = item
    return tuple(sorted(by_name.values(), key=lambda i: collation_key(i.name)))


@dataclass(frozen=True)
class MenuDiff:
    """Items that appeared and disappeared between two snapshots."""
    added: Snapshot = ()
    removed: Snapshot = ()

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.removed)


@dataclass(frozen=True)
class Notification:
    """A composed, ready-to-send change notification."""
    message: str
    image_url: Optional[str] = None


# Typed nodes of the embedded page state

@dataclass
class OtherNode:
    """Anything in the embedded state that is not part of the menu tree."""
    raw: Any = None


@dataclass
class ItemRecord:
    """A raw menu item as found in the page state."""
    name: Any
    description: Any = None
    image_urls: dict = field(default_factory=dict)


@dataclass
class GroupRecord:
    """A named menu group (e.g. "Pizza") owning item records."""
    name: str
    items: list[Union[ItemRecord, OtherNode]] = field(default_factory=list)


@dataclass
class MenuRecord:
    """A top-level menu owning group records."""
    key: str
    groups: list[Union[GroupRecord, OtherNode]] = field(default_factory=list)


Node = Union[MenuRecord, GroupRecord, ItemRecord, OtherNode]


@dataclass
class EmbeddedState:
    """Classified view of the page's embedded state mapping."""
    records: dict[str, Node] = field(default_factory=dict)

    @property
    def menus(self) -> list[MenuRecord]:
        return [r for r in self.records.values() if isinstance(r, MenuRecord)]
