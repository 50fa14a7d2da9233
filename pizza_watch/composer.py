"""
Notification Composer

Turns a menu diff into the notification text and picture.
"""

from typing import Optional, Sequence

from .models import MenuItem, Notification


def format_list(names: Sequence[str]) -> str:
    """Join names as an English conjunction: "A", "A and B", "A, B, and C"."""
    if len(names) == 0:
        return ""
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} and {names[1]}"
    return f"{', '.join(names[:-1])}, and {names[-1]}"


def pick_image(added: Sequence[MenuItem], removed: Sequence[MenuItem]) -> Optional[str]:
    """First new item's image, else the first removed item's image."""
    if added and added[0].image_url:
        return added[0].image_url
    if removed and removed[0].image_url:
        return removed[0].image_url
    return None


def compose(added: Sequence[MenuItem], removed: Sequence[MenuItem]) -> Notification:
    """Build the IN/OUT message for a non-empty diff."""
    if not added and not removed:
        raise ValueError("Nothing to compose: no items added or removed")

    message = ""
    if added:
        message += "IN: " + format_list([item.name for item in added])
    if added and removed:
        message += "\n"
    if removed:
        message += "OUT: " + format_list([item.name for item in removed])

    return Notification(message=message.rstrip(), image_url=pick_image(added, removed))
