"""
Tests for the change detector module.
"""

import pytest

from pizza_watch.detector import ChangeDetector, diff_menus
from pizza_watch.models import MenuItem, build_snapshot


def snapshot(*names):
    return build_snapshot(MenuItem(name=n) for n in names)


@pytest.fixture
def detector():
    return ChangeDetector()


class TestDiffMenus:
    """Tests for diff_menus."""

    def test_item_added(self):
        """A new pizza shows up in added."""
        diff = diff_menus(snapshot("Margherita"), snapshot("Margherita", "Pepperoni"))

        assert [i.name for i in diff.added] == ["Pepperoni"]
        assert diff.removed == ()

    def test_item_removed(self):
        """A pizza that disappeared shows up in removed."""
        diff = diff_menus(snapshot("A", "B"), snapshot("B"))

        assert diff.added == ()
        assert [i.name for i in diff.removed] == ["A"]

    def test_no_change(self):
        """Identical menus produce an empty diff."""
        diff = diff_menus(snapshot("A"), snapshot("A"))

        assert diff.added == ()
        assert diff.removed == ()
        assert not diff.has_changes

    def test_first_run_reports_everything_added(self):
        """An empty baseline makes every current item new."""
        diff = diff_menus((), snapshot("Margherita", "Pepperoni"))

        assert [i.name for i in diff.added] == ["Margherita", "Pepperoni"]
        assert diff.removed == ()

    def test_field_changes_are_ignored(self):
        """Identity is the name only; description and image changes are not reported."""
        previous = (MenuItem("Margherita", "Tomato", "https://img/a.jpg"),)
        current = (MenuItem("Margherita", "Tomato and basil", "https://img/b.jpg"),)

        diff = diff_menus(previous, current)

        assert not diff.has_changes

    def test_order_follows_source_snapshots(self):
        """Added follows current order, removed follows previous order."""
        diff = diff_menus(snapshot("Bianca", "Diavola", "Funghi"), snapshot("Calzone", "Funghi", "Quattro"))

        assert [i.name for i in diff.added] == ["Calzone", "Quattro"]
        assert [i.name for i in diff.removed] == ["Bianca", "Diavola"]

    def test_added_and_removed_are_disjoint(self):
        """No name can be both added and removed."""
        diff = diff_menus(snapshot("A", "B", "C"), snapshot("C", "D", "E"))

        added = {i.name for i in diff.added}
        removed = {i.name for i in diff.removed}
        assert added.isdisjoint(removed)

    def test_diff_of_equal_snapshots_is_empty(self):
        """Comparing a snapshot with itself is a no-op."""
        for names in [(), ("A",), ("Margherita", "Pepperoni", "Bianca")]:
            s = snapshot(*names)
            diff = diff_menus(s, s)
            assert diff.added == () and diff.removed == ()

    def test_partition_reconstructs_current(self):
        """Added plus unchanged previous names is exactly the current name set."""
        previous = snapshot("A", "B", "C", "Z")
        current = snapshot("B", "C", "D", "E")

        diff = diff_menus(previous, current)

        removed = {i.name for i in diff.removed}
        unchanged = {i.name for i in previous} - removed
        assert unchanged | {i.name for i in diff.added} == {i.name for i in current}


class TestChangeDetector:
    """Tests for ChangeDetector class."""

    def test_detect_changes(self, detector):
        """Detector returns the same diff as diff_menus."""
        previous = snapshot("Margherita")
        current = snapshot("Margherita", "Pepperoni")

        assert detector.detect_changes(previous, current) == diff_menus(previous, current)

    def test_detect_no_changes(self, detector):
        """No changes when the menu stays the same."""
        diff = detector.detect_changes(snapshot("A"), snapshot("A"))

        assert not diff.has_changes
