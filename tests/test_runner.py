"""
Tests for the run coordinator.
"""

from unittest.mock import MagicMock

import httpx
import pytest

from pizza_watch.exceptions import DispatchError, ExtractionError, FetchError, StoreError
from pizza_watch.extractor import StateExtractor
from pizza_watch.fetcher import PageFetcher
from pizza_watch.models import EmbeddedState, MenuItem, Notification, build_snapshot
from pizza_watch.notifier import HomeAssistantNotifier
from pizza_watch.projector import MenuProjector
from pizza_watch.runner import RunCoordinator
from pizza_watch.state import SnapshotStore


def snapshot(*names):
    return build_snapshot(MenuItem(name=n) for n in names)


@pytest.fixture
def parts():
    """Mocked pipeline collaborators."""
    fetcher = MagicMock(spec=PageFetcher)
    fetcher.fetch.return_value = "<html></html>"
    extractor = MagicMock(spec=StateExtractor)
    extractor.extract.return_value = EmbeddedState()
    projector = MagicMock(spec=MenuProjector)
    store = MagicMock(spec=SnapshotStore)
    notifier = MagicMock(spec=HomeAssistantNotifier)
    notifier.configured = True
    return fetcher, extractor, projector, store, notifier


@pytest.fixture
def coordinator(parts):
    fetcher, extractor, projector, store, notifier = parts
    return RunCoordinator(fetcher, extractor, projector, store, notifier)


class TestRunCoordinator:
    """Tests for RunCoordinator class."""

    def test_item_added_notifies_and_saves(self, coordinator, parts):
        _, _, projector, store, notifier = parts
        current = snapshot("Margherita", "Pepperoni")
        projector.project.return_value = current
        store.load.return_value = snapshot("Margherita")

        result = coordinator.run_once()

        notifier.dispatch.assert_called_once_with(Notification("IN: Pepperoni", None))
        store.save.assert_called_once_with(current)
        assert result.notified
        assert [i.name for i in result.diff.added] == ["Pepperoni"]

    def test_item_removed_message(self, coordinator, parts):
        _, _, projector, store, notifier = parts
        projector.project.return_value = snapshot("B")
        store.load.return_value = snapshot("A", "B")

        coordinator.run_once()

        notifier.dispatch.assert_called_once_with(Notification("OUT: A", None))

    def test_no_changes_skips_notify_but_saves(self, coordinator, parts):
        """An unchanged menu is still persisted."""
        _, _, projector, store, notifier = parts
        projector.project.return_value = snapshot("A")
        store.load.return_value = snapshot("A")

        result = coordinator.run_once()

        notifier.dispatch.assert_not_called()
        store.save.assert_called_once_with(snapshot("A"))
        assert not result.notified
        assert not result.diff.has_changes

    def test_dispatch_failure_still_saves(self, coordinator, parts):
        _, _, projector, store, notifier = parts
        projector.project.return_value = snapshot("A", "B")
        store.load.return_value = snapshot("A")
        error = DispatchError(503, "unavailable")
        notifier.dispatch.side_effect = error

        result = coordinator.run_once()

        store.save.assert_called_once_with(snapshot("A", "B"))
        assert not result.notified
        assert result.notification_error is error

    def test_unconfigured_notifier_is_not_notified(self, coordinator, parts):
        """The log-only path does not count as a delivered notification."""
        _, _, projector, store, notifier = parts
        notifier.configured = False
        projector.project.return_value = snapshot("A", "B")
        store.load.return_value = snapshot("A")

        result = coordinator.run_once()

        notifier.dispatch.assert_called_once()
        assert not result.notified
        store.save.assert_called_once_with(snapshot("A", "B"))

    def test_fetch_failure_is_fatal(self, coordinator, parts):
        fetcher, extractor, _, store, notifier = parts
        fetcher.fetch.side_effect = FetchError("timeout")

        with pytest.raises(FetchError):
            coordinator.run_once()

        extractor.extract.assert_not_called()
        store.save.assert_not_called()
        notifier.dispatch.assert_not_called()

    def test_extraction_failure_is_fatal(self, coordinator, parts):
        _, extractor, _, store, _ = parts
        extractor.extract.side_effect = ExtractionError("marker-not-found")

        with pytest.raises(ExtractionError):
            coordinator.run_once()

        store.load.assert_not_called()
        store.save.assert_not_called()

    def test_corrupt_snapshot_is_fatal(self, coordinator, parts):
        _, _, projector, store, notifier = parts
        projector.project.return_value = snapshot("A")
        store.load.side_effect = StoreError("corrupt")

        with pytest.raises(StoreError):
            coordinator.run_once()

        notifier.dispatch.assert_not_called()
        store.save.assert_not_called()


class TestEndToEnd:
    """Full pipeline over a real page, store and composer."""

    def test_first_run_then_unchanged(self, tmp_path, page_html):
        fetcher = MagicMock(spec=PageFetcher)
        fetcher.fetch.return_value = page_html
        notifier = MagicMock(spec=HomeAssistantNotifier)
        store = SnapshotStore(tmp_path / "data.json")
        coordinator = RunCoordinator(fetcher, StateExtractor(), MenuProjector(), store, notifier)

        first = coordinator.run_once()

        notifier.dispatch.assert_called_once_with(
            Notification(
                "IN: Bianca, Margherita, and Pepperoni",
                "https://img.example/bianca.jpg",
            )
        )
        assert store.load() == first.current

        notifier.reset_mock()
        second = coordinator.run_once()

        notifier.dispatch.assert_not_called()
        assert not second.diff.has_changes

    def test_bad_token_still_saves_snapshot(self, tmp_path, page_html):
        """A notifier that cannot build its request does not block the save."""
        fetcher = MagicMock(spec=PageFetcher)
        fetcher.fetch.return_value = page_html
        notifier = HomeAssistantNotifier(
            base_url="http://ha.local:8123",
            token="töken",
            target_url="https://order.example/benchmark",
            client=httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200))),
        )
        store = SnapshotStore(tmp_path / "data.json")
        coordinator = RunCoordinator(fetcher, StateExtractor(), MenuProjector(), store, notifier)

        result = coordinator.run_once()

        assert isinstance(result.notification_error, DispatchError)
        assert not result.notified
        assert store.load() == result.current
        assert len(result.current) == 3
