"""Tests for the shared now-playing cell and its poller."""

import threading
from unittest.mock import Mock

from soundstorm.errors import IPCError
from soundstorm.now_playing import NowPlaying, TitlePoller


class TestNowPlaying:
    """The cell only ever takes non-empty values that differ from the last one."""

    def test_starts_empty(self):
        assert NowPlaying().snapshot() == ""

    def test_update_replaces(self):
        cell = NowPlaying()
        assert cell.update("Song A") is True
        assert cell.snapshot() == "Song A"

    def test_same_value_is_not_a_change(self):
        cell = NowPlaying("Song A")
        assert cell.update("Song A") is False
        assert cell.snapshot() == "Song A"

    def test_empty_values_ignored(self):
        cell = NowPlaying("Song A")
        assert cell.update("") is False
        assert cell.update(None) is False
        assert cell.snapshot() == "Song A"

    def test_concurrent_updates_keep_a_written_value(self):
        cell = NowPlaying()
        titles = [f"Song {i}" for i in range(50)]

        threads = [threading.Thread(target=cell.update, args=(t,)) for t in titles]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert cell.snapshot() in titles


class TestTitlePoller:
    """Tests for the background poller."""

    def test_poll_once_updates_and_notifies(self, logger):
        cell = NowPlaying()
        on_change = Mock()
        poller = TitlePoller(lambda: "Song A", cell, on_change=on_change, logger=logger)

        assert poller.poll_once() is True
        assert cell.snapshot() == "Song A"
        on_change.assert_called_once_with("Song A")

    def test_poll_once_unchanged_does_not_notify(self, logger):
        cell = NowPlaying("Song A")
        on_change = Mock()
        poller = TitlePoller(lambda: "Song A", cell, on_change=on_change, logger=logger)

        assert poller.poll_once() is False
        on_change.assert_not_called()

    def test_poll_once_none_keeps_last_value(self, logger):
        cell = NowPlaying("Song A")
        poller = TitlePoller(lambda: None, cell, logger=logger)

        assert poller.poll_once() is False
        assert cell.snapshot() == "Song A"

    def test_fetch_error_keeps_last_value(self, logger):
        cell = NowPlaying("Song A")
        fetch = Mock(side_effect=IPCError("socket gone"))
        poller = TitlePoller(fetch, cell, logger=logger)

        assert poller.poll_once() is False
        assert cell.snapshot() == "Song A"

    def test_thread_is_daemon(self, logger):
        poller = TitlePoller(lambda: None, NowPlaying(), logger=logger)
        assert poller.daemon is True

    def test_run_until_stopped(self, logger):
        cell = NowPlaying()
        titles = iter(["Song A", "Song A", "Song B"])
        seen = []
        changed = threading.Event()

        def on_change(title):
            seen.append(title)
            if title == "Song B":
                changed.set()

        poller = TitlePoller(
            lambda: next(titles, None), cell, interval=0.01, on_change=on_change, logger=logger
        )
        poller.start()
        assert changed.wait(timeout=2)
        poller.stop()
        poller.join(timeout=2)

        assert not poller.is_alive()
        assert poller.stopped
        assert seen == ["Song A", "Song B"]
        assert cell.snapshot() == "Song B"
