"""Shared now-playing cell and the background poller that feeds it."""

import logging
import threading
from typing import Callable

from .errors import SoundstormError


class NowPlaying:
    """Last known track title, written by the poller and read by the UI."""

    def __init__(self, initial: str = ""):
        self._lock = threading.Lock()
        self._title = initial

    def snapshot(self) -> str:
        with self._lock:
            return self._title

    def update(self, title: str | None) -> bool:
        """
        Replace the title if it is non-empty and differs from the current one.

        Returns:
            bool: True if the stored title changed
        """
        if not title:
            return False
        with self._lock:
            if title == self._title:
                return False
            self._title = title
            return True


class TitlePoller(threading.Thread):
    """
    Daemon thread that refreshes a NowPlaying cell on a fixed interval.

    ``fetch`` returns the current title or None; failures keep the last
    known value. ``on_change`` is called from this thread with the new
    title whenever the cell changes.
    """

    def __init__(
        self,
        fetch: Callable[[], str | None],
        cell: NowPlaying,
        interval: float = 2.0,
        on_change: Callable[[str], None] | None = None,
        logger: logging.Logger | None = None,
    ):
        super().__init__(name="soundstorm-title-poller", daemon=True)
        self.fetch = fetch
        self.cell = cell
        self.interval = interval
        self.on_change = on_change
        self.logger = logger or logging.getLogger("soundstorm")
        self._stop_event = threading.Event()

    def run(self) -> None:
        while not self._stop_event.is_set():
            self.poll_once()
            self._stop_event.wait(self.interval)

    def poll_once(self) -> bool:
        """Fetch once and push the result into the cell."""
        try:
            title = self.fetch()
        except SoundstormError as e:
            self.logger.debug(f"Title poll failed: {e}")
            return False

        if not self.cell.update(title):
            return False

        self.logger.info(f"Now playing: {title}")
        if self.on_change is not None:
            self.on_change(title)
        return True

    def stop(self) -> None:
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()
