"""Playback session: command dispatch over the player and its control socket."""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from .config import Config
from .errors import IPCError, PlayerError
from .ipc import MpvIPC
from .logging import setup_logging
from .metadata import describe, resolve_title
from .now_playing import NowPlaying, TitlePoller
from .player import MpvPlayer


# Input word or single-letter alias -> command name
COMMANDS = {
    "start": "start",
    "s": "start",
    "pause": "pause",
    "p": "pause",
    "stop": "stop",
    "x": "stop",
    "status": "status",
    "i": "status",
    "help": "help",
    "h": "help",
    "exit": "exit",
    "q": "exit",
}

HELP_LINES = [
    "Available commands:",
    "  start (s)   - Start playback",
    "  pause (p)   - Pause/resume playback",
    "  stop  (x)   - Stop playback",
    "  status (i)  - Show current song info",
    "  help  (h)   - Show this help",
    "  exit  (q)   - Exit the player",
]

UNKNOWN_COMMAND = "Unknown command. Type 'help' for a list of commands."

# Seconds to wait for mpv to exit after "quit" before killing it
QUIT_TIMEOUT = 5.0


@dataclass
class Result:
    """Outcome of one dispatched command."""

    messages: list[str] = field(default_factory=list)
    keep_running: bool = True


class Session:
    """Owns the player process, the title poller and the shared title."""

    def __init__(
        self,
        config: Config,
        player: MpvPlayer | None = None,
        ipc: MpvIPC | None = None,
        now_playing: NowPlaying | None = None,
        on_change: Callable[[str], None] | None = None,
        logger: logging.Logger | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.player = player or MpvPlayer()
        self.ipc = ipc or MpvIPC(config.ipc_path, timeout=config.ipc_timeout)
        self.now_playing = now_playing or NowPlaying()
        self.on_change = on_change
        self.logger = logger or setup_logging()
        self.poller: TitlePoller | None = None
        self._sleep = sleep

    @property
    def playing(self) -> bool:
        return self.player.is_running()

    def dispatch(self, line: str) -> Result:
        """
        Run one line of user input.

        Args:
            line: Raw input; trimmed and lower-cased before lookup

        Returns:
            Result: Messages to show and whether the front end should continue
        """
        word = line.strip().lower()
        if not word:
            return Result()

        name = COMMANDS.get(word)
        if name is None:
            return Result([UNKNOWN_COMMAND])

        self.logger.debug(f"Command: {name}")
        if name == "exit":
            return Result(self.exit(), keep_running=False)
        handler = getattr(self, name)
        try:
            return Result(handler())
        except PlayerError as e:
            self.logger.error(f"Command {name} failed: {e}")
            return Result([f"Error: {e}"])

    def start(self) -> list[str]:
        """Spawn the player, wait briefly for a title, then start polling."""
        if self.playing:
            return ["Already playing."]

        self._stop_poller()

        pid = self.player.start(
            self.config.stream_url, self.config.ipc_path, volume=self.config.volume
        )
        self.logger.info(f"Started mpv with PID {pid} on {self.config.stream_url}")
        messages = ["Started playback."]

        marker = self.config.station_marker
        for attempt in range(self.config.startup_attempts):
            title = resolve_title(self.ipc, marker)
            if title:
                self.now_playing.update(title)
                messages.append(f"Now playing: {title}")
                break
            if attempt < self.config.startup_attempts - 1:
                self._sleep(1.0)

        self.poller = TitlePoller(
            fetch=lambda: resolve_title(self.ipc, marker),
            cell=self.now_playing,
            interval=self.config.poll_interval,
            on_change=self.on_change,
            logger=self.logger,
        )
        self.poller.start()
        return messages

    def pause(self) -> list[str]:
        self._send("cycle", "pause")
        return ["Toggled pause."]

    def stop(self) -> list[str]:
        self.shutdown()
        return ["Stopped playback."]

    def status(self) -> list[str]:
        return [describe(self.ipc, self.config.station_marker)]

    def help(self) -> list[str]:
        return list(HELP_LINES)

    def exit(self) -> list[str]:
        self.shutdown()
        return ["Exiting."]

    def shutdown(self) -> None:
        """
        Quit the player and stop the poller.

        Safe to call repeatedly and when nothing was started.
        """
        self._send("quit")

        exit_code = self.player.wait(timeout=QUIT_TIMEOUT)
        if exit_code is not None:
            self.logger.info(f"mpv exited with code {exit_code}")

        self._stop_poller()

    def _stop_poller(self) -> None:
        if self.poller is not None:
            self.poller.stop()
            self.poller.join(timeout=self.config.poll_interval + self.config.ipc_timeout + 1)
            self.poller = None

    def _send(self, *args) -> None:
        try:
            self.ipc.command(*args)
        except IPCError as e:
            self.logger.debug(f"Ignoring failed command {list(args)}: {e}")
