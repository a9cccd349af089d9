"""Pytest configuration and fixtures for Soundstorm tests."""

import json
import logging
import shutil
import socket
import tempfile
import threading
import time
from pathlib import Path

import pytest

from soundstorm.config import Config


@pytest.fixture(autouse=True)
def tmp_home(tmp_path, monkeypatch):
    """
    Mock home directory for isolated tests.

    Keeps ~/.soundstorm.log and ~/.soundstorm.json out of the real home.

    Yields:
        Path: Temporary home directory
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("SOUNDSTORM_CONFIG", raising=False)
    yield home


@pytest.fixture
def logger():
    """Quiet logger for components that accept one."""
    log = logging.getLogger("soundstorm.test")
    log.addHandler(logging.NullHandler())
    log.propagate = False
    return log


class FakeMpvServer:
    """
    Minimal stand-in for mpv's IPC server.

    Answers ``get_property`` from ``properties``, records every command it
    receives, and can prefix replies with broadcast event lines.
    """

    def __init__(self, path: str):
        self.path = path
        self.properties: dict = {}
        self.commands: list[list] = []
        self.events: list[dict] = []
        self.raw_reply: bytes | None = None
        self._stop = threading.Event()
        self._sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._sock.bind(path)
        self._sock.listen(8)
        self._sock.settimeout(0.05)
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def start(self) -> "FakeMpvServer":
        self._thread.start()
        return self

    def wait_for_commands(self, count: int, timeout: float = 2.0) -> list[list]:
        """Block until at least ``count`` commands were received."""
        deadline = time.monotonic() + timeout
        while len(self.commands) < count and time.monotonic() < deadline:
            time.sleep(0.01)
        return self.commands

    def close(self) -> None:
        self._stop.set()
        self._thread.join(timeout=2)
        self._sock.close()

    def _serve(self) -> None:
        while not self._stop.is_set():
            try:
                conn, _ = self._sock.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            with conn:
                self._handle(conn)

    def _handle(self, conn: socket.socket) -> None:
        conn.settimeout(1.0)
        try:
            with conn.makefile("rb") as reader:
                line = reader.readline()
            if not line:
                return
            command = json.loads(line)["command"]
            self.commands.append(command)
            conn.sendall(self._reply(command))
        except (OSError, ValueError, KeyError):
            pass

    def _reply(self, command: list) -> bytes:
        if self.raw_reply is not None:
            return self.raw_reply

        lines = [json.dumps(event) for event in self.events]
        if command[0] == "get_property":
            name = command[1]
            if name in self.properties:
                lines.append(json.dumps({"data": self.properties[name], "error": "success"}))
            else:
                lines.append(json.dumps({"error": "property unavailable"}))
        else:
            lines.append(json.dumps({"error": "success"}))
        return ("\n".join(lines) + "\n").encode("utf-8")


@pytest.fixture
def socket_dir():
    """
    Short temporary directory for Unix sockets.

    pytest's tmp_path can exceed the ~104 byte sun_path limit.
    """
    path = Path(tempfile.mkdtemp(prefix="ss-"))
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def mpv_server(socket_dir):
    """Running FakeMpvServer bound in socket_dir."""
    server = FakeMpvServer(str(socket_dir / "mpv.sock")).start()
    yield server
    server.close()


@pytest.fixture
def config(socket_dir):
    """Fast-polling config pointed at socket_dir/mpv.sock."""
    return Config(
        stream_url="http://stream.soundstorm-radio.com:8000",
        ipc_path=str(socket_dir / "mpv.sock"),
        poll_interval=0.05,
        startup_attempts=2,
        ipc_timeout=1.0,
    )
