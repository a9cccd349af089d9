"""Client for mpv's JSON IPC control socket."""

import json
import os
import socket

from .errors import IPCError


class MpvIPC:
    """
    One-shot client for mpv's ``--input-ipc-server`` socket.

    Every call opens its own connection, writes one newline-terminated
    JSON object, optionally reads one reply line, then closes. Callers on
    different threads therefore never share a socket.
    """

    def __init__(self, path: str, timeout: float | None = 1.0):
        self.path = path
        self.timeout = timeout

    def available(self) -> bool:
        """Check if the control socket exists."""
        return os.path.exists(self.path)

    def command(self, *args) -> None:
        """
        Send a command without waiting for the reply.

        Args:
            *args: Command name and arguments, e.g. ``"cycle", "pause"``

        Raises:
            IPCError: If the socket can't be reached or written
        """
        with self._connect() as sock:
            self._send(sock, args)

    def request(self, *args) -> dict | None:
        """
        Send a command and return the parsed reply.

        Asynchronous event lines mpv broadcasts to every client are skipped.

        Returns:
            dict | None: Reply object, or None if the reply is empty or not JSON

        Raises:
            IPCError: If the socket can't be reached, written or read
        """
        with self._connect() as sock:
            self._send(sock, args)
            try:
                with sock.makefile("rb") as reader:
                    while True:
                        line = reader.readline()
                        if not line:
                            return None
                        reply = _decode(line)
                        if reply is None:
                            return None
                        if "event" not in reply:
                            return reply
            except OSError as e:
                raise IPCError(f"Failed to read reply from {self.path}: {e}") from e

    def get_property(self, name: str) -> str | None:
        """
        Read a player property as a string.

        String values are returned as-is; anything else (numbers, maps,
        lists) is returned as its JSON text.

        Args:
            name: Property name, e.g. ``"media-title"``

        Returns:
            str | None: Property value, or None if the reply has no data

        Raises:
            IPCError: If the socket round trip fails
        """
        reply = self.request("get_property", name)
        if reply is None or "data" not in reply:
            return None

        data = reply["data"]
        if isinstance(data, str):
            return data
        return json.dumps(data)

    def _connect(self) -> socket.socket:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self.timeout)
        try:
            sock.connect(self.path)
        except OSError as e:
            sock.close()
            raise IPCError(f"Failed to connect to {self.path}: {e}") from e
        return sock

    def _send(self, sock: socket.socket, args: tuple) -> None:
        payload = json.dumps({"command": list(args)}).encode("utf-8") + b"\n"
        try:
            sock.sendall(payload)
        except OSError as e:
            raise IPCError(f"Failed to write to {self.path}: {e}") from e


def _decode(line: bytes) -> dict | None:
    try:
        reply = json.loads(line.decode("utf-8", errors="replace"))
    except json.JSONDecodeError:
        return None
    return reply if isinstance(reply, dict) else None

