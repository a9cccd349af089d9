"""External media player process management."""

import subprocess
from shutil import which

from .errors import PlayerError


class MpvPlayer:
    """mpv child process pointed at a stream URL."""

    def __init__(self, binary: str = "mpv"):
        self.binary = binary
        self.process: subprocess.Popen | None = None

    def start(self, url: str, ipc_path: str, volume: int | None = None) -> int:
        """
        Spawn mpv on a stream with its IPC server enabled.

        Args:
            url: Stream URL
            ipc_path: Unix socket path for ``--input-ipc-server``
            volume: Initial volume 0-100, or None for mpv's default

        Returns:
            int: Process ID

        Raises:
            PlayerError: If mpv is missing or fails to spawn
        """
        if not self.available():
            raise PlayerError(f"{self.binary} not found on PATH")

        cmd = [self.binary, url, f"--input-ipc-server={ipc_path}"]
        if volume is not None:
            cmd.append(f"--volume={volume}")

        try:
            self.process = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise PlayerError(f"Failed to start {self.binary}: {e}") from e

        return self.process.pid

    def is_running(self) -> bool:
        """Check if the child process is alive."""
        return self.process is not None and self.process.poll() is None

    def wait(self, timeout: float | None = None) -> int | None:
        """
        Wait for the child to exit, killing it if it outlives the timeout.

        Returns:
            int | None: Exit code, or None if there was no child
        """
        if self.process is None:
            return None

        proc = self.process
        self.process = None
        try:
            return proc.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            proc.kill()
            return proc.wait()

    def terminate(self) -> None:
        """Send SIGTERM to the child if it is still running."""
        if self.is_running():
            self.process.terminate()

    def available(self) -> bool:
        """Check if the player binary is available."""
        return which(self.binary) is not None

    def name(self) -> str:
        """Return player name."""
        return "mpv"
