"""Configuration management for the Soundstorm player."""

import dataclasses
import json
import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

from .errors import ConfigError


DEFAULT_STREAM_URL = "http://stream.soundstorm-radio.com:8000"
DEFAULT_IPC_PATH = "/tmp/mpv-soundstorm.sock"
MANIFEST_NAME = "pyproject.toml"


@dataclass(frozen=True)
class Config:
    """Immutable configuration for the Soundstorm player."""

    stream_url: str
    ipc_path: str
    poll_interval: float
    startup_attempts: int
    ipc_timeout: float
    volume: int | None = None

    def validate(self) -> tuple[bool, str | None]:
        """
        Validate configuration values.

        Returns:
            tuple[bool, str | None]: (is_valid, error_message)
        """
        if not isinstance(self.stream_url, str) or not self.stream_url.strip():
            return False, "stream_url must be a non-empty string"

        if not isinstance(self.ipc_path, str) or not self.ipc_path.strip():
            return False, "ipc_path must be a non-empty string"

        if not _is_number(self.poll_interval) or self.poll_interval <= 0:
            return False, "poll_interval must be a positive number"

        if not isinstance(self.startup_attempts, int) or isinstance(self.startup_attempts, bool) \
                or self.startup_attempts < 0:
            return False, "startup_attempts must be a non-negative integer"

        if not _is_number(self.ipc_timeout) or self.ipc_timeout <= 0:
            return False, "ipc_timeout must be a positive number"

        if self.volume is not None and (
            not isinstance(self.volume, int) or isinstance(self.volume, bool)
            or not (0 <= self.volume <= 100)
        ):
            return False, "volume must be an integer between 0 and 100"

        return True, None

    @property
    def station_marker(self) -> str:
        """
        Substring identifying the station's own placeholder title.

        mpv reports the stream URL as media-title until ICY metadata
        arrives, so any title containing the host is not a track name.
        """
        host = urlparse(self.stream_url).hostname or self.stream_url
        if host.startswith("stream."):
            host = host[len("stream."):]
        return host

    def with_overrides(self, **changes) -> "Config":
        """Return a copy with every non-None keyword applied."""
        changes = {k: v for k, v in changes.items() if v is not None}
        if not changes:
            return self
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)


DEFAULT_CONFIG = Config(
    stream_url=DEFAULT_STREAM_URL,
    ipc_path=DEFAULT_IPC_PATH,
    poll_interval=2.0,
    startup_attempts=5,
    ipc_timeout=1.0,
)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def default_config_path() -> Path:
    """Return $SOUNDSTORM_CONFIG, or ~/.soundstorm.json."""
    env_path = os.environ.get("SOUNDSTORM_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / ".soundstorm.json"


def stream_url_from_manifest(manifest_path: Path | None = None) -> str | None:
    """
    Read the stream URL from a project manifest.

    Looks for ``[tool.soundstorm] stream_url`` in pyproject.toml.

    Args:
        manifest_path: Manifest to read. Defaults to ./pyproject.toml

    Returns:
        str | None: Stream URL, or None if the manifest or key is missing
    """
    if manifest_path is None:
        manifest_path = Path.cwd() / MANIFEST_NAME

    try:
        with open(manifest_path, "rb") as f:
            manifest = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    url = manifest.get("tool", {}).get("soundstorm", {}).get("stream_url")
    if isinstance(url, str) and url.strip():
        return url
    return None


def read_config_file(config_path: Path) -> dict:
    """
    Read the raw values stored in a config file.

    Returns:
        dict: Stored values (empty dict if the file doesn't exist)

    Raises:
        ConfigError: If the file exists but isn't a JSON object
    """
    if not config_path.exists():
        return {}

    try:
        with open(config_path, "r") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise ConfigError(f"Failed to load config from {config_path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid configuration in {config_path}: expected a JSON object")

    return data


def load_config(
    config_path: Path | None = None,
    manifest_path: Path | None = None,
    logger: logging.Logger | None = None,
) -> Config:
    """
    Load configuration from file, falling back to defaults.

    A missing config file is not an error. The stream URL comes from the
    config file, then the manifest, then the built-in default.

    Args:
        config_path: Path to config file. Defaults to ~/.soundstorm.json
        manifest_path: Manifest consulted for stream_url. Defaults to ./pyproject.toml
        logger: Optional logger instance

    Returns:
        Config: Loaded configuration

    Raises:
        ConfigError: If config file exists but is invalid
    """
    if config_path is None:
        config_path = default_config_path()
    if logger is None:
        logger = logging.getLogger("soundstorm")

    data = read_config_file(config_path)

    stream_url = data.get("stream_url") or stream_url_from_manifest(manifest_path)
    if not stream_url:
        logger.warning("Stream URL not found in config, using default.")
        stream_url = DEFAULT_CONFIG.stream_url

    config = Config(
        stream_url=stream_url,
        ipc_path=data.get("ipc_path", DEFAULT_CONFIG.ipc_path),
        poll_interval=data.get("poll_interval", DEFAULT_CONFIG.poll_interval),
        startup_attempts=data.get("startup_attempts", DEFAULT_CONFIG.startup_attempts),
        ipc_timeout=data.get("ipc_timeout", DEFAULT_CONFIG.ipc_timeout),
        volume=data.get("volume", DEFAULT_CONFIG.volume),
    )

    is_valid, error = config.validate()
    if not is_valid:
        raise ConfigError(f"Invalid configuration in {config_path}: {error}")

    return config


def save_config(
    config: Config,
    config_path: Path | None = None,
    include_stream_url: bool = True,
) -> None:
    """
    Save configuration to file.

    Args:
        config: Config object to save
        config_path: Path to config file. Defaults to ~/.soundstorm.json
        include_stream_url: Write stream_url too. Leave it out to keep the
            manifest fallback in effect.

    Raises:
        ConfigError: If save fails
    """
    if config_path is None:
        config_path = default_config_path()

    is_valid, error = config.validate()
    if not is_valid:
        raise ConfigError(f"Cannot save invalid configuration: {error}")

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            data = config.to_dict()
            if not include_stream_url:
                del data["stream_url"]
            json.dump(data, f, indent=2)
    except OSError as e:
        raise ConfigError(f"Failed to save config to {config_path}: {e}")
