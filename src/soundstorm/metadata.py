"""Now-playing title extraction from mpv properties."""

import json
import logging

from .errors import IPCError
from .ipc import MpvIPC


logger = logging.getLogger("soundstorm.metadata")

# Keys tried in order on the metadata map; artist/title pairing comes after these
STREAM_TITLE_KEYS = ("icy-title", "stream-title")


def is_placeholder(title: str, marker: str) -> bool:
    """Check if a title is the station's own URL rather than a track."""
    return bool(marker) and marker in title


def usable_title(title: str | None, marker: str) -> str | None:
    """
    Filter out empty and placeholder titles.

    Args:
        title: Raw media-title value
        marker: Station marker (see Config.station_marker)

    Returns:
        str | None: The title, or None if it is not worth showing
    """
    if not title or not title.strip():
        return None
    if is_placeholder(title, marker):
        return None
    return title


def title_from_metadata(meta: dict) -> str | None:
    """
    Pick a display title out of a stream metadata map.

    Tries icy-title, then stream-title, then "artist - title", then title.

    Args:
        meta: Decoded value of mpv's ``metadata`` property

    Returns:
        str | None: Display title, or None if no known field is present
    """
    for key in STREAM_TITLE_KEYS:
        value = meta.get(key)
        if isinstance(value, str):
            return value

    title = meta.get("title")
    artist = meta.get("artist")
    if isinstance(title, str) and isinstance(artist, str):
        return f"{artist} - {title}"
    if isinstance(title, str):
        return title

    return None


# Stands in for the decoded value when the metadata text is not JSON
_INVALID = object()


def _read_metadata(ipc: MpvIPC) -> tuple[str | None, object]:
    """Return the raw metadata text and its decoded value."""
    raw = ipc.get_property("metadata")
    if not raw:
        return None, _INVALID
    try:
        return raw, json.loads(raw)
    except json.JSONDecodeError:
        return raw, _INVALID


def resolve_title(ipc: MpvIPC, marker: str) -> str | None:
    """
    Best-effort current track title.

    Errors are swallowed; the caller keeps whatever it showed last.
    """
    try:
        title = usable_title(ipc.get_property("media-title"), marker)
        if title:
            return title
        _, meta = _read_metadata(ipc)
    except IPCError as e:
        logger.debug(f"Title lookup failed: {e}")
        return None

    if not isinstance(meta, dict):
        return None
    return title_from_metadata(meta)


def describe(ipc: MpvIPC, marker: str) -> str:
    """
    Build the status line shown for the ``status`` command.

    Args:
        ipc: Control socket client
        marker: Station marker

    Returns:
        str: Human-readable now-playing line
    """
    try:
        title = usable_title(ipc.get_property("media-title"), marker)
    except IPCError as e:
        logger.debug(f"media-title lookup failed: {e}")
        title = None

    if title:
        return f"Now playing: {title}"

    try:
        raw, meta = _read_metadata(ipc)
    except IPCError as e:
        logger.debug(f"metadata lookup failed: {e}")
        return "No song info available."

    if raw is None:
        return "No song info available."
    if meta is _INVALID:
        return "No song metadata found."

    if isinstance(meta, dict):
        title = title_from_metadata(meta)
        if title is not None:
            return f"Now playing: {title}"
    return f"No song metadata found. Raw metadata: {json.dumps(meta, indent=2)}"
