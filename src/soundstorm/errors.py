"""Custom exception types for the Soundstorm player."""


class SoundstormError(Exception):
    """Base exception for all Soundstorm errors."""

    pass


class ConfigError(SoundstormError):
    """Raised when configuration loading, validation, or saving fails."""

    pass


class PlayerError(SoundstormError):
    """Raised when the external player cannot be found or spawned."""

    pass


class IPCError(SoundstormError):
    """Raised when talking to the player's control socket fails."""

    pass
