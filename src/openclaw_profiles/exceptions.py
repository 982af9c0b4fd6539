"""Exceptions for openclaw-profiles."""

from pathlib import Path


class ProfileError(Exception):
    """Base exception for profile switching errors."""

    pass


class ConfigFileError(ProfileError):
    """Error reading, parsing or writing a configuration document."""

    pass


class ProfileNotFoundError(ProfileError):
    """Requested profile overlay does not exist in the profile store."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        super().__init__(f"Profile '{name}' not found")


class BaseMissingError(ProfileError):
    """Base config is missing; the profile system was never initialized."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Base config not found at {path}")


class GenerationFailedError(ProfileError):
    """Merging base and overlay produced a document that is not valid JSON."""

    pass


class DependencyMissingError(ProfileError):
    """A JSON capability required at start-up is unavailable."""

    pass
