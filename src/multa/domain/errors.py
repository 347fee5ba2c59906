"""Exception hierarchy for multa."""

from pathlib import Path


class MultaError(Exception):
    """Base class for every error raised by multa."""


class ProfileError(MultaError):
    """A stored profile could not be used."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class ProfileReadError(ProfileError):
    """The profile exists but could not be read."""


class ProfileWriteError(ProfileError):
    """The profile could not be written or moved."""


class CorruptProfileError(ProfileError):
    """The profile was read but its content is not a valid profile."""
