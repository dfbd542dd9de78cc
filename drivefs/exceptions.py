"""Exception types raised by drivefs."""

from __future__ import annotations


class DriveError(Exception):
    """Base class for drivefs errors."""


class ListingDecodeError(DriveError, ValueError):
    """A remote directory listing payload could not be decoded.

    Attributes:
        position: Offset into the decoded payload text where decoding
            failed, or None when unknown.
    """

    def __init__(self, message: str, position: int | None = None):
        if position is not None:
            message = f"{message} (at offset {position})"
        super().__init__(message)
        self.position = position
