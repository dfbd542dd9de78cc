"""Shared records and callback types.

Defines the directory entry record produced by both local and remote
enumeration, and the callback signatures consumers implement.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional


@dataclass
class DirEntry:
    """One entry produced while enumerating a directory.

    Attributes:
        name: Entry name (basename, never a path).
        hash: Content hash of a remote file; None for local entries and folders.
        id: Numeric id of a remote file; None for local entries and folders.
        is_dir: True for folders, False for files.
    """

    name: str
    hash: str | None = None
    id: int | None = None
    is_dir: bool = False


# on_item(name, hash, id, is_dir) -> False stops the enumeration
ItemCallback = Callable[[str, Optional[str], Optional[int], bool], Optional[bool]]
DoneCallback = Callable[[], None]
LoadCallback = Callable[[bytes], None]
IsDirCallback = Callable[[bool], None]


def wants_stop(result: object) -> bool:
    """Only an explicit False from an item callback stops enumeration."""
    return result is False
