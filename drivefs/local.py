"""Local file operations on resolved host paths.

All operations are synchronous. OS-level failures (missing file, permission
denied, disk full, ...) are not raised: they collapse to None/False/0 and
are logged at DEBUG.
"""

from __future__ import annotations

import logging
import stat as stat_mod
from pathlib import Path
from typing import Callable

from .base import DirEntry, wants_stop

logger = logging.getLogger(__name__)


def read_file(path: str) -> bytes | None:
    """Read entire file as bytes, or None if it cannot be read."""
    try:
        return Path(path).read_bytes()
    except OSError as e:
        logger.debug(f"read_file({path!r}) failed: {e}")
        return None


def write_file(path: str, data: bytes) -> bool:
    """Create or truncate ``path`` and write ``data`` to it."""
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        logger.debug(f"write_file({path!r}) failed: {e}")
        return False
    return True


def save_file(path: str, data: bytes, overwrite: bool = False) -> bool:
    """Write ``data`` to ``path``, refusing to replace an existing file.

    Returns False without writing when ``overwrite`` is False and ``path``
    exists. The check and the write are not atomic.
    """
    if not overwrite and exists(path):
        return False
    return write_file(path, data)


def delete_file(path: str) -> bool:
    try:
        Path(path).unlink()
    except OSError as e:
        logger.debug(f"delete_file({path!r}) failed: {e}")
        return False
    return True


def delete_dir(path: str) -> bool:
    """Remove an empty directory."""
    try:
        Path(path).rmdir()
    except OSError as e:
        logger.debug(f"delete_dir({path!r}) failed: {e}")
        return False
    return True


def make_dir(path: str) -> None:
    """Create a single directory level. Failures are ignored."""
    try:
        Path(path).mkdir(mode=0o700)
    except OSError as e:
        logger.debug(f"make_dir({path!r}) failed: {e}")


def make_dirs(path: str) -> None:
    """Create a directory and any missing parents. Failures are ignored."""
    try:
        Path(path).mkdir(mode=0o700, parents=True, exist_ok=True)
    except OSError as e:
        logger.debug(f"make_dirs({path!r}) failed: {e}")


def exists(path: str) -> bool:
    try:
        Path(path).stat()
    except (OSError, ValueError):
        return False
    return True


def is_dir(path: str) -> bool:
    try:
        return Path(path).is_dir()
    except (OSError, ValueError):
        return False


def modified_time(path: str) -> int:
    """Modification time in whole seconds for regular files, else 0."""
    try:
        st = Path(path).stat()
    except (OSError, ValueError):
        return 0
    if not stat_mod.S_ISREG(st.st_mode):
        return 0
    return int(st.st_mtime)


def scan_dir(
    path: str, on_item: Callable[[DirEntry], object], folders: bool
) -> bool:
    """Report the visible folders (or regular files) of one directory.

    Entries whose name starts with "." are hidden. Entries are reported in
    host enumeration order; nothing is sorted.

    Args:
        path: Host directory to scan.
        on_item: Called once per matching entry; returning False stops.
        folders: Report directories if True, regular files if False.

    Returns:
        False if on_item stopped the scan, True otherwise (including when
        the directory cannot be opened).
    """
    try:
        entries = list(Path(path).iterdir())
    except OSError as e:
        logger.debug(f"scan_dir({path!r}) failed: {e}")
        return True

    for entry in entries:
        if entry.name.startswith("."):
            continue
        try:
            mode = entry.stat().st_mode
        except OSError:
            continue
        matches = stat_mod.S_ISDIR(mode) if folders else stat_mod.S_ISREG(mode)
        if not matches:
            continue
        if wants_stop(on_item(DirEntry(name=entry.name, is_dir=folders))):
            return False
    return True
