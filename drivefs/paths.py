"""Virtual path resolution.

Virtual paths are slash-separated and relative to the storage root. These
helpers turn them into host paths that can be handed to the OS unmodified.
"""

from __future__ import annotations

import os


def normalize_root(path: str) -> str:
    """Return ``path`` with exactly the host separator appended if missing."""
    if not path.endswith(os.sep):
        path += os.sep
    return path


def to_host(path: str) -> str:
    """Convert virtual '/' separators to the host separator."""
    if os.sep != "/":
        return path.replace("/", os.sep)
    return path


def root_path(root: str, name: str) -> str:
    """Resolve ``name`` against the storage root, ignoring the working directory.

    Args:
        root: Storage root, already ending in the host separator.
        name: Virtual path relative to the root.
    """
    return to_host(root + name)


def working_path(root: str, work: str, name: str) -> str:
    """Resolve ``name`` against the working directory.

    A leading ``/`` marks ``name`` as relative to the storage root: the marker
    is stripped and the working directory is ignored.

    Args:
        root: Storage root, already ending in the host separator.
        work: Current working directory ("" at the drive root).
        name: Virtual path to resolve.
    """
    if name.startswith("/"):
        path = name[1:]
    elif work:
        path = f"{work}/{name}"
    else:
        path = name
    return root_path(root, path)


def dirname_of(path: str) -> str | None:
    """Absolute directory of ``path``, ending in the host separator.

    A directory resolves to itself, a regular file to its parent.
    Returns None if ``path`` does not exist.
    """
    full = os.path.realpath(path)
    if not os.path.exists(full):
        return None
    if os.path.isfile(full):
        full = os.path.dirname(full)
    return normalize_root(full)


def filename_of(path: str) -> str | None:
    """Name of ``path`` relative to dirname_of(path).

    Empty for directories. Returns None if ``path`` does not exist.
    """
    base = dirname_of(path)
    if base is None:
        return None
    full = os.path.realpath(path)
    return full[len(base):] if full.startswith(base) else ""
