"""Content-addressed artifact cache.

Artifacts fetched from the public namespace are identified by their content
hash. The first fetch stores them under the cache directory of the drive;
from then on the cached copy is served without touching the network and is
never re-fetched or overwritten.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from . import local
from .base import LoadCallback
from .net import HttpGetData, HttpGetType

if TYPE_CHECKING:
    from .drive import DriveFS

logger = logging.getLogger(__name__)


class ArtifactCache:
    """Check-then-fetch-then-persist cache keyed by content hash.

    Concurrent misses for the same hash are not coalesced: each issues its
    own request, and the first to finish writes the cache entry.
    """

    def __init__(self, drive: DriveFS):
        self.drive = drive

    def cache_path(self, hash: str) -> str:
        """Cache entry for ``hash``, relative to the storage root."""
        _check_hash(hash)
        config = self.drive.config
        return f"{config.cache_dir}{hash}.{config.artifact_ext}"

    def host_path(self, hash: str) -> str:
        return self.drive.root_path(self.cache_path(hash))

    def contains(self, hash: str) -> bool:
        return local.exists(self.host_path(hash))

    def load(self, hash: str, callback: LoadCallback) -> None:
        """Deliver the artifact for ``hash`` to ``callback``.

        A cached artifact is delivered synchronously, before this returns.
        Otherwise the artifact is requested from the network; on success it
        is stored and then delivered, on failure ``callback`` is never called.
        """
        cache_path = self.cache_path(hash)
        data = local.read_file(self.drive.root_path(cache_path))
        if data is not None:
            logger.debug(f"Cache hit for {hash}")
            callback(data)
            return

        path = self.drive.config.artifact_path.format(hash=hash)
        logger.debug(f"Cache miss for {hash}, fetching {path}")
        request = _ArtifactRequest(self.drive, cache_path, callback)
        self.drive.net.get(path, _on_artifact_response, request)


class _ArtifactRequest:
    """Context owned by one in-flight artifact fetch."""

    def __init__(self, drive: DriveFS, cache_path: str, callback: LoadCallback):
        self.drive = drive
        self.cache_path = cache_path
        self.callback: LoadCallback | None = callback

    def release(self) -> LoadCallback | None:
        callback, self.callback = self.callback, None
        return callback

    def persist(self, data: bytes) -> None:
        host_path = self.drive.root_path(self.cache_path)
        local.make_dirs(self.drive.root_path(self.drive.config.cache_dir))
        if self.drive.save_root_file(self.cache_path, data, overwrite=False):
            logger.debug(f"Cached {len(data)} bytes at {host_path}")


def _on_artifact_response(response: HttpGetData) -> None:
    if response.type is HttpGetType.PROGRESS:
        return

    request = response.calldata
    callback = request.release()
    if callback is None:
        logger.debug(f"Ignoring repeated completion for {response.url}")
        return

    if response.type is HttpGetType.DONE:
        request.persist(response.data)
        callback(response.data)
    else:
        logger.warning(f"Artifact request {response.url} failed: {response.error}")


def _check_hash(hash: str) -> None:
    if not hash or "/" in hash or "\\" in hash or hash in (".", ".."):
        raise ValueError(f"Invalid content hash: {hash!r}")
