"""Directory enumeration across the local and public namespaces.

One enumeration lists the current working directory of a drive and reports
every entry through a single item callback, followed by exactly one done
callback:

- at the drive root the public namespace is announced first, as a folder;
- inside the public namespace the listing is requested from the network and
  decoded when the response arrives;
- anywhere else the local directory is scanned twice, folders then files.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from . import local
from .base import DirEntry, DoneCallback, ItemCallback, wants_stop
from .exceptions import ListingDecodeError
from .listing import decode_listing
from .net import HttpGetData, HttpGetType

if TYPE_CHECKING:
    from .drive import DriveFS

logger = logging.getLogger(__name__)


class EnumState(Enum):
    IDLE = "idle"
    DISPATCHED = "dispatched"
    LOCAL_ENUMERATING = "local"
    REMOTE_AWAITING = "remote"
    COMPLETED = "completed"


class DirEnumerator:
    """Single-use enumeration of a drive's working directory.

    Args:
        drive: Drive whose working directory is listed. The directory is
            captured when run() is called.
        on_item: ``on_item(name, hash, id, is_dir)``. Returning False stops
            the enumeration; any other value continues.
        on_done: Called exactly once when the enumeration is over, whether it
            finished, was stopped, or the remote listing failed.
    """

    def __init__(self, drive: DriveFS, on_item: ItemCallback, on_done: DoneCallback):
        self.drive = drive
        self.on_item = on_item
        self.on_done = on_done
        self.state = EnumState.IDLE
        self.request_path: str | None = None

    def run(self) -> None:
        if self.state is not EnumState.IDLE:
            raise RuntimeError(f"Enumeration already started ({self.state.value})")
        self.state = EnumState.DISPATCHED
        work = self.drive.work

        if work.is_root and not self._emit(DirEntry(work.public_dir, is_dir=True)):
            self._finish()
            return

        if work.is_public:
            self._list_remote(work.public_subpath)
        else:
            self._list_local()

    def _emit(self, entry: DirEntry) -> bool:
        """Deliver one entry; False if the consumer asked to stop."""
        return not wants_stop(self.on_item(entry.name, entry.hash, entry.id, entry.is_dir))

    def _finish(self) -> None:
        if self.state is EnumState.COMPLETED:
            return
        self.state = EnumState.COMPLETED
        self.on_done()

    def _list_local(self) -> None:
        self.state = EnumState.LOCAL_ENUMERATING
        path = self.drive.file_path("")
        local.scan_dir(path, self._emit, folders=True)
        local.scan_dir(path, self._emit, folders=False)
        self._finish()

    def _list_remote(self, subpath: str) -> None:
        self.state = EnumState.REMOTE_AWAITING
        self.request_path = self.drive.config.listing_path.format(path=subpath)
        logger.debug(f"Requesting listing {self.request_path}")
        self.drive.net.get(self.request_path, _on_listing_response, _ListingRequest(self))

    def _deliver_listing(self, payload: bytes) -> None:
        try:
            entries = decode_listing(payload)
        except ListingDecodeError as e:
            logger.warning(f"Undecodable listing for {self.request_path}: {e}")
            return
        for entry in entries:
            if not self._emit(entry):
                return


class _ListingRequest:
    """Context owned by one in-flight listing request.

    Holds the enumerator until the first terminal notification, then lets go
    of it so a duplicate DONE/ERROR cannot reach the consumer again.
    """

    def __init__(self, enumerator: DirEnumerator):
        self.enumerator: DirEnumerator | None = enumerator

    def release(self) -> DirEnumerator | None:
        enumerator, self.enumerator = self.enumerator, None
        return enumerator


def _on_listing_response(response: HttpGetData) -> None:
    if response.type is HttpGetType.PROGRESS:
        return

    enumerator = response.calldata.release()
    if enumerator is None:
        logger.debug(f"Ignoring repeated completion for {response.url}")
        return

    try:
        if response.type is HttpGetType.DONE:
            enumerator._deliver_listing(response.data)
        else:
            logger.warning(f"Listing request {response.url} failed: {response.error}")
    finally:
        enumerator._finish()
