"""Drive: a single rooted filesystem stitching local and public namespaces.

Local paths live under the storage root on disk. The reserved public
namespace is never on disk; listing it goes to the network and its files
are fetched by content hash through the artifact cache.
"""

from __future__ import annotations

import logging
from pathlib import Path

from . import local
from .base import DoneCallback, IsDirCallback, ItemCallback, LoadCallback
from .cache import ArtifactCache
from .config import DriveConfig, connect_drive
from .enumerator import DirEnumerator
from .navigator import WorkingDir
from .net import Network, RequestsNet
from .paths import normalize_root, root_path, working_path

logger = logging.getLogger(__name__)


class DriveFS:
    """Filesystem handle for one application.

    Holds the storage root, the working directory and the network
    collaborator. Holds no open file handles; every write reaches the disk
    before the call returns. Independent instances do not share state.
    """

    def __init__(self, root: str, net: Network, config: DriveConfig | None = None):
        """Initialize the drive.

        Args:
            root: Host directory holding the drive. Created if missing.
            net: Network collaborator for the public namespace.
            config: Optional settings; ``config.root`` is ignored in favour
                of ``root``.

        Raises:
            ValueError: If root exists but is not a directory.
        """
        root_dir = Path(root)
        if root_dir.exists() and not root_dir.is_dir():
            raise ValueError(f"Root must be a directory: {root}")
        root_dir.mkdir(parents=True, exist_ok=True)

        self.config = config if config is not None else connect_drive(root)
        self.root = normalize_root(str(root))
        self.net = net
        self._owns_net = False
        self.work = WorkingDir(self.config.public_dir)
        self.cache = ArtifactCache(self)
        logger.debug(f"Drive ready at {self.root} (public namespace {self.config.public_dir!r})")

    @classmethod
    def from_config(cls, config: DriveConfig, net: Network | None = None) -> DriveFS:
        """Create a drive from a DriveConfig.

        Without ``net`` a RequestsNet talking to ``config.host`` is created
        and owned by the drive; ``close()`` or leaving a ``with`` block
        shuts it down.
        """
        if net is not None:
            return cls(config.root, net, config)
        own_net = RequestsNet(config.host, timeout=config.timeout)
        try:
            drive = cls(config.root, own_net, config)
        except Exception:
            own_net.close()
            raise
        drive._owns_net = True
        return drive

    def __enter__(self) -> DriveFS:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the network collaborator if this drive created it.

        A collaborator passed in by the caller stays open; its owner closes it.
        """
        if self._owns_net:
            self._owns_net = False
            self.net.close()

    def __repr__(self) -> str:
        return f"DriveFS(root={self.root!r}, dir={self.work.get()!r})"

    # -------------------------------------------------------------------------
    # Paths
    # -------------------------------------------------------------------------

    def root_path(self, name: str) -> str:
        """Host path of ``name`` relative to the storage root."""
        return root_path(self.root, name)

    def file_path(self, name: str) -> str:
        """Host path of ``name`` relative to the working directory.

        A leading "/" resolves from the storage root instead.
        """
        return working_path(self.root, self.work.get(), name)

    def working_folder(self) -> str:
        """Host directory to show for the working directory.

        Inside the public namespace, which has no local counterpart, this is
        the storage root.
        """
        if self.work.is_public:
            return self.root
        return self.file_path("")

    # -------------------------------------------------------------------------
    # Working Directory
    # -------------------------------------------------------------------------

    def home(self) -> None:
        self.work.home()

    def change_dir(self, name: str) -> None:
        self.work.change_dir(name)

    def dir_back(self) -> None:
        self.work.dir_back()

    def get_dir(self) -> str:
        return self.work.get()

    def is_in_public_dir(self) -> bool:
        return self.work.is_public

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    def enum_files_async(self, on_item: ItemCallback, on_done: DoneCallback) -> DirEnumerator:
        """List the working directory.

        Local directories are listed before this returns; the public namespace
        is listed when the network answers. See DirEnumerator.
        """
        enumerator = DirEnumerator(self, on_item, on_done)
        enumerator.run()
        return enumerator

    def is_dir(self, name: str) -> bool:
        """Check whether ``name`` is a directory, without using the network.

        Hidden (dot-prefixed) names are never directories. At the drive root
        the public namespace always is.
        """
        if name.startswith("."):
            return False
        if self.work.is_root and name == self.work.public_dir:
            return True
        return local.is_dir(self.file_path(name))

    def is_dir_async(self, name: str, callback: IsDirCallback) -> None:
        """Check whether ``name`` is a directory, asking the network if needed.

        At the public namespace root the folder list is fetched and searched
        for ``name``; elsewhere ``callback`` is called before this returns.
        """
        if not self.work.is_public_root:
            callback(self.is_dir(name))
            return

        found = False

        def on_item(item_name, hash, id, is_dir):
            nonlocal found
            if is_dir and item_name == name:
                found = True
                return False
            return True

        def on_done():
            callback(found)

        self.enum_files_async(on_item, on_done)

    # -------------------------------------------------------------------------
    # Files
    # -------------------------------------------------------------------------

    def load_file(self, name: str) -> bytes | None:
        """Read ``name`` relative to the working directory.

        Files of the public namespace have no local copy: use
        load_file_by_hash_async() for those.
        """
        if self.work.is_public and not name.startswith("/"):
            return None
        return local.read_file(self.file_path(name))

    def load_root_file(self, name: str) -> bytes | None:
        return local.read_file(self.root_path(name))

    def save_file(self, name: str, data: bytes, overwrite: bool = False) -> bool:
        """Write ``name`` relative to the working directory.

        Returns False without writing if the file exists and ``overwrite`` is
        False, or if the write fails.
        """
        return local.save_file(self.file_path(name), data, overwrite)

    def save_root_file(self, name: str, data: bytes, overwrite: bool = False) -> bool:
        return local.save_file(self.root_path(name), data, overwrite)

    def delete_file(self, name: str) -> bool:
        return local.delete_file(self.file_path(name))

    def delete_dir(self, name: str) -> bool:
        return local.delete_dir(self.file_path(name))

    def make_dir(self, name: str) -> None:
        local.make_dir(self.file_path(name))

    def exists_file(self, name: str) -> bool:
        return local.exists(self.file_path(name))

    def modified_time(self, name: str) -> int:
        return local.modified_time(self.file_path(name))

    def load_file_by_hash_async(self, hash: str, callback: LoadCallback) -> None:
        """Deliver the artifact with content hash ``hash``. See ArtifactCache.load."""
        self.cache.load(hash, callback)
