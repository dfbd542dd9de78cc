"""Working directory tracking.

The working directory is a slash-separated virtual path relative to the
storage root: empty at the drive root, ``<public>[/<subpath>]`` inside the
public namespace, anything else is a local subdirectory.
"""

from __future__ import annotations


class WorkingDir:
    """Mutable current directory of one drive.

    The navigator never checks that the directory exists; that surfaces when
    the directory is listed.
    """

    def __init__(self, public_dir: str, path: str = ""):
        self.public_dir = public_dir
        self._path = path

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"WorkingDir({self._path!r})"

    def get(self) -> str:
        """Current working directory, "" at the drive root."""
        return self._path

    @property
    def is_root(self) -> bool:
        return self._path == ""

    @property
    def is_public_root(self) -> bool:
        return self._path == self.public_dir

    @property
    def is_public(self) -> bool:
        """True anywhere inside the public namespace, including its root."""
        return self._path.split("/", 1)[0] == self.public_dir

    @property
    def public_subpath(self) -> str:
        """Portion of the path after ``<public>/``; "" at the public root."""
        if not self.is_public:
            raise ValueError(f"Not in the public namespace: {self._path!r}")
        return self._path[len(self.public_dir) + 1:]

    def home(self) -> None:
        self._path = ""

    def change_dir(self, name: str) -> None:
        """Descend into ``name``."""
        self._path = f"{self._path}/{name}" if self._path else name

    def dir_back(self) -> None:
        """Go up one level.

        Leaving the public namespace root goes straight home. At the root
        this does nothing.
        """
        if self.is_public_root:
            self.home()
            return
        self._path = self._path.rpartition("/")[0]
