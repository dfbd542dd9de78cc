"""Configuration for a drive.

Provides the DriveConfig dataclass and the connect_drive factory function
for configuring the storage root, the public namespace and the remote
service it is served from.
"""

from dataclasses import dataclass, fields

DEFAULT_PUBLIC_DIR = "tic80.com"
DEFAULT_HOST = "https://tic80.com"
DEFAULT_CACHE_DIR = ".local/cache/"
DEFAULT_ARTIFACT_EXT = "tic"
DEFAULT_LISTING_PATH = "/api?fn=dir&path={path}"
DEFAULT_ARTIFACT_PATH = "/cart/{hash}/cart.tic"


@dataclass
class DriveConfig:
    """Configuration for a drive rooted at a host directory.

    Attributes:
        root: Host directory under which all virtual paths are resolved.
        public_dir: Reserved top-level name of the remote public namespace.
            Never present on local disk.
        host: Base URL the default network collaborator sends requests to.
        cache_dir: Artifact cache directory, relative to root, with a
            trailing slash.
        artifact_ext: Extension given to cached artifacts (no dot).
        listing_path: Request path template for remote directory listings.
            Must contain ``{path}``.
        artifact_path: Request path template for remote artifacts.
            Must contain ``{hash}``.
        timeout: Request timeout in seconds for the default network
            collaborator.
    """

    root: str
    public_dir: str = DEFAULT_PUBLIC_DIR
    host: str = DEFAULT_HOST
    cache_dir: str = DEFAULT_CACHE_DIR
    artifact_ext: str = DEFAULT_ARTIFACT_EXT
    listing_path: str = DEFAULT_LISTING_PATH
    artifact_path: str = DEFAULT_ARTIFACT_PATH
    timeout: float = 30.0


def connect_drive(root: str, **kwargs) -> DriveConfig:
    """Configure a drive.

    Args:
        root: Required. Host directory holding the drive.
        **kwargs: Any other DriveConfig field.

    Returns:
        DriveConfig for DriveFS.from_config().

    Examples:
        >>> connect_drive("/data/drive")
        DriveConfig(root='/data/drive', public_dir='tic80.com', host='https://tic80.com', cache_dir='.local/cache/', artifact_ext='tic', listing_path='/api?fn=dir&path={path}', artifact_path='/cart/{hash}/cart.tic', timeout=30.0)

        >>> connect_drive("/data/drive", public_dir="play").public_dir
        'play'
    """
    if not root:
        raise ValueError("Drive requires 'root' parameter")

    known = {f.name for f in fields(DriveConfig)} - {"root"}
    unexpected = [key for key in kwargs if key not in known]
    if unexpected:
        raise ValueError(f"Unexpected arguments for drive: {unexpected}")

    config = DriveConfig(root=root, **kwargs)

    if not config.public_dir or "/" in config.public_dir:
        raise ValueError(
            f"public_dir must be a single path component: {config.public_dir!r}"
        )
    if "{path}" not in config.listing_path:
        raise ValueError("listing_path must contain a '{path}' placeholder")
    if "{hash}" not in config.artifact_path:
        raise ValueError("artifact_path must contain a '{hash}' placeholder")
    if config.cache_dir and not config.cache_dir.endswith("/"):
        config.cache_dir += "/"

    return config
