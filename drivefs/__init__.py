"""drivefs: a rooted drive stitching a local directory and a remote public namespace."""

from .base import DirEntry
from .cache import ArtifactCache
from .config import DriveConfig, connect_drive
from .drive import DriveFS
from .enumerator import DirEnumerator, EnumState
from .exceptions import DriveError, ListingDecodeError
from .listing import decode_listing, parse_listing
from .navigator import WorkingDir
from .net import HttpGetData, HttpGetType, Network, RequestsNet

__all__ = [
    "ArtifactCache",
    "connect_drive",
    "decode_listing",
    "DirEntry",
    "DirEnumerator",
    "DriveConfig",
    "DriveError",
    "DriveFS",
    "EnumState",
    "HttpGetData",
    "HttpGetType",
    "ListingDecodeError",
    "Network",
    "parse_listing",
    "RequestsNet",
    "WorkingDir",
]
