"""Network collaborator.

The drive only needs one operation from the network: an asynchronous GET
against a fixed host that reports back through a callback. ``Network`` is
that contract; ``RequestsNet`` is the default implementation on top of
``requests``.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Protocol, runtime_checkable

import requests

logger = logging.getLogger(__name__)


class HttpGetType(Enum):
    PROGRESS = "progress"
    DONE = "done"
    ERROR = "error"


@dataclass
class HttpGetData:
    """Notification delivered to a GET callback.

    Attributes:
        type: PROGRESS while the body is arriving, then exactly one DONE or
            ERROR.
        url: Requested path.
        calldata: Context object passed to Network.get(), returned untouched.
        data: Response body (DONE only).
        received: Bytes received so far (PROGRESS and DONE).
        total: Expected body size if the server announced it, else 0.
        error: Failure description (ERROR only).
    """

    type: HttpGetType
    url: str
    calldata: Any = None
    data: bytes = b""
    received: int = 0
    total: int = 0
    error: str | None = None

    @property
    def size(self) -> int:
        return len(self.data)


HttpGetCallback = Callable[[HttpGetData], None]


@runtime_checkable
class Network(Protocol):
    """Minimal interface the drive needs from the network subsystem."""

    def get(self, path: str, callback: HttpGetCallback, calldata: Any = None) -> None:
        """Issue a GET for ``path`` and return immediately.

        ``callback`` receives any number of PROGRESS notifications followed by
        exactly one DONE or ERROR.
        """
        ...


class RequestsNet:
    """Network collaborator backed by a ``requests.Session``.

    Each GET runs on a worker thread, so callbacks are invoked from that
    thread, not the caller's.
    """

    CHUNK_SIZE = 64 * 1024

    def __init__(
        self,
        host: str,
        timeout: float = 30.0,
        session: requests.Session | None = None,
        max_workers: int = 4,
    ):
        self.host = host.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="drivefs-net"
        )

    def __enter__(self) -> RequestsNet:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Wait for in-flight requests, then release the session."""
        self._executor.shutdown(wait=True)
        self.session.close()

    def url_for(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return self.host + path

    def get(self, path: str, callback: HttpGetCallback, calldata: Any = None) -> None:
        future = self._executor.submit(self.fetch, path, callback, calldata)
        future.add_done_callback(_log_failure)

    def fetch(self, path: str, callback: HttpGetCallback, calldata: Any = None) -> None:
        """Perform the GET on the current thread and deliver notifications.

        Any failure, including one raised by the callback while handling a
        PROGRESS notification, ends the request with a single ERROR.
        """
        url = self.url_for(path)
        try:
            body = self._download(url, path, callback, calldata)
        except requests.RequestException as e:
            logger.warning(f"GET {url} failed: {e}")
            callback(HttpGetData(HttpGetType.ERROR, path, calldata, error=str(e)))
            return
        except Exception as e:
            logger.exception(f"GET {url} aborted")
            callback(HttpGetData(
                HttpGetType.ERROR, path, calldata, error=f"{type(e).__name__}: {e}",
            ))
            return
        logger.debug(f"GET {url} done: {len(body)} bytes")
        callback(HttpGetData(
            HttpGetType.DONE, path, calldata,
            data=body, received=len(body), total=len(body),
        ))

    def _download(
        self, url: str, path: str, callback: HttpGetCallback, calldata: Any
    ) -> bytes:
        with self.session.get(url, stream=True, timeout=self.timeout) as response:
            response.raise_for_status()
            total = content_length(response.headers)
            chunks = []
            received = 0
            for chunk in response.iter_content(chunk_size=self.CHUNK_SIZE):
                if not chunk:
                    continue
                chunks.append(chunk)
                received += len(chunk)
                callback(HttpGetData(
                    HttpGetType.PROGRESS, path, calldata,
                    received=received, total=total,
                ))
            return b"".join(chunks)


def content_length(headers: Any) -> int:
    """Announced body size, or 0 when the header is missing or malformed."""
    try:
        total = int(headers.get("Content-Length") or 0)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring malformed Content-Length: {headers.get('Content-Length')!r}")
        return 0
    return max(total, 0)


def _log_failure(future: Future) -> None:
    # a terminal callback that raises on a worker thread has nobody to report to
    e = future.exception()
    if e is not None:
        logger.error(f"GET callback raised: {type(e).__name__}: {e}")
