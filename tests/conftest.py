"""Shared fixtures: a scripted network and ready-made drives."""

import pytest

from drivefs import DriveFS, HttpGetData, HttpGetType


class FakeNet:
    """Network collaborator that holds requests until a test settles them."""

    def __init__(self):
        self.requests = []

    def get(self, path, callback, calldata=None):
        self.requests.append((path, callback, calldata))

    @property
    def paths(self):
        return [path for path, _, _ in self.requests]

    def progress(self, index=-1, received=1, total=10):
        path, callback, calldata = self.requests[index]
        callback(HttpGetData(HttpGetType.PROGRESS, path, calldata,
                             received=received, total=total))

    def done(self, data, index=-1):
        path, callback, calldata = self.requests[index]
        callback(HttpGetData(HttpGetType.DONE, path, calldata,
                             data=data, received=len(data), total=len(data)))

    def fail(self, index=-1, error="connection refused"):
        path, callback, calldata = self.requests[index]
        callback(HttpGetData(HttpGetType.ERROR, path, calldata, error=error))


class Collector:
    """Records enumeration callbacks; stops after ``stop_after`` items."""

    def __init__(self, stop_after=None):
        self.items = []
        self.done_count = 0
        self.stop_after = stop_after

    def on_item(self, name, hash, id, is_dir):
        self.items.append((name, hash, id, is_dir))
        if self.stop_after is not None and len(self.items) >= self.stop_after:
            return False
        return True

    def on_done(self):
        self.done_count += 1

    @property
    def names(self):
        return [item[0] for item in self.items]


@pytest.fixture
def net():
    return FakeNet()


@pytest.fixture
def drive(tmp_path, net):
    return DriveFS(str(tmp_path), net)


@pytest.fixture
def collector():
    return Collector()
