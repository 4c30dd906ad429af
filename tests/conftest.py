"""Shared fixtures for the siasync tests."""

import queue
import tempfile
import time
from pathlib import Path

import pytest

from siasync.exceptions import SiaAPIError


class FakeSiaClient:
    """In-memory remote inventory recording every call."""

    def __init__(self, files=None, contracts=50):
        self.files = set(files or [])
        self.contracts = contracts
        self.calls = []
        self.fail_uploads = set()
        self.fail_deletes = set()
        self.fail_list = False

    def list_active_contracts(self):
        self.calls.append(("contracts",))
        return self.contracts

    def list_files(self):
        self.calls.append(("list",))
        if self.fail_list:
            raise SiaAPIError("listing failed")
        return sorted(self.files)

    def upload(self, sia_path, source):
        self.calls.append(("upload", sia_path, source))
        if sia_path in self.fail_uploads:
            raise SiaAPIError(f"upload of {sia_path} failed")
        self.files.add(sia_path)

    def delete(self, sia_path):
        self.calls.append(("delete", sia_path))
        if sia_path in self.fail_deletes:
            raise SiaAPIError(f"delete of {sia_path} failed")
        self.files.discard(sia_path)

    def remote_calls(self):
        """Uploads and deletes, in order, as (kind, sia_path) tuples."""
        return [c[:2] for c in self.calls if c[0] in ("upload", "delete")]


class MemoryWatcher:
    """Watch adapter fed by the test instead of the operating system."""

    def __init__(self, fail_paths=None):
        self.watched = []
        self.fail_paths = set(fail_paths or [])
        self.started = False
        self.closed = False
        self._queue = queue.Queue()

    def start(self):
        self.started = True

    def add(self, path):
        if path in self.fail_paths:
            raise OSError(f"cannot watch {path}")
        if path not in self.watched:
            self.watched.append(path)

    def watched_paths(self):
        return set(self.watched)

    def push(self, item):
        self._queue.put(item)

    def get(self, timeout):
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def pending(self):
        return self._queue.qsize()

    def close(self):
        self.closed = True


def wait_until(predicate, timeout=5.0, interval=0.02):
    """Poll ``predicate`` until it is true or ``timeout`` expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def temp_dir():
    """Create a resolved temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def fake_client():
    return FakeSiaClient()


@pytest.fixture
def memory_watcher():
    return MemoryWatcher()
