"""Sync engine for siasync - keeps a local folder mirrored on a Sia node."""

from .engine import ReconciliationEngine
from .events import EventKind, RawEvent, SyncAction, WatchError, classify_event
from .folder import SiaFolder
from .index import ChecksumIndex, checksum_file
from .operations import SyncOperations
from .remote import RemoteInventoryClient
from .scanner import DirectoryScanner, LocalFile, ScanResult
from .watcher import WatchAdapter, WatchdogAdapter

__all__ = [
    "SiaFolder",
    "ReconciliationEngine",
    "SyncOperations",
    "RemoteInventoryClient",
    "ChecksumIndex",
    "checksum_file",
    "DirectoryScanner",
    "LocalFile",
    "ScanResult",
    "EventKind",
    "RawEvent",
    "SyncAction",
    "WatchError",
    "classify_event",
    "WatchAdapter",
    "WatchdogAdapter",
]
