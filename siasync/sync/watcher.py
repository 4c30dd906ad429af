"""Filesystem watch adapter built on watchdog.

Each directory of the synchronized tree is subscribed individually and
non-recursively, so the set of watched paths is explicit and new
subdirectories must be added as they appear. Notifications are translated
into :class:`RawEvent` objects and handed to the single consumer through a
queue.
"""

import logging
import queue
import threading
from typing import Optional, Protocol, Union

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import ObservedWatch

from .events import EventKind, RawEvent, WatchError

logger = logging.getLogger(__name__)

WatchItem = Union[RawEvent, WatchError]


class WatchAdapter(Protocol):
    """Source of raw filesystem events consumed by the sync engine."""

    def start(self) -> None:
        """Begin delivering events."""
        ...

    def add(self, path: str) -> None:
        """Subscribe one directory (non-recursive).

        Raises:
            OSError: If the directory cannot be watched
        """
        ...

    def watched_paths(self) -> set[str]:
        """Return the directories currently subscribed."""
        ...

    def get(self, timeout: float) -> Optional[WatchItem]:
        """Return the next event or error, or None if none arrived in time."""
        ...

    def close(self) -> None:
        """Release the subscription. No events are delivered afterwards."""
        ...


class _QueueingEventHandler(FileSystemEventHandler):
    """Translates watchdog events into raw events on the adapter queue."""

    def __init__(self, adapter: "WatchdogAdapter"):
        super().__init__()
        self.adapter = adapter

    def dispatch(self, event: FileSystemEvent) -> None:
        # Runs on the observer thread; errors go to the consumer instead of
        # killing the emitter.
        try:
            super().dispatch(event)
        except Exception as e:
            self.adapter.report_error(f"failed to translate {event!r}: {e}")

    def on_created(self, event: FileSystemEvent) -> None:
        self.adapter.put(_raw(event.src_path, EventKind.CREATE, event.is_directory))

    def on_modified(self, event: FileSystemEvent) -> None:
        # Directory modifications only report metadata changes of the
        # directory itself; the entries below it produce their own events.
        if event.is_directory:
            return
        self.adapter.put(_raw(event.src_path, EventKind.WRITE, False))

    def on_deleted(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            self.adapter.discard(_decode(event.src_path))
        self.adapter.put(_raw(event.src_path, EventKind.REMOVE, event.is_directory))

    def on_moved(self, event: FileSystemEvent) -> None:
        # A rename is a removal of the old name followed by a creation of
        # the new one.
        if event.is_directory:
            self.adapter.discard(_decode(event.src_path))
        self.adapter.put(_raw(event.src_path, EventKind.REMOVE, event.is_directory))
        self.adapter.put(_raw(event.dest_path, EventKind.CREATE, event.is_directory))


def _decode(path: Union[str, bytes]) -> str:
    if isinstance(path, bytes):
        return path.decode()
    return path


def _raw(path: Union[str, bytes], kind: EventKind, is_directory: bool) -> RawEvent:
    return RawEvent(path=_decode(path), kind=kind, is_directory=is_directory)


class WatchdogAdapter:
    """Watch adapter backed by a watchdog :class:`Observer`.

    Examples:
        >>> adapter = WatchdogAdapter()
        >>> adapter.start()
        >>> adapter.add("/sync/folder")
        >>> item = adapter.get(timeout=0.5)
        >>> adapter.close()
    """

    def __init__(self, observer: Optional[Observer] = None):
        """Initialize the adapter.

        Args:
            observer: Optional observer instance (a new Observer by default)
        """
        self.observer = observer or Observer()
        self.handler = _QueueingEventHandler(self)
        self._queue: "queue.Queue[WatchItem]" = queue.Queue()
        self._watches: dict[str, ObservedWatch] = {}
        self._lock = threading.Lock()
        self._closed = False

    def start(self) -> None:
        self.observer.start()

    def add(self, path: str) -> None:
        # The observer holds its own lock while dispatching, and the handler
        # may call discard(); never call into the observer under self._lock.
        with self._lock:
            if self._closed:
                raise OSError(f"Watcher is closed, cannot watch {path}")
            if path in self._watches:
                return
        watch = self.observer.schedule(self.handler, path, recursive=False)
        with self._lock:
            self._watches[path] = watch
        logger.debug("Watching %s", path)

    def discard(self, path: str) -> None:
        """Drop the subscription of a directory that no longer exists."""
        with self._lock:
            watch = self._watches.pop(path, None)
            if watch is None or self._closed:
                return
        try:
            self.observer.unschedule(watch)
        except KeyError:
            # The observer already dropped the emitter of a deleted directory
            pass
        logger.debug("Stopped watching %s", path)

    def watched_paths(self) -> set[str]:
        with self._lock:
            return set(self._watches)

    def put(self, item: WatchItem) -> None:
        """Hand an event or error to the consumer."""
        self._queue.put(item)

    def report_error(self, message: str) -> None:
        self.put(WatchError(message))

    def get(self, timeout: float) -> Optional[WatchItem]:
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._watches.clear()
        if self.observer.is_alive():
            self.observer.stop()
            self.observer.join()
        logger.debug("Watcher closed")
