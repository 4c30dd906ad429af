"""Lifecycle of a folder synchronized to a Sia node."""

import logging
import threading
from pathlib import Path
from typing import Optional, Union

from ..config import config
from ..exceptions import SiaContractError, SiaSyncError
from .engine import ReconciliationEngine
from .events import RawEvent, WatchError
from .remote import RemoteInventoryClient
from .watcher import WatchAdapter, WatchdogAdapter

logger = logging.getLogger(__name__)


class SiaFolder:
    """A folder that is synchronized to a Sia node.

    :meth:`start` runs the baseline sync and launches one consumer thread
    that handles filesystem events in arrival order. :meth:`close` stops the
    thread and releases the watch subscription.

    Examples:
        >>> with SiaFolder("/sync/folder", SiaClient()) as folder:
        ...     time.sleep(60)
    """

    def __init__(
        self,
        path: Union[str, Path],
        client: RemoteInventoryClient,
        watcher: Optional[WatchAdapter] = None,
        poll_interval: Optional[float] = None,
    ):
        """Initialize the folder.

        Args:
            path: Folder to synchronize; resolved to an absolute path
            client: Remote inventory client
            watcher: Watch adapter (a watchdog based one by default)
            poll_interval: Seconds between shutdown checks while idle

        Raises:
            SiaSyncError: If the path does not exist or is not a directory
        """
        try:
            self.path = Path(path).resolve(strict=True)
        except OSError as e:
            raise SiaSyncError(f"Cannot resolve folder {path}: {e}") from e
        if not self.path.is_dir():
            raise SiaSyncError(f"Folder is not a directory: {self.path}")

        self.client = client
        self.watcher = watcher if watcher is not None else WatchdogAdapter()
        self.poll_interval = (
            config.poll_interval if poll_interval is None else poll_interval
        )
        self.engine = ReconciliationEngine(client, self.path, self.watcher)

        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._closed = False

    @property
    def index(self):
        return self.engine.index

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def __enter__(self) -> "SiaFolder":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def start(self) -> None:
        """Check preconditions, run the baseline sync and start watching.

        On failure the watch subscription is released before the error
        propagates; no consumer thread is left behind.

        Raises:
            SiaContractError: If the renter has no storage contracts
            SiaSyncError: If the baseline sync fails
        """
        if self._thread is not None or self._closed:
            raise SiaSyncError("SiaFolder can only be started once")

        contracts = self.client.list_active_contracts()
        if contracts == 0:
            raise SiaContractError("you must have formed contracts to upload to Sia")
        logger.debug("Renter has %d contract(s)", contracts)

        self.watcher.start()
        try:
            self.engine.baseline_sync()
        except Exception:
            self.watcher.close()
            self._closed = True
            raise

        self._thread = threading.Thread(
            target=self._event_loop, name="siasync-events", daemon=True
        )
        self._thread.start()
        logger.info("Watching for changes to %s", self.path)

    def _event_loop(self) -> None:
        """Consume watch events until the stop signal is set."""
        while not self._stop.is_set():
            item = self.watcher.get(timeout=self.poll_interval)
            if item is None or self._stop.is_set():
                continue
            if isinstance(item, WatchError):
                logger.warning("Filesystem watcher error: %s", item.message)
            elif isinstance(item, RawEvent):
                self.engine.process_event(item)
        logger.debug("Event loop stopped")

    def close(self) -> None:
        """Stop the event loop and release the watch subscription.

        The consumer thread has terminated when this returns. An in-flight
        event is completed first. Calling close again is a no-op.
        """
        if self._closed:
            logger.debug("SiaFolder already closed")
            return
        self._closed = True

        self._stop.set()
        if self._thread is not None:
            self._thread.join()
        self.watcher.close()
        self.engine.index.clear()
        logger.debug("Closed %s", self.path)
