"""Reconciliation engine keeping a local folder in sync with a Sia node."""

import logging
import os
from pathlib import Path
from typing import Optional

from ..exceptions import SiaAPIError, SiaSyncError, SiaWatchError
from .events import EventKind, RawEvent, SyncAction, classify_event
from .index import ChecksumIndex, checksum_file
from .operations import SyncOperations
from .remote import RemoteInventoryClient
from .scanner import DirectoryScanner
from .watcher import WatchAdapter

logger = logging.getLogger(__name__)


class ReconciliationEngine:
    """Turns directory contents and filesystem events into remote calls.

    The engine owns the checksum index and drives the watch adapter's
    subscriptions. It is not thread-safe: exactly one consumer may call
    :meth:`baseline_sync` and :meth:`process_event`.
    """

    def __init__(
        self,
        client: RemoteInventoryClient,
        root: Path,
        watcher: WatchAdapter,
        index: Optional[ChecksumIndex] = None,
        scanner: Optional[DirectoryScanner] = None,
    ):
        """Initialize the engine.

        Args:
            client: Remote inventory client
            root: Absolute path of the folder root
            watcher: Watch adapter to subscribe directories on
            index: Checksum index (a new empty one by default)
            scanner: Directory scanner used for walks
        """
        self.root = root
        self.watcher = watcher
        self.index = index if index is not None else ChecksumIndex()
        self.scanner = scanner or DirectoryScanner()
        self.operations = SyncOperations(client, root)
        self.stats = self._create_empty_stats()

    def _create_empty_stats(self) -> dict:
        return {
            "uploads": 0,
            "deletes": 0,
            "skips": 0,
            "errors": 0,
        }

    # =========================
    # Baseline sync
    # =========================

    def baseline_sync(self) -> dict:
        """Establish the initial consistent state between disk and node.

        Subscribes the root and every subdirectory, uploads each local file
        the node does not have yet and records a digest for every file.

        Returns:
            Dictionary with sync statistics

        Raises:
            SiaWatchError: If the root cannot be watched
            SiaSyncError: If the directory walk or hashing a file fails
            SiaAPIError: If the remote inventory cannot be listed
        """
        try:
            self.watcher.add(str(self.root))
        except OSError as e:
            raise SiaWatchError(f"Cannot watch {self.root}: {e}") from e

        try:
            scan = self.scanner.scan(self.root)
        except OSError as e:
            raise SiaSyncError(f"Cannot scan {self.root}: {e}") from e

        for directory in scan.directories:
            self._watch(directory)

        remote = self.operations.list_remote()
        logger.debug(
            "Found %d local file(s), %d remote file(s)", len(scan.files), len(remote)
        )

        failed: set[Path] = set()
        for local_file in scan.files:
            if local_file.sia_path in remote:
                continue
            logger.info("Uploading %s", local_file.sia_path)
            try:
                self.operations.upload_file(local_file.path)
                self.stats["uploads"] += 1
            except SiaAPIError as e:
                # Left untracked so the next write event retries the upload
                logger.error("Error uploading %s: %s", local_file.sia_path, e)
                self.stats["errors"] += 1
                failed.add(local_file.path)

        for local_file in scan.files:
            if local_file.path in failed:
                continue
            try:
                self.index.set(local_file.path, checksum_file(local_file.path))
            except OSError as e:
                raise SiaSyncError(f"Cannot checksum {local_file.path}: {e}") from e

        logger.info(
            "Baseline sync complete: %d file(s) tracked, %d uploaded",
            len(self.index),
            self.stats["uploads"],
        )
        return self.stats

    # =========================
    # Event handling
    # =========================

    def process_event(self, event: RawEvent) -> Optional[SyncAction]:
        """Handle one event, logging instead of raising per-path failures.

        Returns:
            The action performed, or None if it failed
        """
        try:
            return self.handle_event(event)
        except (OSError, SiaAPIError) as e:
            logger.error("Error handling %s of %s: %s", event.kind.value, event.path, e)
            self.stats["errors"] += 1
            return None

    def handle_event(self, event: RawEvent) -> SyncAction:
        """Classify a raw event and perform the resulting action.

        Args:
            event: Event received from the watch adapter

        Returns:
            The action that was performed

        Raises:
            OSError: If the file cannot be hashed or a directory cannot be read
            SiaAPIError: If an upload or delete call fails
        """
        path = Path(os.path.normpath(event.path))
        if path != self.root and self.root not in path.parents:
            logger.debug("Ignoring event outside of %s: %s", self.root, path)
            return SyncAction.SKIP

        if path.is_symlink() and path.is_dir():
            logger.debug("Not following symlinked directory %s", path)
            self.stats["skips"] += 1
            return SyncAction.SKIP

        # Some platforms report directory writes without the directory flag
        if not event.is_directory and path.is_dir():
            event = RawEvent(str(path), event.kind, is_directory=True)
        elif event.kind != EventKind.REMOVE and path.exists() and not path.is_file():
            # Named pipes, sockets and devices cannot be hashed or uploaded
            logger.debug("Ignoring non-regular file %s", path)
            self.stats["skips"] += 1
            return SyncAction.SKIP

        action = classify_event(event, path in self.index)

        if action == SyncAction.WATCH_DIRECTORY:
            self._watch_directory(path)
        elif action == SyncAction.UPLOAD:
            logger.info("File creation detected, uploading %s", path)
            self._upload(path)
        elif action == SyncAction.RECONCILE:
            if not self._reconcile(path):
                action = SyncAction.SKIP
        elif action == SyncAction.DELETE:
            logger.info("File removal detected, removing %s", path)
            self._delete(path)

        if action == SyncAction.SKIP:
            logger.debug("Nothing to do for %s of %s", event.kind.value, path)
            self.stats["skips"] += 1
        return action

    def _watch(self, directory: Path) -> None:
        try:
            self.watcher.add(str(directory))
        except OSError as e:
            logger.warning("Cannot watch %s: %s", directory, e)
            self.stats["errors"] += 1

    def _watch_directory(self, directory: Path) -> None:
        """Subscribe a new directory and catch up on what it already holds.

        Entries created before the subscription took effect produce no
        events, so subdirectories are subscribed and untracked files are
        uploaded here. Create events for those files that were queued anyway
        find them tracked and only rehash them.
        """
        self._watch(directory)
        scan = self.scanner.scan(directory, base_path=self.root)
        for subdirectory in scan.directories:
            self._watch(subdirectory)

        for local_file in scan.files:
            if local_file.path in self.index:
                continue
            logger.info("File found in new directory, uploading %s", local_file.path)
            try:
                self._upload(local_file.path)
            except (OSError, SiaAPIError) as e:
                # Left untracked so its create or write event retries it
                logger.error("Error uploading %s: %s", local_file.sia_path, e)
                self.stats["errors"] += 1

    def _upload(self, path: Path) -> None:
        self.operations.upload_file(path)
        self.stats["uploads"] += 1
        self.index.set(path, checksum_file(path))

    def _reconcile(self, path: Path) -> bool:
        """Re-upload a tracked file if its contents changed.

        The digest is only replaced after both the delete and the upload
        succeeded, so an interrupted re-upload is retried on the next write.

        Returns:
            True if the file was re-uploaded
        """
        checksum = checksum_file(path)
        if self.index.get(path) == checksum:
            return False

        logger.info("Change in %s detected, reuploading", path)
        self.operations.delete_remote(path)
        self.stats["deletes"] += 1
        self.operations.upload_file(path)
        self.stats["uploads"] += 1
        self.index.set(path, checksum)
        return True

    def _delete(self, path: Path) -> None:
        self.operations.delete_remote(path)
        self.stats["deletes"] += 1
        self.index.delete(path)
