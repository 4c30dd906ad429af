"""Remote operations addressed by local path."""

import logging
from pathlib import Path

from ..utils import to_sia_path
from .remote import RemoteInventoryClient

logger = logging.getLogger(__name__)


class SyncOperations:
    """Translates local paths to siapaths and calls the remote node."""

    def __init__(self, client: RemoteInventoryClient, root: Path):
        """Initialize sync operations.

        Args:
            client: Remote inventory client
            root: Absolute folder root all siapaths are relative to
        """
        self.client = client
        self.root = root

    def sia_path(self, path: Path) -> str:
        """Return the siapath of a local path below the folder root."""
        return to_sia_path(self.root, path)

    def upload_file(self, path: Path) -> str:
        """Upload a local file to its siapath.

        Args:
            path: Absolute path of the local file

        Returns:
            The siapath the file was uploaded to
        """
        sia_path = self.sia_path(path)
        logger.debug("Uploading %s to %s", path, sia_path)
        self.client.upload(sia_path, str(path))
        return sia_path

    def delete_remote(self, path: Path) -> str:
        """Delete the remote copy of a local file.

        Args:
            path: Absolute path of the local file (it may no longer exist)

        Returns:
            The siapath that was deleted
        """
        sia_path = self.sia_path(path)
        logger.debug("Deleting %s", sia_path)
        self.client.delete(sia_path)
        return sia_path

    def list_remote(self) -> set[str]:
        """Return the siapaths currently stored on the node."""
        return set(self.client.list_files())
