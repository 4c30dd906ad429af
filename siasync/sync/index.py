"""Checksum index used to detect real content changes.

The index maps the absolute path of every reconciled file to the SHA-256
digest of its contents. A path present in the index means the file was on
disk and uploaded to the Sia node as of the last update.
"""

import hashlib
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

# Read files in 1 MB chunks while hashing
CHECKSUM_CHUNK_SIZE: int = 1024 * 1024


def checksum_file(path: Union[str, Path]) -> bytes:
    """Return the SHA-256 digest of a file on disk.

    Args:
        path: Path of the file to hash

    Returns:
        32-byte digest

    Raises:
        OSError: If the file cannot be opened or read
    """
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHECKSUM_CHUNK_SIZE), b""):
            h.update(chunk)
    return h.digest()


class ChecksumIndex:
    """Mapping of absolute file path to content digest.

    The index is owned by a single consumer and performs no locking.
    """

    def __init__(self) -> None:
        self._digests: dict[str, bytes] = {}

    def get(self, path: Union[str, Path]) -> Optional[bytes]:
        """Return the stored digest for ``path``, or None if untracked."""
        return self._digests.get(str(path))

    def set(self, path: Union[str, Path], digest: bytes) -> None:
        """Store the digest for ``path``."""
        self._digests[str(path)] = digest

    def delete(self, path: Union[str, Path]) -> None:
        """Forget ``path``. Forgetting an untracked path is a no-op."""
        self._digests.pop(str(path), None)

    def paths(self) -> list[str]:
        """Return every tracked path, sorted."""
        return sorted(self._digests)

    def clear(self) -> None:
        self._digests.clear()

    def __contains__(self, path: object) -> bool:
        return str(path) in self._digests

    def __len__(self) -> int:
        return len(self._digests)

    def __iter__(self) -> Iterator[str]:
        return iter(self.paths())
