"""Directory walking for the baseline sync."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..utils import format_size, to_sia_path

logger = logging.getLogger(__name__)


@dataclass
class LocalFile:
    """Represents a local file with metadata."""

    path: Path
    """Absolute path to the file"""

    sia_path: str
    """Path relative to the folder root, using forward slashes"""

    size: int
    """File size in bytes"""

    mtime: float
    """Last modification time (Unix timestamp)"""

    @classmethod
    def from_path(cls, file_path: Path, base_path: Path) -> "LocalFile":
        """Create LocalFile from a path.

        Args:
            file_path: Absolute path to the file
            base_path: Folder root used to compute the siapath

        Returns:
            LocalFile instance
        """
        stat = file_path.stat()
        return cls(
            path=file_path,
            sia_path=to_sia_path(base_path, file_path),
            size=stat.st_size,
            mtime=stat.st_mtime,
        )


@dataclass
class ScanResult:
    """Directories and regular files found below a folder root."""

    directories: list[Path] = field(default_factory=list)
    files: list[LocalFile] = field(default_factory=list)

    @property
    def total_size(self) -> int:
        return sum(f.size for f in self.files)


class DirectoryScanner:
    """Recursively walks a directory tree.

    Unlike a best-effort listing, any error while reading a directory or
    stat-ing a file propagates to the caller: a partial walk would leave
    files untracked.

    Examples:
        >>> scanner = DirectoryScanner()
        >>> result = scanner.scan(Path("/sync/folder"))
        >>> [f.sia_path for f in result.files]
        ['a.txt', 'sub/b.txt']
    """

    def scan(self, directory: Path, base_path: Optional[Path] = None) -> ScanResult:
        """Walk ``directory`` and collect every subdirectory and regular file.

        ``directory`` itself is not part of ``directories``. Symlinked
        directories are not descended into.

        Args:
            directory: Absolute path of the directory to walk
            base_path: Folder root siapaths are relative to (defaults to
                ``directory``)

        Returns:
            ScanResult with directories in walk order and files

        Raises:
            OSError: If a directory cannot be listed or a file cannot be stat-ed
        """
        result = ScanResult()
        self._scan_directory(directory, base_path or directory, result)
        logger.debug(
            "Scanned %s: %d director(ies), %d file(s), %s",
            directory,
            len(result.directories),
            len(result.files),
            format_size(result.total_size),
        )
        return result

    def _scan_directory(
        self, directory: Path, base_path: Path, result: ScanResult
    ) -> None:
        for item in sorted(directory.iterdir()):
            if item.is_dir():
                if item.is_symlink():
                    logger.debug("Not following symlinked directory %s", item)
                    continue
                result.directories.append(item)
                self._scan_directory(item, base_path, result)
            elif item.is_file():
                result.files.append(LocalFile.from_path(item, base_path))
