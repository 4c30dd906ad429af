"""Path translation helpers for siasync."""

from pathlib import Path
from urllib.parse import quote

# =============================================================================
# Path translation between the local folder and the Sia node
# =============================================================================


def to_sia_path(root: Path, path: Path) -> str:
    """Translate a local path into the path used on the Sia node.

    The result is relative to ``root`` and always uses forward slashes, so the
    same file maps to the same siapath on every platform and regardless of the
    current working directory.

    Args:
        root: Absolute path of the synchronized folder
        path: Absolute path of a file below ``root``

    Returns:
        Relative siapath (e.g. ``"sub/b.txt"``)

    Raises:
        ValueError: If ``path`` is not located below ``root``

    Examples:
        >>> to_sia_path(Path("/data"), Path("/data/sub/b.txt"))
        'sub/b.txt'
    """
    return path.relative_to(root).as_posix()


def quote_sia_path(sia_path: str) -> str:
    """Percent-encode a siapath for use in a URL, keeping the separators."""
    return quote(sia_path.lstrip("/"), safe="/")


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"
