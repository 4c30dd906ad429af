"""Raw filesystem events and their classification into sync actions."""

from dataclasses import dataclass
from enum import Enum


class EventKind(str, Enum):
    """Kinds of raw notifications produced by the watch adapter."""

    CREATE = "create"
    WRITE = "write"
    REMOVE = "remove"


@dataclass(frozen=True)
class RawEvent:
    """A single notification from the watch adapter."""

    path: str
    """Absolute path the event refers to"""

    kind: EventKind
    """What happened to the path"""

    is_directory: bool = False
    """Whether the path is a directory"""


@dataclass(frozen=True)
class WatchError:
    """A transport error reported by the watch adapter."""

    message: str


class SyncAction(str, Enum):
    """Semantic actions derived from raw events."""

    WATCH_DIRECTORY = "watch_directory"
    """Subscribe the directory; no remote call"""

    UPLOAD = "upload"
    """Upload the file and start tracking its digest"""

    RECONCILE = "reconcile"
    """Rehash a tracked file and re-upload it if its contents changed"""

    DELETE = "delete"
    """Delete the remote copy and stop tracking the file"""

    SKIP = "skip"
    """Nothing to do"""


def classify_event(event: RawEvent, tracked: bool) -> SyncAction:
    """Decide what a raw event means for the file it refers to.

    Args:
        event: Event received from the watch adapter
        tracked: Whether the path currently has a checksum index entry

    Returns:
        Action the engine must perform

    Examples:
        >>> classify_event(RawEvent("/r/a", EventKind.WRITE), tracked=False)
        <SyncAction.UPLOAD: 'upload'>
        >>> classify_event(RawEvent("/r/a", EventKind.REMOVE), tracked=False)
        <SyncAction.SKIP: 'skip'>
    """
    if event.is_directory:
        if event.kind in (EventKind.CREATE, EventKind.WRITE):
            return SyncAction.WATCH_DIRECTORY
        # A removed directory drops its own subscription; the files inside
        # it are reported individually.
        return SyncAction.SKIP

    if event.kind in (EventKind.CREATE, EventKind.WRITE):
        # A create for a tracked file arrives after its new parent directory
        # was scanned; writes to an untracked file are handled like a create.
        return SyncAction.RECONCILE if tracked else SyncAction.UPLOAD
    if event.kind == EventKind.REMOVE:
        return SyncAction.DELETE if tracked else SyncAction.SKIP
    return SyncAction.SKIP
