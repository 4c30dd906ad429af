"""Capability interface of the remote storage node."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class RemoteInventoryClient(Protocol):
    """Operations the sync engine needs from the Sia node.

    :class:`siasync.api.SiaClient` is the production implementation. All
    methods raise :class:`siasync.exceptions.SiaAPIError` on failure. Upload
    and delete are idempotent from the engine's point of view: deleting a
    missing path fails like any other request and is safe to retry.
    """

    def list_files(self) -> list[str]:
        """Return the siapaths currently stored on the node."""
        ...

    def upload(self, sia_path: str, source: str) -> None:
        """Upload the local file ``source`` to ``sia_path``."""
        ...

    def delete(self, sia_path: str) -> None:
        """Delete the file stored at ``sia_path``."""
        ...

    def list_active_contracts(self) -> int:
        """Return the number of storage contracts the renter holds."""
        ...
