"""Exceptions raised by siasync."""


class SiaSyncError(Exception):
    """Base exception for all siasync errors."""


class SiaAPIError(SiaSyncError):
    """Raised when a request against the Sia renter API fails."""


class SiaNetworkError(SiaAPIError):
    """Raised when the Sia node cannot be reached."""


class SiaAuthenticationError(SiaAPIError):
    """Raised when the node rejects the API password."""


class SiaNotFoundError(SiaAPIError):
    """Raised when the requested resource does not exist on the node."""


class SiaInvalidResponseError(SiaAPIError):
    """Raised when the node returns a body that is not valid JSON."""


class SiaContractError(SiaSyncError):
    """Raised when the renter has no active storage contracts."""


class SiaWatchError(SiaSyncError):
    """Raised when a directory cannot be subscribed to for change events."""
