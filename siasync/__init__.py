"""siasync - keep a local folder synchronized to a Sia node."""

from .api import SiaClient
from .exceptions import (
    SiaAPIError,
    SiaAuthenticationError,
    SiaContractError,
    SiaInvalidResponseError,
    SiaNetworkError,
    SiaNotFoundError,
    SiaSyncError,
    SiaWatchError,
)
from .sync import SiaFolder

__version__ = "0.1.0"

__all__ = [
    "SiaClient",
    "SiaFolder",
    "SiaSyncError",
    "SiaAPIError",
    "SiaAuthenticationError",
    "SiaContractError",
    "SiaInvalidResponseError",
    "SiaNetworkError",
    "SiaNotFoundError",
    "SiaWatchError",
]
