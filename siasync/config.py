"""Default settings for siasync.

There is no configuration file and no environment lookup: every value can be
overridden through the command line or constructor arguments.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Config:
    """Defaults shared by the API client, the watcher and the CLI."""

    api_address: str = "localhost:9980"
    """Address of the siad API (host:port)"""

    user_agent: str = "Sia-Agent"
    """siad refuses requests that do not carry this user agent"""

    timeout: float = 30.0
    """Request timeout in seconds"""

    max_retries: int = 3
    """Retries for network errors and 5xx responses"""

    retry_delay: float = 1.0
    """Initial delay between retries in seconds"""

    poll_interval: float = 0.2
    """How long the consumer waits for an event before checking for shutdown"""


config = Config()
