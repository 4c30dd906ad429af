"""API client for the Sia renter module."""

from __future__ import annotations

import random
import time
from typing import Any

import httpx

from .config import config
from .exceptions import (
    SiaAPIError,
    SiaAuthenticationError,
    SiaInvalidResponseError,
    SiaNetworkError,
    SiaNotFoundError,
)
from .utils import quote_sia_path


class SiaClient:
    """Client for interacting with the renter endpoints of a siad node."""

    def __init__(
        self,
        address: str | None = None,
        password: str | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize Sia API client.

        Args:
            address: API address as host:port (uses config if not provided)
            password: Optional API password, sent with HTTP basic auth
            max_retries: Maximum number of retry attempts
            retry_delay: Initial delay between retries in seconds
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.address = address or config.api_address
        self.api_url = f"http://{self.address}"
        self.password = password
        self.max_retries = config.max_retries if max_retries is None else max_retries
        self.retry_delay = config.retry_delay if retry_delay is None else retry_delay
        self.timeout = config.timeout if timeout is None else timeout
        self._transport = transport

        self._client: httpx.Client | None = None

    def __enter__(self) -> SiaClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _get_client(self) -> httpx.Client:
        """Get or create the httpx client."""
        if self._client is None or self._client.is_closed:
            auth = httpx.BasicAuth("", self.password) if self.password else None
            self._client = httpx.Client(
                headers={"User-Agent": config.user_agent},
                auth=auth,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """Close the client and release connections."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()
            self._client = None

    def _calculate_retry_delay(self, attempt: int) -> float:
        """Calculate delay before next retry using exponential backoff.

        Args:
            attempt: Current attempt number (0-based)

        Returns:
            Delay in seconds
        """
        base_delay = self.retry_delay * (2**attempt)
        # +/- 25% jitter
        jitter = base_delay * 0.25 * (2 * random.random() - 1)
        return base_delay + jitter

    def _handle_http_error(
        self, e: httpx.HTTPStatusError, attempt: int
    ) -> tuple[Exception, bool]:
        """Map an HTTP error to a siasync exception.

        Args:
            e: The HTTP error exception
            attempt: Current attempt number

        Returns:
            Tuple of (exception to raise, should_retry)
        """
        status_code = e.response.status_code

        if status_code == 401:
            raise SiaAuthenticationError(
                "API authentication failed - check the API password"
            ) from e
        elif status_code == 404:
            raise SiaNotFoundError("Resource not found") from e

        error_msg = f"API request failed with status {status_code}"
        # siad reports failures as {"message": "..."}
        try:
            if e.response.content:
                error_data = e.response.json()
                if isinstance(error_data, dict) and error_data.get("message"):
                    error_msg = f"{error_msg}: {error_data['message']}"
        except ValueError:
            pass

        should_retry = 500 <= status_code < 600 and attempt < self.max_retries
        return (SiaAPIError(error_msg), should_retry)

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        """Make an API request with retry logic.

        Args:
            method: HTTP method
            endpoint: API endpoint path
            **kwargs: Additional arguments passed to httpx

        Returns:
            Response JSON data (empty dict for empty bodies)

        Raises:
            SiaAPIError: If the request fails after all retries
        """
        url = f"{self.api_url}/{endpoint.lstrip('/')}"
        last_exception: Exception | None = None
        client = self._get_client()

        for attempt in range(self.max_retries + 1):
            try:
                response = client.request(method, url, **kwargs)
                response.raise_for_status()

                if response.content:
                    try:
                        return response.json()
                    except ValueError as e:
                        raise SiaInvalidResponseError(
                            "Invalid JSON response from Sia node"
                        ) from e
                return {}

            except httpx.HTTPStatusError as e:
                error, should_retry = self._handle_http_error(e, attempt)
                last_exception = error
                if should_retry:
                    time.sleep(self._calculate_retry_delay(attempt))
                    continue
                raise error from e
            except SiaAPIError:
                raise
            except httpx.RequestError as e:
                error = SiaNetworkError(f"Network error: {e}")
                last_exception = error
                if attempt < self.max_retries:
                    time.sleep(self._calculate_retry_delay(attempt))
                    continue
                raise error from e

        if last_exception:
            raise last_exception
        raise SiaAPIError("Request failed after all retry attempts")

    # =========================
    # Renter operations
    # =========================

    def get_contracts(self) -> list[dict[str, Any]]:
        """Return the renter's storage contracts."""
        data = self._request("GET", "/renter/contracts")
        return data.get("contracts") or []

    def list_active_contracts(self) -> int:
        """Return the number of storage contracts the renter has formed."""
        return len(self.get_contracts())

    def get_files(self) -> list[dict[str, Any]]:
        """Return the file records known to the renter."""
        data = self._request("GET", "/renter/files")
        return data.get("files") or []

    def list_files(self) -> list[str]:
        """Return the siapaths of every file known to the renter."""
        return [f["siapath"] for f in self.get_files() if f.get("siapath")]

    def upload(self, sia_path: str, source: str) -> None:
        """Upload a local file to the given siapath.

        Args:
            sia_path: Destination path on the Sia node
            source: Absolute path of the local file; siad reads it directly
        """
        endpoint = f"/renter/upload/{quote_sia_path(sia_path)}"
        self._request("POST", endpoint, data={"source": source})

    def delete(self, sia_path: str) -> None:
        """Delete the file stored at the given siapath."""
        endpoint = f"/renter/delete/{quote_sia_path(sia_path)}"
        self._request("POST", endpoint)
