"""
Shared async HTTP plumbing for the feed clients.
"""

import logging
from typing import Any, Mapping, Optional

import httpx

from .config import ClientConfig
from .exceptions import FeedConnectionError, FeedQueryError

logger = logging.getLogger(__name__)


class BaseFeedClient:
    """
    Base class for feed clients backed by a single ``httpx.AsyncClient``.

    Subclasses call ``_get_json`` and receive decoded JSON, or one of
    FeedConnectionError / FeedQueryError. Use as an async context manager or
    call ``close()`` when done.
    """

    def __init__(self, client_config: Optional[ClientConfig] = None):
        self.client_config = client_config or ClientConfig()
        self.timeout = self.client_config.timeout
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            headers={
                "User-Agent": self.client_config.user_agent,
                "Accept": "application/json",
            },
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "BaseFeedClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _get_json(
        self, url: str, params: Optional[Mapping[str, Any]] = None
    ) -> Any:
        """Make a GET request and decode the JSON body, mapping failures to feed errors."""
        logger.debug(f"GET {url} params={dict(params or {})}")

        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
            return response.json()

        except httpx.TimeoutException as e:
            raise FeedConnectionError(f"Request timeout after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404:
                raise FeedQueryError(f"Feed endpoint not found: {url}") from e
            elif status == 429:
                raise FeedConnectionError("Rate limit exceeded") from e
            elif status >= 500:
                raise FeedConnectionError(
                    f"Feed service temporarily unavailable (HTTP {status})"
                ) from e
            else:
                raise FeedQueryError(f"HTTP error {status}: {e}") from e
        except httpx.RequestError as e:
            raise FeedConnectionError(f"Network error: {e}") from e
        except ValueError as e:
            # json.JSONDecodeError is a ValueError
            raise FeedQueryError(f"Invalid JSON response: {e}") from e
