"""
Retrieval of the raw listings document for an event.
"""
import logging
from typing import Any, Optional

import httpx

from .exceptions import TransportError
from .models import FetcherConfig

logger = logging.getLogger(__name__)


class ListingsFetcher:
    """Fetches the listings JSON for one event from the resale platform."""

    def __init__(self, event_id: str, config: FetcherConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize with the event to fetch and fetcher configuration."""
        self.event_id = event_id
        self.config = config
        self.url = config.listings_url.format(event_id=event_id)
        self._transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Async context manager entry."""
        self.client = self._create_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.config.timeout,
            headers={
                "User-Agent": self.config.user_agent,
                "Accept": "application/json",
            },
            transport=self._transport,
        )

    async def close(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.client = None

    async def fetch(self) -> Any:
        """Fetch and decode the listings document.

        Returns:
            The decoded JSON body.

        Raises:
            TransportError: If the request fails, the server answers with an
                error status or the body is not JSON.
        """
        if self.client is not None:
            return await self._fetch(self.client)
        async with self._create_client() as client:
            return await self._fetch(client)

    async def _fetch(self, client: httpx.AsyncClient) -> Any:
        logger.debug(f"GET {self.url}")
        try:
            response = await client.get(self.url, params=self.config.params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"Listings request failed with status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Listings request failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise TransportError("Listings response is not valid JSON") from e
