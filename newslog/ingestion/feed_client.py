"""Concurrent feed downloader."""

import asyncio
import logging
from typing import Dict, Mapping, Optional

import httpx

from ..config.models import DEFAULT_USER_AGENT
from ..models import FeedSource
from .models import FetchResponse

logger = logging.getLogger(__name__)


class FeedClient:
    """Fetch feed documents over HTTP, all sources at once."""

    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        max_concurrent: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize feed client.

        ``max_concurrent`` of None issues every request at once. ``transport``
        replaces the network layer (used by tests).
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.max_concurrent = max_concurrent
        self.transport = transport

    async def fetch_source(self, client: httpx.AsyncClient, source: FeedSource) -> FetchResponse:
        """Fetch a single feed. Never raises for network or HTTP failures."""
        try:
            response = await client.get(source.url)
        except httpx.TimeoutException as e:
            error = f"Request timed out: {e}" if str(e) else "Request timed out"
        except (httpx.RequestError, httpx.InvalidURL) as e:
            error = str(e) or e.__class__.__name__
        else:
            return FetchResponse(
                source_id=source.id,
                content=response.content,
                http_status=response.status_code,
            )

        logger.error("Transport error fetching %s (%s): %s", source.name, source.url, error)
        return FetchResponse(source_id=source.id, transport_error=error)

    async def fetch_all(self, sources: Mapping[str, FeedSource]) -> Dict[str, FetchResponse]:
        """Fetch all feeds concurrently, keyed by source id."""
        if not sources:
            return {}

        limit = self.max_concurrent or len(sources)
        semaphore = asyncio.Semaphore(limit)

        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={
                "User-Agent": self.user_agent,
                "Accept": "application/rss+xml, application/atom+xml, application/xml, text/xml, */*",
            },
            transport=self.transport,
        ) as client:

            async def fetch_with_semaphore(source_id: str, source: FeedSource) -> FetchResponse:
                async with semaphore:
                    response = await self.fetch_source(client, source)
                return response.model_copy(update={"source_id": source_id})

            tasks = [fetch_with_semaphore(source_id, source) for source_id, source in sources.items()]
            results = await asyncio.gather(*tasks)

        return {response.source_id: response for response in results}

    def fetch(self, sources: Mapping[str, FeedSource]) -> Dict[str, FetchResponse]:
        """Synchronous wrapper for fetch_all."""
        if not sources:
            return {}
        return asyncio.run(self.fetch_all(sources))
