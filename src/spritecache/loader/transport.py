"""Async HTTP image transport with retry on transient failures."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from spritecache.config.defaults import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RESOURCE_TIMEOUT,
)
from spritecache.errors.exceptions import FetchError
from spritecache.errors.retry import classify_http_error, is_transient

logger = logging.getLogger(__name__)


class ImageTransport(Protocol):
    """Anything that turns a URL into raw bytes."""

    async def fetch(self, url: str) -> bytes: ...

    async def close(self) -> None: ...


class HttpImageTransport:
    """Fetches image bytes with an httpx AsyncClient."""

    def __init__(
        self,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        resource_timeout: float = DEFAULT_RESOURCE_TIMEOUT,
        max_attempts: int = DEFAULT_MAX_RETRIES,
        min_wait: float = 0.5,
        max_wait: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(resource_timeout, connect=connect_timeout),
            follow_redirects=True,
        )
        self._max_attempts = max_attempts
        self._min_wait = min_wait
        self._max_wait = max_wait

    async def fetch(self, url: str) -> bytes:
        """GET ``url`` and return the body. Raises FetchError."""
        retrying = AsyncRetrying(
            retry=retry_if_exception(is_transient),
            wait=wait_exponential(multiplier=0.5, min=self._min_wait, max=self._max_wait),
            stop=stop_after_attempt(self._max_attempts),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._fetch_once(url)
        raise FetchError(f"Max retry attempts exhausted for {url}", url=url)

    async def _fetch_once(self, url: str) -> bytes:
        logger.debug("Fetching image %s", url)
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            err = classify_http_error(e, url=url)
            if err.transient:
                logger.warning("Transient error fetching %s: %s", url, err.message)
            raise err from e
        except (httpx.InvalidURL, ValueError) as e:
            # Unencodable or malformed keys never reach the network
            raise classify_http_error(e, url=url) from e
        return response.content

    async def close(self) -> None:
        await self._client.aclose()
