"""Async catalog API client (list pages and item detail)."""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from spritecache.catalog.models import CatalogDetail, CatalogPage
from spritecache.config.defaults import (
    DEFAULT_CATALOG_BASE_URL,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_PAGE_LIMIT,
    DEFAULT_RESOURCE_TIMEOUT,
)
from spritecache.errors.exceptions import CatalogError

logger = logging.getLogger(__name__)


class CatalogClient:
    """Reads paginated item listings and per-item detail."""

    def __init__(
        self,
        base_url: str = DEFAULT_CATALOG_BASE_URL,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(DEFAULT_RESOURCE_TIMEOUT, connect=DEFAULT_CONNECT_TIMEOUT),
        )

    async def fetch_list(self, limit: int = DEFAULT_PAGE_LIMIT, offset: int = 0) -> CatalogPage:
        url = f"{self._base_url}/pokemon"
        data = await self._get_json(url, params={"limit": limit, "offset": offset})
        try:
            page = CatalogPage.model_validate(data)
        except ValidationError as e:
            raise CatalogError(f"Malformed catalog page from {url}", original=e) from e
        logger.info("Fetched %d catalog entries (offset: %d)", len(page.results), offset)
        return page

    async def fetch_detail(self, name: str) -> CatalogDetail:
        identifier = name.strip().lower()
        url = f"{self._base_url}/pokemon/{identifier}"
        data = await self._get_json(url)
        try:
            return CatalogDetail.model_validate(data)
        except ValidationError as e:
            raise CatalogError(f"Malformed catalog detail for {identifier}", original=e) from e

    async def close(self) -> None:
        await self._client.aclose()

    async def _get_json(self, url: str, params: dict | None = None) -> object:
        logger.debug("Fetching catalog %s", url)
        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as e:
            raise CatalogError(f"Network error fetching {url}: {e}", original=e) from e
        if response.status_code != 200:
            raise CatalogError(
                f"HTTP {response.status_code} from {url}", http_status=response.status_code
            )
        try:
            return response.json()
        except ValueError as e:
            raise CatalogError(f"Invalid JSON from {url}", original=e) from e
