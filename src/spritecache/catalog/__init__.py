"""Catalog collaborator — yields item sprite URLs for prefetching."""

from spritecache.catalog.client import CatalogClient
from spritecache.catalog.models import CatalogDetail, CatalogEntry, CatalogPage

__all__ = ["CatalogClient", "CatalogDetail", "CatalogEntry", "CatalogPage"]
