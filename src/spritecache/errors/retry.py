"""Classification of httpx failures into the spritecache hierarchy."""

from __future__ import annotations

import httpx

from spritecache.errors.exceptions import FetchError

_TRANSIENT_STATUS = frozenset({408, 425, 429, 500, 502, 503, 504})


def is_transient_status(status_code: int) -> bool:
    return status_code in _TRANSIENT_STATUS


def classify_http_error(exc: Exception, url: str | None = None) -> FetchError:
    """Convert an httpx exception to a FetchError."""
    if isinstance(exc, FetchError):
        return exc
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return FetchError(
            f"HTTP {status} for {url or exc.request.url}",
            url=url,
            http_status=status,
            transient=is_transient_status(status),
            original=exc,
        )
    if isinstance(exc, httpx.TimeoutException):
        return FetchError(
            f"Timed out fetching {url}",
            url=url,
            transient=True,
            original=exc,
        )
    if isinstance(exc, (httpx.NetworkError, httpx.RemoteProtocolError)):
        return FetchError(
            f"Connection error fetching {url}: {exc}",
            url=url,
            transient=True,
            original=exc,
        )
    if isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol, UnicodeError)):
        return FetchError(f"Invalid URL: {url}", url=url, original=exc)
    return FetchError(str(exc) or type(exc).__name__, url=url, original=exc)


def is_transient(exc: BaseException) -> bool:
    """tenacity predicate: retry only failures classified as transient."""
    return isinstance(exc, FetchError) and exc.transient
