"""Tests for httpx error classification."""

import httpx

from spritecache.errors.exceptions import FetchError
from spritecache.errors.retry import classify_http_error, is_transient, is_transient_status

URL = "https://img.example.com/1.png"


def _status_error(status_code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", URL)
    response = httpx.Response(status_code=status_code, request=request)
    return httpx.HTTPStatusError("error", request=request, response=response)


class TestClassifyHttpError:
    def test_server_error_is_transient(self):
        err = classify_http_error(_status_error(503), url=URL)
        assert err.http_status == 503
        assert err.transient is True

    def test_rate_limit_is_transient(self):
        assert classify_http_error(_status_error(429), url=URL).transient is True

    def test_not_found_is_terminal(self):
        err = classify_http_error(_status_error(404), url=URL)
        assert err.http_status == 404
        assert err.transient is False

    def test_timeout(self):
        err = classify_http_error(httpx.ReadTimeout("slow"), url=URL)
        assert err.transient is True
        assert err.url == URL

    def test_connect_error(self):
        err = classify_http_error(httpx.ConnectError("refused"), url=URL)
        assert err.transient is True

    def test_unsupported_protocol(self):
        err = classify_http_error(httpx.UnsupportedProtocol("ftp"), url="ftp://x")
        assert err.transient is False

    def test_unencodable_url(self):
        bad = "http://x/\ud800"
        exc = UnicodeEncodeError("utf-8", bad, 9, 10, "surrogates not allowed")
        err = classify_http_error(exc, url=bad)
        assert err.transient is False
        assert err.message.startswith("Invalid URL")

    def test_fetch_error_passthrough(self):
        original = FetchError("already classified")
        assert classify_http_error(original) is original

    def test_unknown_error(self):
        err = classify_http_error(RuntimeError("odd"), url=URL)
        assert isinstance(err, FetchError)
        assert err.transient is False


class TestPredicates:
    def test_is_transient(self):
        assert is_transient(FetchError(transient=True))
        assert not is_transient(FetchError(transient=False))
        assert not is_transient(ValueError())

    def test_is_transient_status(self):
        assert is_transient_status(502)
        assert not is_transient_status(403)
