"""Tests for the feed fetcher."""

import time

import httpx
import pytest

from dashlink.exceptions import FetchError, FetchErrorKind
from dashlink.ingestion.fetcher import FeedFetcher

FEED_URL = "https://calendar.example.com/feed.ics"
PROXY_VARS = ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy")


def _fetcher(handler, timeout=30.0):
    return FeedFetcher(timeout=timeout, transport=httpx.MockTransport(handler))


def test_fetch_returns_body_text():
    def handler(request):
        assert request.url == FEED_URL
        return httpx.Response(200, text="BEGIN:VCALENDAR\nSUMMARY:Café\n")

    assert _fetcher(handler).fetch(FEED_URL) == "BEGIN:VCALENDAR\nSUMMARY:Café\n"


def test_fetch_plain_http():
    def handler(request):
        return httpx.Response(200, text="ok")

    assert _fetcher(handler).fetch("http://calendar.example.com/feed.ics") == "ok"


def test_fetch_follows_redirects():
    def handler(request):
        if request.url.path == "/old.ics":
            return httpx.Response(
                301, headers={"Location": "https://calendar.example.com/new.ics"}
            )
        return httpx.Response(200, text="moved")

    assert _fetcher(handler).fetch("https://calendar.example.com/old.ics") == "moved"


def test_non_success_status_raises():
    def handler(request):
        return httpx.Response(404)

    with pytest.raises(FetchError) as exc_info:
        _fetcher(handler).fetch(FEED_URL)

    error = exc_info.value
    assert error.kind == FetchErrorKind.STATUS
    assert error.status_code == 404
    assert error.url == FEED_URL
    assert "404" in str(error)
    assert isinstance(error.__cause__, httpx.HTTPStatusError)


def test_network_failure_raises():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FetchError) as exc_info:
        _fetcher(handler).fetch(FEED_URL)

    assert exc_info.value.kind == FetchErrorKind.NETWORK
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_timeout_raises_timeout_kind():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(FetchError) as exc_info:
        _fetcher(handler).fetch(FEED_URL)

    assert exc_info.value.kind == FetchErrorKind.TIMEOUT
    assert "timed out" in str(exc_info.value)


def test_slow_body_aborted_at_deadline():
    """Test the total wait is bounded even when bytes keep trickling in."""

    def slow_body():
        yield b"BEGIN:VCALENDAR\n"
        time.sleep(0.2)
        yield b"END:VCALENDAR\n"

    def handler(request):
        return httpx.Response(200, content=slow_body())

    with pytest.raises(FetchError) as exc_info:
        _fetcher(handler, timeout=0.05).fetch(FEED_URL)

    assert exc_info.value.kind == FetchErrorKind.TIMEOUT


@pytest.mark.parametrize(
    "url", ["ftp://example.com/feed.ics", "webcal://example.com/feed.ics", "feed.ics"]
)
def test_unsupported_scheme_rejected(url):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, text="")

    with pytest.raises(FetchError) as exc_info:
        _fetcher(handler).fetch(url)

    assert exc_info.value.kind == FetchErrorKind.INVALID_URL
    assert calls == []


def test_default_timeout_is_thirty_seconds():
    assert FeedFetcher().timeout == 30.0


def test_overlong_host_label_is_invalid_url(monkeypatch):
    """Test IDNA failures from the real transport map to INVALID_URL."""
    for name in PROXY_VARS:
        monkeypatch.delenv(name, raising=False)
    url = "http://" + "a" * 64 + ".com/feed.ics"

    with pytest.raises(FetchError) as exc_info:
        FeedFetcher(timeout=2).fetch(url)

    assert exc_info.value.kind == FetchErrorKind.INVALID_URL
    assert exc_info.value.url == url


def test_transport_unicode_error_is_invalid_url():
    def handler(request):
        raise UnicodeError("label empty or too long")

    with pytest.raises(FetchError) as exc_info:
        _fetcher(handler).fetch(FEED_URL)

    assert exc_info.value.kind == FetchErrorKind.INVALID_URL


def test_slow_headers_and_body_share_one_deadline():
    """Test time spent before headers counts against the total bound."""

    def slow_body():
        time.sleep(0.3)
        yield b"BEGIN:VCALENDAR\n"

    def handler(request):
        time.sleep(0.3)
        return httpx.Response(200, content=slow_body())

    start = time.monotonic()
    with pytest.raises(FetchError) as exc_info:
        _fetcher(handler, timeout=0.4).fetch(FEED_URL)
    elapsed = time.monotonic() - start

    assert exc_info.value.kind == FetchErrorKind.TIMEOUT
    assert elapsed < 0.55


def test_stalled_headers_hit_deadline():
    def handler(request):
        time.sleep(0.5)
        return httpx.Response(200, text="late")

    start = time.monotonic()
    with pytest.raises(FetchError) as exc_info:
        _fetcher(handler, timeout=0.1).fetch(FEED_URL)

    assert exc_info.value.kind == FetchErrorKind.TIMEOUT
    assert time.monotonic() - start < 0.4
