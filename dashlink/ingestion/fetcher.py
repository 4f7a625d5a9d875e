"""HTTP client for downloading calendar feeds."""

import concurrent.futures
import logging
import time

import httpx

from dashlink.exceptions import FetchError, FetchErrorKind

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

ALLOWED_SCHEMES = ("http", "https")

DEFAULT_HEADERS = {
    "User-Agent": "dashlink/0.1 calendar-sync",
    "Accept": "text/calendar, text/plain, */*",
}


class FeedFetcher:
    """Fetches raw calendar text with a hard upper bound on wait time.

    No retries are attempted here; callers decide what to do with a
    ``FetchError``.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize fetcher.

        Args:
            timeout: Seconds allowed for the whole request, body included
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            headers=DEFAULT_HEADERS,
            transport=self._transport,
        )

    def _download(self, client: httpx.Client, url: str, deadline: float) -> str:
        """Run the request on ``client``, mapping failures to FetchError."""
        try:
            with client:
                with client.stream("GET", url) as response:
                    response.raise_for_status()
                    chunks = []
                    for chunk in response.iter_bytes():
                        if time.monotonic() > deadline:
                            raise self._timeout_error(url)
                        chunks.append(chunk)
                    encoding = response.encoding or "utf-8"
        except httpx.TimeoutException as e:
            logger.error(f"Timeout fetching {url}: {e}")
            raise self._timeout_error(url) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"HTTP error fetching {url}: {status}")
            raise FetchError(
                f"HTTP {status}: {e.response.reason_phrase}",
                kind=FetchErrorKind.STATUS,
                url=url,
                status_code=status,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Network error fetching {url}: {e}")
            raise FetchError(
                f"Network error: {e}", kind=FetchErrorKind.NETWORK, url=url
            ) from e
        except (httpx.InvalidURL, ValueError) as e:
            # Hosts that fail IDNA encoding surface as UnicodeError at connect
            logger.error(f"Invalid URL {url}: {e}")
            raise FetchError(
                f"Invalid URL: {e}", kind=FetchErrorKind.INVALID_URL, url=url
            ) from e

        body = b"".join(chunks)
        logger.debug(f"Fetched {len(body)} bytes from {url}")
        return body.decode(encoding, errors="replace")

    def _timeout_error(self, url: str) -> FetchError:
        return FetchError(
            f"Request timed out after {self.timeout:g}s",
            kind=FetchErrorKind.TIMEOUT,
            url=url,
        )

    def fetch(self, url: str) -> str:
        """
        Fetch a feed and return its body as text.

        The request runs on a worker thread and the caller waits at most
        ``timeout`` seconds in total, however the time is split between
        connecting, waiting for headers and reading the body.

        Args:
            url: http(s) URL of the feed

        Returns:
            Response body decoded as text

        Raises:
            FetchError: On invalid URL, network failure, non-2xx status or timeout
        """
        try:
            scheme = httpx.URL(url).scheme
        except (httpx.InvalidURL, ValueError) as e:
            raise FetchError(
                f"Invalid URL: {url}", kind=FetchErrorKind.INVALID_URL, url=url
            ) from e
        if scheme not in ALLOWED_SCHEMES:
            raise FetchError(
                f"Unsupported URL scheme: {scheme or '(none)'}",
                kind=FetchErrorKind.INVALID_URL,
                url=url,
            )

        logger.info(f"Fetching calendar feed: {url}")
        deadline = time.monotonic() + self.timeout
        executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="dashlink-fetch"
        )
        try:
            future = executor.submit(self._download, self._client(), url, deadline)
            return future.result(timeout=self.timeout)
        except concurrent.futures.TimeoutError as e:
            # The worker stops on its own once its per-phase timeout expires
            logger.error(f"Timeout fetching {url}: deadline passed")
            raise self._timeout_error(url) from e
        finally:
            executor.shutdown(wait=False)
