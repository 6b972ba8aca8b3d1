"""
Dictionary page fetcher with caching, classification and retry.
"""

import httpx
import time
from typing import Callable, Optional
from urllib.parse import quote, quote_plus
from tenacity import RetryError
import logging

from ..models import DEFAULT_HOST
from ..utils import (
    TransientError,
    FetchFailedError,
    RateLimiter,
    create_retrying,
    error_for_kind,
)
from .error_classifier import classify
from .search_cache import SearchCache

logger = logging.getLogger(__name__)


class ConnectionCheckError(Exception):
    """The dictionary host could not be reached."""
    pass


class PageFetcher:
    """
    Fetches raw entry pages from KBBI Daring.

    A cached page is returned without touching the network. Otherwise the
    page is requested, classified, and retried with linear backoff on
    transient failures; classified source errors other than the generic
    error page end the lookup immediately.
    """

    # Browser-like headers; the source rejects obvious bots
    HEADERS = {
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/120.0.0.0 Safari/537.36"
        ),
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
        "Accept-Language": "id-ID,id;q=0.9,en;q=0.8",
        "Accept-Encoding": "gzip, deflate",
        "Connection": "keep-alive",
        "Upgrade-Insecure-Requests": "1",
    }

    # Terms the entry route cannot serve; they go through the search form
    RESERVED_TERMS = frozenset({"nul", "bin"})
    SPECIAL_CHARACTERS = (".", "?")

    def __init__(
        self,
        cache: Optional[SearchCache] = None,
        rate_limiter: Optional[RateLimiter] = None,
        client: Optional[httpx.Client] = None,
        host: str = DEFAULT_HOST,
        max_attempts: int = 3,
        timeout: float = 30.0,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize the page fetcher.

        Args:
            cache: Optional cache instance
            rate_limiter: Optional courtesy delay before each request
            client: HTTP client for unauthenticated requests
            host: Dictionary base URL
            max_attempts: Attempts per lookup before giving up
            timeout: Request timeout in seconds for the default client
            sleep: Sleep function used for retry backoff
        """
        self.cache = cache or SearchCache(enabled=False)
        self.rate_limiter = rate_limiter or RateLimiter(delay=0.5)
        self.host = host.rstrip("/")
        self.max_attempts = max_attempts
        self._sleep = sleep

        self.client = client or httpx.Client(
            timeout=timeout,
            follow_redirects=True
        )

    def build_url(self, term: str) -> str:
        """
        Build the request URL for a term.

        Args:
            term: Search term

        Returns:
            Entry URL, or search-form URL for special terms
        """
        special = (
            any(ch in term for ch in self.SPECIAL_CHARACTERS)
            or term.lower() in self.RESERVED_TERMS
        )
        if special:
            return f"{self.host}/Cari/Hasil?frasa={quote_plus(term)}"
        return f"{self.host}/entri/{quote(term, safe='')}"

    def fetch(self, term: str, session=None) -> str:
        """
        Fetch the page markup for a term.

        Args:
            term: Search term
            session: Optional authenticated session (``KBBISession``)

        Returns:
            Raw page markup

        Raises:
            KBBIError: Terminal source error; ``html`` holds the page
            FetchFailedError: Every attempt failed transiently
        """
        cached = self.cache.get(term)
        if cached is not None:
            logger.debug(f"Serving {term!r} from cache")
            return cached

        retrying = create_retrying(
            max_attempts=self.max_attempts,
            sleep=self._sleep
        )

        try:
            html = retrying(self._fetch_page, term, session)
        except RetryError as e:
            last_attempt = e.last_attempt
            raise FetchFailedError(
                attempts=last_attempt.attempt_number,
                last_error=last_attempt.exception()
            ) from last_attempt.exception()

        self.cache.set(term, html)
        return html

    def _fetch_page(self, term: str, session=None) -> str:
        """
        Execute a single fetch attempt.

        Raises:
            KBBIError: The page was classified as an error
            TransientError: Unexpected HTTP status
            httpx.RequestError: Transport failure
        """
        url = self.build_url(term)
        client = session.client if session is not None else self.client

        self.rate_limiter.wait_sync()

        logger.debug(f"GET {url}")
        response = client.get(url, headers=self.HEADERS)

        if response.status_code != 200:
            raise TransientError(
                f"Server mengembalikan status code: {response.status_code}"
            )

        html = response.text

        if session is not None:
            session.update_from_html(html)

        kind = classify(str(response.url), html)
        if kind is not None:
            logger.info(f"Lookup of {term!r} classified as {kind.value}")
            raise error_for_kind(kind, html)

        return html

    def check_connection(self, timeout: float = 10.0) -> None:
        """
        Check that the dictionary host answers.

        Raises:
            ConnectionCheckError: Host unreachable or not returning 200
        """
        try:
            response = self.client.get(self.host, timeout=timeout)
        except httpx.RequestError as e:
            raise ConnectionCheckError(f"Tidak dapat terhubung ke KBBI: {e}") from e

        if response.status_code != 200:
            raise ConnectionCheckError(
                f"KBBI mengembalikan status code: {response.status_code}"
            )

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
