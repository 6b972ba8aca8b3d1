"""
Library entry point: look up a term and get parsed entries back.
"""

from typing import Optional
import logging

from ..config import Settings
from ..models import SearchResult
from ..parsing import EntryParser
from ..search import SearchCache, PageFetcher
from ..utils import (
    EntryNotFoundError,
    FetchFailedError,
    KBBIError,
    LookupLogger,
    RateLimiter,
)
from .session import KBBISession

logger = logging.getLogger(__name__)


class KBBIDictionary:
    """
    Coordinates fetching and parsing for single-term lookups.

    Pipeline:
    1. Fetch the page (cache first, then network with retry)
    2. Parse it, gating member-only fields on the session state
    3. Attach the canonical entry link
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        session: Optional[KBBISession] = None,
        fetcher: Optional[PageFetcher] = None,
        parser: Optional[EntryParser] = None,
        use_cache: bool = True
    ):
        """
        Initialize the dictionary.

        Args:
            config: Application settings
            session: Optional logged-in session
            fetcher: Optional page fetcher (built from config otherwise)
            parser: Optional entry parser
            use_cache: Whether to use the page cache
        """
        self.config = config or Settings()
        self.session = session
        self.parser = parser or EntryParser()
        self.events = LookupLogger()

        if fetcher is None:
            cache = SearchCache(
                cache_dir=self.config.resolved_cache_dir,
                ttl_days=self.config.cache_ttl_days,
                enabled=self.config.use_cache and use_cache
            )
            fetcher = PageFetcher(
                cache=cache,
                rate_limiter=RateLimiter(delay=self.config.request_delay_seconds),
                host=self.config.host,
                max_attempts=self.config.max_attempts,
                timeout=self.config.timeout_seconds
            )
        self.fetcher = fetcher

    @property
    def authenticated(self) -> bool:
        """Whether lookups are currently served to a logged-in account."""
        return self.session is not None and self.session.is_authenticated()

    def lookup(self, term: str) -> SearchResult:
        """
        Look up a term.

        Args:
            term: Word or phrase to search

        Returns:
            SearchResult with entries and canonical link

        Raises:
            EntryNotFoundError: No entry; ``result`` holds any suggestions
            KBBIError: Other terminal source errors
            FetchFailedError: Every attempt failed transiently
            ParseError: The page could not be loaded
        """
        try:
            html = self.fetcher.fetch(term, self.session)
        except EntryNotFoundError as e:
            if e.html:
                e.result = self._parse(e.html, term)
            self.events.not_found(term, len(e.result.suggestions) if e.result else 0)
            raise
        except (KBBIError, FetchFailedError) as e:
            self.events.failed(term, e)
            raise

        result = self._parse(html, term)
        self.events.found(term, len(result.entries), self.authenticated)
        return result

    def _parse(self, html: str, term: str) -> SearchResult:
        logger.debug(f"Parsing page for {term!r}, authenticated={self.authenticated}")
        result = self.parser.parse(html, self.authenticated)
        return result.with_link(term, self.config.host)

    def close(self) -> None:
        """Close the HTTP clients."""
        self.fetcher.close()
        if self.session is not None:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def lookup(
    term: str,
    session: Optional[KBBISession] = None,
    config: Optional[Settings] = None
) -> SearchResult:
    """
    Look up a single term with a throwaway dictionary.

    Args:
        term: Word or phrase to search
        session: Optional logged-in session (left open)
        config: Optional settings

    Returns:
        Parsed SearchResult
    """
    dictionary = KBBIDictionary(config=config, session=session)
    try:
        return dictionary.lookup(term)
    finally:
        dictionary.fetcher.close()
