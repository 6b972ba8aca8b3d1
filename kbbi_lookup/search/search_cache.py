"""
File-based cache of dictionary pages with a fixed lifetime.
"""

import json
import hashlib
import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Optional, Union
import logging

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path.home() / ".kbbi" / "cache"
DEFAULT_TTL_DAYS = 30


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SearchCache:
    """
    Cache of raw page markup, one JSON file per search term.

    Files are named after the SHA-256 of the term and hold
    ``{term, html, timestamp, expired}``. Expired entries are removed
    when they are read; ``cleanup_expired`` sweeps the rest.
    """

    def __init__(
        self,
        cache_dir: Union[str, Path] = DEFAULT_CACHE_DIR,
        ttl_days: int = DEFAULT_TTL_DAYS,
        enabled: bool = True,
        now: Callable[[], datetime] = _utc_now
    ):
        """
        Initialize the cache.

        Args:
            cache_dir: Directory to store cache files
            ttl_days: Lifetime of an entry in days
            enabled: Whether caching is enabled
            now: Clock returning an aware datetime
        """
        self.cache_dir = Path(cache_dir).expanduser()
        self.ttl = timedelta(days=ttl_days)
        self.enabled = enabled
        self._now = now

        if self.enabled:
            try:
                self.cache_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.warning(f"Cache disabled, cannot create {self.cache_dir}: {e}")
                self.enabled = False

    @staticmethod
    def cache_key(term: str) -> str:
        """
        Generate the storage key for a term.

        Args:
            term: Search term

        Returns:
            Hex-encoded SHA-256 of the UTF-8 term
        """
        return hashlib.sha256(term.encode("utf-8")).hexdigest()

    def _get_cache_path(self, term: str) -> Path:
        return self.cache_dir / f"{self.cache_key(term)}.json"

    def get(self, term: str) -> Optional[str]:
        """
        Get cached markup for a term.

        Args:
            term: Search term

        Returns:
            Cached markup or None if not found, unreadable or expired
        """
        if not self.enabled:
            return None

        cache_path = self._get_cache_path(term)

        if not cache_path.exists():
            return None

        try:
            with open(cache_path, 'r', encoding="utf-8") as f:
                entry = json.load(f)
            html = entry["html"]
            expired = self._parse_time(entry["expired"])
        except (json.JSONDecodeError, OSError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Cache read error for {term!r}: {e}")
            return None

        if self._now() > expired:
            logger.debug(f"Cache expired for term: {term!r}")
            cache_path.unlink(missing_ok=True)
            return None

        logger.debug(f"Cache hit for term: {term!r}")
        return html

    def set(self, term: str, html: str) -> bool:
        """
        Store markup for a term, replacing any existing entry.

        The file is written to a temporary name and moved into place so
        readers never see a partial entry.

        Args:
            term: Search term
            html: Raw page markup

        Returns:
            True if the entry was written
        """
        if not self.enabled:
            return False

        now = self._now()
        entry = {
            'term': term,
            'html': html,
            'timestamp': now.isoformat(),
            'expired': (now + self.ttl).isoformat(),
        }

        cache_path = self._get_cache_path(term)
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                'w',
                encoding="utf-8",
                dir=self.cache_dir,
                prefix=".tmp-",
                suffix=".json",
                delete=False
            ) as f:
                tmp_name = f.name
                json.dump(entry, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, cache_path)
            logger.debug(f"Cached page for term: {term!r}")
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Cache write error for {term!r}: {e}")
            if tmp_name:
                Path(tmp_name).unlink(missing_ok=True)
            return False

    def delete(self, term: str) -> bool:
        """
        Delete the entry for a term.

        Returns:
            True if an entry was deleted
        """
        cache_path = self._get_cache_path(term)

        if cache_path.exists():
            cache_path.unlink()
            return True
        return False

    def clear(self) -> int:
        """
        Remove every cache entry.

        Returns:
            Number of entries cleared
        """
        count = 0

        if self.cache_dir.exists():
            for cache_file in self.cache_dir.glob("*.json"):
                cache_file.unlink(missing_ok=True)
                count += 1

        logger.info(f"Cleared {count} cache entries")
        return count

    def cleanup_expired(self) -> int:
        """
        Remove expired cache entries.

        Unreadable files are left in place.

        Returns:
            Number of entries removed
        """
        count = 0
        current_time = self._now()

        if not self.cache_dir.exists():
            return count

        for cache_file in self.cache_dir.glob("*.json"):
            try:
                with open(cache_file, 'r', encoding="utf-8") as f:
                    entry = json.load(f)
                expired = self._parse_time(entry["expired"])
            except (json.JSONDecodeError, OSError, KeyError, TypeError, ValueError):
                continue

            if current_time > expired:
                cache_file.unlink(missing_ok=True)
                count += 1

        logger.info(f"Cleaned up {count} expired cache entries")
        return count

    def get_stats(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache stats
        """
        stats = {
            'enabled': self.enabled,
            'cache_dir': str(self.cache_dir),
            'entries': 0,
            'total_size_bytes': 0,
        }

        if self.cache_dir.exists():
            files = list(self.cache_dir.glob("*.json"))
            stats['entries'] = len(files)
            stats['total_size_bytes'] = sum(f.stat().st_size for f in files)

        return stats

    @staticmethod
    def _parse_time(value: str) -> datetime:
        parsed = datetime.fromisoformat(value)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
