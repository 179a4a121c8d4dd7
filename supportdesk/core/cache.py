"""
Knowledge Source Cache Module

Serves the knowledge text of a domain from one of three tiers:

1. the in-memory entry, while it is younger than the TTL;
2. a live fetch, whose result replaces the entry;
3. the domain's static fallback file, which is cached as well so a failing
   live source is not retried on every call.

Only when the live fetch and the fallback file both fail does ``get`` raise
``SourceUnavailable``.

The cache is an explicit object with an injected clock, owned by the
knowledge service. Reads and writes are not locked: two concurrent misses
may both fetch and the later write wins, which is harmless because fetches
are idempotent.

Usage:
    from supportdesk.core.cache import KnowledgeSourceCache, KnowledgeSource

    cache = KnowledgeSourceCache(
        sources=[KnowledgeSource("warranty", fetch=fetcher.fetch_warranty,
                                 fallback_path=Path("data/warranty.txt"))],
        ttl_seconds=3600,
    )
    text = cache.get("warranty")
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from supportdesk.config import settings
from supportdesk.exceptions import SourceUnavailable
from supportdesk.logger import get_logger

logger = get_logger(__name__)

SOURCE_LIVE = "live"
SOURCE_FILE = "file"

PREVIEW_CHARS = 500


@dataclass
class CacheEntry:
    """
    Cached knowledge text for one domain.

    Attributes:
        data: The knowledge text
        fetched_at: Clock reading when the entry was stored
        source: "live" or "file"
    """
    data: str
    fetched_at: float
    source: str


@dataclass
class KnowledgeSource:
    """
    How to obtain a domain's knowledge text.

    Attributes:
        domain: Cache key
        fetch: Live fetch callable; raises on failure
        fallback_path: Static file read when the live fetch fails
    """
    domain: str
    fetch: Optional[Callable[[], str]] = None
    fallback_path: Optional[Path] = None


class KnowledgeSourceCache:
    """
    TTL cache over live knowledge sources with a static-file fallback.

    Example:
        cache = KnowledgeSourceCache(sources, ttl_seconds=60, clock=lambda: 0.0)
        cache.get("warranty")    # live fetch (or file fallback)
        cache.get("warranty")    # served from memory
        cache.clear("warranty")  # next get fetches again
    """

    def __init__(
        self,
        sources: Optional[Iterable[KnowledgeSource]] = None,
        ttl_seconds: Optional[float] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Args:
            sources: Knowledge sources to register
            ttl_seconds: Entry lifetime (defaults to settings)
            clock: Returns the current time in seconds (defaults to time.time)
        """
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.cache.ttl_seconds
        self._clock = clock or time.time
        self._sources: Dict[str, KnowledgeSource] = {}
        self._entries: Dict[str, CacheEntry] = {}

        for source in sources or []:
            self.register(source)

        logger.info(
            f"Initialized KnowledgeSourceCache: domains={self.domains}, ttl={self.ttl_seconds}s"
        )

    def register(self, source: KnowledgeSource) -> None:
        """Add or replace a domain's source. The cached entry is kept."""
        self._sources[source.domain] = source

    @property
    def domains(self) -> List[str]:
        return list(self._sources)

    def is_fresh(self, entry: CacheEntry) -> bool:
        """An entry is fresh while it is younger than the TTL."""
        return self._clock() - entry.fetched_at < self.ttl_seconds

    def entry(self, domain: str) -> Optional[CacheEntry]:
        """The stored entry for a domain, fresh or not."""
        return self._entries.get(domain)

    def get(self, domain: str) -> str:
        """
        Get a domain's knowledge text.

        Args:
            domain: Registered domain name

        Returns:
            The knowledge text

        Raises:
            SourceUnavailable: If the domain is unknown, or both the live
                fetch and the fallback file failed
        """
        source = self._sources.get(domain)
        if source is None:
            raise SourceUnavailable(domain, "no such knowledge source")

        now = self._clock()
        cached = self._entries.get(domain)
        if cached is not None and now - cached.fetched_at < self.ttl_seconds:
            logger.info(f"Using cached {domain} data ({cached.source})")
            return cached.data

        error: Optional[Exception] = None
        if source.fetch is not None:
            try:
                data = source.fetch()
                self._entries[domain] = CacheEntry(data=data, fetched_at=now, source=SOURCE_LIVE)
                logger.info(f"{domain.capitalize()} data cached successfully ({len(data)} chars)")
                return data
            except Exception as e:
                error = e
                logger.warning(f"Live fetch for {domain} failed: {e}")

        data = self._read_fallback(source)
        if data is not None:
            logger.info(f"Serving {domain} from fallback file {source.fallback_path}")
            self._entries[domain] = CacheEntry(data=data, fetched_at=now, source=SOURCE_FILE)
            return data

        reason = str(error) if error else "no live source and no fallback file"
        raise SourceUnavailable(domain, reason) from error

    def _read_fallback(self, source: KnowledgeSource) -> Optional[str]:
        path = source.fallback_path
        if path is None or not path.is_file():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading {source.domain} fallback file {path}: {e}")
            return None

    def clear(self, domain: Optional[str] = None) -> None:
        """
        Invalidate a domain's entry, or every entry when domain is None.

        Never fails, including for unknown domains.
        """
        if domain is None:
            self._entries.clear()
            logger.info("Knowledge cache cleared")
            return
        self._entries.pop(domain, None)
        logger.info(f"{domain.capitalize()} cache cleared")

    def describe(self, domain: str, preview_chars: int = PREVIEW_CHARS) -> Dict[str, Any]:
        """
        Diagnostics for a domain without triggering a fetch.

        Returns:
            Dictionary with provenance, freshness, age and a text preview
        """
        cached = self._entries.get(domain)
        if cached is None:
            return {
                "domain": domain,
                "source": None,
                "fresh": False,
                "fetched_at": None,
                "age_seconds": None,
                "length": 0,
                "preview": "",
            }
        return {
            "domain": domain,
            "source": cached.source,
            "fresh": self.is_fresh(cached),
            "fetched_at": cached.fetched_at,
            "age_seconds": self._clock() - cached.fetched_at,
            "length": len(cached.data),
            "preview": cached.data[:preview_chars],
        }
