"""
Knowledge Service Module

Single entry point for topic knowledge. Topics backed by a live source
(warranty, products) go through the knowledge source cache; the remaining
topics are read from the static corpus store on every request.

The service owns its cache, so each service instance (and each test) has
its own freshness state.
"""

from typing import Any, Callable, Dict, Optional

from supportdesk.config import settings
from supportdesk.core.cache import KnowledgeSource, KnowledgeSourceCache
from supportdesk.core.fetcher import LiveSourceFetcher
from supportdesk.exceptions import SourceUnavailable
from supportdesk.knowledge.document import KnowledgeDocument
from supportdesk.knowledge.store import CorpusStore
from supportdesk.logger import get_logger
from supportdesk.messages import msg

logger = get_logger(__name__)

WARRANTY_DOMAIN = "warranty"
PRODUCTS_DOMAIN = "products"


class KnowledgeService:
    """
    Resolves topics to knowledge documents.

    Example:
        service = KnowledgeService()
        doc = service.document("returns")       # static file, or None
        doc = service.document("warranty")      # cached live page
        service.reset("warranty")               # force a refetch
        print(service.diagnostics("warranty"))  # provenance + preview
    """

    def __init__(
        self,
        store: Optional[CorpusStore] = None,
        fetcher: Optional[LiveSourceFetcher] = None,
        cache: Optional[KnowledgeSourceCache] = None,
        ttl_seconds: Optional[float] = None,
        clock: Optional[Callable[[], float]] = None,
        live_sources: Optional[bool] = None,
    ):
        """
        Args:
            store: Static corpus store (defaults to the configured data dir)
            fetcher: Live source fetcher
            cache: Pre-built cache; when given, ttl_seconds and clock are ignored
            ttl_seconds: Cache TTL (defaults to settings)
            clock: Cache clock (defaults to time.time)
            live_sources: Fetch live pages; when false only fallback files are
                served (defaults to settings)
        """
        self.store = store or CorpusStore()
        self.fetcher = fetcher or LiveSourceFetcher()
        if live_sources is None:
            live_sources = settings.sources.enabled
        self.cache = cache or KnowledgeSourceCache(
            sources=[
                KnowledgeSource(
                    WARRANTY_DOMAIN,
                    fetch=self.fetcher.fetch_warranty if live_sources else None,
                    fallback_path=self.store.path_for(WARRANTY_DOMAIN),
                ),
                KnowledgeSource(
                    PRODUCTS_DOMAIN,
                    fetch=self.fetcher.fetch_products if live_sources else None,
                ),
            ],
            ttl_seconds=ttl_seconds,
            clock=clock,
        )

    def is_live(self, topic: str) -> bool:
        """True when the topic is served through the cache."""
        return topic in self.cache.domains

    def knowledge_text(self, topic: str) -> Optional[str]:
        """
        Raw knowledge text for a topic.

        Raises:
            SourceUnavailable: For a live topic whose sources all failed
        """
        if self.is_live(topic):
            return self.cache.get(topic)
        return self.store.read(topic)

    def document(self, topic: str) -> Optional[KnowledgeDocument]:
        """
        Knowledge document for a topic, or None when the topic has no text.

        Raises:
            SourceUnavailable: For a live topic whose sources all failed
        """
        text = self.knowledge_text(topic)
        if not text:
            return None
        return KnowledgeDocument(topic=topic, text=text)

    def reset(self, domain: Optional[str] = None) -> None:
        """Administrative reset: drop a domain's cached entry (or all)."""
        self.cache.clear(domain)

    def diagnostics(self, domain: str = WARRANTY_DOMAIN) -> Dict[str, Any]:
        """
        Provenance and a 500 character preview of a domain's cached text.

        Nothing is fetched; an empty cache reports ``source: None``.
        """
        info = self.cache.describe(domain)
        info["live"] = self.is_live(domain)
        return info

    def products_overview(self) -> str:
        """Featured products text, or a canned notice when unavailable."""
        try:
            return self.cache.get(PRODUCTS_DOMAIN)
        except SourceUnavailable as e:
            logger.error(f"Error fetching products: {e}")
            return msg("products.unavailable")
