"""
Tests for the knowledge source cache and the knowledge service.
"""

import pytest
from unittest.mock import MagicMock, patch

from supportdesk.core.cache import KnowledgeSource, KnowledgeSourceCache
from supportdesk.exceptions import SourceUnavailable


def make_cache(clock, fetch=None, fallback_path=None, ttl=60):
    return KnowledgeSourceCache(
        sources=[KnowledgeSource("warranty", fetch=fetch, fallback_path=fallback_path)],
        ttl_seconds=ttl,
        clock=clock,
    )


class TestFreshness:
    """Tests for TTL behaviour."""

    def test_fresh_entry_is_reused(self, clock):
        """Test a second get within the TTL does not fetch again."""
        fetch = MagicMock(return_value="live text")
        cache = make_cache(clock, fetch=fetch)

        assert cache.get("warranty") == "live text"
        clock.advance(59)
        assert cache.get("warranty") == "live text"
        assert fetch.call_count == 1

    def test_expired_entry_is_refetched(self, clock):
        """Test an entry as old as the TTL is stale."""
        fetch = MagicMock(side_effect=["first", "second"])
        cache = make_cache(clock, fetch=fetch)

        cache.get("warranty")
        clock.advance(60)

        assert cache.get("warranty") == "second"
        assert fetch.call_count == 2

    def test_is_fresh(self, clock):
        """Test is_fresh against the injected clock."""
        cache = make_cache(clock, fetch=MagicMock(return_value="x"))
        cache.get("warranty")
        entry = cache.entry("warranty")

        assert cache.is_fresh(entry) is True
        clock.advance(120)
        assert cache.is_fresh(entry) is False


class TestFallback:
    """Tests for the static file fallback."""

    def test_fallback_file_used_and_cached(self, clock, tmp_path):
        """Test a failing fetch serves the file and caches it as 'file'."""
        path = tmp_path / "warranty.txt"
        path.write_text("file text", encoding="utf-8")
        fetch = MagicMock(side_effect=ConnectionError("down"))
        cache = make_cache(clock, fetch=fetch, fallback_path=path)

        assert cache.get("warranty") == "file text"
        assert cache.entry("warranty").source == "file"

        # Served from memory until expiry, the live source is not retried
        assert cache.get("warranty") == "file text"
        assert fetch.call_count == 1

    def test_live_replaces_file_after_expiry(self, clock, tmp_path):
        """Test a recovered live source wins once the file entry expires."""
        path = tmp_path / "warranty.txt"
        path.write_text("file text", encoding="utf-8")
        fetch = MagicMock(side_effect=[ConnectionError("down"), "live text"])
        cache = make_cache(clock, fetch=fetch, fallback_path=path)

        cache.get("warranty")
        clock.advance(60)

        assert cache.get("warranty") == "live text"
        assert cache.entry("warranty").source == "live"

    def test_both_fail(self, clock, tmp_path):
        """Test SourceUnavailable when fetch and file both fail."""
        fetch = MagicMock(side_effect=ConnectionError("down"))
        cache = make_cache(clock, fetch=fetch, fallback_path=tmp_path / "missing.txt")

        with pytest.raises(SourceUnavailable) as exc_info:
            cache.get("warranty")

        assert exc_info.value.domain == "warranty"
        assert "down" in str(exc_info.value)
        assert cache.entry("warranty") is None

    def test_undecodable_fallback_file(self, clock, tmp_path):
        """Test a fallback file that is not UTF-8 counts as missing."""
        path = tmp_path / "warranty.txt"
        path.write_bytes(b"WARRANTY INFORMATION\n\xff\xfe broken")
        fetch = MagicMock(side_effect=ConnectionError("down"))
        cache = make_cache(clock, fetch=fetch, fallback_path=path)

        with pytest.raises(SourceUnavailable) as exc_info:
            cache.get("warranty")

        assert exc_info.value.domain == "warranty"
        assert cache.entry("warranty") is None

    def test_unknown_domain(self, clock):
        """Test unknown domains are unavailable."""
        cache = make_cache(clock, fetch=MagicMock(return_value="x"))

        with pytest.raises(SourceUnavailable):
            cache.get("recipes")


class TestClearAndDescribe:
    """Tests for invalidation and diagnostics."""

    def test_clear_forces_refetch(self, clock):
        """Test clear drops the entry."""
        fetch = MagicMock(side_effect=["first", "second"])
        cache = make_cache(clock, fetch=fetch)

        cache.get("warranty")
        cache.clear("warranty")

        assert cache.get("warranty") == "second"

    def test_clear_never_fails(self, clock):
        """Test clearing unknown domains and an empty cache."""
        cache = make_cache(clock)
        cache.clear("recipes")
        cache.clear()
        assert cache.entry("warranty") is None

    def test_describe_empty(self, clock):
        """Test diagnostics without an entry do not fetch."""
        fetch = MagicMock(return_value="x")
        cache = make_cache(clock, fetch=fetch)

        info = cache.describe("warranty")

        assert info["source"] is None
        assert info["fresh"] is False
        fetch.assert_not_called()

    def test_describe_entry(self, clock):
        """Test provenance, age and a 500 character preview."""
        cache = make_cache(clock, fetch=MagicMock(return_value="w" * 800))
        cache.get("warranty")
        clock.advance(10)

        info = cache.describe("warranty")

        assert info["source"] == "live"
        assert info["fresh"] is True
        assert info["age_seconds"] == 10
        assert info["length"] == 800
        assert info["preview"] == "w" * 500


class TestKnowledgeService:
    """Tests for KnowledgeService topic resolution."""

    def test_static_topic_from_store(self, knowledge_service, mock_fetcher):
        """Test non-live topics are read from the corpus directory."""
        doc = knowledge_service.document("returns")

        assert doc.topic == "returns"
        assert "RETURNS AND REFUNDS POLICY" in doc.text
        mock_fetcher.fetch_warranty.assert_not_called()

    def test_missing_static_topic(self, knowledge_service):
        """Test a topic without a file has no document."""
        assert knowledge_service.document("payments") is None

    def test_undecodable_static_topic(self, knowledge_service, data_dir):
        """Test an unreadable corpus file has no document."""
        (data_dir / "payments.txt").write_bytes(b"PAYMENT METHODS\n\xff\xfe")

        assert knowledge_service.document("payments") is None

    def test_live_topic_through_cache(self, knowledge_service, mock_fetcher):
        """Test warranty is fetched once and then cached."""
        knowledge_service.document("warranty")
        knowledge_service.document("warranty")

        assert mock_fetcher.fetch_warranty.call_count == 1
        assert knowledge_service.diagnostics("warranty")["source"] == "live"
        assert knowledge_service.diagnostics("warranty")["live"] is True

    def test_warranty_fallback_to_corpus_file(self, data_dir, failing_fetcher, clock):
        """Test the warranty corpus file backs a failing live source."""
        from supportdesk.knowledge.service import KnowledgeService
        from supportdesk.knowledge.store import CorpusStore

        service = KnowledgeService(store=CorpusStore(data_dir), fetcher=failing_fetcher, clock=clock)
        doc = service.document("warranty")

        assert "TABLET:" in doc.text
        assert service.diagnostics()["source"] == "file"

    def test_live_sources_disabled(self, data_dir, mock_fetcher, clock):
        """Test disabled live sources serve the corpus file without fetching."""
        from supportdesk.knowledge.service import KnowledgeService
        from supportdesk.knowledge.store import CorpusStore

        service = KnowledgeService(
            store=CorpusStore(data_dir), fetcher=mock_fetcher, clock=clock, live_sources=False,
        )
        doc = service.document("warranty")

        assert "TABLET:" in doc.text
        assert service.diagnostics()["source"] == "file"
        mock_fetcher.fetch_warranty.assert_not_called()

    def test_live_sources_setting(self, data_dir, mock_fetcher, clock):
        """Test LIVE_SOURCES_ENABLED is read from settings by default."""
        from supportdesk.config import settings
        from supportdesk.knowledge.service import KnowledgeService
        from supportdesk.knowledge.store import CorpusStore

        with patch.object(settings.sources, "enabled", False):
            service = KnowledgeService(store=CorpusStore(data_dir), fetcher=mock_fetcher, clock=clock)
        service.document("warranty")

        mock_fetcher.fetch_warranty.assert_not_called()

    def test_reset(self, knowledge_service, mock_fetcher):
        """Test reset forces a refetch."""
        knowledge_service.document("warranty")
        knowledge_service.reset("warranty")
        knowledge_service.document("warranty")

        assert mock_fetcher.fetch_warranty.call_count == 2

    def test_products_overview_unavailable(self, data_dir, failing_fetcher, clock):
        """Test products degrade to a canned notice."""
        from supportdesk.knowledge.service import KnowledgeService
        from supportdesk.knowledge.store import CorpusStore
        from supportdesk.messages import msg

        service = KnowledgeService(store=CorpusStore(data_dir), fetcher=failing_fetcher, clock=clock)
        assert service.products_overview() == msg("products.unavailable")

    def test_corpus_store_topics(self, data_dir):
        """Test the store lists available topics."""
        from supportdesk.knowledge.store import CorpusStore

        assert CorpusStore(data_dir).topics() == ["orders", "returns", "warranty"]
