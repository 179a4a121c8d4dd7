"""
Core Module Package

Infrastructure the answering pipeline consumes:
- Cache: Three-tier knowledge source cache (memory, live, static file)
- Fetcher: Live warranty/product page scraping
- LLM: Optional generative responders
"""

from supportdesk.core.cache import CacheEntry, KnowledgeSource, KnowledgeSourceCache
from supportdesk.core.fetcher import LiveSourceFetcher
from supportdesk.core.llm import (
    GenerativeResponder,
    HuggingFaceResponder,
    OpenAIResponder,
    build_responder,
)

__all__ = [
    "CacheEntry",
    "KnowledgeSource",
    "KnowledgeSourceCache",
    "LiveSourceFetcher",
    "GenerativeResponder",
    "HuggingFaceResponder",
    "OpenAIResponder",
    "build_responder",
]
