"""
Support Desk - Source Package

A heuristic customer-support answering service.

This package provides:
- Topic routing with canned conversational intents
- Knowledge texts from static files and cached live sources
- Layered answer extraction (product terms, Q&A scoring, section and
  paragraph fallbacks)
- An optional generative responder with direct-extraction fallback
- CLI and HTTP interfaces
"""

__version__ = "1.0.0"

from supportdesk.config import settings

__all__ = ["settings", "__version__"]
