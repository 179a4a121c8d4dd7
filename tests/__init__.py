"""
Test Package Initialization

This package contains all unit and integration tests for the
support desk project.

Test Structure:
- test_config.py: Configuration tests
- test_document.py: Knowledge document and product catalog tests
- test_scoring.py: Q&A scoring heuristics
- test_strategies.py: Extraction strategies and engine
- test_classifier.py: Topic routing
- test_cache.py: Knowledge source cache and knowledge service
- test_fetcher.py: Live page fetching and normalization
- test_llm.py: Generative responders
- test_composer.py: End-to-end reply composition
- test_api.py: FastAPI endpoints
- test_cli.py: Command line interface

Run tests with:
    pytest tests/ -v
"""
