"""
Knowledge Package

Knowledge texts and their structure:
- Catalog: Product warranty records and the alias table
- Document: Sections, Q&A pairs and query normalization
- Store: Static per-topic corpus files
- Service: Topic to document resolution, owning the source cache
"""

from supportdesk.knowledge.catalog import ALIAS_TABLE, PRODUCT_CATALOG, ProductWarrantyRecord, match_product
from supportdesk.knowledge.document import KnowledgeDocument, QAEntry, Query, Section
from supportdesk.knowledge.store import CorpusStore

__all__ = [
    "ALIAS_TABLE",
    "PRODUCT_CATALOG",
    "ProductWarrantyRecord",
    "match_product",
    "KnowledgeDocument",
    "QAEntry",
    "Query",
    "Section",
    "CorpusStore",
]
