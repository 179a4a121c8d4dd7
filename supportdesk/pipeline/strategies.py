"""
Extraction Strategies

Interchangeable answer extractors sharing one interface. The engine tries
them in order and keeps the first non-empty answer.

- ProductMatcher: warranty terms for a product named in the query
- QAScorer: best scoring stored Q&A pair
- SectionFallback: leading sentences of the best matching section
- ParagraphFallback: leading sentences of the best matching paragraph
- LastResort: the lines under an ORDER HISTORY marker
"""

import re
from abc import ABC, abstractmethod
from typing import Callable, FrozenSet, Iterable, List, Optional, Tuple

from supportdesk.knowledge.catalog import ProductWarrantyRecord, match_product
from supportdesk.knowledge.document import (
    KnowledgeDocument,
    Query,
    SEPARATOR_RE,
    is_section_header,
    split_paragraphs,
)
from supportdesk.logger import get_logger
from supportdesk.pipeline.scoring import (
    QA_ACCEPT_THRESHOLD,
    best_qa_entry,
    count_contained_words,
    join_sentences,
    split_sentences,
)

logger = get_logger(__name__)


class ExtractionStrategy(ABC):
    """An answer extractor over one knowledge document."""

    name: str = "strategy"

    @abstractmethod
    def extract(self, query: Query, document: KnowledgeDocument) -> Optional[str]:
        """
        Try to answer the query from the document.

        Returns:
            The answer text, or None when this strategy has nothing
        """


# ---------------------------------------------------------------------------
# Product matcher
# ---------------------------------------------------------------------------

PRODUCT_HEADER_RE = re.compile(r"^[A-Z][A-Z0-9\s&/\-]*(\([^)]*\))?\s*:$")
PARENTHETICAL_RE = re.compile(r"\([^)]*\)")
PERIOD_RE = re.compile(r"Warranty period:\s*(\d+)\s*Months", re.IGNORECASE)
SERVICE_RE = re.compile(r"Warranty service offered:\s*(.+)", re.IGNORECASE)
REPAIR_LABEL_RE = re.compile(r"Repair services available:\s*(.*)", re.IGNORECASE)
LIST_BULLET_RE = re.compile(r"^[-*•]\s*")
REPAIR_LOOKAHEAD = 10


def _is_product_header(line: str) -> bool:
    stripped = line.strip()
    return bool(PRODUCT_HEADER_RE.match(stripped) or SEPARATOR_RE.match(stripped))


def _header_name(line: str) -> str:
    """'MONITOR (FOR CONSUMERS):' -> 'monitor'"""
    name = PARENTHETICAL_RE.sub("", line.strip().rstrip(":"))
    return " ".join(name.lower().split())


class ProductMatcher(ExtractionStrategy):
    """
    Answers warranty questions about a specific product.

    The product is recognized through the alias table, its section is
    located by header (exact header name first, then alias containment),
    and the period, service sentence and repair list are read from the
    section body. Nothing is returned unless a period is present.
    """

    name = "product"

    def __init__(
        self,
        lookup: Callable[[str], Optional[ProductWarrantyRecord]] = match_product,
        topics: Iterable[str] = ("warranty",),
    ):
        self._lookup = lookup
        self.topics: FrozenSet[str] = frozenset(topics)

    def extract(self, query: Query, document: KnowledgeDocument) -> Optional[str]:
        if document.topic not in self.topics:
            return None

        record = self._lookup(query.lowered)
        if record is None:
            return None

        body = self.find_section(record, document.lines)
        if body is None:
            logger.debug(f"No section for product '{record.key}'")
            return None

        period = self.find_period(body)
        if period is None:
            return None

        service = self.find_service(body) or record.service
        repairs = self.find_repair_services(body) or ", ".join(record.repair_services)
        return (
            f"Warranty period: {period} Months. {service.rstrip('.')}. "
            f"Repair services available: {repairs.rstrip('.')}."
        )

    @staticmethod
    def find_section(record: ProductWarrantyRecord, lines: List[str]) -> Optional[List[str]]:
        """Body lines of the product's section, bounded by the next header."""
        headers: List[Tuple[int, str]] = [
            (i, _header_name(line)) for i, line in enumerate(lines)
            if _is_product_header(line) and not SEPARATOR_RE.match(line.strip())
        ]

        names = {record.key, *record.aliases}
        start = next((i for i, name in headers if name in names), None)
        if start is None:
            for alias in sorted(names, key=len, reverse=True):
                start = next((i for i, name in headers if alias in name), None)
                if start is not None:
                    break
        if start is None:
            return None

        body: List[str] = []
        for line in lines[start + 1:]:
            if _is_product_header(line) or is_section_header(line):
                break
            body.append(line)
        return body

    @staticmethod
    def find_period(body: List[str]) -> Optional[str]:
        match = PERIOD_RE.search("\n".join(body))
        return match.group(1) if match else None

    @staticmethod
    def find_service(body: List[str]) -> Optional[str]:
        for line in body:
            match = SERVICE_RE.search(line)
            if match and match.group(1).strip():
                return match.group(1).strip()
        return None

    @staticmethod
    def find_repair_services(body: List[str]) -> Optional[str]:
        """
        The list after the "Repair services available:" label.

        Items may follow the label on the same line and/or on indented lines
        directly below it; collection stops at the first blank or unindented
        line, looking at most 10 lines ahead.
        """
        for index, line in enumerate(body):
            match = REPAIR_LABEL_RE.search(line)
            if not match:
                continue

            items: List[str] = []
            inline = match.group(1).strip()
            if inline:
                items.append(inline)

            for follower in body[index + 1:index + 1 + REPAIR_LOOKAHEAD]:
                if not follower.strip() or not follower[:1].isspace():
                    break
                item = LIST_BULLET_RE.sub("", follower.strip()).strip()
                if item:
                    items.append(item)

            return ", ".join(item.rstrip(",.") for item in items) or None
        return None


# ---------------------------------------------------------------------------
# Q&A scorer
# ---------------------------------------------------------------------------

class QAScorer(ExtractionStrategy):
    """Returns the answer of the best scoring Q&A pair, verbatim."""

    name = "qa"

    def __init__(self, threshold: float = QA_ACCEPT_THRESHOLD):
        self.threshold = threshold

    def extract(self, query: Query, document: KnowledgeDocument) -> Optional[str]:
        entry, score = best_qa_entry(query, document.qa_entries)
        if entry is not None and score > self.threshold:
            logger.debug(f"Q&A match '{entry.question}' scored {score:.1f}")
            return entry.answer
        return None


# ---------------------------------------------------------------------------
# Section and paragraph fallbacks
# ---------------------------------------------------------------------------

class SectionFallback(ExtractionStrategy):
    """
    Leading sentences of the section sharing the most query words.

    Sections are visited in document order and the running best stops being
    updated once it reaches ``saturation`` words, so a later section with an
    equal or higher count is never considered after that point.
    """

    name = "section"

    def __init__(self, saturation: int = 3, max_sentences: int = 3, min_sentence_chars: int = 20):
        self.saturation = saturation
        self.max_sentences = max_sentences
        self.min_sentence_chars = min_sentence_chars

    def extract(self, query: Query, document: KnowledgeDocument) -> Optional[str]:
        words = query.words(3)
        best_text = ""
        best_count = 0

        for section in document.sections:
            if best_count >= self.saturation:
                break
            count = count_contained_words(words, section.text)
            if count > best_count:
                best_count, best_text = count, section.text

        if not best_text or best_count < 1:
            return None

        sentences = split_sentences(best_text, self.min_sentence_chars)[:self.max_sentences]
        return join_sentences(sentences) if sentences else None


class ParagraphFallback(ExtractionStrategy):
    """Leading sentences of the paragraph sharing the most query words."""

    name = "paragraph"

    def __init__(self, max_sentences: int = 2, min_sentence_chars: int = 15, min_paragraph_chars: int = 50):
        self.max_sentences = max_sentences
        self.min_sentence_chars = min_sentence_chars
        self.min_paragraph_chars = min_paragraph_chars

    def extract(self, query: Query, document: KnowledgeDocument) -> Optional[str]:
        words = query.words(3)
        best_paragraph = ""
        best_count = 0

        for paragraph in split_paragraphs(document.text, self.min_paragraph_chars):
            count = count_contained_words(words, paragraph)
            if count > best_count:
                best_count, best_paragraph = count, paragraph

        if best_count == 0:
            return None

        sentences = split_sentences(best_paragraph, self.min_sentence_chars)[:self.max_sentences]
        return join_sentences(sentences) if sentences else None


# ---------------------------------------------------------------------------
# Last resort
# ---------------------------------------------------------------------------

class LastResort(ExtractionStrategy):
    """The first lines under an ORDER HISTORY marker, joined with spaces."""

    name = "last_resort"

    def __init__(self, marker: str = "ORDER HISTORY", max_lines: int = 3):
        self.marker = marker
        self.max_lines = max_lines

    def extract(self, query: Query, document: KnowledgeDocument) -> Optional[str]:
        position = document.text.find(self.marker)
        if position < 0:
            return None

        following = document.text[position + len(self.marker):]
        if following.startswith(":"):
            following = following[1:]
        lines = following.strip().split("\n")[:self.max_lines]
        answer = " ".join(line.strip() for line in lines).strip()
        return answer or None


DEFAULT_STRATEGIES = (ProductMatcher, QAScorer, SectionFallback, ParagraphFallback, LastResort)
