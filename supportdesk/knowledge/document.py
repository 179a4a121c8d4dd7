"""
Knowledge Document Module

Data model for the semi-structured knowledge texts the extraction engine
works on, plus the parsers that derive sections and Q&A pairs from them.

Text conventions:
- A section header is a line of upper-case words ending in a colon
  (``TABLET:``) or a ``===`` separator line.
- A Q&A pair is a ``Q:`` line followed by an ``A:`` line; the answer keeps
  absorbing non-blank lines until a blank line.
- Paragraphs are separated by blank lines.

Usage:
    from supportdesk.knowledge.document import KnowledgeDocument, Query

    doc = KnowledgeDocument(topic="returns", text=open("data/returns.txt").read())
    for entry in doc.qa_entries:
        print(entry.question, "->", entry.answer)
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

SECTION_HEADER_RE = re.compile(r"^[A-Z\s]+:$")
SEPARATOR_RE = re.compile(r"^===")
PARAGRAPH_SPLIT_RE = re.compile(r"\n\n+")
QUESTION_PREFIX_RE = re.compile(r"^Q:\s*")
ANSWER_PREFIX_RE = re.compile(r"^A:\s*")


@dataclass(frozen=True)
class Query:
    """
    A customer query in the forms used for scoring.

    Attributes:
        raw: Text exactly as received
        lowered: Lowercased text (not stripped)
        tokens: Whitespace split of the lowercased text
    """
    raw: str
    lowered: str
    tokens: List[str]

    @classmethod
    def from_text(cls, text: str) -> "Query":
        lowered = text.lower()
        return cls(raw=text, lowered=lowered, tokens=lowered.split())

    def words(self, longer_than: int = 3) -> List[str]:
        """Tokens strictly longer than ``longer_than`` characters."""
        return [token for token in self.tokens if len(token) > longer_than]

    def mentions(self, phrase: str) -> bool:
        """Substring check against the lowercased query."""
        return phrase in self.lowered


@dataclass
class Section:
    """
    A header line and the non-blank lines that follow it.

    The leading text before the first header is kept as a section with no
    header.
    """
    header: Optional[str]
    lines: List[str] = field(default_factory=list)

    @property
    def is_separator(self) -> bool:
        return self.header is not None and bool(SEPARATOR_RE.match(self.header))

    @property
    def text(self) -> str:
        """Header and body, one line each, newline terminated."""
        head = [self.header] if self.header is not None else []
        return "".join(f"{line}\n" for line in head + self.lines)


@dataclass(frozen=True)
class QAEntry:
    """A question (lowercased) and its answer as written."""
    question: str
    answer: str


def is_section_header(line: str) -> bool:
    """True for ``ALL CAPS:`` header lines and ``===`` separators."""
    return bool(SECTION_HEADER_RE.match(line) or SEPARATOR_RE.match(line))


def parse_sections(text: str) -> List[Section]:
    """
    Segment text into sections at every header line.

    Blank lines are dropped; lines keep their original indentation.
    """
    sections: List[Section] = []
    current = Section(header=None)

    for line in text.split("\n"):
        if is_section_header(line):
            if current.header is not None or current.lines:
                sections.append(current)
            current = Section(header=line)
        elif line.strip():
            current.lines.append(line)

    if current.header is not None or current.lines:
        sections.append(current)
    return sections


def parse_qa_entries(text: str) -> List[QAEntry]:
    """
    Extract Q&A pairs.

    A ``Q:`` line or a ``QUESTIONS ABOUT`` marker opens a new question and
    closes the previous pair. Questions without an answer are discarded.
    """
    entries: List[QAEntry] = []
    question = ""
    answer = ""
    in_qa = False

    for raw_line in text.split("\n"):
        line = raw_line.strip()

        if line.startswith("Q:") or line.startswith("QUESTIONS ABOUT"):
            if question and answer:
                entries.append(QAEntry(question=question, answer=answer))
            question = QUESTION_PREFIX_RE.sub("", line, count=1).lower()
            answer = ""
            in_qa = True
        elif in_qa and line.startswith("A:"):
            answer = ANSWER_PREFIX_RE.sub("", line, count=1)
        elif in_qa and answer and line:
            answer += " " + line
        elif in_qa and not line and answer:
            in_qa = False

    if question and answer:
        entries.append(QAEntry(question=question, answer=answer))
    return entries


def split_paragraphs(text: str, longer_than: int = 50) -> List[str]:
    """Blank-line separated paragraphs whose stripped length exceeds ``longer_than``."""
    return [p for p in PARAGRAPH_SPLIT_RE.split(text) if len(p.strip()) > longer_than]


@dataclass
class KnowledgeDocument:
    """
    The knowledge text for one topic.

    Sections and Q&A entries are parsed on first access and reused.
    """
    topic: str
    text: str
    _sections: Optional[List[Section]] = field(default=None, init=False, repr=False)
    _qa_entries: Optional[List[QAEntry]] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        self.text = self.text.replace("\r\n", "\n")

    @property
    def sections(self) -> List[Section]:
        if self._sections is None:
            self._sections = parse_sections(self.text)
        return self._sections

    @property
    def qa_entries(self) -> List[QAEntry]:
        if self._qa_entries is None:
            self._qa_entries = parse_qa_entries(self.text)
        return self._qa_entries

    @property
    def lines(self) -> List[str]:
        return self.text.split("\n")

    def contains(self, marker: str) -> bool:
        return marker in self.text

    def __len__(self) -> int:
        return len(self.text)
