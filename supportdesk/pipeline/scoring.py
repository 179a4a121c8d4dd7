"""
Scoring Functions

Pure, independently testable heuristics used by the extraction strategies.
Every function is deterministic given its inputs.

Q&A scoring adds up:
- 100 when the query contains the question phrase or vice versa;
- up to 50 for the share of the question's important words found in the query;
- fixed bonuses when both mention the same high-signal keyword;
- a small penalty for tracking questions when the query is not about tracking
  or orders.
"""

import re
from typing import Iterable, List, Optional, Sequence, Tuple

from supportdesk.knowledge.document import QAEntry, Query

STOPWORDS = frozenset({"how", "what", "when", "where", "why", "can", "do", "i", "my", "the", "a", "an"})

PHRASE_MATCH_SCORE = 100.0
WORD_OVERLAP_WEIGHT = 50.0
TRACK_PENALTY = 10.0
QA_ACCEPT_THRESHOLD = 15.0

# (keyword, bonus) pairs rewarded when query and question both contain them
KEYWORD_BONUSES: Tuple[Tuple[str, float], ...] = (
    ("track", 20.0),
    ("cancel", 20.0),
    ("latest", 20.0),
    ("order id", 30.0),
    ("all order", 30.0),
    ("reorder", 20.0),
    ("change", 20.0),
    ("wrong item", 30.0),
)

SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
QUESTION_PREFIX_RE = re.compile(r"^q:\s*")


def question_phrase(question: str) -> str:
    """Core phrase of a stored question: lowercased, prefix and padding removed."""
    return QUESTION_PREFIX_RE.sub("", question.lower(), count=1).strip()


def important_words(question: str) -> List[str]:
    """Question words longer than three characters that are not stopwords."""
    return [
        word for word in question.lower().split()
        if len(word) > 3 and word not in STOPWORDS
    ]


def word_found(word: str, tokens: Iterable[str]) -> bool:
    """
    Exact token match, or mutual containment for words longer than four
    characters.
    """
    for token in tokens:
        if token == word:
            return True
        if len(word) > 4 and (word in token or token in word):
            return True
    return False


def phrase_score(query: Query, question: str) -> float:
    phrase = question_phrase(question)
    if phrase in query.lowered or query.lowered in phrase:
        return PHRASE_MATCH_SCORE
    return 0.0


def word_overlap_score(query: Query, question: str) -> float:
    words = important_words(question)
    if not words:
        return 0.0
    tokens = [token for token in query.tokens if len(token) > 2]
    matched = sum(1 for word in words if word_found(word, tokens))
    return matched / len(words) * WORD_OVERLAP_WEIGHT


def keyword_bonus(query: Query, question: str) -> float:
    question = question.lower()
    return sum(
        bonus for keyword, bonus in KEYWORD_BONUSES
        if keyword in query.lowered and keyword in question
    )


def track_penalty(query: Query, question: str) -> float:
    """Tracking questions are penalised for queries about neither tracking nor orders."""
    if "track" in question.lower() and "track" not in query.lowered and "order" not in query.lowered:
        return TRACK_PENALTY
    return 0.0


def score_qa_entry(query: Query, entry: QAEntry) -> float:
    """Total relevance score of one Q&A pair for a query."""
    return (
        phrase_score(query, entry.question)
        + word_overlap_score(query, entry.question)
        + keyword_bonus(query, entry.question)
        - track_penalty(query, entry.question)
    )


def best_qa_entry(query: Query, entries: Sequence[QAEntry]) -> Tuple[Optional[QAEntry], float]:
    """
    Highest scoring pair; the earliest one wins ties.

    Returns:
        (entry, score), or (None, 0.0) when nothing scores above zero
    """
    best: Optional[QAEntry] = None
    best_score = 0.0
    for entry in entries:
        score = score_qa_entry(query, entry)
        if score > best_score:
            best, best_score = entry, score
    return best, best_score


def count_contained_words(words: Iterable[str], text: str) -> int:
    """How many of the words occur as substrings of the text (case-insensitive)."""
    lowered = text.lower()
    return sum(1 for word in words if word in lowered)


def split_sentences(text: str, longer_than: int) -> List[str]:
    """Split on runs of . ! ? and keep pieces whose stripped length exceeds the limit."""
    return [s for s in SENTENCE_SPLIT_RE.split(text) if len(s.strip()) > longer_than]


def join_sentences(sentences: Sequence[str]) -> str:
    """Join with ". " and close with a period."""
    return ". ".join(sentences).strip() + "."
