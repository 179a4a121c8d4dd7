"""
Answer Extraction Engine

Runs an ordered chain of extraction strategies over a knowledge document
and returns the first non-empty answer. ``None`` means no strategy found
anything; the caller substitutes its own canned text.

Usage:
    from supportdesk.pipeline.extractor import AnswerExtractionEngine

    engine = AnswerExtractionEngine()
    answer = engine.extract("What is tablet warranty period?", document)
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from supportdesk.knowledge.document import KnowledgeDocument, Query
from supportdesk.logger import get_logger
from supportdesk.pipeline.strategies import DEFAULT_STRATEGIES, ExtractionStrategy

logger = get_logger(__name__)


@dataclass(frozen=True)
class Extraction:
    """An answer and the strategy that produced it."""
    answer: str
    strategy: str


class AnswerExtractionEngine:
    """
    Ordered, short-circuiting strategy chain.

    Example:
        engine = AnswerExtractionEngine()
        result = engine.run(Query.from_text("how do refunds work"), doc)
        if result:
            print(result.strategy, result.answer)
    """

    def __init__(self, strategies: Optional[Sequence[ExtractionStrategy]] = None):
        self.strategies: List[ExtractionStrategy] = (
            list(strategies) if strategies is not None
            else [strategy() for strategy in DEFAULT_STRATEGIES]
        )

    def run(
        self,
        query: Union[str, Query],
        document: Optional[KnowledgeDocument],
    ) -> Optional[Extraction]:
        """
        Try each strategy in order.

        Returns:
            The first present extraction, or None when the chain is exhausted
        """
        if document is None:
            return None
        if isinstance(query, str):
            query = Query.from_text(query)

        for strategy in self.strategies:
            answer = strategy.extract(query, document)
            if answer:
                logger.info(f"Answer for topic '{document.topic}' from {strategy.name} strategy")
                return Extraction(answer=answer, strategy=strategy.name)

        logger.info(f"No answer found in topic '{document.topic}'")
        return None

    def extract(
        self,
        query: Union[str, Query],
        document: Optional[KnowledgeDocument],
    ) -> Optional[str]:
        """Answer text only; None when no strategy produced one."""
        result = self.run(query, document)
        return result.answer if result else None
