"""
Response Composer Module

Turns a customer message into the final reply string:

1. canned conversational intents are answered immediately;
2. when a generative responder is configured it gets the first try, with
   the topic's knowledge text embedded in the prompt;
3. otherwise the topic's knowledge document is fetched and run through the
   extraction engine; when the responder fails, warranty questions take
   this path and other topics get their canned reply;
4. topic acceptance rules and canned fallbacks shape the final text.

For the orders topic an extracted answer must be longer than 30 characters;
shorter ones are replaced by the narrowest matching canned order reply.

Usage:
    from supportdesk.pipeline.composer import ResponseComposer

    composer = ResponseComposer()
    reply = composer.respond("What is tablet warranty period?")
    print(reply.answer)
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

from supportdesk.core.llm import GenerativeResponder
from supportdesk.exceptions import GenerativeResponderFailure, SourceUnavailable
from supportdesk.knowledge.service import KnowledgeService
from supportdesk.logger import get_logger
from supportdesk.messages import msg
from supportdesk.pipeline.classifier import Classification, Topic, TopicClassifier
from supportdesk.pipeline.extractor import AnswerExtractionEngine

logger = get_logger(__name__)

MIN_ORDER_ANSWER_CHARS = 30

# Narrow order replies, most specific first
ORDER_SUB_INTENTS: List[Tuple[str, re.Pattern]] = [
    ("orders.order_id", re.compile(r"(order id|order ids|all order|get.*order id)")),
    ("orders.latest", re.compile(r"(latest|recent|last|newest).*order")),
    ("orders.tracking", re.compile(r"(track|tracking|where.*order|order status)")),
    ("orders.cancel", re.compile(r"(cancel|cancellation)")),
]

ORIGIN_CANNED = "canned"
ORIGIN_EXTRACTION = "extraction"
ORIGIN_RESPONDER = "responder"
ORIGIN_FALLBACK = "fallback"


@dataclass
class SupportReply:
    """
    Reply to one customer message.

    Attributes:
        answer: Reply text
        topic: Topic the message was routed to
        intent: Canned intent name, if one matched
        origin: canned, extraction, responder or fallback
        strategy: Extraction strategy that produced the answer
        timestamp: When the reply was composed
    """
    answer: str
    topic: Topic = Topic.NONE
    intent: Optional[str] = None
    origin: str = ORIGIN_CANNED
    strategy: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)


class ResponseComposer:
    """
    Orchestrates classifier, knowledge service, extraction engine and the
    optional generative responder.

    Example:
        composer = ResponseComposer(responder=None)
        composer.answer("bye")                     # canned goodbye, no fetch
        composer.answer("How do refunds work?")    # extracted from returns.txt
    """

    def __init__(
        self,
        knowledge: Optional[KnowledgeService] = None,
        classifier: Optional[TopicClassifier] = None,
        engine: Optional[AnswerExtractionEngine] = None,
        responder: Optional[GenerativeResponder] = None,
    ):
        self.knowledge = knowledge or KnowledgeService()
        self.classifier = classifier or TopicClassifier()
        self.engine = engine or AnswerExtractionEngine()
        self.responder = responder

        logger.info(
            f"Initialized ResponseComposer: "
            f"responder={self.responder.name if self.responder else 'none'}"
        )

    def answer(self, message: str) -> str:
        """Reply text for a message."""
        return self.respond(message).answer

    def respond(self, message: str) -> SupportReply:
        """
        Compose the reply for a message.

        Raises:
            SourceUnavailable: When the routed topic's knowledge source and
                its fallback are both unavailable
        """
        logger.info(f"Processing message: {message[:50]}...")
        classification = self.classifier.classify(message)

        if classification.is_canned:
            return SupportReply(
                answer=classification.reply,
                intent=classification.intent,
                origin=ORIGIN_CANNED,
            )

        if self.responder is not None:
            try:
                return self._generate(message, classification)
            except GenerativeResponderFailure as e:
                if classification.topic is not Topic.WARRANTY:
                    logger.warning(f"Generative responder failed, using canned reply: {e}")
                    return SupportReply(
                        answer=self.canned_reply(message, classification.topic),
                        topic=classification.topic, origin=ORIGIN_FALLBACK,
                    )
                logger.warning(f"Generative responder failed, using direct extraction: {e}")

        return self.compose(message, classification)

    def _generate(self, message: str, classification: Classification) -> SupportReply:
        knowledge = None
        if classification.topic is not Topic.NONE:
            try:
                knowledge = self.knowledge.knowledge_text(classification.topic.value)
            except SourceUnavailable as e:
                logger.warning(f"Prompting without knowledge: {e}")

        answer = self.responder.generate(message, knowledge=knowledge)
        return SupportReply(answer=answer, topic=classification.topic, origin=ORIGIN_RESPONDER)

    def compose(self, message: str, classification: Optional[Classification] = None) -> SupportReply:
        """
        Heuristic reply: knowledge extraction plus topic rules.

        Raises:
            SourceUnavailable: See respond()
        """
        classification = classification or self.classifier.classify(message)
        if classification.is_canned:
            return SupportReply(answer=classification.reply, intent=classification.intent)

        topic = classification.topic
        if topic is Topic.NONE:
            return SupportReply(answer=self.canned_reply(message, topic), topic=topic)

        document = self.knowledge.document(topic.value)
        extraction = self.engine.run(message, document)

        if topic is Topic.ORDERS:
            if extraction and len(extraction.answer) > MIN_ORDER_ANSWER_CHARS:
                return SupportReply(
                    answer=extraction.answer, topic=topic,
                    origin=ORIGIN_EXTRACTION, strategy=extraction.strategy,
                )
            return SupportReply(answer=self.canned_reply(message, topic), topic=topic, origin=ORIGIN_FALLBACK)

        if extraction:
            return SupportReply(
                answer=extraction.answer, topic=topic,
                origin=ORIGIN_EXTRACTION, strategy=extraction.strategy,
            )
        return SupportReply(answer=self.canned_reply(message, topic), topic=topic, origin=ORIGIN_FALLBACK)

    def canned_reply(self, message: str, topic: Topic) -> str:
        """Fixed reply for a topic when no knowledge answer is available."""
        if topic is Topic.NONE:
            return msg("topic.none")
        if topic is Topic.ORDERS:
            return self.order_fallback(message)
        return msg(f"topic.{topic.value}")

    @staticmethod
    def order_fallback(message: str) -> str:
        """Narrowest canned order reply matching the message."""
        lowered = message.lower().strip()
        for key, pattern in ORDER_SUB_INTENTS:
            if pattern.search(lowered):
                return msg(key)
        return msg("orders.generic")
