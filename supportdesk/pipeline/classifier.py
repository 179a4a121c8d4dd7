"""
Topic Classifier Module

Routes a customer message either to a canned conversational intent
(greeting, how-are-you, help, thanks, goodbye) or to one support topic.

Canned intents are checked first and bypass all knowledge lookup. Topics are
then tried in fixed priority order (returns, shipping, payments, orders,
warranty) and the first regex family that matches wins.

Simple pattern-based routing without LLM overhead.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from supportdesk.logger import get_logger
from supportdesk.messages import msg

logger = get_logger(__name__)


class Topic(Enum):
    """Support topics, each backed by one knowledge document."""
    RETURNS = "returns"
    SHIPPING = "shipping"
    PAYMENTS = "payments"
    ORDERS = "orders"
    WARRANTY = "warranty"
    NONE = "none"


@dataclass
class IntentPattern:
    """Pattern family for one canned intent or topic."""
    name: str
    patterns: List[str]
    reply_key: Optional[str] = None


# Checked in order; first hit wins.
CANNED_INTENT_PATTERNS = [
    IntentPattern(
        name="greeting",
        patterns=[r"^(hi|hello|hey|greetings|good morning|good afternoon|good evening)\b"],
        reply_key="intent.greeting",
    ),
    IntentPattern(
        name="how_are_you",
        patterns=[r"(how are you|how r u|how's it going|how do you do)"],
        reply_key="intent.how_are_you",
    ),
    IntentPattern(
        name="help",
        patterns=[r"\bhelp\b"],
        reply_key="intent.help",
    ),
    IntentPattern(
        name="thanks",
        patterns=[r"\b(thank|appreciate)"],
        reply_key="intent.thanks",
    ),
    IntentPattern(
        name="goodbye",
        patterns=[r"\b(bye|goodbye|see you|farewell|exit|quit)\b"],
        reply_key="intent.goodbye",
    ),
]

# Priority order matters: "cancel my order" is a return, "track my order"
# is shipping.
TOPIC_PATTERNS = [
    IntentPattern(
        name=Topic.RETURNS.value,
        patterns=[r"(return|refund|exchange|cancel.*order)"],
    ),
    IntentPattern(
        name=Topic.SHIPPING.value,
        patterns=[r"(ship|shipping|delivery|deliver|track|tracking|when.*arrive|how long.*ship)"],
    ),
    IntentPattern(
        name=Topic.PAYMENTS.value,
        patterns=[r"(pay|payment|billing|card|credit|debit|paypal|how.*pay|payment method)"],
    ),
    IntentPattern(
        name=Topic.ORDERS.value,
        patterns=[
            r"(order|orders|latest.*order|recent.*order|my order|order history|order status"
            r"|track.*order|place.*order|view.*order|order id|order ids|all order)"
        ],
    ),
    IntentPattern(
        name=Topic.WARRANTY.value,
        patterns=[r"(warrant|guarantee|repair|faulty|defect|regist|serial|proof of purchase)"],
    ),
]


@dataclass(frozen=True)
class Classification:
    """
    Routing decision for one message.

    Attributes:
        topic: Support topic (Topic.NONE for canned intents and unknowns)
        intent: Canned intent name, if one matched
        reply_key: Message key of the canned intent's reply
    """
    topic: Topic
    intent: Optional[str] = None
    reply_key: Optional[str] = None

    @property
    def is_canned(self) -> bool:
        return self.intent is not None

    @property
    def reply(self) -> Optional[str]:
        """The fixed reply for a canned intent or the unknown topic."""
        if self.reply_key is not None:
            return msg(self.reply_key)
        if self.topic is Topic.NONE:
            return msg("topic.none")
        return None


class TopicClassifier:
    """
    Regex-family router.

    Usage:
        classifier = TopicClassifier()
        result = classifier.classify("How do I get a refund?")
        result.topic  # Topic.RETURNS
    """

    def __init__(
        self,
        intent_patterns: Optional[List[IntentPattern]] = None,
        topic_patterns: Optional[List[IntentPattern]] = None,
    ):
        self._intent_patterns = intent_patterns or CANNED_INTENT_PATTERNS
        self._topic_patterns = topic_patterns or TOPIC_PATTERNS

        self._compiled: Dict[str, List[re.Pattern]] = {}
        for pattern in self._intent_patterns + self._topic_patterns:
            self._compiled[pattern.name] = [re.compile(p, re.IGNORECASE) for p in pattern.patterns]

    @staticmethod
    def normalize(text: str) -> str:
        return text.lower().strip()

    def _matches(self, pattern: IntentPattern, text: str) -> bool:
        return any(compiled.search(text) for compiled in self._compiled[pattern.name])

    def detect_intent(self, text: str) -> Optional[IntentPattern]:
        """First canned intent matching the message, if any."""
        normalized = self.normalize(text)
        for pattern in self._intent_patterns:
            if self._matches(pattern, normalized):
                return pattern
        return None

    def detect_topic(self, text: str) -> Topic:
        """First topic family matching the message, or Topic.NONE."""
        normalized = self.normalize(text)
        for pattern in self._topic_patterns:
            if self._matches(pattern, normalized):
                return Topic(pattern.name)
        return Topic.NONE

    def classify(self, text: str) -> Classification:
        intent = self.detect_intent(text)
        if intent is not None:
            logger.debug(f"Canned intent detected: {intent.name}")
            return Classification(topic=Topic.NONE, intent=intent.name, reply_key=intent.reply_key)

        topic = self.detect_topic(text)
        logger.debug(f"Topic detected: {topic.value}")
        return Classification(topic=topic)
