"""
Tests for the topic classifier.
"""

import pytest

from supportdesk.pipeline.classifier import Topic, TopicClassifier


@pytest.fixture
def classifier():
    return TopicClassifier()


class TestCannedIntents:
    """Tests for canned conversational intents."""

    @pytest.mark.parametrize("message,intent", [
        ("hello", "greeting"),
        ("Good morning!", "greeting"),
        ("how are you?", "how_are_you"),
        ("can you help me", "help"),
        ("thanks a lot", "thanks"),
        ("bye", "goodbye"),
        ("ok see you", "goodbye"),
    ])
    def test_intents(self, classifier, message, intent):
        """Test each intent family."""
        result = classifier.classify(message)

        assert result.is_canned is True
        assert result.intent == intent
        assert result.topic is Topic.NONE

    def test_intent_wins_over_topic(self, classifier):
        """Test canned intents are checked before topics."""
        result = classifier.classify("thanks for the refund")
        assert result.intent == "thanks"

    def test_greeting_needs_word_boundary(self, classifier):
        """Test 'history' is not a greeting."""
        result = classifier.classify("history of my orders")

        assert result.is_canned is False
        assert result.topic is Topic.ORDERS

    def test_canned_reply_text(self, classifier):
        """Test the goodbye reply comes from the message table."""
        from supportdesk.messages import msg

        assert classifier.classify("goodbye").reply == msg("intent.goodbye")


class TestTopics:
    """Tests for topic routing priority."""

    @pytest.mark.parametrize("message,topic", [
        ("How do I get a refund?", Topic.RETURNS),
        ("I want to cancel my order", Topic.RETURNS),
        ("Where is my delivery", Topic.SHIPPING),
        ("track my order", Topic.SHIPPING),
        ("Do you take PayPal?", Topic.PAYMENTS),
        ("show my latest order", Topic.ORDERS),
        ("What is tablet warranty period?", Topic.WARRANTY),
        ("my screen is faulty", Topic.WARRANTY),
        ("How to register my product?", Topic.WARRANTY),
        ("Where is the serial number?", Topic.WARRANTY),
        ("Do I need proof of purchase for a claim?", Topic.WARRANTY),
        ("what colour is the sky", Topic.NONE),
    ])
    def test_topics(self, classifier, message, topic):
        """Test the first matching family in priority order wins."""
        assert classifier.classify(message).topic is topic

    def test_case_insensitive(self, classifier):
        """Test routing ignores case and padding."""
        assert classifier.detect_topic("  REFUND  ") is Topic.RETURNS

    def test_unknown_topic_reply(self, classifier):
        """Test the unknown topic carries the clarification reply."""
        from supportdesk.messages import msg

        result = classifier.classify("what colour is the sky")
        assert result.reply == msg("topic.none")
