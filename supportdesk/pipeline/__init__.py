"""
Answering Pipeline Package

- Classifier: Route messages to canned intents or topics
- Scoring/Strategies: Heuristic answer extractors
- Extractor: Ordered strategy chain
- Composer: Orchestrate the full answer flow
"""

from supportdesk.pipeline.classifier import Classification, Topic, TopicClassifier
from supportdesk.pipeline.extractor import AnswerExtractionEngine, Extraction
from supportdesk.pipeline.composer import ResponseComposer, SupportReply

__all__ = [
    "Classification",
    "Topic",
    "TopicClassifier",
    "AnswerExtractionEngine",
    "Extraction",
    "ResponseComposer",
    "SupportReply",
]
