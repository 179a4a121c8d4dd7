"""
Generative Responder Module

Optional language-model collaborators the response composer can delegate
to. The heuristic pipeline never depends on them: every failure surfaces as
``GenerativeResponderFailure`` and the composer falls back to direct
extraction.

Architecture:
- GenerativeResponder: Abstract base class defining the interface
- OpenAIResponder: Chat completions over HTTP
- HuggingFaceResponder: Hosted inference API, with a one-shot retry while
  the model is loading
- build_responder: Picks an implementation from settings

Usage:
    from supportdesk.core.llm import build_responder

    responder = build_responder()
    if responder is not None:
        print(responder.generate("Where is my parcel?"))
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import requests

from supportdesk.config import ResponderConfig, settings
from supportdesk.exceptions import GenerativeResponderFailure
from supportdesk.logger import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful and friendly customer service representative. "
    "Answer questions clearly and professionally."
)

KNOWLEDGE_TEMPLATE = """Use only the following knowledge to answer.

{knowledge}"""

MIN_REPLY_CHARS = 5
WARMUP_PADDING_SECONDS = 2.0


@dataclass
class Message:
    """
    Represents a chat message.

    Attributes:
        role: Message role (system, user, assistant)
        content: Message content text
    """
    role: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        """Convert to API-compatible dictionary."""
        return {"role": self.role, "content": self.content}


def build_messages(message: str, knowledge: Optional[str] = None) -> List[Message]:
    """
    Build the chat message list for a customer message.

    Args:
        message: Customer's message
        knowledge: Optional knowledge text embedded in the system turn

    Returns:
        List of Message objects
    """
    system = SYSTEM_PROMPT
    if knowledge:
        system += "\n\n" + KNOWLEDGE_TEMPLATE.format(knowledge=knowledge)
    return [
        Message(role="system", content=system),
        Message(role="user", content=message),
    ]


def build_prompt(message: str, knowledge: Optional[str] = None) -> str:
    """Plain-text prompt for completion-style models."""
    prefix = "You are a helpful customer service assistant."
    if knowledge:
        prefix += "\n" + KNOWLEDGE_TEMPLATE.format(knowledge=knowledge) + "\n"
    return f"{prefix} User: {message}\nAssistant:"


class GenerativeResponder(ABC):
    """
    Abstract base class for generative responders.

    Implementations return free text for a customer message and raise
    GenerativeResponderFailure on any failure.
    """

    name: str = "responder"

    @abstractmethod
    def generate(self, message: str, knowledge: Optional[str] = None) -> str:
        """
        Generate a reply.

        Args:
            message: Customer's message
            knowledge: Optional knowledge text to ground the reply

        Returns:
            Reply text

        Raises:
            GenerativeResponderFailure: If no usable reply was produced
        """


class OpenAIResponder(GenerativeResponder):
    """
    OpenAI chat completions responder.

    Example:
        responder = OpenAIResponder(api_key="sk-...")
        reply = responder.generate("How do I return an item?")
    """

    name = "openai"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        url: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        config = settings.responder
        self.api_key = api_key or config.openai_api_key
        self.model = model or config.openai_model
        self.url = url or config.openai_url
        self.temperature = temperature if temperature is not None else config.temperature
        self.max_tokens = max_tokens if max_tokens is not None else config.max_tokens
        self.timeout = timeout if timeout is not None else config.timeout_seconds

        logger.info(f"Initialized OpenAIResponder: model={self.model}, max_tokens={self.max_tokens}")

    @property
    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def generate(self, message: str, knowledge: Optional[str] = None) -> str:
        body = {
            "model": self.model,
            "messages": [m.to_dict() for m in build_messages(message, knowledge)],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        try:
            response = requests.post(self.url, headers=self._headers, json=body, timeout=self.timeout)
            response.raise_for_status()
            content = response.json()["choices"][0]["message"]["content"]
        except requests.RequestException as e:
            raise GenerativeResponderFailure(f"OpenAI request failed: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise GenerativeResponderFailure(f"Unexpected OpenAI response: {e}") from e

        content = (content or "").strip()
        if len(content) <= MIN_REPLY_CHARS:
            raise GenerativeResponderFailure("OpenAI returned an empty reply")
        return content


class HuggingFaceResponder(GenerativeResponder):
    """
    Hugging Face inference API responder.

    When the model is still loading the API answers 503 with an
    ``estimated_time``; the responder waits that long (plus a small pad)
    once and retries once.
    """

    name = "huggingface"

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        temperature: Optional[float] = None,
        max_new_tokens: int = 100,
        timeout: Optional[float] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        config = settings.responder
        self.api_key = api_key if api_key is not None else config.huggingface_api_key
        self.url = url or config.huggingface_url
        self.temperature = temperature if temperature is not None else config.temperature
        self.max_new_tokens = max_new_tokens
        self.timeout = timeout if timeout is not None else config.timeout_seconds
        self._sleep = sleep or time.sleep

        logger.info(f"Initialized HuggingFaceResponder: url={self.url}")

    @property
    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        # Works without a token, only with lower rate limits
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def generate(self, message: str, knowledge: Optional[str] = None) -> str:
        prompt = build_prompt(message, knowledge)
        data = self._request(prompt)
        return self._clean(self._generated_text(data), prompt)

    def _request(self, prompt: str, retried: bool = False) -> Any:
        body = {
            "inputs": prompt,
            "parameters": {
                "max_new_tokens": self.max_new_tokens,
                "return_full_text": False,
                "temperature": self.temperature,
            },
        }
        try:
            response = requests.post(self.url, headers=self._headers, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise GenerativeResponderFailure(f"Hugging Face request failed: {e}") from e

        if response.status_code == 503 and not retried:
            wait = self._estimated_time(response)
            if wait is not None:
                logger.info(f"Model loading, waiting {wait:g} seconds...")
                self._sleep(wait + WARMUP_PADDING_SECONDS)
                return self._request(prompt, retried=True)

        if not response.ok:
            raise GenerativeResponderFailure(
                f"Hugging Face API error: {response.status_code} {response.text[:200]}"
            )
        try:
            return response.json()
        except ValueError as e:
            raise GenerativeResponderFailure(f"Invalid Hugging Face response: {e}") from e

    @staticmethod
    def _estimated_time(response: requests.Response) -> Optional[float]:
        try:
            value = response.json().get("estimated_time")
        except (ValueError, AttributeError):
            return None
        if isinstance(value, (int, float)) and value >= 0:
            return float(value)
        return None

    @staticmethod
    def _generated_text(data: Any) -> str:
        if isinstance(data, list) and data and isinstance(data[0], dict):
            return str(data[0].get("generated_text", ""))
        if isinstance(data, dict):
            return str(data.get("generated_text", ""))
        return ""

    @staticmethod
    def _clean(text: str, prompt: str) -> str:
        text = text.strip().replace(prompt, "").strip()
        if len(text) <= MIN_REPLY_CHARS:
            raise GenerativeResponderFailure("Hugging Face returned no usable text")
        return text


def build_responder(config: Optional[ResponderConfig] = None) -> Optional[GenerativeResponder]:
    """
    Create the configured responder.

    ``auto`` selects OpenAI when a key is configured and otherwise runs
    without a responder.

    Returns:
        A responder, or None for the heuristic-only mode
    """
    config = config or settings.responder
    backend = config.backend

    if backend == "auto":
        backend = "openai" if config.has_openai_key else "none"

    if backend == "openai":
        return OpenAIResponder(api_key=config.openai_api_key, model=config.openai_model)
    if backend == "huggingface":
        return HuggingFaceResponder(api_key=config.huggingface_api_key, url=config.huggingface_url)
    logger.info("No generative responder configured, using direct extraction")
    return None
