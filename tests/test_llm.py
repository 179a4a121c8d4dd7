"""
Tests for the generative responders.

requests.post is patched; no API is ever called.
"""

import pytest
import requests
from unittest.mock import MagicMock, patch

from supportdesk.exceptions import GenerativeResponderFailure


def make_response(status=200, payload=None, text=""):
    response = MagicMock()
    response.status_code = status
    response.ok = status < 400
    response.text = text
    response.json.return_value = payload
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
    return response


class TestBuildMessages:
    """Tests for prompt construction."""

    def test_knowledge_in_system_turn(self):
        """Test knowledge text is embedded in the system message."""
        from supportdesk.core.llm import build_messages

        messages = build_messages("Where is my parcel?", knowledge="SHIPPING INFO")

        assert messages[0].role == "system"
        assert "SHIPPING INFO" in messages[0].content
        assert messages[1].to_dict() == {"role": "user", "content": "Where is my parcel?"}

    def test_prompt_without_knowledge(self):
        """Test the completion prompt ends with the assistant cue."""
        from supportdesk.core.llm import build_prompt

        prompt = build_prompt("hi there")
        assert prompt.endswith("User: hi there\nAssistant:")


class TestOpenAIResponder:
    """Tests for OpenAIResponder."""

    def test_generate(self):
        """Test a successful completion."""
        from supportdesk.core.llm import OpenAIResponder

        responder = OpenAIResponder(api_key="sk-test", model="gpt-test")
        payload = {"choices": [{"message": {"content": "  Returns take 30 days.  "}}]}

        with patch("supportdesk.core.llm.requests.post") as mock_post:
            mock_post.return_value = make_response(payload=payload)
            reply = responder.generate("How do returns work?")

        assert reply == "Returns take 30 days."
        _, kwargs = mock_post.call_args
        assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
        assert kwargs["json"]["model"] == "gpt-test"

    def test_http_error(self):
        """Test HTTP errors become responder failures."""
        from supportdesk.core.llm import OpenAIResponder

        with patch("supportdesk.core.llm.requests.post") as mock_post:
            mock_post.return_value = make_response(status=429)
            with pytest.raises(GenerativeResponderFailure):
                OpenAIResponder(api_key="sk-test").generate("hi")

    def test_short_reply(self):
        """Test replies of five characters or fewer are rejected."""
        from supportdesk.core.llm import OpenAIResponder

        payload = {"choices": [{"message": {"content": "ok"}}]}
        with patch("supportdesk.core.llm.requests.post") as mock_post:
            mock_post.return_value = make_response(payload=payload)
            with pytest.raises(GenerativeResponderFailure):
                OpenAIResponder(api_key="sk-test").generate("hi")

    def test_malformed_payload(self):
        """Test unexpected JSON becomes a responder failure."""
        from supportdesk.core.llm import OpenAIResponder

        with patch("supportdesk.core.llm.requests.post") as mock_post:
            mock_post.return_value = make_response(payload={"error": "nope"})
            with pytest.raises(GenerativeResponderFailure):
                OpenAIResponder(api_key="sk-test").generate("hi")


class TestHuggingFaceResponder:
    """Tests for HuggingFaceResponder."""

    def test_model_loading_retry(self):
        """Test a 503 with estimated_time waits once and retries."""
        from supportdesk.core.llm import HuggingFaceResponder

        sleep = MagicMock()
        responder = HuggingFaceResponder(api_key="", url="https://hf.test/model", sleep=sleep)

        with patch("supportdesk.core.llm.requests.post") as mock_post:
            mock_post.side_effect = [
                make_response(status=503, payload={"estimated_time": 4}),
                make_response(payload=[{"generated_text": "Your parcel is on its way."}]),
            ]
            reply = responder.generate("Where is my parcel?")

        assert reply == "Your parcel is on its way."
        sleep.assert_called_once_with(6.0)
        _, kwargs = mock_post.call_args
        assert "Authorization" not in kwargs["headers"]

    def test_echoed_prompt_removed(self):
        """Test the prompt is stripped from the generated text."""
        from supportdesk.core.llm import HuggingFaceResponder, build_prompt

        responder = HuggingFaceResponder(api_key="hf-token", url="https://hf.test/model", sleep=MagicMock())
        prompt = build_prompt("Where is my parcel?")

        with patch("supportdesk.core.llm.requests.post") as mock_post:
            mock_post.return_value = make_response(
                payload=[{"generated_text": prompt + " It ships tomorrow."}]
            )
            assert responder.generate("Where is my parcel?") == "It ships tomorrow."

    def test_error_status(self):
        """Test non-503 errors fail immediately."""
        from supportdesk.core.llm import HuggingFaceResponder

        responder = HuggingFaceResponder(url="https://hf.test/model", sleep=MagicMock())
        with patch("supportdesk.core.llm.requests.post") as mock_post:
            mock_post.return_value = make_response(status=400, text="bad request")
            with pytest.raises(GenerativeResponderFailure, match="400"):
                responder.generate("hi")


class TestBuildResponder:
    """Tests for responder selection."""

    def test_auto_without_key(self):
        """Test auto mode runs without a responder when no key is set."""
        from supportdesk.config import ResponderConfig
        from supportdesk.core.llm import build_responder

        assert build_responder(ResponderConfig(backend="auto", openai_api_key="")) is None

    def test_auto_with_key(self):
        """Test auto mode picks OpenAI when a key is set."""
        from supportdesk.config import ResponderConfig
        from supportdesk.core.llm import OpenAIResponder, build_responder

        responder = build_responder(ResponderConfig(backend="auto", openai_api_key="sk-real"))
        assert isinstance(responder, OpenAIResponder)

    def test_huggingface(self):
        """Test the Hugging Face backend."""
        from supportdesk.config import ResponderConfig
        from supportdesk.core.llm import HuggingFaceResponder, build_responder

        responder = build_responder(ResponderConfig(backend="huggingface"))
        assert isinstance(responder, HuggingFaceResponder)
