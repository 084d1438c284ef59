"""Tests for OpenAIService with a mocked OpenAI client."""
import json
from unittest.mock import Mock

import httpx
import openai
import pytest

from studyqa.core.config import Settings
from studyqa.core.errors import GenerationFailed
from studyqa.services.openai_service import OpenAIService


def _response(content):
    message = Mock(content=content)
    return Mock(choices=[Mock(message=message)])


@pytest.fixture
def mock_client():
    return Mock()


@pytest.fixture
def service(mock_client):
    settings = Settings(OPENAI_API_KEY="test-key", OPENAI_MODEL="gpt-4o", GENERATION_MAX_CHARS=20)
    return OpenAIService(settings, client=mock_client)


class TestOpenAIService:

    def test_returns_decoded_payload(self, service, mock_client):
        payload = {"questions": [{"question": "Q?", "answer": "A"}]}
        mock_client.chat.completions.create.return_value = _response(json.dumps(payload))

        assert service.generate_questions("Some text", 3) == payload

    def test_request_uses_json_mode_and_truncates_text(self, service, mock_client):
        mock_client.chat.completions.create.return_value = _response("{}")

        service.generate_questions("x" * 100, 4)

        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["max_tokens"] == 2000
        user_prompt = kwargs["messages"][1]["content"]
        assert "generate 4 educational questions" in user_prompt
        assert "x" * 20 in user_prompt
        assert "x" * 21 not in user_prompt

    def test_empty_content(self, service, mock_client):
        mock_client.chat.completions.create.return_value = _response(None)

        with pytest.raises(GenerationFailed) as exc_info:
            service.generate_questions("text", 3)

        assert "Empty response" in exc_info.value.message

    def test_invalid_json(self, service, mock_client):
        mock_client.chat.completions.create.return_value = _response("Here are your questions: ...")

        with pytest.raises(GenerationFailed):
            service.generate_questions("text", 3)

    def test_timeout_is_generation_failure(self, service, mock_client):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        mock_client.chat.completions.create.side_effect = openai.APITimeoutError(request=request)

        with pytest.raises(GenerationFailed) as exc_info:
            service.generate_questions("text", 3)

        assert isinstance(exc_info.value.cause, openai.APITimeoutError)

    def test_client_configured_with_timeout(self):
        settings = Settings(OPENAI_API_KEY="test-key", OPENAI_TIMEOUT_SECONDS=12.5)

        service = OpenAIService(settings)

        assert service.client.timeout == 12.5
