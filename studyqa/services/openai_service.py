"""OpenAI LLM service for study question generation."""
import json
import logging
from typing import Any

from openai import OpenAI, OpenAIError

from studyqa.core.config import Settings, settings as default_settings
from studyqa.core.errors import GenerationFailed

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = (
    "You are an expert educator who creates high-quality study materials. "
    "Generate insightful questions with comprehensive answers based on document content."
)


class OpenAIService:
    """Service for interacting with OpenAI API."""

    def __init__(self, settings: Settings = default_settings, client: OpenAI = None):
        """Initialize OpenAI client with API key and timeout from settings."""
        self.client = client or OpenAI(
            api_key=settings.OPENAI_API_KEY,
            timeout=settings.OPENAI_TIMEOUT_SECONDS,
        )
        self.model = settings.OPENAI_MODEL
        self.max_tokens = settings.OPENAI_MAX_TOKENS
        self.max_chars = settings.GENERATION_MAX_CHARS

    def generate_questions(self, text: str, count: int = 5) -> Any:
        """
        Generate question/answer pairs from document text.

        Args:
            text: Extracted document text
            count: Number of pairs to ask for

        Returns:
            The decoded JSON payload, in whatever shape the model chose.
            Use question_parser.normalize_questions to flatten it.

        Raises:
            GenerationFailed: API error, timeout, empty or non-JSON response
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": self._build_user_prompt(text, count)}
                ],
                response_format={"type": "json_object"},
                max_tokens=self.max_tokens,
            )
        except OpenAIError as e:
            logger.error("OpenAI request failed: %s", e)
            raise GenerationFailed(f"Failed to generate questions: {str(e)}", cause=e) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise GenerationFailed("Failed to generate questions: Empty response from OpenAI")

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning("OpenAI returned invalid JSON: %s", e)
            raise GenerationFailed(f"Failed to generate questions: invalid JSON ({e.msg})", cause=e) from e

    def _build_user_prompt(self, text: str, count: int) -> str:
        """Build the user prompt with the (truncated) document text."""
        return f"""Analyze the following text and generate {count} educational questions with detailed answers.
The questions should test understanding of key concepts from the content.
Include detailed explanations in the answers to aid learning.

FORMAT YOUR RESPONSE AS JSON: an object with a "questions" array of objects containing "question" and "answer" fields.

TEXT TO ANALYZE:
{text[:self.max_chars]}"""
