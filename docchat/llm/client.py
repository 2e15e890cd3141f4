# docchat/llm/client.py

import logging
import os
import time
from typing import Optional, Protocol

from google import genai
from google.genai import types
from openai import OpenAI

from docchat.config import (
    GEMINI_MODEL,
    LLM_MAX_TOKENS,
    LLM_PROVIDER,
    LLM_TEMPERATURE,
    OPENAI_MODEL,
)
from docchat.errors import GenerationError
from docchat.prompts.prompt_builder import build_chat_prompt
from docchat.prompts.system_prompts import CHAT_SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class AnswerGenerator(Protocol):

    def answer(self, question: str, context: str) -> str:
        ...


class GeminiAnswerGenerator:
    """
    Answer generator backed by Google Gemini.

    Failures are not retried; they surface as GenerationError with the
    provider's message attached.
    """

    provider = "gemini"

    def __init__(self, model: str = GEMINI_MODEL, api_key: Optional[str] = None):

        api_key = api_key or os.getenv("GEMINI_API_KEY")
        if not api_key:
            raise ValueError(
                "GEMINI_API_KEY environment variable not set. "
                "Please set it before running the application."
            )

        self.client = genai.Client(api_key=api_key)
        self.model = model

    def answer(self, question: str, context: str) -> str:

        start = time.time()

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=build_chat_prompt(question, context),
                config=types.GenerateContentConfig(
                    system_instruction=CHAT_SYSTEM_PROMPT,
                    temperature=LLM_TEMPERATURE,
                    max_output_tokens=LLM_MAX_TOKENS,
                ),
            )
        except Exception as e:
            raise GenerationError(f"Answer generation failed: {e}") from e

        if not response or not response.text:
            raise GenerationError("Answer generation failed: Gemini returned empty response")

        _log_success(self.provider, start)

        return response.text.strip()


class OpenAIAnswerGenerator:
    """Answer generator backed by the OpenAI chat completions API."""

    provider = "openai"

    def __init__(self, model: str = OPENAI_MODEL, api_key: Optional[str] = None):

        api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError(
                "OPENAI_API_KEY environment variable not set. "
                "Please set it before running the application."
            )

        self.client = OpenAI(api_key=api_key)
        self.model = model

    def answer(self, question: str, context: str) -> str:

        start = time.time()

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "system",
                        "content": CHAT_SYSTEM_PROMPT,
                    },
                    {
                        "role": "user",
                        "content": build_chat_prompt(question, context),
                    },
                ],
                temperature=LLM_TEMPERATURE,
                max_tokens=LLM_MAX_TOKENS,
            )
        except Exception as e:
            raise GenerationError(f"Answer generation failed: {e}") from e

        text = response.choices[0].message.content

        if not text:
            raise GenerationError("Answer generation failed: OpenAI returned empty response")

        _log_success(self.provider, start)

        return text.strip()


def _log_success(provider: str, start: float):

    logger.info(
        "LLM provider success",
        extra={
            "provider": provider,
            "latency_seconds": round(time.time() - start, 3),
        },
    )


def build_answer_generator(provider: str = LLM_PROVIDER) -> AnswerGenerator:

    if provider == "gemini":
        return GeminiAnswerGenerator()

    if provider == "openai":
        return OpenAIAnswerGenerator()

    raise ValueError(f"Unsupported LLM provider: {provider}")
