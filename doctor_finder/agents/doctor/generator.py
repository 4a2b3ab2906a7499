"""
Text generation capability for doctor recommendations.

The recommendation service only needs "prompt in, text out". That contract
is the TextGenerator protocol; GeminiTextGenerator implements it with the
Google Gen AI SDK. Routes receive a generator through the get_text_generator
dependency so tests can swap in a fake via app.dependency_overrides.
"""

import logging
from functools import lru_cache
from typing import Optional, Protocol

from google import genai
from google.genai import types

from doctor_finder.agents.doctor.prompts import DOCTOR_SYSTEM_PROMPT
from doctor_finder.config import settings

logger = logging.getLogger(__name__)


class UpstreamGenerationError(Exception):
    """Raised when the generation service answers without usable text."""


class TextGenerator(Protocol):
    """Anything that can turn a prompt into raw model text."""

    async def generate(self, prompt: str) -> str:
        ...


class GeminiTextGenerator:
    """
    TextGenerator backed by Gemini.

    Provider errors (network, auth, quota) propagate unchanged; the service
    layer classifies them as upstream failures.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        temperature: float = 0.4,
        max_output_tokens: int = 4096,
        system_instruction: Optional[str] = DOCTOR_SYSTEM_PROMPT,
    ):
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.system_instruction = system_instruction
        self._client = genai.Client(api_key=api_key)

    async def generate(self, prompt: str) -> str:
        config = types.GenerateContentConfig(
            system_instruction=self.system_instruction,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )

        logger.info(f"Calling Gemini model={self.model}")
        response = await self._client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=config,
        )

        text = response.text
        if not text:
            logger.error("Empty text in Gemini response")
            raise UpstreamGenerationError("Gemini returned an empty response.")

        logger.debug(f"Gemini raw response text: {text}")
        return text


@lru_cache(maxsize=4)
def _build_gemini_generator(api_key: str, model: str) -> GeminiTextGenerator:
    generator = GeminiTextGenerator(
        api_key=api_key,
        model=model,
        temperature=settings.GEMINI_TEMPERATURE,
        max_output_tokens=settings.GEMINI_MAX_OUTPUT_TOKENS,
    )
    logger.info(f"Gemini client initialized for model={model}")
    return generator


def get_text_generator() -> Optional[TextGenerator]:
    """
    FastAPI dependency returning the configured text generator.

    Returns None when no API key is configured; the service turns that
    into an upstream failure envelope instead of crashing the request.
    """
    if not settings.GOOGLE_API_KEY:
        logger.warning(
            "GOOGLE_API_KEY not configured. Doctor recommendations will not work. "
            "Please set GOOGLE_API_KEY in your .env file."
        )
        return None

    return _build_gemini_generator(settings.GOOGLE_API_KEY, settings.GEMINI_MODEL)
