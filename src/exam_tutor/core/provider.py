"""
Generation provider capability and its Gemini implementation.

The pipeline only ever talks to a GenerationProvider, so tests can swap
in a stub that returns canned fragments and payloads.
"""
import os
import logging
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, Optional

from google import genai

from src.exam_tutor import config
from src.exam_tutor.core.exceptions import ProviderError
from src.exam_tutor.utils.env_loader import load_env

logger = logging.getLogger(__name__)


class GenerationProvider(ABC):
    """Narrow capability the content pipeline depends on."""

    @abstractmethod
    def stream_text(self, prompt: str, temperature: float) -> AsyncIterator[str]:
        """Stream text fragments for a prompt. Fails with ProviderError."""

    @abstractmethod
    async def generate_structured(
        self,
        prompt: str,
        schema: Dict[str, Any],
        temperature: float
    ) -> str:
        """Return raw JSON text conforming to schema. Fails with ProviderError."""


class GeminiProvider(GenerationProvider):
    """Generation provider backed by the Gemini async client."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None
    ):
        """
        Initialize the Gemini provider.

        Args:
            api_key: Google AI API key. If not provided, uses GEMINI_API_KEY environment variable.
            model_name: Name of the Gemini model to use. If not provided, uses config.MODEL_NAME
        """
        load_env()

        if api_key:
            os.environ[config.API_KEY_ENV_VAR] = api_key

        self.client = genai.Client(api_key=api_key)
        self.model_name = model_name or config.MODEL_NAME

    async def stream_text(self, prompt: str, temperature: float) -> AsyncIterator[str]:
        logger.info(f"Streaming text from {self.model_name} (temperature={temperature})")
        try:
            stream = await self.client.aio.models.generate_content_stream(
                model=self.model_name,
                contents=prompt,
                config={"temperature": temperature}
            )
            async for chunk in stream:
                if chunk.text:
                    yield chunk.text
        except Exception as e:
            logger.error(f"Text stream failed: {e}")
            raise ProviderError(f"Streaming request to {self.model_name} failed: {e}") from e

    async def generate_structured(
        self,
        prompt: str,
        schema: Dict[str, Any],
        temperature: float
    ) -> str:
        logger.info(f"Requesting structured output from {self.model_name} (temperature={temperature})")
        generation_config = {
            "response_mime_type": "application/json",
            "response_json_schema": schema,
            "temperature": temperature,
        }
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=generation_config
            )
        except Exception as e:
            logger.error(f"Structured request failed: {e}")
            raise ProviderError(f"Structured request to {self.model_name} failed: {e}") from e

        return response.text or ""
