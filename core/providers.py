"""Vision-language model provider interface and implementations."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod

from core.encoding import parse_data_url
from core.errors import AnalysisError, classify_upstream_error
from core.models import AnalysisResult
from core.prompt_builder import build_chat_messages
from core.settings import resolve_api_key

logger = logging.getLogger(__name__)

__all__ = [
    "VisionProvider",
    "OpenAIVisionProvider",
    "GeminiVisionProvider",
    "get_provider",
    "resolve_api_key",
]


class VisionProvider(ABC):
    """Base interface for multimodal completion providers."""

    provider_name: str = "base"

    @abstractmethod
    def complete(
        self, data_url: str, instruction: str, max_tokens: int, temperature: float
    ) -> str:
        """Return the model's text for one image. May raise SDK exceptions."""
        ...

    def analyze(
        self,
        data_url: str,
        instruction: str,
        max_tokens: int = 2500,
        temperature: float = 0.7,
    ) -> AnalysisResult:
        """Run a single completion and translate SDK failures into the taxonomy."""
        start = time.time()
        try:
            content = self.complete(data_url, instruction, max_tokens, temperature)
        except AnalysisError:
            raise
        except Exception as exc:
            logger.error("%s API error: %s", self.provider_name, exc)
            raise classify_upstream_error(exc) from exc
        elapsed = time.time() - start
        logger.info(
            "Analysis via %s finished in %.2fs (%d chars)",
            self.provider_name, elapsed, len(content or ""),
        )
        return AnalysisResult(content=content or "")


class OpenAIVisionProvider(VisionProvider):
    """OpenAI chat completions with an ``image_url`` part."""

    provider_name = "openai"

    def __init__(self, api_key: str | None = None, model: str = "gpt-4o") -> None:
        self.api_key = resolve_api_key(api_key, "OPENAI_API_KEY")
        self.model = model
        self._client = None
        if not self.api_key:
            raise ValueError("OpenAI API key is required. Set OPENAI_API_KEY or pass api_key.")

    def _get_client(self):
        if self._client is None:
            from openai import OpenAI
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def complete(
        self, data_url: str, instruction: str, max_tokens: int, temperature: float
    ) -> str:
        client = self._get_client()
        logger.info("Analyzing image via OpenAI model=%s", self.model)

        completion = client.chat.completions.create(
            model=self.model,
            messages=build_chat_messages(data_url, instruction),
            max_tokens=max_tokens,
            temperature=temperature,
        )
        return completion.choices[0].message.content or ""


class GeminiVisionProvider(VisionProvider):
    """Google Gemini with the image sent as inline bytes."""

    provider_name = "gemini"

    def __init__(self, api_key: str | None = None, model: str = "gemini-2.0-flash") -> None:
        self.api_key = resolve_api_key(api_key, "GEMINI_API_KEY", "GOOGLE_API_KEY")
        self.model = model
        self._client = None
        if not self.api_key:
            raise ValueError(
                "Gemini API key is required. Set GEMINI_API_KEY/GOOGLE_API_KEY or pass api_key."
            )

    def _get_client(self):
        if self._client is None:
            from google import genai
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def complete(
        self, data_url: str, instruction: str, max_tokens: int, temperature: float
    ) -> str:
        from google.genai import types

        client = self._get_client()
        logger.info("Analyzing image via Gemini model=%s", self.model)

        mime_type, raw = parse_data_url(data_url)
        response = client.models.generate_content(
            model=self.model,
            contents=[types.Part.from_bytes(data=raw, mime_type=mime_type)],
            config={
                "system_instruction": instruction,
                "temperature": temperature,
                "max_output_tokens": max_tokens,
            },
        )
        return response.text or ""


def get_provider(name: str, **kwargs) -> VisionProvider:
    """Factory function to get a provider by name."""
    providers: dict[str, type[VisionProvider]] = {
        "openai": OpenAIVisionProvider,
        "gemini": GeminiVisionProvider,
    }
    if name not in providers:
        raise ValueError(f"Unknown provider: {name}. Available: {list(providers.keys())}")
    return providers[name](**kwargs)
