"""Runtime configuration read from the process environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MIB = 1024 * 1024

DEFAULT_MAX_UPLOAD_BYTES = 10 * MIB
DEFAULT_MAX_ENCODED_BYTES = 20 * MIB
DEFAULT_API_URL = "http://localhost:5000/"


def resolve_api_key(explicit: str | None, *env_names: str) -> str:
    """Return the explicit key if given, else the first non-empty env variable."""
    if explicit and explicit.strip():
        return explicit.strip()
    for name in env_names:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return ""


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, raw)
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", name, raw)
        return default


@dataclass
class Settings:
    provider: str = "openai"
    model: str | None = None
    max_tokens: int = 2500
    temperature: float = 0.7
    locale: str = "he"
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    # The encoded-size gate only runs when a threshold is configured.
    encoded_check_threshold: int | None = None
    max_encoded_bytes: int = DEFAULT_MAX_ENCODED_BYTES
    base64_chunk_bytes: int | None = None
    api_url: str = DEFAULT_API_URL

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            provider=os.environ.get("ANALYSIS_PROVIDER", "openai").strip().lower() or "openai",
            model=os.environ.get("ANALYSIS_MODEL", "").strip() or None,
            max_tokens=_env_int("ANALYSIS_MAX_TOKENS", 2500),
            temperature=_env_float("ANALYSIS_TEMPERATURE", 0.7),
            locale=os.environ.get("ANALYSIS_LOCALE", "he").strip().lower() or "he",
            max_upload_bytes=_env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
            encoded_check_threshold=_env_int("ENCODED_CHECK_THRESHOLD_BYTES", None),
            max_encoded_bytes=_env_int("MAX_ENCODED_BYTES", DEFAULT_MAX_ENCODED_BYTES),
            base64_chunk_bytes=_env_int("BASE64_CHUNK_BYTES", None),
            api_url=os.environ.get("ANALYSIS_API_URL", "").strip() or DEFAULT_API_URL,
        )

    def provider_kwargs(self) -> dict[str, str]:
        """Keyword arguments for ``core.providers.get_provider``."""
        kwargs: dict[str, str] = {}
        if self.model:
            kwargs["model"] = self.model
        return kwargs
