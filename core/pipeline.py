"""Analysis pipeline: size gates, encoding, and the single upstream call."""

from __future__ import annotations

import logging
from typing import Callable

from core.encoding import build_data_url, encode_base64, estimate_encoded_size
from core.errors import PayloadTooLarge
from core.models import AnalysisResult, ImageSubmission
from core.prompt_builder import get_system_instruction
from core.providers import VisionProvider
from core.settings import Settings

logger = logging.getLogger(__name__)


def check_upload_size(size: int, max_bytes: int) -> None:
    """Raise ``PayloadTooLarge`` when ``size`` exceeds the raw ceiling."""
    if size > max_bytes:
        raise PayloadTooLarge(
            f"Image too large. Maximum size is {max_bytes / 1024 / 1024:.0f}MB. "
            f"Current size: {size / 1024 / 1024:.2f}MB"
        )


def check_encoded_size(size: int, settings: Settings) -> None:
    """Estimate-based gate, active only above ``encoded_check_threshold``."""
    threshold = settings.encoded_check_threshold
    if threshold is None or size <= threshold:
        return
    estimate = estimate_encoded_size(size)
    if estimate > settings.max_encoded_bytes:
        raise PayloadTooLarge(
            "Image too large for processing. Please use a smaller image. "
            f"Estimated encoded size: {estimate / 1024 / 1024:.2f}MB"
        )


def prepare_image(submission: ImageSubmission, settings: Settings) -> str:
    """Validate sizes and return the submission as a base64 data URL."""
    check_upload_size(submission.size, settings.max_upload_bytes)
    check_encoded_size(submission.size, settings)

    encoded = encode_base64(submission.data, chunk_size=settings.base64_chunk_bytes)
    mime_type = submission.effective_mime_type
    logger.info(
        "Image processed successfully: original_size=%d base64_size=%d mime_type=%s",
        submission.size, len(encoded), mime_type,
    )
    return build_data_url(encoded, mime_type)


def request_analysis(
    provider: VisionProvider, data_url: str, settings: Settings
) -> AnalysisResult:
    return provider.analyze(
        data_url,
        get_system_instruction(settings.locale),
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
    )


def analyze_submission(
    submission: ImageSubmission,
    provider: VisionProvider | Callable[[], VisionProvider],
    settings: Settings,
) -> AnalysisResult:
    """Full server-side path for one submission.

    Size gates run before the provider is touched, so rejected payloads never
    reach the upstream API. ``provider`` may be a zero-argument factory; it is
    only called once the image has passed the gates.
    """
    data_url = prepare_image(submission, settings)
    if not isinstance(provider, VisionProvider):
        provider = provider()
    return request_analysis(provider, data_url, settings)
