"""HTTP client for the analysis endpoint."""

from __future__ import annotations

import logging

import httpx

from core.errors import SubmissionFailed
from core.messages import get_message
from core.models import AnalysisResult, ImageSubmission

logger = logging.getLogger(__name__)

# Status code -> message key. Anything >= 500 uses the 500 entry.
STATUS_MESSAGES: dict[int, str] = {
    400: "status_400",
    405: "status_405",
    413: "status_413",
    429: "status_429",
    500: "status_500",
}


def message_for_status(status: int, server_error: str | None = None, locale: str = "he") -> str:
    """User-facing text for a non-2xx analysis response."""
    key = STATUS_MESSAGES.get(500 if status >= 500 else status)
    if status == 400 and server_error:
        # The handler's 400 messages are already user-safe.
        return server_error
    if key is not None:
        return get_message(key, locale)
    return server_error or get_message("http_error", locale, status=status)


class AnalysisClient:
    """Posts one image per call to the analysis endpoint."""

    def __init__(
        self,
        api_url: str,
        locale: str = "he",
        timeout: float | None = 120,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_url = api_url
        self.locale = locale
        self.timeout = timeout
        self.transport = transport

    def submit(self, image: ImageSubmission) -> AnalysisResult:
        files = {"image": (image.filename, image.data, image.effective_mime_type)}
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as http:
                resp = http.post(self.api_url, files=files)
        except httpx.HTTPError as exc:
            logger.error("Request to %s failed: %s", self.api_url, exc)
            raise SubmissionFailed(get_message("network_error", self.locale)) from exc

        if not resp.is_success:
            server_error = None
            try:
                body = resp.json()
                if isinstance(body, dict):
                    server_error = body.get("error")
            except ValueError as parse_error:
                logger.info("Could not parse error response: %s", parse_error)

            message = message_for_status(resp.status_code, server_error, self.locale)
            logger.error(
                "HTTP error details: status=%d reason=%s url=%s message=%s",
                resp.status_code, resp.reason_phrase, resp.url, message,
            )
            raise SubmissionFailed(message, status_code=resp.status_code)

        try:
            payload = resp.json()
        except ValueError as exc:
            raise SubmissionFailed(
                get_message("http_error", self.locale, status=resp.status_code),
                status_code=resp.status_code,
            ) from exc

        if not isinstance(payload, dict):
            payload = {}
        if payload.get("error"):
            raise SubmissionFailed(payload["error"], status_code=resp.status_code)

        return AnalysisResult.from_dict(payload)
