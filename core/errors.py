"""Error taxonomy shared by the analysis handler and the uploader client."""

from __future__ import annotations

RATE_LIMITED_MESSAGE = "Rate limit exceeded. Please try again in a few minutes."
UPSTREAM_REJECTED_MESSAGE = "Invalid image format. Please try with a different image."
UPSTREAM_UNAVAILABLE_MESSAGE = "Failed to analyze image. Please try again."


class AnalysisError(Exception):
    """Base class for failures that terminate a single analysis request.

    ``message`` is always safe to return to the end user; internal detail
    belongs in the server log.
    """

    status_code: int = 500
    kind: str = "analysis_error"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message}


class InvalidInput(AnalysisError):
    status_code = 400
    kind = "invalid_input"


class PayloadTooLarge(AnalysisError):
    status_code = 413
    kind = "payload_too_large"


class IOFailure(AnalysisError):
    status_code = 400
    kind = "io_failure"


class UpstreamRateLimited(AnalysisError):
    status_code = 429
    kind = "upstream_rate_limited"


class UpstreamRejected(AnalysisError):
    status_code = 400
    kind = "upstream_rejected"


class UpstreamUnavailable(AnalysisError):
    status_code = 500
    kind = "upstream_unavailable"


class InternalFault(AnalysisError):
    status_code = 500
    kind = "internal_fault"


# Client-side failures

class ProcessingFailed(AnalysisError):
    """The image could not be decoded or re-encoded before upload."""

    status_code = 400
    kind = "processing_failed"


class SubmissionFailed(AnalysisError):
    """The analysis endpoint answered with an HTTP or logical failure."""

    kind = "submission_failed"


def upstream_status(exc: BaseException) -> int | None:
    """Best-effort HTTP status of an SDK exception (openai or google-genai)."""
    for attr in ("status_code", "code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    return None


def classify_upstream_error(exc: BaseException) -> AnalysisError:
    """Map a model-API failure onto the upstream part of the taxonomy.

    The upstream's own message is never forwarded.
    """
    status = upstream_status(exc)
    if status == 429:
        return UpstreamRateLimited(RATE_LIMITED_MESSAGE)
    if status == 400:
        return UpstreamRejected(UPSTREAM_REJECTED_MESSAGE)
    return UpstreamUnavailable(UPSTREAM_UNAVAILABLE_MESSAGE)
