"""Uploader component: owns the selected image and one submission at a time."""

from __future__ import annotations

import logging

from core.client import AnalysisClient
from core.errors import ProcessingFailed, SubmissionFailed
from core.messages import get_message
from core.models import AnalysisResult, ErrorDescriptor, ImageSubmission, UploaderState
from core.preprocess import JPEG_QUALITY, MAX_HEIGHT, MAX_WIDTH, compress_image
from core.settings import DEFAULT_MAX_UPLOAD_BYTES

logger = logging.getLogger(__name__)


class Uploader:
    """Idle -> Ready -> Analyzing -> Result | Error, back to Idle on removal.

    Only one request is in flight at a time; ``analyze`` is a no-op while
    analyzing and never touches the network without a selected image.
    """

    def __init__(
        self,
        client: AnalysisClient,
        compress: bool = True,
        max_width: int = MAX_WIDTH,
        max_height: int = MAX_HEIGHT,
        quality: float = JPEG_QUALITY,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        locale: str = "he",
    ) -> None:
        self.client = client
        self.compress = compress
        self.max_width = max_width
        self.max_height = max_height
        self.quality = quality
        self.max_upload_bytes = max_upload_bytes
        self.locale = locale

        self.state = UploaderState.IDLE
        self.original: ImageSubmission | None = None
        self.selected: ImageSubmission | None = None
        self.result: AnalysisResult | None = None
        self.error: ErrorDescriptor | None = None
        self.upload_id: str | None = None

    @property
    def busy(self) -> bool:
        return self.state == UploaderState.ANALYZING

    @property
    def can_analyze(self) -> bool:
        return self.selected is not None and not self.busy

    def select_image(self, filename: str, data: bytes, mime_type: str) -> ImageSubmission | None:
        """Validate and (optionally) compress a picked or dropped file."""
        image = ImageSubmission(data=data, mime_type=mime_type or "", filename=filename)
        self.result = None

        if not image.is_image:
            self._fail("invalid_input", get_message("invalid_type", self.locale))
            return None

        if image.size > self.max_upload_bytes:
            self._fail(
                "payload_too_large",
                get_message(
                    "too_large", self.locale,
                    max_mb=self.max_upload_bytes / 1024 / 1024,
                    size_mb=image.size_mb,
                ),
            )
            return None

        prepared = image
        if self.compress:
            try:
                prepared = compress_image(
                    image,
                    max_width=self.max_width,
                    max_height=self.max_height,
                    quality=self.quality,
                )
            except ProcessingFailed:
                self._fail("processing_failed", get_message("processing_failed", self.locale))
                return None

            ratio = (image.size - prepared.size) / image.size * 100 if image.size else 0.0
            if ratio > 10:
                logger.info("Image compressed by %.1f%%", ratio)

        self.original = image
        self.selected = prepared
        self.error = None
        self.state = UploaderState.READY
        return prepared

    def select_upload(
        self, upload_id: str, filename: str, data: bytes, mime_type: str
    ) -> ImageSubmission | None:
        """Select a widget upload once; repeats of the same ``upload_id`` are ignored."""
        if upload_id == self.upload_id:
            return self.selected
        self.upload_id = upload_id
        return self.select_image(filename, data, mime_type)

    def remove_image(self) -> None:
        self.upload_id = None
        self.original = None
        self.selected = None
        self.result = None
        self.error = None
        self.state = UploaderState.IDLE

    def analyze(self) -> AnalysisResult | None:
        if self.busy:
            return None
        if self.selected is None:
            self._fail("invalid_input", get_message("no_image", self.locale))
            return None

        self.state = UploaderState.ANALYZING
        try:
            result = self.client.submit(self.selected)
        except SubmissionFailed as exc:
            logger.error("Image analysis failed: %s", exc.message)
            self._fail(exc.kind, get_message("analysis_failed", self.locale, message=exc.message))
            return None
        finally:
            if self.state == UploaderState.ANALYZING:
                self.state = UploaderState.READY

        self.result = result
        self.error = None
        self.state = UploaderState.RESULT
        return result

    def _fail(self, kind: str, message: str) -> None:
        self.error = ErrorDescriptor(kind=kind, message=message)
        self.state = UploaderState.ERROR
