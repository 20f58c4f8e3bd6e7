"""Data models for image submissions and analysis results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

DEFAULT_MIME_TYPE = "image/jpeg"


class UploaderState(str, Enum):
    IDLE = "idle"
    READY = "ready"
    ANALYZING = "analyzing"
    RESULT = "result"
    ERROR = "error"


@dataclass(frozen=True)
class ImageSubmission:
    """One image as selected by the user or received by the handler."""

    data: bytes
    mime_type: str = ""
    filename: str = "image"

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def size_mb(self) -> float:
        return self.size / 1024 / 1024

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")

    @property
    def effective_mime_type(self) -> str:
        return self.mime_type or DEFAULT_MIME_TYPE

    def describe(self) -> dict[str, Any]:
        return {"name": self.filename, "size": self.size, "type": self.mime_type}


@dataclass
class AnalysisResult:
    content: str
    role: str = "assistant"

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> AnalysisResult:
        return cls(
            content=payload.get("content") or "",
            role=payload.get("role") or "assistant",
        )


@dataclass
class ErrorDescriptor:
    kind: str
    message: str
