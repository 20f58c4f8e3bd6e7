"""Base64 and data-URL helpers for image payloads."""

from __future__ import annotations

import base64
import binascii
import math

from core.errors import InvalidInput


def estimate_encoded_size(byte_length: int) -> int:
    """Size of the base64 text for ``byte_length`` raw bytes, rounded up."""
    return math.ceil(byte_length * 4 / 3)


def encode_base64(data: bytes, chunk_size: int | None = None) -> str:
    """Standard base64 of ``data``.

    With ``chunk_size`` the input is encoded piecewise. Chunks are aligned to
    3 bytes so no padding appears mid-stream and the output is identical to a
    single-shot encode.
    """
    if not chunk_size or chunk_size >= len(data):
        return base64.b64encode(data).decode("ascii")

    step = max(3, chunk_size - chunk_size % 3)
    parts = [
        base64.b64encode(data[offset:offset + step]).decode("ascii")
        for offset in range(0, len(data), step)
    ]
    return "".join(parts)


def build_data_url(encoded: str, mime_type: str) -> str:
    return f"data:{mime_type};base64,{encoded}"


def parse_data_url(data_url: str) -> tuple[str, bytes]:
    """Split a base64 data URL into ``(mime_type, raw_bytes)``."""
    header, sep, payload = data_url.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise InvalidInput("Malformed data URL.")
    mime_type = header[len("data:"):-len(";base64")]
    try:
        raw = base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise InvalidInput("Malformed data URL.") from exc
    return mime_type, raw
