"""Build model requests for a medicine image."""

from __future__ import annotations

from typing import Any

from prompts.templates import DEFAULT_LOCALE, SYSTEM_INSTRUCTIONS


def get_system_instruction(locale: str = DEFAULT_LOCALE) -> str:
    """Fixed instruction for the given locale, falling back to the default."""
    return SYSTEM_INSTRUCTIONS.get(locale, SYSTEM_INSTRUCTIONS[DEFAULT_LOCALE])


def build_chat_messages(data_url: str, instruction: str) -> list[dict[str, Any]]:
    """Chat-completions messages with the image as the only user input."""
    return [
        {"role": "system", "content": instruction},
        {
            "role": "user",
            "content": [
                {"type": "image_url", "image_url": {"url": data_url}},
            ],
        },
    ]
