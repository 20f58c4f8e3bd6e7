from pathlib import Path
from types import SimpleNamespace
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import httpx
import openai
import pytest

from core.encoding import build_data_url, encode_base64
from core.errors import (
    RATE_LIMITED_MESSAGE,
    UpstreamRateLimited,
    UpstreamRejected,
    UpstreamUnavailable,
    classify_upstream_error,
)
from core.models import AnalysisResult
from core.prompt_builder import get_system_instruction
from core.providers import GeminiVisionProvider, OpenAIVisionProvider

RAW = b"\x89PNG\r\n\x1a\nfake-png-bytes"
DATA_URL = build_data_url(encode_base64(RAW), "image/png")


def openai_status_error(cls, status: int):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    return cls("upstream detail", response=httpx.Response(status, request=request), body=None)


class FakeCompletions:
    def __init__(self, content="X", error=None):
        self.content = content
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(role="assistant", content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def openai_provider(completions: FakeCompletions) -> OpenAIVisionProvider:
    provider = OpenAIVisionProvider(api_key="sk-test")
    provider._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return provider


def test_openai_sends_image_as_sole_user_input():
    completions = FakeCompletions(content="## Medicines")
    instruction = get_system_instruction("en")

    result = openai_provider(completions).analyze(DATA_URL, instruction, max_tokens=2500, temperature=0.7)

    assert result == AnalysisResult(content="## Medicines")
    kwargs = completions.kwargs
    assert kwargs["model"] == "gpt-4o"
    assert kwargs["max_tokens"] == 2500
    assert kwargs["temperature"] == 0.7
    system, user = kwargs["messages"]
    assert system == {"role": "system", "content": instruction}
    assert user["role"] == "user"
    assert user["content"] == [{"type": "image_url", "image_url": {"url": DATA_URL}}]


def test_openai_empty_content_becomes_empty_string():
    result = openai_provider(FakeCompletions(content=None)).analyze(DATA_URL, "x")
    assert result.content == ""


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (openai_status_error(openai.RateLimitError, 429), UpstreamRateLimited),
        (openai_status_error(openai.BadRequestError, 400), UpstreamRejected),
        (openai_status_error(openai.InternalServerError, 500), UpstreamUnavailable),
    ],
)
def test_openai_sdk_errors_are_classified(error, expected):
    provider = openai_provider(FakeCompletions(error=error))

    with pytest.raises(expected) as excinfo:
        provider.analyze(DATA_URL, "x")

    assert "upstream detail" not in excinfo.value.message


def test_gemini_sends_inline_bytes():
    calls = {}

    def generate_content(**kwargs):
        calls.update(kwargs)
        return SimpleNamespace(text="Y")

    provider = GeminiVisionProvider(api_key="g-test")
    provider._client = SimpleNamespace(models=SimpleNamespace(generate_content=generate_content))

    result = provider.analyze(DATA_URL, "instruction", max_tokens=100, temperature=0.2)

    assert result.content == "Y"
    assert calls["model"] == "gemini-2.0-flash"
    part = calls["contents"][0]
    assert part.inline_data.data == RAW
    assert part.inline_data.mime_type == "image/png"
    assert calls["config"] == {
        "system_instruction": "instruction",
        "temperature": 0.2,
        "max_output_tokens": 100,
    }


def test_classify_uses_code_attribute():
    error = Exception("quota")
    error.code = 429
    classified = classify_upstream_error(error)
    assert isinstance(classified, UpstreamRateLimited)
    assert classified.message == RATE_LIMITED_MESSAGE
    assert classified.status_code == 429


def test_classify_without_status_is_unavailable():
    classified = classify_upstream_error(ConnectionError("reset"))
    assert isinstance(classified, UpstreamUnavailable)
    assert classified.status_code == 500
