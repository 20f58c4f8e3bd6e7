from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import httpx
import pytest

from core.client import AnalysisClient, message_for_status
from core.errors import SubmissionFailed
from core.messages import get_message
from core.models import ImageSubmission

IMAGE = ImageSubmission(data=b"\xff\xd8\xff\xe0jpeg", mime_type="image/jpeg", filename="pills.jpg")


def make_client(handler, locale: str = "en") -> AnalysisClient:
    return AnalysisClient(
        "http://analysis.test/",
        locale=locale,
        transport=httpx.MockTransport(handler),
    )


def test_submit_posts_single_image_part_and_returns_content():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["body"] = request.read()
        seen["content_type"] = request.headers["content-type"]
        return httpx.Response(200, json={"role": "assistant", "content": "# Result"})

    result = make_client(handler).submit(IMAGE)

    assert result.content == "# Result"
    assert result.role == "assistant"
    assert seen["method"] == "POST"
    assert seen["content_type"].startswith("multipart/form-data")
    assert b'name="image"' in seen["body"]
    assert b'filename="pills.jpg"' in seen["body"]
    assert b"Content-Type: image/jpeg" in seen["body"]
    assert IMAGE.data in seen["body"]


@pytest.mark.parametrize(
    ("status", "key"),
    [(405, "status_405"), (413, "status_413"), (429, "status_429"), (500, "status_500"), (502, "status_500")],
)
def test_status_codes_map_to_fixed_messages(status, key):
    client = make_client(lambda request: httpx.Response(status, json={"error": "server detail"}))

    with pytest.raises(SubmissionFailed) as excinfo:
        client.submit(IMAGE)

    assert excinfo.value.message == get_message(key, "en")
    assert excinfo.value.status_code == status


def test_bad_request_prefers_server_message():
    client = make_client(lambda request: httpx.Response(400, json={"error": "No image provided."}))

    with pytest.raises(SubmissionFailed) as excinfo:
        client.submit(IMAGE)

    assert excinfo.value.message == "No image provided."


def test_bad_request_without_body_uses_table():
    client = make_client(lambda request: httpx.Response(400, text="oops"))

    with pytest.raises(SubmissionFailed) as excinfo:
        client.submit(IMAGE)

    assert excinfo.value.message == get_message("status_400", "en")


def test_unlisted_status_falls_back_to_http_error():
    client = make_client(lambda request: httpx.Response(418, text="teapot"))

    with pytest.raises(SubmissionFailed) as excinfo:
        client.submit(IMAGE)

    assert excinfo.value.message == get_message("http_error", "en", status=418)


def test_success_status_with_error_field_is_a_failure():
    client = make_client(lambda request: httpx.Response(200, json={"error": "model refused"}))

    with pytest.raises(SubmissionFailed) as excinfo:
        client.submit(IMAGE)

    assert excinfo.value.message == "model refused"


def test_transport_error_is_reported_as_network_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(SubmissionFailed) as excinfo:
        make_client(handler, locale="he").submit(IMAGE)

    assert excinfo.value.message == get_message("network_error", "he")


def test_message_for_status_is_localized():
    assert message_for_status(429, locale="he") == get_message("status_429", "he")
    assert message_for_status(503, locale="en") == get_message("status_500", "en")
    assert message_for_status(404, "Not found", locale="en") == "Not found"
