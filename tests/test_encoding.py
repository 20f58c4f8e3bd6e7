from pathlib import Path
import base64
import os
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest

from core.encoding import build_data_url, encode_base64, estimate_encoded_size, parse_data_url
from core.errors import InvalidInput

PAYLOAD = os.urandom(10_007)


@pytest.mark.parametrize("chunk_size", [None, 1, 2, 3, 4, 1024, 8192, 1024 * 1024])
def test_chunking_does_not_change_output(chunk_size):
    assert encode_base64(PAYLOAD, chunk_size=chunk_size) == base64.b64encode(PAYLOAD).decode()


@pytest.mark.parametrize("length", [0, 1, 2, 3, 4, 5])
def test_short_inputs_match_standard_encoding(length):
    data = PAYLOAD[:length]
    assert encode_base64(data, chunk_size=2) == base64.b64encode(data).decode()


@pytest.mark.parametrize("chunk_size", [None, 7, 8192])
def test_data_url_decodes_to_original_bytes(chunk_size):
    data_url = build_data_url(encode_base64(PAYLOAD, chunk_size=chunk_size), "image/png")

    assert data_url.startswith("data:image/png;base64,")
    assert parse_data_url(data_url) == ("image/png", PAYLOAD)


def test_estimate_encoded_size_rounds_up():
    assert estimate_encoded_size(0) == 0
    assert estimate_encoded_size(3) == 4
    assert estimate_encoded_size(4) == 6
    assert estimate_encoded_size(15 * 1024 * 1024) == 20 * 1024 * 1024


@pytest.mark.parametrize("value", ["image/png;base64,AAAA", "data:image/png,AAAA", "data:image/png;base64,@@@"])
def test_parse_data_url_rejects_malformed_input(value):
    with pytest.raises(InvalidInput):
        parse_data_url(value)
