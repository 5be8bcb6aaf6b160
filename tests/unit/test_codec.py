"""
Unit tests for payload encoding.
"""

import pytest

from redqueue.exceptions import EncodeError, MalformedPayloadError, PayloadShapeError
from redqueue.store.codec import decode, decode_model, encode
from redqueue.types.job import JobPayload


class TestCodec:
    """Tests for encode/decode."""

    def test_encode_returns_bytes(self):
        assert encode({"class": "Send", "args": ["a@b.com"]}) == b'{"class":"Send","args":["a@b.com"]}'

    def test_nested_values_survive(self):
        value = {"class": "Report", "args": [1, 2.5, "x", [1, {"k": None}], {"nested": [True]}]}
        assert decode(encode(value)) == value

    def test_unicode(self):
        value = {"class": "Greet", "args": ["héllo ✓"]}
        assert decode(encode(value)) == value

    def test_decode_absent(self):
        assert decode(None) is None

    def test_decode_accepts_str(self):
        assert decode('{"a":1}') == {"a": 1}

    def test_encode_model_uses_wire_names(self):
        payload = JobPayload(job_class="Send", args=[1])
        assert decode(encode(payload)) == {"class": "Send", "args": [1]}

    def test_encode_rejects_unencodable(self):
        with pytest.raises(EncodeError):
            encode({"value": object()})

    def test_encode_rejects_nan(self):
        with pytest.raises(EncodeError):
            encode({"value": float("nan")})

    @pytest.mark.parametrize("data", [b"not json", b"{", "\xff".encode("latin-1")])
    def test_decode_malformed(self, data: bytes):
        with pytest.raises(MalformedPayloadError):
            decode(data)

    def test_decode_model(self):
        payload = decode_model(b'{"class":"Send","args":["a"]}', JobPayload)
        assert payload == JobPayload(job_class="Send", args=["a"])

    def test_decode_model_absent(self):
        assert decode_model(None, JobPayload) is None

    def test_decode_model_wrong_shape(self):
        with pytest.raises(PayloadShapeError):
            decode_model(b'{"args":[]}', JobPayload)

    def test_decode_model_extra_keys(self):
        with pytest.raises(PayloadShapeError):
            decode_model(b'{"class":"Send","args":[],"queue":"x"}', JobPayload)
