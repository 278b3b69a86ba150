"""Unit tests for the base64 text codec."""

import pytest

from src.models.errors import MalformedResponse
from src.services.codec import decode_text, encode_text


class TestCodec:
    """Test cases for encode_text / decode_text."""

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "plain ascii",
            "line one\nline two\r\nline three\n",
            "naïve café — 日本語のテキスト",
            "emoji 🚀🔥 and astral 𝄞",
        ],
    )
    def test_round_trip(self, text):
        assert decode_text(encode_text(text)) == text

    def test_encode_uses_utf8_bytes(self):
        assert encode_text("é") == "w6k="

    def test_decode_strips_host_chunking(self):
        encoded = encode_text("x" * 200)
        chunked = "\n".join(encoded[i : i + 60] for i in range(0, len(encoded), 60))
        assert "\n" in chunked
        assert decode_text(chunked + "\n") == "x" * 200

    def test_decode_rejects_invalid_base64(self):
        with pytest.raises(MalformedResponse):
            decode_text("not base64!!")

    def test_decode_rejects_binary_content(self):
        # 0xff 0xfe is not valid UTF-8
        with pytest.raises(MalformedResponse):
            decode_text("//4=")
