"""Unicode-safe base64 used for file content on the wire."""

import base64
import binascii

from src.models.errors import MalformedResponse


def encode_text(text: str) -> str:
    """Encode text as base64 of its UTF-8 bytes."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_text(content_base64: str) -> str:
    """Decode a (possibly newline-chunked) base64 blob into text."""
    compact = content_base64.replace("\n", "").replace("\r", "")
    try:
        return base64.b64decode(compact, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise MalformedResponse(f"Content is not UTF-8 text: {e}") from e
