"""Typed failures raised by the transport and the contents client."""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """User-facing failure categories."""

    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"
    TIMEOUT = "timeout"
    MALFORMED = "malformed"
    UNKNOWN = "unknown"


class ContentError(Exception):
    """Base class for every failure surfaced by the contents layer."""


class HttpError(ContentError):
    """A non-2xx response from the contents host."""

    def __init__(self, status: int, status_text: str, body: Any = None):
        super().__init__(f"{status} {status_text}".strip())
        self.status = status
        self.status_text = status_text
        self.body = body


class RequestTimeout(ContentError):
    """No response arrived before the request deadline."""

    def __init__(self, url: str, timeout_ms: int):
        super().__init__(f"Request timed out after {timeout_ms} ms: {url}")
        self.url = url
        self.timeout_ms = timeout_ms


class TransportError(ContentError):
    """The request failed below HTTP (DNS, connection reset, TLS...)."""


class MalformedResponse(ContentError):
    """A 2xx response whose body does not have the expected shape."""


class MissingCredential(ContentError):
    """An authenticated call was attempted without a bearer credential."""

    def __init__(self, message: str = "Missing access token"):
        super().__init__(message)


def classify(exc: BaseException) -> ErrorKind:
    """Map an exception onto the failure taxonomy."""
    if isinstance(exc, HttpError):
        if exc.status == 404:
            return ErrorKind.NOT_FOUND
        if exc.status in (403, 429):
            return ErrorKind.FORBIDDEN
        if exc.status == 409:
            return ErrorKind.CONFLICT
        return ErrorKind.UNKNOWN
    if isinstance(exc, RequestTimeout):
        return ErrorKind.TIMEOUT
    if isinstance(exc, MalformedResponse):
        return ErrorKind.MALFORMED
    return ErrorKind.UNKNOWN

