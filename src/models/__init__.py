"""Models for the application."""

from .errors import (
    ContentError,
    ErrorKind,
    HttpError,
    MalformedResponse,
    MissingCredential,
    RequestTimeout,
    TransportError,
    classify,
)
from .tree import apply_patch, filter_tree, find_node, iter_nodes

__all__ = [
    "ContentError",
    "ErrorKind",
    "HttpError",
    "MalformedResponse",
    "MissingCredential",
    "RequestTimeout",
    "TransportError",
    "apply_patch",
    "classify",
    "filter_tree",
    "find_node",
    "iter_nodes",
]
