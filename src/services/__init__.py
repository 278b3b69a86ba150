"""Services for the application."""

from .content_client import ContentClient
from .content_client_factory import (
    create_content_client,
    create_content_client_from_settings,
)
from .editor_controller import EditorController
from .recent_store import RecentStore
from .transport import RetryingTransport
from .tree_cache import DirectoryTreeCache

__all__ = [
    "ContentClient",
    "DirectoryTreeCache",
    "EditorController",
    "RecentStore",
    "RetryingTransport",
    "create_content_client",
    "create_content_client_from_settings",
]
