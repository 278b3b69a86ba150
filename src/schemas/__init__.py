"""Schemas for the application."""

from .contents import (
    DirectoryEntry,
    FileContents,
    RemoteUser,
    RepositorySummary,
    WriteResult,
)
from .editor import (
    EditorSession,
    EditorState,
    LoadState,
    PendingDelete,
    PinnedRepository,
    RecentFile,
    RepositoryContext,
    StatusKind,
)
from .tree import NodeKind, TreeNode, new_root

__all__ = [
    "DirectoryEntry",
    "EditorSession",
    "EditorState",
    "FileContents",
    "LoadState",
    "NodeKind",
    "PendingDelete",
    "PinnedRepository",
    "RecentFile",
    "RemoteUser",
    "RepositoryContext",
    "RepositorySummary",
    "StatusKind",
    "TreeNode",
    "WriteResult",
    "new_root",
]
