"""Contents client protocol interface."""

from typing import List, Optional, Protocol, runtime_checkable

from ..schemas import (
    DirectoryEntry,
    FileContents,
    RemoteUser,
    RepositorySummary,
    WriteResult,
)


@runtime_checkable
class ContentClientProtocol(Protocol):
    """Protocol for per-file operations against a remote contents host."""

    @property
    def token(self) -> Optional[str]:
        """Bearer credential used for every call."""
        ...

    def set_token(self, token: Optional[str]) -> None:
        """Replace (or clear, with None) the bearer credential."""
        ...

    async def get_user(self) -> RemoteUser:
        """Identity of the credential's owner."""
        ...

    async def read_file(
        self, owner: str, repo: str, path: str, branch: str
    ) -> FileContents:
        """Read one file and its version token."""
        ...

    async def write_file(
        self,
        owner: str,
        repo: str,
        path: str,
        branch: str,
        message: str,
        content_base64: str,
        version_token: str,
    ) -> WriteResult:
        """Update an existing file; fails with 409 when the token is stale."""
        ...

    async def create_file(
        self,
        owner: str,
        repo: str,
        path: str,
        branch: str,
        message: str,
        content_base64: str,
    ) -> WriteResult:
        """Create a file that does not exist yet."""
        ...

    async def delete_file(
        self,
        owner: str,
        repo: str,
        path: str,
        branch: str,
        message: str,
        version_token: str,
    ) -> None:
        """Delete a file at the given version token."""
        ...

    async def list_directory(
        self, owner: str, repo: str, path: str, branch: str
    ) -> List[DirectoryEntry]:
        """List a directory (or a single file) in host order."""
        ...

    async def list_accessible_repositories(
        self, limit: int
    ) -> List[RepositorySummary]:
        """Recently updated, writable, non-archived repositories."""
        ...
