"""Domain records returned by the contents client."""

from typing import Optional

from pydantic import BaseModel


class FileContents(BaseModel):
    """A single file blob as read from the contents API."""

    version_token: str
    content_base64: str  # newline-chunked, as sent by the host


class WriteResult(BaseModel):
    new_version_token: str


class DirectoryEntry(BaseModel):
    name: str
    path: str
    version_token: str
    size: int = 0
    kind: str  # 'file' | 'dir' | 'symlink' | 'submodule'


class RepositorySummary(BaseModel):
    owner: str
    name: str
    full_name: str
    default_branch: str = "main"
    description: Optional[str] = None


class RemoteUser(BaseModel):
    login: str
