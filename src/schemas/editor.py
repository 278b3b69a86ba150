"""State records owned by the editor controller."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from .contents import RemoteUser, RepositorySummary


class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class StatusKind(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class RepositoryContext(BaseModel):
    owner: str = ""
    repo: str = ""
    branch: str = "main"

    @property
    def is_complete(self) -> bool:
        return bool(self.owner and self.repo)

    def describe(self) -> str:
        return f"{self.owner}/{self.repo}@{self.branch}"


class EditorSession(BaseModel):
    """The file currently open in the editor."""

    path: str = ""
    content: str = ""
    version_token: Optional[str] = None
    load_state: LoadState = LoadState.IDLE
    save_state: LoadState = LoadState.IDLE
    delete_state: LoadState = LoadState.IDLE


class PendingDelete(BaseModel):
    path: str


class EditorState(BaseModel):
    """Snapshot handed to the rendering layer."""

    credential_present: bool
    user: Optional[RemoteUser] = None
    user_state: LoadState = LoadState.IDLE
    context: RepositoryContext
    session: EditorSession
    status: str = ""
    status_kind: StatusKind = StatusKind.INFO
    pending_delete: Optional[PendingDelete] = None
    repositories: List[RepositorySummary] = []


class RecentFile(BaseModel):
    owner: str
    repo: str
    branch: str
    path: str
    at: float


class PinnedRepository(BaseModel):
    owner: str
    repo: str
    at: float
