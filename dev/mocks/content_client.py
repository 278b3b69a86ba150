"""In-memory implementation of ContentClientProtocol for development and testing."""

import hashlib
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

sys.path.append(str(Path(__file__).parent.parent.parent))
from src.models.errors import HttpError, MissingCredential
from src.schemas import (
    DirectoryEntry,
    FileContents,
    RemoteUser,
    RepositorySummary,
    WriteResult,
)
from src.services.codec import decode_text, encode_text

FileKey = Tuple[str, str, str, str]  # owner, repo, branch, path

SAMPLE_FILES = {
    "README.md": "# Mock repository\n\nServed from memory in DEBUG mode.\n",
    "docs/guide.md": "# Guide\n\nEdit me.\n",
    "docs/notes/todo.md": "- [ ] write more notes\n",
    "src/app.py": "print('hello')\n",
}


def blob_sha(text: str) -> str:
    """Git-style blob hash of the UTF-8 text."""
    data = text.encode("utf-8")
    return hashlib.sha1(b"blob %d\0" % len(data) + data).hexdigest()


class MockContentClient:
    """Mock contents host keeping files in a dict.

    Honours the same optimistic concurrency rules as the real host: updates
    and deletes with a stale sha fail with 409, creates over an existing file
    fail with 422.
    """

    def __init__(
        self,
        token: str = "",
        owner: str = "mock-owner",
        repo: str = "notes",
        branch: str = "main",
        seed: bool = True,
    ):
        self._token = token or None
        self.owner = owner
        self.repo = repo
        self.branch = branch
        self.files: Dict[FileKey, str] = {}
        self.calls: List[Tuple[str, str]] = []

        if seed:
            for path, text in SAMPLE_FILES.items():
                self.put_text(path, text)

    # --- helpers for tests and DEBUG seeding ---

    def put_text(
        self,
        path: str,
        text: str,
        owner: Optional[str] = None,
        repo: Optional[str] = None,
        branch: Optional[str] = None,
    ) -> str:
        """Write a file directly, as another client would. Returns the new sha."""
        key = (owner or self.owner, repo or self.repo, branch or self.branch, path)
        self.files[key] = text
        return blob_sha(text)

    def text_of(self, path: str) -> Optional[str]:
        return self.files.get((self.owner, self.repo, self.branch, path))

    def _check_token(self) -> None:
        if not self._token:
            raise MissingCredential()

    @staticmethod
    def _not_found() -> HttpError:
        return HttpError(404, "Not Found", {"message": "Not Found"})

    # --- ContentClientProtocol ---

    @property
    def token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: Optional[str]) -> None:
        self._token = token or None

    async def get_user(self) -> RemoteUser:
        self._check_token()
        self.calls.append(("get_user", ""))
        return RemoteUser(login="mock-user")

    async def read_file(
        self, owner: str, repo: str, path: str, branch: str
    ) -> FileContents:
        self._check_token()
        self.calls.append(("read_file", path))
        text = self.files.get((owner, repo, branch, path))
        if text is None:
            raise self._not_found()
        encoded = encode_text(text)
        # The host chunks base64 at 60 characters
        chunked = "\n".join(encoded[i : i + 60] for i in range(0, len(encoded), 60))
        return FileContents(version_token=blob_sha(text), content_base64=chunked)

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
        self._check_token()
        self.calls.append(("write_file", path))
        key = (owner, repo, branch, path)
        current = self.files.get(key)
        if current is None:
            raise self._not_found()
        if blob_sha(current) != version_token:
            raise HttpError(409, "Conflict", {"message": f"{path} does not match"})
        text = decode_text(content_base64)
        self.files[key] = text
        return WriteResult(new_version_token=blob_sha(text))

    async def create_file(
        self,
        owner: str,
        repo: str,
        path: str,
        branch: str,
        message: str,
        content_base64: str,
    ) -> WriteResult:
        self._check_token()
        self.calls.append(("create_file", path))
        key = (owner, repo, branch, path)
        if key in self.files:
            raise HttpError(
                422, "Unprocessable Entity", {"message": "\"sha\" wasn't supplied."}
            )
        text = decode_text(content_base64)
        self.files[key] = text
        return WriteResult(new_version_token=blob_sha(text))

    async def delete_file(
        self,
        owner: str,
        repo: str,
        path: str,
        branch: str,
        message: str,
        version_token: str,
    ) -> None:
        self._check_token()
        self.calls.append(("delete_file", path))
        key = (owner, repo, branch, path)
        current = self.files.get(key)
        if current is None:
            raise self._not_found()
        if blob_sha(current) != version_token:
            raise HttpError(409, "Conflict", {"message": f"{path} does not match"})
        del self.files[key]

    async def list_directory(
        self, owner: str, repo: str, path: str, branch: str
    ) -> List[DirectoryEntry]:
        self._check_token()
        self.calls.append(("list_directory", path))
        file_text = self.files.get((owner, repo, branch, path))
        if path and file_text is not None:
            return [self._entry(path, "file", file_text)]

        prefix = f"{path}/" if path else ""
        entries: Dict[str, DirectoryEntry] = {}
        for (o, r, b, file_path), text in self.files.items():
            if (o, r, b) != (owner, repo, branch) or not file_path.startswith(prefix):
                continue
            rest = file_path[len(prefix) :]
            head, _, tail = rest.partition("/")
            child_path = prefix + head
            if tail:
                entries.setdefault(child_path, self._entry(child_path, "dir", ""))
            else:
                entries[child_path] = self._entry(child_path, "file", text)

        if path and not entries:
            raise self._not_found()
        return [entries[key] for key in sorted(entries)]

    @staticmethod
    def _entry(path: str, kind: str, text: str) -> DirectoryEntry:
        return DirectoryEntry(
            name=path.rsplit("/", 1)[-1],
            path=path,
            version_token=blob_sha(text),
            size=len(text.encode("utf-8")) if kind == "file" else 0,
            kind=kind,
        )

    async def list_accessible_repositories(
        self, limit: int = 30
    ) -> List[RepositorySummary]:
        self._check_token()
        self.calls.append(("list_accessible_repositories", ""))
        summary = RepositorySummary(
            owner=self.owner,
            name=self.repo,
            full_name=f"{self.owner}/{self.repo}",
            default_branch=self.branch,
            description="In-memory repository",
        )
        return [summary][:limit]
