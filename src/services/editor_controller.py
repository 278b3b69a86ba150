"""Open / save / delete workflow for the single file being edited."""

from typing import List, Optional

from src.config.settings import Settings
from src.models.errors import ContentError, ErrorKind, classify
from src.protocols.content_client_protocol import ContentClientProtocol
from src.schemas import (
    EditorSession,
    EditorState,
    LoadState,
    PendingDelete,
    RepositoryContext,
    RepositorySummary,
    StatusKind,
)

from .codec import decode_text, encode_text
from .recent_store import RecentStore
from .tree_cache import DirectoryTreeCache

REQUIRED_FIELDS = "Owner, repo, and path are required"
FORBIDDEN = "Forbidden or rate limited. Try again later."


def open_failure_message(exc: ContentError) -> str:
    kind = classify(exc)
    if kind == ErrorKind.NOT_FOUND:
        return "File not found or insufficient permissions"
    if kind == ErrorKind.FORBIDDEN:
        return FORBIDDEN
    return f"Open failed: {exc}"


def save_failure_message(exc: ContentError) -> str:
    kind = classify(exc)
    if kind == ErrorKind.CONFLICT:
        return "Conflict: file changed upstream. Re-open to refresh before saving."
    if kind == ErrorKind.FORBIDDEN:
        return FORBIDDEN
    return f"Save failed: {exc}"


def delete_failure_message(exc: ContentError) -> str:
    kind = classify(exc)
    if kind == ErrorKind.NOT_FOUND:
        return "File not found or already deleted"
    if kind == ErrorKind.CONFLICT:
        return "Conflict: file changed upstream. Re-open before deleting."
    if kind == ErrorKind.FORBIDDEN:
        return FORBIDDEN
    return f"Delete failed: {exc}"


class EditorController:
    """Owns the editor state for one user and funnels every change through
    named operations.

    Remote failures never escape: they become an ``error`` state plus a
    status line, and the last good session is kept so buffered text is not
    lost. Responses that arrive after the repository context changed (or
    after logout) are dropped.
    """

    def __init__(
        self,
        client: ContentClientProtocol,
        tree: DirectoryTreeCache,
        recents: RecentStore,
        settings: Settings,
    ):
        self.client = client
        self.tree = tree
        self.recents = recents
        self.settings = settings

        self.context = RepositoryContext(branch=settings.DEFAULT_BRANCH)
        self.session = EditorSession()
        self.user = None
        self.user_state = LoadState.IDLE
        self.repositories: List[RepositorySummary] = []
        self.pending_delete: Optional[PendingDelete] = None
        self.status = ""
        self.status_kind = StatusKind.INFO

        self._generation = 0
        self._open_seq = 0

    # --- state helpers ---

    @property
    def credential_present(self) -> bool:
        return bool(self.client.token)

    def snapshot(self) -> EditorState:
        return EditorState(
            credential_present=self.credential_present,
            user=self.user,
            user_state=self.user_state,
            context=self.context.model_copy(),
            session=self.session.model_copy(),
            status=self.status,
            status_kind=self.status_kind,
            pending_delete=self.pending_delete,
            repositories=list(self.repositories),
        )

    def _set_status(self, kind: StatusKind, message: str) -> None:
        self.status_kind = kind
        self.status = message

    def _require_target(self, path: str) -> bool:
        if not (self.context.owner and self.context.repo and path):
            self._set_status(StatusKind.ERROR, REQUIRED_FIELDS)
            return False
        return True

    def _is_stale_open(self, generation: int, seq: int) -> bool:
        if generation != self._generation:
            return True
        return self.settings.DISCARD_SUPERSEDED_OPENS and seq != self._open_seq

    # --- credential and identity ---

    def login(self, token: str) -> EditorState:
        token = token.strip()
        if token != (self.client.token or ""):
            # Work started under the previous credential is dropped
            self._generation += 1
            self.session = EditorSession()
            self.pending_delete = None
            self.repositories = []
            self.tree.reset(self.context)
        self.client.set_token(token)
        self.user = None
        self.user_state = LoadState.IDLE
        self._set_status(StatusKind.INFO, "Credential received")
        return self.snapshot()

    async def refresh_user(self) -> EditorState:
        if not self.credential_present:
            self.user = None
            self.user_state = LoadState.IDLE
            return self.snapshot()

        self.user_state = LoadState.LOADING
        try:
            me = await self.client.get_user()
        except ContentError as e:
            print(f"❌ Identity check failed: {e}")
            self.client.set_token(None)
            self.user = None
            self.user_state = LoadState.ERROR
            self._set_status(StatusKind.ERROR, "Login error. Please login again.")
            return self.snapshot()

        self.user = me
        self.user_state = LoadState.LOADED
        self._set_status(StatusKind.SUCCESS, f"Welcome {me.login}")
        try:
            await self.load_repositories()
        except ContentError as e:
            print(f"⚠️ Failed to load repositories: {e}")
        return self.snapshot()

    async def load_repositories(
        self, limit: Optional[int] = None
    ) -> List[RepositorySummary]:
        limit = self.settings.REPO_LIST_LIMIT if limit is None else limit
        self.repositories = await self.client.list_accessible_repositories(limit)
        return self.repositories

    def logout(self) -> EditorState:
        self.client.set_token(None)
        self._generation += 1
        self.user = None
        self.user_state = LoadState.IDLE
        self.repositories = []
        self.session = EditorSession()
        self.pending_delete = None
        self._set_status(StatusKind.INFO, "Logged out")
        return self.snapshot()

    # --- repository context ---

    async def set_context(
        self, owner: str, repo: str, branch: Optional[str] = None
    ) -> EditorState:
        context = RepositoryContext(
            owner=owner.strip(),
            repo=repo.strip(),
            branch=(branch or "").strip() or self.settings.DEFAULT_BRANCH,
        )
        if context != self.context:
            # Session and tree are reset before the first suspension point.
            self.context = context
            self._generation += 1
            self.session = EditorSession()
            self.pending_delete = None
            self.tree.reset(context)
            self._set_status(StatusKind.INFO, f"Selected {context.describe()}")

        if context.is_complete and not self.tree.root.loaded:
            await self.tree.load_root()
        return self.snapshot()

    async def select_repository(self, summary: RepositorySummary) -> EditorState:
        return await self.set_context(
            summary.owner, summary.name, summary.default_branch
        )

    # --- file operations ---

    def update_content(self, content: str) -> EditorState:
        self.session.content = content
        return self.snapshot()

    def new_file(self, path: str) -> EditorState:
        """Start an unsaved file; the next save creates it."""
        path = path.strip()
        if not self._require_target(path):
            return self.snapshot()
        self.session = EditorSession(path=path)
        self.pending_delete = None
        self._set_status(StatusKind.INFO, f"New file {path}")
        return self.snapshot()

    async def open(self, path: Optional[str] = None) -> EditorState:
        target = (self.session.path if path is None else path).strip()
        if not self._require_target(target):
            return self.snapshot()

        context = self.context
        generation = self._generation
        self._open_seq += 1
        seq = self._open_seq

        self.session.load_state = LoadState.LOADING
        self._set_status(StatusKind.INFO, "Opening file...")
        try:
            data = await self.client.read_file(
                context.owner, context.repo, target, context.branch
            )
            text = decode_text(data.content_base64)
        except ContentError as e:
            if self._is_stale_open(generation, seq):
                return self.snapshot()
            print(f"❌ Open failed for {target}: {e}")
            self.session.load_state = LoadState.ERROR
            self._set_status(StatusKind.ERROR, open_failure_message(e))
            return self.snapshot()

        if self._is_stale_open(generation, seq):
            return self.snapshot()

        self.session.path = target
        self.session.content = text
        self.session.version_token = data.version_token
        self.session.load_state = LoadState.LOADED
        self._set_status(
            StatusKind.SUCCESS, f"Opened {context.describe()}:{target}"
        )
        self.recents.add_recent_file(
            context.owner, context.repo, context.branch, target
        )
        return self.snapshot()

    async def save(self, message: Optional[str] = None) -> EditorState:
        path = self.session.path.strip()
        if not self._require_target(path):
            return self.snapshot()

        commit_message = (message or "").strip() or f"Update {path}"
        context = self.context
        generation = self._generation
        content = self.session.content
        version_token = self.session.version_token

        self.session.save_state = LoadState.LOADING
        self._set_status(StatusKind.INFO, "Saving...")
        try:
            encoded = encode_text(content)
            if not version_token:
                result = await self.client.create_file(
                    context.owner,
                    context.repo,
                    path,
                    context.branch,
                    commit_message,
                    encoded,
                )
            else:
                result = await self.client.write_file(
                    context.owner,
                    context.repo,
                    path,
                    context.branch,
                    commit_message,
                    encoded,
                    version_token,
                )
        except ContentError as e:
            if generation != self._generation:
                return self.snapshot()
            print(f"❌ Save failed for {path}: {e}")
            # The held token is left as is so a blind retry conflicts again.
            self.session.save_state = LoadState.ERROR
            self._set_status(StatusKind.ERROR, save_failure_message(e))
            return self.snapshot()

        if generation != self._generation:
            return self.snapshot()
        if self.session.path == path:
            self.session.version_token = result.new_version_token
        self.session.save_state = LoadState.LOADED
        self._set_status(StatusKind.SUCCESS, "Saved successfully.")
        return self.snapshot()

    def request_delete(self, path: str) -> EditorState:
        path = path.strip()
        if not self._require_target(path):
            return self.snapshot()
        self.pending_delete = PendingDelete(path=path)
        self._set_status(StatusKind.INFO, f"Confirm deletion of {path}")
        return self.snapshot()

    def cancel_pending(self) -> EditorState:
        self.pending_delete = None
        self._set_status(StatusKind.INFO, "Cancelled")
        return self.snapshot()

    async def confirm_delete(self) -> EditorState:
        if self.pending_delete is None:
            self._set_status(StatusKind.ERROR, "Nothing to confirm")
            return self.snapshot()
        path = self.pending_delete.path
        self.pending_delete = None
        return await self.delete(path)

    async def delete(self, path: str) -> EditorState:
        target = path.strip()
        if not self._require_target(target):
            return self.snapshot()
        version_token = self.session.version_token
        if self.session.path != target or not version_token:
            self._set_status(StatusKind.ERROR, "Open the file before deleting it")
            return self.snapshot()

        context = self.context
        generation = self._generation
        self.session.delete_state = LoadState.LOADING
        self._set_status(StatusKind.INFO, "Deleting...")
        try:
            await self.client.delete_file(
                context.owner,
                context.repo,
                target,
                context.branch,
                f"Delete {target}",
                version_token,
            )
        except ContentError as e:
            if generation != self._generation:
                return self.snapshot()
            print(f"❌ Delete failed for {target}: {e}")
            self.session.delete_state = LoadState.ERROR
            self._set_status(StatusKind.ERROR, delete_failure_message(e))
            return self.snapshot()

        if generation != self._generation:
            return self.snapshot()
        if self.session.path == target:
            self.session = EditorSession(delete_state=LoadState.LOADED)
        self._set_status(StatusKind.SUCCESS, f"Deleted {target}")
        return self.snapshot()
