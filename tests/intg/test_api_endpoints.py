import pytest
from fastapi.testclient import TestClient

from dev.mocks.content_client import MockContentClient
from src.config.settings import Settings
from src.dependencies import get_editor_controller
from src.main import app
from src.services import DirectoryTreeCache, EditorController, RecentStore


class TestAPIEndpoints:
    """Integration tests driving the editor API against the in-memory host."""

    @pytest.fixture(autouse=True)
    def setup(self, tmp_path):
        settings = Settings(
            RECENT_STORE_PATH=str(tmp_path / "recent.json"), DEBUG=False
        )
        self.host = MockContentClient()
        self.controller = EditorController(
            client=self.host,
            tree=DirectoryTreeCache(self.host),
            recents=RecentStore(tmp_path / "recent.json"),
            settings=settings,
        )
        app.dependency_overrides[get_editor_controller] = lambda: self.controller
        self.client = TestClient(app)
        yield
        self.client.close()
        app.dependency_overrides.clear()

    def login_and_select(self):
        response = self.client.post("/api/editor/login", json={"token": "secret"})
        assert response.status_code == 200
        response = self.client.post(
            "/api/editor/context",
            json={"owner": "mock-owner", "repo": "notes", "branch": "main"},
        )
        assert response.status_code == 200
        return response.json()

    def test_health_check_endpoint(self):
        response = self.client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_login_verifies_identity(self):
        response = self.client.post("/api/editor/login", json={"token": "secret"})
        assert response.status_code == 200
        data = response.json()
        assert data["credential_present"] is True
        assert data["user"] == {"login": "mock-user"}
        assert data["status"] == "Welcome mock-user"
        assert data["repositories"][0]["full_name"] == "mock-owner/notes"

    @pytest.mark.parametrize("payload", [{"token": ""}, {"token": "   "}])
    def test_login_rejects_empty_token(self, payload):
        response = self.client.post("/api/editor/login", json=payload)
        assert response.status_code == 400

    def test_login_requires_token_field(self):
        response = self.client.post("/api/editor/login", json={})
        assert response.status_code == 422

    def test_repos_without_credential_is_401(self):
        response = self.client.get("/api/editor/repos")
        assert response.status_code == 401
        assert response.json()["detail"] == "Missing access token"

    def test_repos_rejects_bad_limit(self):
        response = self.client.get("/api/editor/repos", params={"limit": 0})
        assert response.status_code == 400

    def test_context_requires_owner_and_repo(self):
        response = self.client.post(
            "/api/editor/context", json={"owner": " ", "repo": "notes"}
        )
        assert response.status_code == 400

    def test_context_loads_tree_root(self):
        data = self.login_and_select()
        assert data["context"] == {
            "owner": "mock-owner",
            "repo": "notes",
            "branch": "main",
        }

        tree = self.client.get("/api/editor/tree").json()
        assert tree["loaded"] is True
        assert [child["name"] for child in tree["children"]] == [
            "docs",
            "src",
            "README.md",
        ]

    def test_tree_expand_filter_and_unknown_path(self):
        self.login_and_select()

        node = self.client.post("/api/editor/tree/expand", json={"path": "docs"})
        assert node.status_code == 200
        assert node.json()["expanded"] is True
        assert [c["name"] for c in node.json()["children"]] == ["notes", "guide.md"]

        filtered = self.client.get("/api/editor/tree", params={"query": "GUIDE"})
        docs = filtered.json()["children"]
        assert [c["name"] for c in docs] == ["docs"]
        assert [c["name"] for c in docs[0]["children"]] == ["guide.md"]

        collapsed = self.client.post("/api/editor/tree/collapse", json={"path": "docs"})
        assert collapsed.json()["expanded"] is False

        missing = self.client.post("/api/editor/tree/expand", json={"path": "nope"})
        assert missing.status_code == 404

    def test_tree_files(self):
        self.login_and_select()
        response = self.client.get("/api/editor/tree/files")
        assert response.status_code == 200
        data = response.json()
        assert sorted(data["files"]) == [
            "README.md",
            "docs/guide.md",
            "docs/notes/todo.md",
            "src/app.py",
        ]
        assert data["truncated"] is False

    def test_open_edit_save(self):
        self.login_and_select()

        opened = self.client.post("/api/editor/file/open", json={"path": "README.md"})
        assert opened.status_code == 200
        token = opened.json()["session"]["version_token"]
        assert opened.json()["session"]["load_state"] == "loaded"

        self.client.put("/api/editor/file/content", json={"content": "edited\n"})
        saved = self.client.post("/api/editor/file/save", json={})
        data = saved.json()
        assert data["status"] == "Saved successfully."
        assert data["session"]["version_token"] != token
        assert self.host.text_of("README.md") == "edited\n"

        recent = self.client.get("/api/editor/recent").json()
        assert [(r["repo"], r["path"]) for r in recent] == [("notes", "README.md")]

    def test_save_conflict_reports_and_keeps_token(self):
        self.login_and_select()
        opened = self.client.post("/api/editor/file/open", json={"path": "README.md"})
        token = opened.json()["session"]["version_token"]

        self.host.put_text("README.md", "changed elsewhere")
        self.client.put("/api/editor/file/content", json={"content": "mine"})
        data = self.client.post("/api/editor/file/save", json={}).json()

        assert data["status_kind"] == "error"
        assert data["status"].startswith("Conflict")
        assert data["session"]["version_token"] == token
        assert data["session"]["content"] == "mine"

    def test_open_missing_file_returns_state(self):
        self.login_and_select()
        response = self.client.post("/api/editor/file/open", json={"path": "nope.md"})
        assert response.status_code == 200
        data = response.json()
        assert data["session"]["load_state"] == "error"
        assert data["status"] == "File not found or insufficient permissions"

    def test_new_file_then_save_creates(self):
        self.login_and_select()
        self.client.post("/api/editor/file/new", json={"path": "docs/new.md"})
        self.client.put("/api/editor/file/content", json={"content": "new"})
        data = self.client.post(
            "/api/editor/file/save", json={"message": "Add new.md"}
        ).json()

        assert data["status"] == "Saved successfully."
        assert self.host.text_of("docs/new.md") == "new"

    def test_delete_with_confirmation(self):
        self.login_and_select()
        self.client.post("/api/editor/file/open", json={"path": "src/app.py"})

        pending = self.client.post(
            "/api/editor/file/delete/request", json={"path": "src/app.py"}
        ).json()
        assert pending["pending_delete"] == {"path": "src/app.py"}

        data = self.client.post("/api/editor/file/delete/confirm").json()
        assert data["status"] == "Deleted src/app.py"
        assert data["pending_delete"] is None
        assert self.host.text_of("src/app.py") is None

    def test_cancel_delete(self):
        self.login_and_select()
        self.client.post("/api/editor/file/open", json={"path": "src/app.py"})
        self.client.post("/api/editor/file/delete/request", json={"path": "src/app.py"})

        data = self.client.post("/api/editor/file/delete/cancel").json()

        assert data["pending_delete"] is None
        assert self.host.text_of("src/app.py") is not None

    def test_pin_toggle(self):
        first = self.client.post(
            "/api/editor/pinned/toggle", json={"owner": "octo", "repo": "site"}
        ).json()
        assert first["pinned"] is True
        assert [p["repo"] for p in self.client.get("/api/editor/pinned").json()] == [
            "site"
        ]

        second = self.client.post(
            "/api/editor/pinned/toggle", json={"owner": "octo", "repo": "site"}
        ).json()
        assert second["pinned"] is False
        assert self.client.get("/api/editor/pinned").json() == []

    def test_logout_clears_state(self):
        self.login_and_select()
        self.client.post("/api/editor/file/open", json={"path": "README.md"})

        data = self.client.post("/api/editor/logout").json()

        assert data["credential_present"] is False
        assert data["user"] is None
        assert data["session"]["path"] == ""
        assert self.client.get("/api/editor/state").json()["status"] == "Logged out"
