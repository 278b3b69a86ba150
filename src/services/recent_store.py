"""Recent files and pinned repositories, persisted as a JSON document."""

import json
import time
from pathlib import Path
from typing import Callable, Dict, List

from src.schemas import PinnedRepository, RecentFile


class RecentStore:
    """Most-recent-first, de-duplicated lists kept on local disk.

    Read failures yield empty lists and write failures are only reported:
    the lists are hints and never block file operations.
    """

    def __init__(
        self,
        path: Path,
        recent_limit: int = 30,
        pinned_limit: int = 50,
        clock: Callable[[], float] = time.time,
    ):
        self.path = Path(path)
        self.recent_limit = recent_limit
        self.pinned_limit = pinned_limit
        self._clock = clock

    def _read(self) -> Dict[str, list]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            print(f"⚠️ Ignoring unreadable recent store {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, key: str, items: List[dict]) -> None:
        data = self._read()
        data[key] = items
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            print(f"⚠️ Failed to write recent store {self.path}: {e}")

    def get_recent_files(self) -> List[RecentFile]:
        items = self._read().get("recent_files")
        if not isinstance(items, list):
            return []
        try:
            return [RecentFile(**item) for item in items]
        except (TypeError, ValueError):
            return []

    def add_recent_file(self, owner: str, repo: str, branch: str, path: str) -> None:
        kept = [
            f
            for f in self.get_recent_files()
            if (f.owner, f.repo, f.branch, f.path) != (owner, repo, branch, path)
        ]
        entry = RecentFile(
            owner=owner, repo=repo, branch=branch, path=path, at=self._clock()
        )
        kept.insert(0, entry)
        self._write(
            "recent_files", [f.model_dump() for f in kept[: self.recent_limit]]
        )

    def get_pinned_repos(self) -> List[PinnedRepository]:
        items = self._read().get("pinned_repos")
        if not isinstance(items, list):
            return []
        try:
            return [PinnedRepository(**item) for item in items]
        except (TypeError, ValueError):
            return []

    def toggle_pinned_repo(self, owner: str, repo: str) -> bool:
        """Pin or unpin a repository. Returns True when it is now pinned."""
        pinned = self.get_pinned_repos()
        remaining = [r for r in pinned if (r.owner, r.repo) != (owner, repo)]
        now_pinned = len(remaining) == len(pinned)
        if now_pinned:
            remaining.insert(0, PinnedRepository(owner=owner, repo=repo, at=self._clock()))
        self._write(
            "pinned_repos", [r.model_dump() for r in remaining[: self.pinned_limit]]
        )
        return now_pinned
