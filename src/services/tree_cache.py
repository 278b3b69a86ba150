"""Lazily populated mirror of a remote directory tree."""

from collections import deque
from typing import Deque, List, Optional, Tuple

from src.models.errors import ContentError
from src.models.tree import apply_patch, filter_tree, find_node
from src.protocols.content_client_protocol import ContentClientProtocol
from src.schemas import DirectoryEntry, NodeKind, RepositoryContext, TreeNode, new_root


def build_children(entries: List[DirectoryEntry]) -> List[TreeNode]:
    """Turn a listing into unloaded child nodes, directories first then by name."""
    nodes = [
        TreeNode(name=e.name, path=e.path, kind=NodeKind(e.kind))
        for e in entries
        if e.kind in (NodeKind.FILE.value, NodeKind.DIRECTORY.value)
    ]
    nodes.sort(key=lambda n: (n.kind != NodeKind.DIRECTORY, n.name))
    return nodes


class DirectoryTreeCache:
    """Directory tree for one (owner, repo, branch) context.

    Each directory moves through unloaded -> loading -> loaded exactly once
    per context; expanding a loaded directory again never re-fetches it.
    ``root`` is replaced, never mutated, so an old reference stays valid
    while a newer tree is being built.
    """

    def __init__(
        self,
        client: ContentClientProtocol,
        context: Optional[RepositoryContext] = None,
    ):
        self.client = client
        self.context = context or RepositoryContext()
        self.root: TreeNode = new_root()
        self._generation = 0

    def reset(self, context: RepositoryContext) -> None:
        """Discard the tree and start over with an unloaded root."""
        self.context = context.model_copy()
        self.root = new_root()
        self._generation += 1

    def _patch(self, path: str, **partial) -> None:
        self.root = apply_patch(self.root, path, partial)

    def _require(self, path: str) -> TreeNode:
        node = find_node(self.root, path)
        if node is None:
            raise KeyError(path)
        return node

    async def load_root(self) -> TreeNode:
        await self._load("")
        return self.root

    async def _load(self, path: str) -> None:
        node = self._require(path)
        if not node.is_directory or node.loaded or node.loading:
            return
        if not self.context.is_complete:
            return

        context = self.context
        generation = self._generation
        self._patch(path, loading=True)
        try:
            entries = await self.client.list_directory(
                context.owner, context.repo, path, context.branch
            )
            children = build_children(entries)
        except ContentError as e:
            print(f"⚠️ Failed to load directory '{path or '/'}': {e}")
            children = []
        except BaseException:
            if generation == self._generation:
                self._patch(path, loading=False)
            raise

        if generation != self._generation:
            return
        self._patch(path, children=children, loaded=True, loading=False)

    async def expand(self, path: str) -> TreeNode:
        node = self._require(path)
        if not node.is_directory:
            return node
        generation = self._generation
        await self._load(path)
        if generation != self._generation:
            # Context changed mid-load; the path belongs to the discarded tree
            return self.root
        self._patch(path, expanded=True)
        return self._require(path)

    def collapse(self, path: str) -> TreeNode:
        node = self._require(path)
        if node.is_directory:
            self._patch(path, expanded=False)
        return self._require(path)

    async def toggle(self, path: str) -> TreeNode:
        node = self._require(path)
        if not node.is_directory:
            return node
        if node.expanded:
            return self.collapse(path)
        return await self.expand(path)

    def visible(self, query: str = "") -> TreeNode:
        return filter_tree(self.root, query)

    async def walk_files(self, max_depth: int = 4, max_files: int = 500) -> List[str]:
        """Breadth-first file listing for the search overlay.

        Directories already loaded in the tree are read from the cache, the
        rest are listed remotely without being added to the tree. Directories
        deeper than ``max_depth`` are skipped and the walk stops at
        ``max_files`` files.
        """
        if not self.context.is_complete:
            return []

        context = self.context
        generation = self._generation
        files: List[str] = []
        queue: Deque[Tuple[str, int]] = deque([("", 0)])

        while queue and len(files) < max_files:
            path, depth = queue.popleft()
            node = find_node(self.root, path)
            if node is not None and node.loaded:
                children = node.children or []
            else:
                try:
                    entries = await self.client.list_directory(
                        context.owner, context.repo, path, context.branch
                    )
                except ContentError as e:
                    print(f"⚠️ Skipping '{path or '/'}' while walking: {e}")
                    continue
                if generation != self._generation:
                    return []
                children = build_children(entries)

            for child in children:
                if child.is_directory:
                    if depth < max_depth:
                        queue.append((child.path, depth + 1))
                    continue
                files.append(child.path)
                if len(files) >= max_files:
                    break

        return files
