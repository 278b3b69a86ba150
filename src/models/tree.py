"""Pure operations on the immutable directory tree."""

from typing import Any, Dict, Iterator, List, Optional

from src.schemas.tree import TreeNode


def _on_path(node: TreeNode, target_path: str) -> bool:
    if node.path == "" or node.path == target_path:
        return True
    return target_path.startswith(node.path + "/")


def apply_patch(root: TreeNode, target_path: str, partial: Dict[str, Any]) -> TreeNode:
    """Return a tree where the node at ``target_path`` is merged with ``partial``.

    Only the patched node and its ancestors are rebuilt; every other subtree
    is shared with ``root``. When no node matches, ``root`` itself is returned.
    """
    if root.path == target_path:
        return root.model_copy(update=partial)
    if not root.children or not _on_path(root, target_path):
        return root

    children: List[TreeNode] = []
    changed = False
    for child in root.children:
        patched = apply_patch(child, target_path, partial) if not changed else child
        if patched is not child:
            changed = True
        children.append(patched)

    if not changed:
        return root
    return root.model_copy(update={"children": children})


def find_node(root: TreeNode, target_path: str) -> Optional[TreeNode]:
    if root.path == target_path:
        return root
    if not _on_path(root, target_path):
        return None
    for child in root.children or []:
        found = find_node(child, target_path)
        if found is not None:
            return found
    return None


def _filter_node(node: TreeNode, query: str) -> Optional[TreeNode]:
    name_matches = query in node.name.lower()
    if not node.is_directory:
        return node.model_copy() if name_matches else None

    kept = None
    if node.children is not None:
        kept = []
        for child in node.children:
            filtered = _filter_node(child, query)
            if filtered is not None:
                kept.append(filtered)

    if not name_matches and not kept:
        return None
    return node.model_copy(update={"children": kept, "expanded": True})


def filter_tree(root: TreeNode, query: str) -> TreeNode:
    """Case-insensitive substring view of ``root``.

    Files are kept when their name matches, directories when they match or
    hold a match. Kept directories are expanded. ``root`` is left untouched
    and is always present in the result.
    """
    q = query.strip().lower()
    if not q:
        return root

    kept = []
    for child in root.children or []:
        filtered = _filter_node(child, q)
        if filtered is not None:
            kept.append(filtered)
    return root.model_copy(update={"children": kept, "expanded": True})


def iter_nodes(root: TreeNode) -> Iterator[TreeNode]:
    """Depth-first iteration over the loaded part of the tree."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children or []))
