from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class NodeKind(str, Enum):
    FILE = "file"
    DIRECTORY = "dir"


class TreeNode(BaseModel):
    """One entry of the mirrored directory tree.

    ``children`` stays ``None`` until the directory has been listed. Nodes are
    treated as immutable: updates go through ``src.models.tree.apply_patch``.
    """

    name: str
    path: str
    kind: NodeKind
    children: Optional[List["TreeNode"]] = None
    loaded: bool = False
    loading: bool = False
    expanded: bool = False

    @property
    def is_directory(self) -> bool:
        return self.kind == NodeKind.DIRECTORY


def new_root() -> TreeNode:
    return TreeNode(name="/", path="", kind=NodeKind.DIRECTORY, expanded=True)
