"""Unit tests for the pure tree operations."""

from src.models.tree import apply_patch, filter_tree, find_node, iter_nodes
from src.schemas import NodeKind, TreeNode, new_root


def file_node(path):
    return TreeNode(name=path.rsplit("/", 1)[-1], path=path, kind=NodeKind.FILE)


def dir_node(path, children=None):
    return TreeNode(
        name=path.rsplit("/", 1)[-1],
        path=path,
        kind=NodeKind.DIRECTORY,
        children=children,
        loaded=children is not None,
    )


def sample_tree():
    root = new_root()
    return root.model_copy(
        update={
            "loaded": True,
            "children": [
                dir_node(
                    "docs",
                    [
                        dir_node("docs/api", [file_node("docs/api/Client.md")]),
                        file_node("docs/guide.md"),
                    ],
                ),
                dir_node("src", [file_node("src/app.py")]),
                dir_node("vendor"),
                file_node("README.md"),
            ],
        }
    )


class TestApplyPatch:
    def test_patches_target_and_rebuilds_ancestors_only(self):
        root = sample_tree()
        patched = apply_patch(root, "docs/api", {"expanded": True})

        assert patched is not root
        assert find_node(patched, "docs/api").expanded is True
        assert find_node(root, "docs/api").expanded is False
        docs_old, src_old = root.children[0], root.children[1]
        docs_new, src_new = patched.children[0], patched.children[1]
        assert docs_new is not docs_old
        assert src_new is src_old
        assert docs_new.children[1] is docs_old.children[1]

    def test_patch_root(self):
        root = new_root()
        patched = apply_patch(root, "", {"loaded": True, "children": []})

        assert patched.loaded is True
        assert patched.children == []
        assert root.loaded is False

    def test_unknown_path_returns_same_tree(self):
        root = sample_tree()
        assert apply_patch(root, "nope/missing", {"expanded": True}) is root

    def test_prefix_sibling_is_not_confused(self):
        root = new_root().model_copy(
            update={"children": [dir_node("doc", []), dir_node("docs", [])]}
        )
        patched = apply_patch(root, "docs", {"expanded": True})

        assert find_node(patched, "doc").expanded is False
        assert find_node(patched, "docs").expanded is True


class TestFilterTree:
    def test_empty_query_returns_input(self):
        root = sample_tree()
        assert filter_tree(root, "") == root
        assert filter_tree(root, "   ") == root

    def test_keeps_matches_and_their_ancestors(self):
        root = sample_tree()
        filtered = filter_tree(root, "CLIENT")

        assert [c.path for c in filtered.children] == ["docs"]
        docs = filtered.children[0]
        assert docs.expanded is True
        assert [c.path for c in docs.children] == ["docs/api"]
        assert docs.children[0].expanded is True
        assert [c.path for c in docs.children[0].children] == ["docs/api/Client.md"]

    def test_matching_directory_is_kept(self):
        filtered = filter_tree(sample_tree(), "vend")

        assert [c.path for c in filtered.children] == ["vendor"]
        assert filtered.children[0].expanded is True
        assert filtered.children[0].children is None

    def test_original_is_untouched(self):
        root = sample_tree()
        before = root.model_dump()
        filter_tree(root, "guide")
        assert root.model_dump() == before

    def test_is_idempotent(self):
        root = sample_tree()
        assert filter_tree(root, "md") == filter_tree(root, "md")

    def test_no_matches_leaves_only_root(self):
        filtered = filter_tree(sample_tree(), "zzz")
        assert filtered.path == ""
        assert filtered.children == []


def test_iter_nodes_is_depth_first():
    paths = [n.path for n in iter_nodes(sample_tree())]
    assert paths == [
        "",
        "docs",
        "docs/api",
        "docs/api/Client.md",
        "docs/guide.md",
        "src",
        "src/app.py",
        "vendor",
        "README.md",
    ]
