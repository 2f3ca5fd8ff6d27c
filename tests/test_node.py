import pytest

from layerdive.filetree.diff import DiffType
from layerdive.filetree.file_info import FileInfo
from layerdive.filetree.node import FileNode, FileTreeError
from layerdive.filetree.tree import FileTree


def blank_info(path):
    return FileInfo(path=path, type_flag=1, hash=123)


def test_add_child():
    tree = FileTree()
    one = tree.root.add_child("first node!", FileInfo(path="stufffffs"))
    two = tree.root.add_child("nil node!", FileInfo())
    tree.root.add_child("third node!", FileInfo())
    two.add_child("forth, one level down...", FileInfo())
    two.add_child("fifth, one level down...", FileInfo())
    two.add_child("fifth, one level down...", FileInfo())

    assert tree.size == 5
    assert len(two.children) == 2
    assert len(tree.root.children) == 3
    assert one.data.file_info.path == "stufffffs"


def test_add_existing_child_replaces_payload_and_keeps_children():
    tree = FileTree()
    parent = tree.root.add_child("dir", FileInfo(size=1))
    parent.add_child("inner", FileInfo())
    again = tree.root.add_child("dir", FileInfo(size=9))
    assert tree.root.children["dir"].data.file_info.size == 9
    assert list(tree.root.children["dir"].children) == ["inner"]
    assert again is parent
    assert tree.size == 2


def test_add_child_rejects_opaque_whiteout():
    tree = FileTree()
    assert tree.root.add_child(".wh..wh..opq", FileInfo()) is None
    assert tree.size == 0


def test_remove_child():
    tree = FileTree()
    tree.root.add_child("first", FileInfo())
    two = tree.root.add_child("nil", FileInfo())
    tree.root.add_child("third", FileInfo())
    forth = two.add_child("forth", FileInfo())
    two.add_child("fifth", FileInfo())

    forth.remove()
    assert tree.size == 4
    assert "forth" not in two.children

    two.remove()
    assert tree.size == 2
    assert "nil" not in tree.root.children


def test_remove_root_fails():
    tree = FileTree()
    with pytest.raises(FileTreeError):
        tree.root.remove()


def test_path():
    tree = FileTree()
    node, _ = tree.add_path("/etc/nginx/nginx.conf", FileInfo())
    assert node.path() == "/etc/nginx/nginx.conf"


def test_path_strips_whiteout_prefix_on_leaf():
    tree = FileTree()
    node, _ = tree.add_path("/etc/.wh.nginx", FileInfo())
    assert node.path() == "/etc/nginx"


def test_is_whiteout():
    tree = FileTree()
    p1, _ = tree.add_path("/etc/nginx/public1", FileInfo())
    p2, _ = tree.add_path("/etc/nginx/.wh.public2", FileInfo())
    p3, _ = tree.add_path("/etc/nginx/public3/.wh..wh..opq", FileInfo())
    assert p1.is_whiteout() is False
    assert p2.is_whiteout() is True
    assert p3 is None


def test_is_leaf():
    tree = FileTree()
    leaf, _ = tree.add_path("/a/b", FileInfo())
    assert leaf.is_leaf() is True
    assert tree.get_node("/a").is_leaf() is False


def test_diff_type_from_added_children():
    tree = FileTree()
    node, _ = tree.add_path("/usr", blank_info("/usr"))
    node.data.diff_type = DiffType.UNMODIFIED
    node, _ = tree.add_path("/usr/bin", blank_info("/usr/bin"))
    node.data.diff_type = DiffType.ADDED
    node, _ = tree.add_path("/usr/bin2", blank_info("/usr/bin2"))
    node.data.diff_type = DiffType.REMOVED

    tree.root.children["usr"].derive_diff_type(DiffType.UNMODIFIED)
    assert tree.root.children["usr"].data.diff_type == DiffType.MODIFIED


def test_diff_type_from_removed_children():
    tree = FileTree()
    tree.add_path("/usr", blank_info("/usr"))
    node, _ = tree.add_path("/usr/.wh.bin", blank_info("/usr/.wh.bin"))
    node.data.diff_type = DiffType.REMOVED
    node, _ = tree.add_path("/usr/.wh.bin2", blank_info("/usr/.wh.bin2"))
    node.data.diff_type = DiffType.REMOVED

    tree.root.children["usr"].derive_diff_type(DiffType.UNMODIFIED)
    assert tree.root.children["usr"].data.diff_type == DiffType.MODIFIED


def test_assign_diff_type():
    tree = FileTree()
    node, _ = tree.add_path("/usr", blank_info("/usr"))
    node.data.diff_type = DiffType.MODIFIED
    assert tree.root.children["usr"].data.diff_type == DiffType.MODIFIED


def test_assign_removed_propagates_to_children():
    tree = FileTree()
    tree.add_path("/usr/bin/bash", FileInfo())
    tree.get_node("/usr").assign_diff_type(DiffType.REMOVED)
    assert tree.get_node("/usr/bin").data.diff_type == DiffType.REMOVED
    assert tree.get_node("/usr/bin/bash").data.diff_type == DiffType.REMOVED


def test_assign_modified_does_not_propagate():
    tree = FileTree()
    tree.add_path("/usr/bin", FileInfo())
    tree.get_node("/usr").assign_diff_type(DiffType.MODIFIED)
    assert tree.get_node("/usr/bin").data.diff_type == DiffType.UNMODIFIED


def test_compare():
    lower = FileTree()
    upper = FileTree()
    a, _ = lower.add_path("/a", blank_info("/a"))
    b, _ = upper.add_path("/a", blank_info("/a"))
    c, _ = upper.add_path("/b", FileInfo(path="/b", type_flag=1, hash=5))
    wh, _ = upper.add_path("/.wh.a", FileInfo())

    assert a.compare(b) == DiffType.UNMODIFIED
    assert a.compare(None) == DiffType.REMOVED
    assert a.compare(wh) == DiffType.REMOVED
    with pytest.raises(FileTreeError):
        a.compare(c)


def test_copy_is_independent():
    tree = FileTree()
    tree.add_path("/a/b", FileInfo(size=3))
    original = tree.get_node("/a")
    duplicate = original.copy(tree.root)
    duplicate.children["b"].data.file_info.size = 99
    assert original.children["b"].data.file_info.size == 3
    assert duplicate.children["b"].parent is duplicate
    assert original.children["b"].parent is original


def test_visit_depth_child_first_order():
    tree = FileTree()
    tree.add_path("/b/c", FileInfo())
    tree.add_path("/a", FileInfo())
    seen = []
    tree.root.visit_depth_child_first(lambda n: seen.append(n.path()))
    assert seen == ["/a", "/b/c", "/b"]


def test_visit_depth_parent_first_with_evaluator():
    tree = FileTree()
    tree.add_path("/b/c", FileInfo())
    tree.add_path("/a/d", FileInfo())
    seen = []
    tree.root.visit_depth_parent_first(
        lambda n: seen.append(n.path()), lambda n: n.name != "b"
    )
    assert seen == ["/a", "/a/d"]


def test_node_constructor_inherits_tree():
    tree = FileTree()
    node = FileNode(tree.root, "x", FileInfo(size=4))
    assert node.tree is tree
    assert node.data.file_info.size == 4