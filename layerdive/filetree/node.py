"""A single entry in a layer's file tree."""

from __future__ import annotations

from typing import Callable, Optional

from layerdive.filetree.diff import DiffType
from layerdive.filetree.file_info import FileInfo, NodeData

WHITEOUT_PREFIX = ".wh."
DOUBLE_WHITEOUT_PREFIX = ".wh..wh.."

Visitor = Callable[["FileNode"], None]
VisitEvaluator = Callable[["FileNode"], bool]


class FileTreeError(Exception):
    """Raised when a tree operation cannot be carried out."""


class FileNode:
    """A file or directory, its children and the tree it belongs to."""

    def __init__(self, parent: Optional[FileNode], name: str, data: FileInfo) -> None:
        self.name = name
        self.data = NodeData(file_info=data.copy())
        self.children: dict[str, FileNode] = {}
        self.parent = parent
        self.tree = parent.tree if parent is not None else None
        self._path = ""

    def __repr__(self) -> str:
        return f"FileNode(name={self.name!r}, children={len(self.children)})"

    def copy(self, parent: Optional[FileNode]) -> FileNode:
        """Duplicate this node and everything beneath it under a new parent."""
        new_node = FileNode(parent, self.name, self.data.file_info)
        new_node.data.view_info = self.data.view_info.copy()
        new_node.data.diff_type = self.data.diff_type
        for name, child in self.children.items():
            new_node.children[name] = child.copy(new_node)
        return new_node

    def add_child(self, name: str, data: FileInfo) -> Optional[FileNode]:
        """Add (or update the payload of) a direct child.

        Opaque whiteout markers are never added; None is returned for them.
        """
        if name.startswith(DOUBLE_WHITEOUT_PREFIX):
            return None

        existing = self.children.get(name)
        if existing is not None:
            # keep the children, replace only the payload
            existing.data.file_info = data.copy()
            return existing

        child = FileNode(self, name, data)
        self.children[name] = child
        self.tree.size += 1
        return child

    def remove(self) -> None:
        """Detach this node and all its descendants from the tree."""
        if self is self.tree.root:
            raise FileTreeError("cannot remove the tree root")
        for child in list(self.children.values()):
            child.remove()
        del self.parent.children[self.name]
        self.tree.size -= 1

    def is_whiteout(self) -> bool:
        """Whether this node is an overlay whiteout marker."""
        return self.name.startswith(WHITEOUT_PREFIX)

    def is_leaf(self) -> bool:
        return not self.children

    def path(self) -> str:
        """The slash-delimited path from the tree root to this node."""
        if not self._path:
            names: list[str] = []
            current = self
            while current.parent is not None:
                name = current.name
                if current is self:
                    # whiteout prefixes are fictitious on the leaf itself
                    name = name.removeprefix(WHITEOUT_PREFIX)
                names.append(name)
                current = current.parent
            self._path = "/" + "/".join(reversed(names))
        return self._path.replace("//", "/")

    def _sorted_children(self):
        for name in sorted(self.children):
            child = self.children.get(name)
            if child is not None:
                yield child

    def visit_depth_child_first(
        self, visitor: Visitor, evaluator: Optional[VisitEvaluator] = None
    ) -> None:
        """Walk depth-first, visiting children before their parent.

        The tree root itself is never visited.
        """
        for child in self._sorted_children():
            child.visit_depth_child_first(visitor, evaluator)
        if self is self.tree.root:
            return
        if evaluator is None or evaluator(self):
            visitor(self)

    def visit_depth_parent_first(
        self, visitor: Visitor, evaluator: Optional[VisitEvaluator] = None
    ) -> None:
        """Walk depth-first, visiting a parent before its children.

        A node rejected by the evaluator is skipped along with its subtree.
        The tree root itself is never visited.
        """
        if evaluator is not None and not evaluator(self):
            return
        if self is not self.tree.root:
            visitor(self)
        for child in self._sorted_children():
            child.visit_depth_parent_first(visitor, evaluator)

    def derive_diff_type(self, diff_type: DiffType) -> None:
        """Assign a diff type merged from the given one and the children's."""
        if self.is_leaf():
            self.assign_diff_type(diff_type)
            return
        merged = diff_type
        for child in self.children.values():
            merged = merged.merge(child.data.diff_type)
        self.assign_diff_type(merged)

    def assign_diff_type(self, diff_type: DiffType) -> None:
        """Set the diff type; a removal applies to every descendant too."""
        self.data.diff_type = diff_type
        if diff_type == DiffType.REMOVED:
            for child in self.children.values():
                child.assign_diff_type(diff_type)

    def compare(self, other: Optional[FileNode]) -> DiffType:
        """Compare this node with the same path in another layer."""
        if other is None:
            return DiffType.REMOVED
        if other.is_whiteout():
            return DiffType.REMOVED
        if self.name != other.name:
            raise FileTreeError("comparing mismatched nodes")
        return self.data.file_info.compare(other.data.file_info)