"""A layer's file tree and the operations to stack and compare layers."""

from __future__ import annotations

import posixpath
import uuid
from dataclasses import dataclass
from typing import Optional

from layerdive.filetree.diff import DiffType, FileAction, PathError
from layerdive.filetree.file_info import FileInfo
from layerdive.filetree.node import (
    DOUBLE_WHITEOUT_PREFIX,
    FileNode,
    FileTreeError,
    VisitEvaluator,
    Visitor,
)


class FileTree:
    """A set of files and directories and their relations."""

    def __init__(self) -> None:
        self.size = 0
        self.file_size = 0
        self.name = ""
        self.id = uuid.uuid4()
        self.root = FileNode(None, "", FileInfo())
        self.root.tree = self

    def __repr__(self) -> str:
        return f"FileTree(name={self.name!r}, size={self.size})"

    def copy(self) -> FileTree:
        """A deep copy whose nodes all belong to the new tree."""
        new_tree = FileTree()
        new_tree.size = self.size
        new_tree.file_size = self.file_size
        new_tree.name = self.name
        new_tree.root = self.root.copy(None)

        pending = [new_tree.root]
        while pending:
            node = pending.pop()
            node.tree = new_tree
            pending.extend(node.children.values())
        return new_tree

    def visit_depth_child_first(
        self, visitor: Visitor, evaluator: Optional[VisitEvaluator] = None
    ) -> None:
        self.root.visit_depth_child_first(visitor, evaluator)

    def visit_depth_parent_first(
        self, visitor: Visitor, evaluator: Optional[VisitEvaluator] = None
    ) -> None:
        self.root.visit_depth_parent_first(visitor, evaluator)

    def stack(self, upper: FileTree) -> list[PathError]:
        """Apply the upper tree on top of this one, honouring whiteouts.

        Returns the paths that could not be applied.
        """
        failed: list[PathError] = []

        def graft(node: FileNode) -> None:
            path = node.path()
            if node.is_whiteout():
                try:
                    self.remove_path(path)
                except FileTreeError as exc:
                    failed.append(PathError(path, FileAction.REMOVE, exc))
            else:
                try:
                    self.add_path(path, node.data.file_info)
                except FileTreeError as exc:
                    failed.append(PathError(path, FileAction.ADD, exc))

        upper.visit_depth_child_first(graft)
        return failed

    def _find_node(self, path: str) -> Optional[FileNode]:
        node = self.root
        for name in path.strip("/").split("/"):
            if not name:
                continue
            node = node.children.get(name)
            if node is None:
                return None
        return node

    def get_node(self, path: str) -> FileNode:
        """Fetch the node at a slash-delimited path such as ``/a/b``."""
        node = self._find_node(path)
        if node is None:
            raise FileTreeError(f"path does not exist: {path}")
        return node

    def add_path(
        self, filepath: str, data: FileInfo
    ) -> tuple[Optional[FileNode], list[FileNode]]:
        """Add a node at the path, creating intermediate directories.

        Returns the end node (None for opaque whiteout markers) and the
        nodes that were newly created along the way.
        """
        cleaned = posixpath.normpath(filepath) if filepath else "."
        if cleaned == ".":
            raise FileTreeError(f"cannot add relative path '{cleaned}'")

        names = cleaned.strip("/").split("/")
        node = self.root
        added: list[FileNode] = []
        for position, name in enumerate(names):
            if not name:
                continue
            existing = node.children.get(name)
            if existing is not None:
                node = existing
            else:
                if name.startswith(DOUBLE_WHITEOUT_PREFIX):
                    return None, added
                # intermediary nodes get an empty payload
                child = node.add_child(name, FileInfo())
                if child is None:
                    raise FileTreeError(
                        f"could not add child node: '{name}' (path:'{cleaned}')"
                    )
                node = child
                added.append(node)

            if position == len(names) - 1:
                node.data.file_info = data.copy()
        return node, added

    def remove_path(self, path: str) -> None:
        """Remove the node at the path along with its descendants."""
        self.get_node(path).remove()

    def compare_and_mark(self, upper: FileTree) -> list[PathError]:
        """Mark this (lower) tree with the differences introduced by ``upper``.

        Returns the paths that could not be applied.
        """
        modifications: list[_CompareMark] = []
        failed: list[PathError] = []

        def graft(upper_node: FileNode) -> None:
            path = upper_node.path()
            if upper_node.is_whiteout():
                try:
                    self.mark_removed(path)
                except FileTreeError as exc:
                    failed.append(PathError(path, FileAction.REMOVE, exc))
                return

            lower_node = self._find_node(path)
            if lower_node is None:
                try:
                    _, new_nodes = self.add_path(path, upper_node.data.file_info)
                except FileTreeError as exc:
                    failed.append(PathError(path, FileAction.ADD, exc))
                    return
                for new_node in reversed(new_nodes):
                    modifications.append(
                        _CompareMark(new_node, upper_node, None, DiffType.ADDED)
                    )
                return

            modifications.append(
                _CompareMark(lower_node, upper_node, lower_node.compare(upper_node), None)
            )

        # visit leaves first so diff types can be derived from children
        upper.visit_depth_child_first(graft)

        for mark in modifications:
            if mark.final is not None:
                mark.lower_node.assign_diff_type(mark.final)
            elif mark.lower_node.data.diff_type == DiffType.UNMODIFIED:
                mark.lower_node.derive_diff_type(mark.tentative)
            mark.lower_node.data.file_info = mark.upper_node.data.file_info.copy()
        return failed

    def mark_removed(self, path: str) -> None:
        """Mark the node at the path, and its descendants, as removed."""
        self.get_node(path).assign_diff_type(DiffType.REMOVED)


@dataclass
class _CompareMark:
    lower_node: FileNode
    upper_node: FileNode
    tentative: Optional[DiffType]
    final: Optional[DiffType]


def stack_tree_range(
    trees: list[FileTree], start: int, stop: int
) -> tuple[FileTree, list[PathError]]:
    """Stack ``trees[start]`` through ``trees[stop]`` onto a copy of the first tree."""
    errors: list[PathError] = []
    tree = trees[0].copy()
    for upper in trees[start : stop + 1]:
        errors.extend(tree.stack(upper))
    return tree, errors