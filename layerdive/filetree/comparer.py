"""Cached comparisons between ranges of stacked layers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

from layerdive.filetree.diff import PathError
from layerdive.filetree.node import FileTreeError
from layerdive.filetree.tree import FileTree, stack_tree_range

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeIndexKey:
    """A range of bottom layers compared against a range of top layers."""

    bottom_tree_start: int
    bottom_tree_stop: int
    top_tree_start: int
    top_tree_stop: int

    def __str__(self) -> str:
        bottom_single = self.bottom_tree_start == self.bottom_tree_stop
        top_single = self.top_tree_start == self.top_tree_stop
        if bottom_single and top_single:
            return f"Index({self.bottom_tree_start}:{self.top_tree_start})"
        if bottom_single:
            return (
                f"Index({self.bottom_tree_start}:"
                f"{self.top_tree_start}-{self.top_tree_stop})"
            )
        if top_single:
            return (
                f"Index({self.bottom_tree_start}-{self.bottom_tree_stop}:"
                f"{self.top_tree_start})"
            )
        return (
            f"Index({self.bottom_tree_start}-{self.bottom_tree_stop}:"
            f"{self.top_tree_start}-{self.top_tree_stop})"
        )


class Comparer:
    """Builds and caches marked trees for ranges of reference layers."""

    def __init__(self, ref_trees: list[FileTree]) -> None:
        self.ref_trees = list(ref_trees)
        self._trees: dict[TreeIndexKey, FileTree] = {}
        self._path_errors: dict[TreeIndexKey, list[PathError]] = {}

    def get_path_errors(self, key: TreeIndexKey) -> list[PathError]:
        """The paths that failed to apply when building the tree for ``key``."""
        _, path_errors = self._build(key)
        return path_errors

    def get_tree(self, key: TreeIndexKey) -> FileTree:
        """The marked tree for ``key``, built once and then cached."""
        cached = self._trees.get(key)
        if cached is not None:
            return cached
        tree, path_errors = self._build(key)
        self._trees[key] = tree
        self._path_errors[key] = path_errors
        return tree

    def _build(self, key: TreeIndexKey) -> tuple[FileTree, list[PathError]]:
        tree, path_errors = stack_tree_range(
            self.ref_trees, key.bottom_tree_start, key.bottom_tree_stop
        )
        for upper in self.ref_trees[key.top_tree_start : key.top_tree_stop + 1]:
            try:
                path_errors.extend(tree.compare_and_mark(upper))
            except FileTreeError as exc:
                logger.error("error while building tree: %s", exc)
                raise
        return tree, path_errors

    def natural_indexes(self) -> Iterator[TreeIndexKey]:
        """Each layer compared against everything beneath it."""
        for index in range(len(self.ref_trees)):
            if index == 0:
                yield TreeIndexKey(0, 0, 0, 0)
            else:
                yield TreeIndexKey(0, index - 1, index, index)

    def aggregated_indexes(self) -> Iterator[TreeIndexKey]:
        """All layers up to each one compared against the base layer."""
        for index in range(len(self.ref_trees)):
            if index == 0:
                yield TreeIndexKey(0, 0, 0, 0)
            else:
                yield TreeIndexKey(0, 0, 1, index)

    def build_cache(self) -> list[Exception]:
        """Build every natural and aggregated tree, returning the problems met.

        Building stops at the first tree that cannot be built at all.
        """
        errors: list[Exception] = []
        for index in self.natural_indexes():
            try:
                path_errors = self.get_path_errors(index)
            except FileTreeError:
                path_errors = []
            errors.extend(
                FileTreeError(f"path error at layer index {index}: {path_error}")
                for path_error in path_errors
            )
            try:
                self.get_tree(index)
            except FileTreeError as exc:
                errors.append(exc)
                return errors

        for index in self.aggregated_indexes():
            try:
                self.get_tree(index)
            except FileTreeError as exc:
                errors.append(exc)
                return errors
        return errors