"""Scoring how much space an image wastes on duplicated or removed files."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from layerdive.filetree.node import FileNode, FileTreeError
from layerdive.filetree.tree import FileTree, stack_tree_range

logger = logging.getLogger(__name__)


@dataclass
class EfficiencyData:
    """Storage and reference statistics for one path across all layers."""

    path: str
    nodes: list[FileNode] = field(default_factory=list)
    cumulative_size: int = 0
    min_discovered_size: int = field(default=-1, repr=False)


def _whiteout_size(trees: list[FileTree], index: int, node: FileNode) -> int:
    """Size of what a whiteout in ``trees[index]`` removed from lower layers."""
    stacked, failed = stack_tree_range(trees, 0, index - 1)
    for path_error in failed:
        logger.error("%s", path_error)

    previous = stacked.get_node(node.path())
    size = 0
    if previous.data.file_info.is_dir:

        def sizer(current: FileNode) -> None:
            nonlocal size
            size += current.data.file_info.size

        previous.visit_depth_child_first(sizer)
    return size


def efficiency(trees: list[FileTree]) -> tuple[float, list[EfficiencyData]]:
    """Score the layers and list the paths stored more than once.

    The score is the ratio of the smallest size seen for each path to the
    total size spent on it across layers; 1.0 means nothing is wasted. The
    list is ordered by ascending cumulative size.
    """
    by_path: dict[str, EfficiencyData] = {}
    inefficient: list[EfficiencyData] = []

    for index, tree in enumerate(trees):

        def visitor(node: FileNode, index: int = index) -> None:
            path = node.path()
            data = by_path.setdefault(path, EfficiencyData(path=path))

            if node.is_whiteout():
                size = _whiteout_size(trees, index, node)
            else:
                size = node.data.file_info.size

            data.cumulative_size += size
            if data.min_discovered_size < 0 or size < data.min_discovered_size:
                data.min_discovered_size = size
            data.nodes.append(node)

            if len(data.nodes) == 2:
                inefficient.append(data)

        try:
            tree.visit_depth_child_first(visitor, FileNode.is_leaf)
        except FileTreeError as exc:
            logger.error("unable to propagate ref tree: %s", exc)

    minimum = sum(data.min_discovered_size for data in by_path.values())
    discovered = sum(data.cumulative_size for data in by_path.values())
    score = 1.0 if discovered == 0 else minimum / discovered

    inefficient.sort(key=lambda data: data.cumulative_size)
    return score, inefficient