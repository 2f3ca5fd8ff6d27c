"""Text rendering of file trees: tree lines, attributes and visible sizes."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable

from layerdive.filetree.diff import DiffType
from layerdive.filetree.file_info import TYPE_LINK, TYPE_SYMLINK
from layerdive.filetree.node import FileNode
from layerdive.filetree.tree import FileTree
from layerdive.units import format_bytes

NEW_LINE = "\n"
NO_BRANCH_SPACE = "    "
BRANCH_SPACE = "│   "
MIDDLE_ITEM = "├─"
LAST_ITEM = "└─"
UNCOLLAPSED_ITEM = "─ "
COLLAPSED_ITEM = "⊕ "

_RESET = "\x1b[0m"
_DIFF_COLORS = {
    DiffType.ADDED: "\x1b[32m",
    DiffType.REMOVED: "\x1b[31m",
    DiffType.MODIFIED: "\x1b[33m",
    DiffType.UNMODIFIED: "\x1b[0m",
}

_color_enabled = False


def set_color_enabled(enabled: bool) -> None:
    """Turn ANSI colouring of rendered names and attributes on or off."""
    global _color_enabled
    _color_enabled = bool(enabled)


def _colorize(diff_type: DiffType, text: str) -> str:
    if not _color_enabled:
        return text
    return f"{_DIFF_COLORS[diff_type]}{text}{_RESET}"


def file_mode_string(mode: int) -> str:
    """The ``rwxrwxrwx`` form of the permission bits of a mode."""
    letters = "rwxrwxrwx"
    return "".join(
        letter if mode & (1 << (8 - position)) else "-"
        for position, letter in enumerate(letters)
    )


def node_label(node: FileNode) -> str:
    """The node's name, with its link target for links, coloured by diff type."""
    display = node.name
    info = node.data.file_info
    if info.type_flag in (TYPE_SYMLINK, TYPE_LINK):
        display += " → " + info.linkname
    return _colorize(node.data.diff_type, display)


def _node_size(node: FileNode) -> int:
    if node.is_leaf():
        return node.data.file_info.size

    total = 0
    include_removed = node.data.diff_type == DiffType.REMOVED

    def sizer(current: FileNode) -> None:
        nonlocal total
        # removed children only count when the node itself was removed
        if current.data.diff_type != DiffType.REMOVED or include_removed:
            total += current.data.file_info.size

    node.visit_depth_child_first(sizer)
    return total


def metadata_string(node: FileNode) -> str:
    """The node's type, permissions, ownership and size as columns."""
    info = node.data.file_info
    kind = "d" if info.is_dir else "-"
    user_group = f"{info.uid}:{info.gid}"
    size = format_bytes(_node_size(node))
    text = f"{kind}{file_mode_string(info.mode)} {user_group:>11} {size:>10} "
    return _colorize(node.data.diff_type, text)


def render_tree_line(
    node: FileNode, spaces: Iterable[bool], last: bool, collapsed: bool
) -> str:
    """One line of the ASCII tree for a node at the given nesting."""
    branches = "".join(NO_BRANCH_SPACE if space else BRANCH_SPACE for space in spaces)
    this_branch = LAST_ITEM if last else MIDDLE_ITEM
    indicator = COLLAPSED_ITEM if collapsed else UNCOLLAPSED_ITEM
    return branches + this_branch + indicator + node_label(node) + NEW_LINE


@dataclass
class _RenderParams:
    node: FileNode
    spaces: list[bool] = field(default_factory=list)
    child_spaces: list[bool] = field(default_factory=list)
    show_collapsed: bool = False
    is_last: bool = False


def _child_params(current: _RenderParams) -> list[_RenderParams]:
    parent = current.node
    params: list[_RenderParams] = []
    for position, name in enumerate(sorted(parent.children)):
        child = parent.children[name]
        if child.data.view_info.hidden or parent.data.view_info.collapsed:
            continue
        is_last = position == len(parent.children) - 1
        collapsed = child.data.view_info.collapsed
        child_spaces = list(current.child_spaces)
        if child.children and not collapsed:
            child_spaces.append(is_last)
        params.append(
            _RenderParams(
                node=child,
                spaces=current.child_spaces,
                child_spaces=child_spaces,
                show_collapsed=collapsed and bool(child.children),
                is_last=is_last,
            )
        )
    return params


def render_tree(tree: FileTree, start: int, stop: int, show_attributes: bool) -> str:
    """Render the visible rows ``start`` through ``stop`` of the tree."""
    selected: list[_RenderParams] = []
    pending: deque[_RenderParams] = deque([_RenderParams(node=tree.root)])
    row = 0
    while pending and row <= stop:
        current = pending.popleft()
        pending.extendleft(reversed(_child_params(current)))

        # the root never occupies a row
        if current.node is tree.root:
            continue
        if start <= row <= stop:
            selected.append(current)
        row += 1

    lines = []
    for params in selected:
        prefix = metadata_string(params.node) + " " if show_attributes else ""
        lines.append(
            prefix
            + render_tree_line(
                params.node, params.spaces, params.is_last, params.show_collapsed
            )
        )
    return "".join(lines)


def tree_string(tree: FileTree, show_attributes: bool = False) -> str:
    """The whole tree as ASCII art."""
    return render_tree(tree, 0, tree.size, show_attributes)


def tree_string_between(
    tree: FileTree, start: int, stop: int, show_attributes: bool = False
) -> str:
    """A slice of the tree's rows as ASCII art."""
    return render_tree(tree, start, stop, show_attributes)


def visible_size(tree: FileTree) -> int:
    """The number of rows the tree takes up given hidden and collapsed nodes."""
    size = 0

    def visitor(node: FileNode) -> None:
        nonlocal size
        size += 1

    def evaluator(node: FileNode) -> bool:
        nonlocal size
        view = node.data.view_info
        if node.data.file_info.is_dir:
            # a collapsed directory is not descended into but still takes a row
            if view.collapsed:
                size += 1
            return not view.collapsed and not view.hidden
        return not view.hidden

    tree.visit_depth_parent_first(visitor, evaluator)
    # the root is not a row
    return size - 1