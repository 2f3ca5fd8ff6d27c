"""Per-file metadata and the payload carried by tree nodes."""

from __future__ import annotations

import hashlib
import io
import os
import stat
import tarfile
from dataclasses import dataclass, field, replace
from typing import BinaryIO, Optional

from layerdive.filetree.diff import DiffType

TYPE_REG = ord("0")
TYPE_LINK = ord("1")
TYPE_SYMLINK = ord("2")
TYPE_CHAR = ord("3")
TYPE_BLOCK = ord("4")
TYPE_DIR = ord("5")
TYPE_FIFO = ord("6")

_TYPE_MODE_BITS = {
    TYPE_DIR: stat.S_IFDIR,
    TYPE_SYMLINK: stat.S_IFLNK,
    TYPE_CHAR: stat.S_IFCHR,
    TYPE_BLOCK: stat.S_IFBLK,
    TYPE_FIFO: stat.S_IFIFO,
}

_CHUNK_SIZE = 64 * 1024

_default_collapse = False


def set_default_collapse(value: bool) -> None:
    """Set whether newly created nodes start out collapsed."""
    global _default_collapse
    _default_collapse = bool(value)


def _collapse_default() -> bool:
    return _default_collapse


def hash_stream(stream: BinaryIO) -> int:
    """Return a 64-bit content hash of everything left in the stream."""
    digest = hashlib.blake2b(digest_size=8)
    for chunk in iter(lambda: stream.read(_CHUNK_SIZE), b""):
        digest.update(chunk)
    return int.from_bytes(digest.digest(), "big")


@dataclass
class FileInfo:
    """Metadata for a single file as found in a layer."""

    path: str = ""
    type_flag: int = 0
    linkname: str = ""
    hash: int = 0
    size: int = 0
    mode: int = 0
    uid: int = 0
    gid: int = 0
    is_dir: bool = False

    def copy(self) -> FileInfo:
        return replace(self)

    def compare(self, other: FileInfo) -> DiffType:
        """Compare type, contents, permissions and ownership."""
        if (
            self.type_flag == other.type_flag
            and self.hash == other.hash
            and self.mode == other.mode
            and self.uid == other.uid
            and self.gid == other.gid
        ):
            return DiffType.UNMODIFIED
        return DiffType.MODIFIED


def file_info_from_tar(
    member: tarfile.TarInfo, stream: Optional[BinaryIO], path: str
) -> FileInfo:
    """Build a FileInfo from a tar member.

    ``stream`` holds the member's contents, or is None when it has none.
    """
    type_flag = member.type[0] if member.type else TYPE_REG
    if type_flag == 0:
        type_flag = TYPE_REG

    content_hash = 0
    if type_flag != TYPE_DIR:
        content_hash = hash_stream(stream if stream is not None else io.BytesIO())

    mode = (member.mode & 0o7777) | _TYPE_MODE_BITS.get(type_flag, stat.S_IFREG)

    return FileInfo(
        path=path,
        type_flag=type_flag,
        linkname=member.linkname,
        hash=content_hash,
        size=member.size,
        mode=mode,
        uid=member.uid,
        gid=member.gid,
        is_dir=member.isdir(),
    )


def file_info_from_path(real_path: str | os.PathLike, path: str) -> FileInfo:
    """Build a FileInfo from a file on disk; ownership is not recorded."""
    info = os.lstat(real_path)
    linkname = ""
    size = 0

    if stat.S_ISLNK(info.st_mode):
        type_flag = TYPE_SYMLINK
        linkname = os.readlink(real_path)
    elif stat.S_ISDIR(info.st_mode):
        type_flag = TYPE_DIR
    else:
        type_flag = TYPE_REG
        size = info.st_size

    content_hash = 0
    if type_flag != TYPE_DIR:
        with open(real_path, "rb") as handle:
            content_hash = hash_stream(handle)

    return FileInfo(
        path=path,
        type_flag=type_flag,
        linkname=linkname,
        hash=content_hash,
        size=size,
        mode=info.st_mode,
        uid=-1,
        gid=-1,
        is_dir=stat.S_ISDIR(info.st_mode),
    )


@dataclass
class ViewInfo:
    """Display state of a node."""

    collapsed: bool = field(default_factory=_collapse_default)
    hidden: bool = False

    def copy(self) -> ViewInfo:
        return replace(self)


@dataclass
class NodeData:
    """Everything a tree node carries: view state, metadata and diff result."""

    view_info: ViewInfo = field(default_factory=ViewInfo)
    file_info: FileInfo = field(default_factory=FileInfo)
    diff_type: DiffType = DiffType.UNMODIFIED

    def copy(self) -> NodeData:
        return NodeData(
            view_info=self.view_info.copy(),
            file_info=self.file_info.copy(),
            diff_type=self.diff_type,
        )