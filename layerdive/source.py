"""Where an image comes from, and how to tell from the user's input."""

from __future__ import annotations

import enum
import re


class ImageSource(enum.Enum):
    """A container engine or archive an image can be loaded from."""

    UNKNOWN = "unknown"
    DOCKER_ENGINE = "docker"
    PODMAN_ENGINE = "podman"
    DOCKER_ARCHIVE = "docker-archive"

    def __str__(self) -> str:
        return self.value


_ALIASES = {
    "docker": ImageSource.DOCKER_ENGINE,
    "podman": ImageSource.PODMAN_ENGINE,
    "docker-archive": ImageSource.DOCKER_ARCHIVE,
    "docker-tar": ImageSource.DOCKER_ARCHIVE,
}

_SCHEME = re.compile(r"([A-Za-z][A-Za-z0-9+.\-]*):")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_PORT = re.compile(r":[0-9]*")


def image_source_names() -> list[str]:
    """Names accepted as an image source."""
    return [str(source) for source in ImageSource if source is not ImageSource.UNKNOWN]


def parse_image_source(text: str) -> ImageSource:
    """Map a source name to an ImageSource; unknown names give UNKNOWN."""
    return _ALIASES.get(text, ImageSource.UNKNOWN)


def _is_valid_url_rest(rest: str) -> bool:
    """Whether the part after the scheme forms a well-formed URL."""
    if any(ord(char) < 0x20 or ord(char) == 0x7F for char in rest):
        return False

    before_fragment, _, fragment = rest.partition("#")
    before_query = before_fragment.partition("?")[0]
    if _BAD_ESCAPE.search(before_query) or _BAD_ESCAPE.search(fragment):
        return False

    if before_query.startswith("//"):
        authority = re.split(r"/", before_query[2:], maxsplit=1)[0]
        host = authority.rpartition("@")[2]
        if host.startswith("["):
            close = host.find("]")
            if close < 0:
                return False
            port = host[close + 1 :]
            if port and not _PORT.fullmatch(port):
                return False
        elif ":" in host:
            if not _PORT.fullmatch(host[host.rfind(":") :]):
                return False
    return True


def derive_image_source(image: str) -> tuple[ImageSource, str]:
    """Split a ``scheme://image`` reference into its source and image.

    Returns ``(ImageSource.UNKNOWN, "")`` when no known scheme is given or
    the reference is not a well-formed URL.
    """
    match = _SCHEME.match(image)
    if match is None:
        return ImageSource.UNKNOWN, ""

    scheme = match.group(1).lower()
    source = _ALIASES.get(scheme)
    if source is None or not _is_valid_url_rest(image[match.end() :]):
        return ImageSource.UNKNOWN, ""

    return source, image.removeprefix(scheme + "://")