"""Human readable byte sizes, using SI (base 1000) units."""

from __future__ import annotations

import math

_SIZE_SUFFIXES = ("B", "kB", "MB", "GB", "TB", "PB", "EB")

_KIB = 1024
_KB = 1000

_SIZE_TABLE = {
    "": 1,
    "b": 1,
    "kib": _KIB,
    "ki": _KIB,
    "kb": _KB,
    "k": _KB,
    "mib": _KIB**2,
    "mi": _KIB**2,
    "mb": _KB**2,
    "m": _KB**2,
    "gib": _KIB**3,
    "gi": _KIB**3,
    "gb": _KB**3,
    "g": _KB**3,
    "tib": _KIB**4,
    "ti": _KIB**4,
    "tb": _KB**4,
    "t": _KB**4,
    "pib": _KIB**5,
    "pi": _KIB**5,
    "pb": _KB**5,
    "p": _KB**5,
    "eib": _KIB**6,
    "ei": _KIB**6,
    "eb": _KB**6,
    "e": _KB**6,
}

_MAX_UINT64 = 2**64
_NUMBER_CHARS = frozenset("0123456789.,")


def format_bytes(size: int) -> str:
    """Render a byte count such as ``1.2 MB`` (base 1000 units)."""
    if size < 0:
        raise ValueError(f"byte count cannot be negative: {size}")
    if size < 10:
        return f"{size} B"
    exponent = int(math.floor(math.log(size) / math.log(1000)))
    suffix = _SIZE_SUFFIXES[exponent]
    value = math.floor(float(size) / math.pow(1000, exponent) * 10 + 0.5) / 10
    if value < 10:
        return f"{value:.1f} {suffix}"
    return f"{value:.0f} {suffix}"


def parse_bytes(text: str) -> int:
    """Parse a size such as ``50kB`` or ``1 MiB`` into a number of bytes.

    Raises ValueError when the number or the unit cannot be understood.
    """
    digits = 0
    for char in text:
        if char not in _NUMBER_CHARS:
            break
        digits += 1

    number = text[:digits].replace(",", "")
    try:
        value = float(number)
    except ValueError as exc:
        raise ValueError(f"invalid size number: {number!r}") from exc

    unit = text[digits:].strip().lower()
    try:
        multiplier = _SIZE_TABLE[unit]
    except KeyError:
        raise ValueError(f"unhandled size name: {unit}") from None

    value *= multiplier
    if value >= _MAX_UINT64:
        raise ValueError(f"too large: {text}")
    return int(value)