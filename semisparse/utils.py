"""Small numeric and formatting helpers."""

from __future__ import annotations

from typing import Any, Callable, Iterable, TypeVar

import numpy as np

Scalar = np.float32
"""Element type stored in tensors."""

T = TypeVar("T")


def ceil_div(num: int, deno: int) -> int:
    """Divide rounding up; zero stays zero."""
    return (num - 1) // deno + 1 if num else 0


def _format_item(item: Any) -> str:
    if isinstance(item, (bool, np.bool_)):
        return "1" if item else "0"
    if isinstance(item, (float, np.floating)):
        return f"{float(item):g}"
    return str(item)


def array_to_string(array: Iterable[Any], delim: str = ", ") -> str:
    """Join the items of ``array`` with ``delim``; booleans print as 1/0."""
    return delim.join(_format_item(item) for item in array)


class StrToNumError(ValueError):
    """Raised when a string is not a complete, valid number."""

    def __init__(self) -> None:
        super().__init__("Invalid number format")


def strtonum(fn: Callable[[str], T], text: str) -> T:
    """Convert the whole of ``text`` with ``fn``; trailing garbage is an error."""
    if not text or text[-1].isspace():
        raise StrToNumError()
    try:
        return fn(text)
    except (ValueError, TypeError, OverflowError) as exc:
        raise StrToNumError() from exc


def size_to_string(size: int) -> str:
    """Render a byte count in human-readable binary units."""
    if size >= 1 << 30:
        return f"{size / (1 << 30):.1f} GiB"
    if size >= 1 << 20:
        return f"{size / (1 << 20):.1f} MiB"
    if size >= 1 << 10:
        return f"{size / (1 << 10):.1f} KiB"
    if size != 1:
        return f"{size} bytes"
    return "1 byte"