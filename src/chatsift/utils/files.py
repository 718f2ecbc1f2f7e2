"""Bounded reading of import sources."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import BinaryIO

from chatsift.exceptions import EmptyInputError, InputTooLargeError, UnreadableSourceError

logger = logging.getLogger(__name__)

_UNITS = ("KB", "MB", "GB")


def format_file_size(size: int) -> str:
    """Human-readable size, e.g. ``1.5 MB``."""
    if size < 1024:
        return f"{size} B"
    value = float(size)
    for unit in _UNITS:
        value /= 1024
        if value < 1024 or unit == _UNITS[-1]:
            return f"{value:.1f} {unit}"
    return f"{size} B"


def check_size(size: int, limit: int, *, source: str | None = None) -> None:
    """Apply the two hard size gates."""
    if size == 0:
        raise EmptyInputError(source)
    if size > limit:
        raise InputTooLargeError(size, limit)


def read_path(path: Path, limit: int) -> bytes:
    """Read at most ``limit + 1`` bytes from ``path``.

    The declared size is checked first so an oversized file is rejected
    without reading it.
    """
    try:
        size = path.stat().st_size
        check_size(size, limit, source=str(path))
        with path.open("rb") as handle:
            return handle.read(limit + 1)
    except OSError as exc:
        raise UnreadableSourceError(str(path), exc) from exc


def read_stream(stream: BinaryIO, limit: int, *, name: str = "<stream>") -> bytes:
    """Read at most ``limit + 1`` bytes from a binary stream."""
    try:
        data = stream.read(limit + 1)
    except OSError as exc:
        raise UnreadableSourceError(name, exc) from exc
    if not isinstance(data, bytes | bytearray):
        msg = f"Expected a binary stream, got {type(data).__name__} from {name}"
        raise TypeError(msg)
    return bytes(data)


def source_name(source: object) -> str | None:
    """Best-effort display name of a source, used as a filename hint."""
    if isinstance(source, str | os.PathLike):
        return os.fspath(source)
    name = getattr(source, "name", None)
    return name if isinstance(name, str) else None
