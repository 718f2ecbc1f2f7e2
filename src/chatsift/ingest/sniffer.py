"""Container detection from leading bytes.

Export files routinely carry the wrong extension (a zip renamed to ``.txt`` by
a share sheet, an HTML export saved without a suffix), so the container kind
is derived from content only.
"""

from __future__ import annotations

from chatsift.constants import ContainerKind

ARCHIVE_MAGIC = b"PK"
MARKUP_FINGERPRINTS: tuple[bytes, ...] = (b"<html", b"<!doctype html")
TEXT_BOMS: tuple[bytes, ...] = (b"\xef\xbb\xbf", b"\xff\xfe", b"\xfe\xff")
DEFAULT_SNIFF_WINDOW = 4096


def is_archive(data: bytes) -> bool:
    """Return True when ``data`` starts with the zip local-header magic."""
    return data[:2] == ARCHIVE_MAGIC


def has_markup_fingerprint(data: bytes, *, window: int = DEFAULT_SNIFF_WINDOW) -> bool:
    prefix = data[:window].lower()
    return any(token in prefix for token in MARKUP_FINGERPRINTS)


def classify_container(data: bytes, *, window: int = DEFAULT_SNIFF_WINDOW) -> ContainerKind:
    """Classify ``data`` by signature.

    Only the first ``window`` bytes are inspected. Returns ``UNKNOWN`` when no
    signature matches, including for empty input; callers treat that as a
    plain-text candidate.
    """
    if is_archive(data):
        return ContainerKind.ARCHIVE
    if has_markup_fingerprint(data, window=window):
        return ContainerKind.MARKUP
    if data.startswith(TEXT_BOMS):
        return ContainerKind.PLAIN_TEXT
    return ContainerKind.UNKNOWN
