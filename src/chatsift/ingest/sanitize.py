"""Removal of invisible Unicode that breaks line-oriented parsing.

Exports sprinkle left-to-right marks before attachments, wrap mentions in
isolates and occasionally start with a BOM. None of it is visible to a reader,
but all of it defeats anchored patterns such as a leading date stamp.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

# Zero-width space/joiners/direction marks, line and paragraph separators,
# embeddings and overrides, narrow no-break space, BOM, soft hyphen,
# Arabic letter mark and the directional isolates.
INVISIBLE_CHARS = re.compile("[\u200b-\u200f\u2028-\u202f\ufeff\u00ad\u061c\u2066-\u2069]")
_LINE_BREAKS = re.compile(r"\r\n?")


def strip_invisible(text: str) -> str:
    return INVISIBLE_CHARS.sub("", text)


def normalize_newlines(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return _LINE_BREAKS.sub("\n", text)


def sanitize(text: str) -> str:
    """Strip invisible characters and normalize line endings.

    Idempotent: ``sanitize(sanitize(x)) == sanitize(x)``.
    """
    if not text:
        return text
    return normalize_newlines(strip_invisible(text))


def clean_lines(lines: Iterable[str]) -> list[str]:
    """Trim and sanitize each line, dropping lines left empty.

    Blank lines carry no meaning for some grammars and separate paragraphs in
    others, so this is never applied unless a caller asks for it.
    """
    cleaned = (sanitize(line.strip()).strip() for line in lines)
    return [line for line in cleaned if line]
