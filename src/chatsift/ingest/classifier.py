"""Heuristic checks that decoded text looks like a chat export.

Content-shape checks are advisory: when they fail the verdict is a warning,
never a rejection. Markup produced by the exporting application has no stable
structure, and a plain-text file was picked for import on purpose. Hard
rejection is left to the size gates of the pipeline.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import TYPE_CHECKING

from chatsift.constants import ContainerKind
from chatsift.ingest.models import ValidationVerdict

if TYPE_CHECKING:
    from chatsift.config.settings import ImportSettings

logger = logging.getLogger(__name__)

FINGERPRINT_NOT_FOUND = "source fingerprint not found"
CHAT_MARKERS_NOT_FOUND = "chat markers not found"
NO_READABLE_TEXT = "no readable text"

DEFAULT_SOURCE_FINGERPRINTS: tuple[str, ...] = ("WhatsApp",)

# 12/05/2023, 5.3.21, 01.12.2024: day and month of one or two digits, two or four digit year.
DATE_TOKEN = re.compile(r"(?<!\d)\d{1,2}[/.]\d{1,2}[/.](?:\d{4}|\d{2})(?!\d)")
MESSAGE_DELIMITERS: tuple[str, ...] = (" - ", ": ")
HTML_ROOT = re.compile(r"<html", re.IGNORECASE)
DOCTYPE = re.compile(r"<!doctype", re.IGNORECASE)


def has_date_token(text: str) -> bool:
    return DATE_TOKEN.search(text) is not None


def has_message_delimiter(text: str) -> bool:
    return any(delimiter in text for delimiter in MESSAGE_DELIMITERS)


class ContentClassifier:
    """Decide whether text can proceed to the message parser."""

    def __init__(self, *, source_fingerprints: Sequence[str] = DEFAULT_SOURCE_FINGERPRINTS) -> None:
        self.source_fingerprints = tuple(token.lower() for token in source_fingerprints)

    @classmethod
    def from_settings(cls, settings: ImportSettings) -> ContentClassifier:
        return cls(source_fingerprints=settings.source_fingerprints)

    def classify(self, text: str, container: ContainerKind) -> ValidationVerdict:
        """Classify ``text`` using the policy for ``container``.

        ``ARCHIVE`` is not a policy of its own: the pipeline classifies the
        extracted entry as markup or plain text and the archive inherits that
        verdict. Passing ``ARCHIVE`` here applies the plain-text policy.
        """
        if not text.strip():
            logger.warning("Decoded text is blank")
            return ValidationVerdict.warning(NO_READABLE_TEXT)
        if container is ContainerKind.MARKUP:
            return self.classify_markup(text)
        return self.classify_plain_text(text)

    def classify_markup(self, text: str) -> ValidationVerdict:
        has_root = HTML_ROOT.search(text) is not None
        lowered = text.lower()
        has_fingerprint = any(token in lowered for token in self.source_fingerprints)
        if has_root and (has_fingerprint or DOCTYPE.search(text) is not None):
            return ValidationVerdict.accepted()
        logger.warning("Markup does not look like a chat export (root=%s, fingerprint=%s)", has_root, has_fingerprint)
        return ValidationVerdict.warning(FINGERPRINT_NOT_FOUND)

    def classify_plain_text(self, text: str) -> ValidationVerdict:
        # Either marker alone matches too much ordinary prose.
        has_date = has_date_token(text)
        has_delimiter = has_message_delimiter(text)
        if has_date and has_delimiter:
            return ValidationVerdict.accepted()
        logger.warning("Text does not look like a chat export (date=%s, delimiter=%s)", has_date, has_delimiter)
        return ValidationVerdict.warning(CHAT_MARKERS_NOT_FOUND)
