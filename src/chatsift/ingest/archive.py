"""Locate the chat transcript inside an export archive.

Exports bundle the transcript with media, and some archives are re-zipped by
users with extra files added. Entry selection is a two-pass name match:

1. the first entry with a transcript extension whose lower-cased name contains
   a transcript keyword (``WhatsApp Chat with Bob.txt``, ``_chat.txt``);
2. only if nothing matched, the first entry with a transcript extension.

Pass 1 covers real exports; pass 2 keeps unconventionally named archives usable.
"""

from __future__ import annotations

import io
import logging
import zipfile
import zlib
from collections.abc import Sequence
from typing import TYPE_CHECKING

from chatsift.exceptions import InputTooLargeError, NoTranscriptInArchiveError
from chatsift.ingest.models import TranscriptEntry
from chatsift.security.zip import (
    ZipMemberSizeError,
    ZipValidationError,
    ZipValidationSettings,
    ensure_safe_member_size,
    validate_zip_contents,
)

if TYPE_CHECKING:
    from chatsift.config.settings import ImportSettings

logger = logging.getLogger(__name__)

DEFAULT_TRANSCRIPT_EXTENSIONS: tuple[str, ...] = (".txt", ".html")
DEFAULT_TRANSCRIPT_KEYWORDS: tuple[str, ...] = ("chat", "whatsapp")
_RESOURCE_FORK_PREFIX = "__macosx/"


class ArchiveExtractor:
    """Select and read the transcript entry of an archive held in memory."""

    def __init__(
        self,
        *,
        extensions: Sequence[str] = DEFAULT_TRANSCRIPT_EXTENSIONS,
        keywords: Sequence[str] = DEFAULT_TRANSCRIPT_KEYWORDS,
        limits: ZipValidationSettings | None = None,
    ) -> None:
        self.extensions = tuple(ext.lower() for ext in extensions)
        self.keywords = tuple(keyword.lower() for keyword in keywords)
        self.limits = limits or ZipValidationSettings()

    @classmethod
    def from_settings(cls, settings: ImportSettings) -> ArchiveExtractor:
        return cls(
            extensions=settings.transcript_extensions,
            keywords=settings.transcript_keywords,
            limits=settings.zip_limits(),
        )

    def select_entry(self, names: Sequence[str]) -> str | None:
        """Apply the two-pass name policy to file entry names, in archive order."""
        candidates = [name for name in names if name.lower().endswith(self.extensions)]
        for name in candidates:
            lowered = name.lower()
            if any(keyword in lowered for keyword in self.keywords):
                logger.debug("Selected archive entry %s by keyword match", name)
                return name
        if candidates:
            logger.info("No archive entry matched a transcript keyword; falling back to %s", candidates[0])
            return candidates[0]
        return None

    def extract_transcript(self, archive_bytes: bytes) -> TranscriptEntry | None:
        """Return the transcript entry, or ``None`` when no entry qualifies.

        Raises:
            NoTranscriptInArchiveError: The archive is corrupt, encrypted or
                exceeds the archive-wide limits.
            InputTooLargeError: The selected entry is larger than the
                per-entry size limit.

        """
        try:
            with zipfile.ZipFile(io.BytesIO(archive_bytes)) as zf:
                validate_zip_contents(zf, limits=self.limits)
                names = list_file_entries(zf)
                logger.debug("Archive holds %d file entries", len(names))
                member = self.select_entry(names)
                if member is None:
                    return None
                ensure_safe_member_size(zf, member, limits=self.limits)
                data = _read_member(zf, member)
        except zipfile.BadZipFile as exc:
            raise NoTranscriptInArchiveError(f"archive could not be opened ({exc})") from exc
        except ZipMemberSizeError as exc:
            raise InputTooLargeError(exc.member_size, exc.max_member_size) from exc
        except ZipValidationError as exc:
            raise NoTranscriptInArchiveError(str(exc)) from exc

        logger.info("Extracted transcript entry %s (%d bytes)", member, len(data))
        return TranscriptEntry(name=member, data=data)


def list_file_entries(zf: zipfile.ZipFile) -> list[str]:
    """Names of non-directory entries, skipping macOS resource forks."""
    return [
        info.filename
        for info in zf.infolist()
        if not info.is_dir() and not info.filename.lower().startswith(_RESOURCE_FORK_PREFIX)
    ]


def _read_member(zf: zipfile.ZipFile, member: str) -> bytes:
    try:
        return zf.read(member)
    except (zlib.error, EOFError, NotImplementedError) as exc:
        raise NoTranscriptInArchiveError(f"entry '{member}' could not be decompressed ({exc})") from exc
    except RuntimeError as exc:
        # zipfile signals encrypted members with a bare RuntimeError.
        raise NoTranscriptInArchiveError(f"entry '{member}' could not be read ({exc})") from exc
