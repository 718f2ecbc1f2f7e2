"""Import normalization pipeline.

Turns one user-supplied export (text, HTML or zip) into a ``NormalizedDocument``
plus a ``ValidationVerdict``::

    START -> SNIFFED -> (EXTRACTED)? -> DECODED -> SANITIZED -> CLASSIFIED -> DONE

Every step either advances or raises a ``TranscriptImportError``. Nothing is
kept between invocations.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePath
from typing import BinaryIO

from chatsift.config.settings import ImportSettings
from chatsift.constants import ContainerKind, PipelineState
from chatsift.exceptions import NoTranscriptInArchiveError, UnrecognizedContentError
from chatsift.ingest.archive import ArchiveExtractor
from chatsift.ingest.classifier import ContentClassifier
from chatsift.ingest.encoding import EncodingResolver, detect_likely_encoding
from chatsift.ingest.models import ImportOutcome, NormalizedDocument, RawInput, ValidationVerdict
from chatsift.ingest.sanitize import clean_lines, sanitize
from chatsift.ingest.sniffer import classify_container
from chatsift.utils.files import check_size, format_file_size, read_path, read_stream, source_name

logger = logging.getLogger(__name__)

Source = bytes | bytearray | str | os.PathLike[str] | BinaryIO

MARKUP_EXTENSIONS = frozenset({"html"})
ARCHIVE_EXTENSION = "zip"
MISSING_ARCHIVE_SIGNATURE = "extension suggests an archive but no archive signature was found"


class ImportPipeline:
    """Normalize chat exports for the message parser."""

    def __init__(
        self,
        settings: ImportSettings | None = None,
        *,
        resolver: EncodingResolver | None = None,
        extractor: ArchiveExtractor | None = None,
        classifier: ContentClassifier | None = None,
    ) -> None:
        self.settings = settings or ImportSettings()
        self.resolver = resolver or EncodingResolver()
        self.extractor = extractor or ArchiveExtractor.from_settings(self.settings)
        self.classifier = classifier or ContentClassifier.from_settings(self.settings)

    def normalize(self, source: Source, filename: str | None = None, *, split_lines: bool = False) -> ImportOutcome:
        """Read ``source`` and normalize it.

        Args:
            source: Raw bytes, a filesystem path, or a readable binary stream.
            filename: Filename hint. Defaults to the path or stream name.
            split_lines: Trim lines and drop blank ones before classification.

        Raises:
            TranscriptImportError: One of its subclasses, on any terminal failure.

        """
        raw = self.read_input(source, filename)
        return self.normalize_raw(raw, split_lines=split_lines)

    def read_input(self, source: Source, filename: str | None = None) -> RawInput:
        limit = self.settings.max_file_size
        if isinstance(source, bytes | bytearray):
            data = bytes(source)
        elif isinstance(source, str | os.PathLike):
            data = read_path(Path(source), limit)
        else:
            data = read_stream(source, limit, name=source_name(source) or "<stream>")
        hint = filename or source_name(source)
        return RawInput(data=data, filename=PurePath(hint).name if hint else None)

    def normalize_raw(self, raw: RawInput, *, split_lines: bool = False) -> ImportOutcome:
        states = [PipelineState.START]
        check_size(raw.size, self.settings.max_file_size, source=raw.filename)
        logger.info("Normalizing %s (%s)", raw.filename or "<bytes>", format_file_size(raw.size))

        container = classify_container(raw.data, window=self.settings.sniff_window)
        states.append(PipelineState.SNIFFED)
        logger.debug("Sniffed container: %s", container.value)

        advisory = self._extension_advisory(raw, container)
        payload = raw.data
        name = raw.filename
        policy = container
        if container is ContainerKind.ARCHIVE:
            entry = self.extractor.extract_transcript(raw.data)
            if entry is None:
                raise NoTranscriptInArchiveError()
            states.append(PipelineState.EXTRACTED)
            check_size(len(entry.data), self.settings.max_file_size, source=entry.name)
            payload = entry.data
            name = entry.name
            policy = self._entry_policy(entry.name, payload)
        elif container is ContainerKind.UNKNOWN:
            policy = self._policy_from_hint(raw.extension)

        likely_encoding = detect_likely_encoding(payload)
        decoded = self.resolver.decode(payload)
        states.append(PipelineState.DECODED)

        text = sanitize(decoded.text)
        if split_lines:
            text = "\n".join(clean_lines(text.split("\n")))
        states.append(PipelineState.SANITIZED)

        verdict = self.classifier.classify(text, policy).merge(advisory)
        states.append(PipelineState.CLASSIFIED)
        if not verdict.is_accepted:
            states.append(PipelineState.REJECTED)
            logger.error("Import of %s rejected: %s", name or "<bytes>", verdict.reason)
            raise UnrecognizedContentError(verdict.reason or "content rejected")

        states.append(PipelineState.DONE)
        if verdict.has_warnings:
            logger.warning("Import of %s accepted with warnings: %s", name or "<bytes>", verdict.reason)

        document = NormalizedDocument(
            text=text,
            encoding_used=decoded.encoding,
            quality=decoded.quality,
            source_container=container,
            source_name=name,
            likely_encoding=likely_encoding,
        )
        return ImportOutcome(document=document, verdict=verdict, states=tuple(states))

    def _extension_advisory(self, raw: RawInput, container: ContainerKind) -> ValidationVerdict:
        extension = raw.extension
        if extension is None:
            return ValidationVerdict.accepted()
        reasons = []
        if extension not in self.settings.supported_extensions:
            reasons.append(f"unsupported file extension: .{extension}")
        if extension == ARCHIVE_EXTENSION and container is not ContainerKind.ARCHIVE:
            reasons.append(MISSING_ARCHIVE_SIGNATURE)
        return ValidationVerdict.warning(*reasons) if reasons else ValidationVerdict.accepted()

    def _entry_policy(self, entry_name: str, payload: bytes) -> ContainerKind:
        """Pick the classification policy for an extracted archive entry."""
        kind = classify_container(payload, window=self.settings.sniff_window)
        if kind is ContainerKind.UNKNOWN:
            return self._policy_from_hint(PurePath(entry_name).suffix[1:].lower() or None)
        return kind

    @staticmethod
    def _policy_from_hint(extension: str | None) -> ContainerKind:
        """Last-resort use of the filename when no byte signature matched."""
        if extension in MARKUP_EXTENSIONS:
            return ContainerKind.MARKUP
        return ContainerKind.PLAIN_TEXT


def normalize(source: Source, filename: str | None = None, *, settings: ImportSettings | None = None) -> ImportOutcome:
    """Run a one-off ``ImportPipeline`` over ``source``."""
    return ImportPipeline(settings).normalize(source, filename)
