"""Centralized exceptions for chatsift."""

from __future__ import annotations

from chatsift.constants import ImportErrorKind


class ChatsiftError(Exception):
    """Base exception for all chatsift errors."""


class TranscriptImportError(ChatsiftError):
    """Base exception for a terminal failure of one import invocation.

    None of these are retried internally. Only ``UnreadableSourceError`` is
    worth retrying with the same input.
    """

    kind: ImportErrorKind

    @property
    def retryable(self) -> bool:
        return self.kind is ImportErrorKind.UNREADABLE_SOURCE


class EmptyInputError(TranscriptImportError):
    """Raised when the input has zero bytes."""

    kind = ImportErrorKind.EMPTY_INPUT

    def __init__(self, source: str | None = None) -> None:
        self.source = source
        label = f" '{source}'" if source else ""
        super().__init__(f"Input{label} is empty")


class InputTooLargeError(TranscriptImportError):
    """Raised when the input (or the selected archive entry) exceeds the size limit."""

    kind = ImportErrorKind.TOO_LARGE

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"Input exceeds maximum size of {limit} bytes (got at least {size} bytes)")


class UnreadableSourceError(TranscriptImportError):
    """Raised when reading bytes from the source fails."""

    kind = ImportErrorKind.UNREADABLE_SOURCE

    def __init__(self, source: str, original_error: Exception) -> None:
        self.source = source
        self.original_error = original_error
        super().__init__(f"Could not read '{source}': {original_error}")


class NoTranscriptInArchiveError(TranscriptImportError):
    """Raised when no archive entry looks like a chat transcript."""

    kind = ImportErrorKind.NO_TRANSCRIPT_IN_ARCHIVE

    def __init__(self, reason: str = "no transcript entry found") -> None:
        self.reason = reason
        super().__init__(f"Could not find a chat transcript in the archive: {reason}")


class UnrecognizedContentError(TranscriptImportError):
    """Raised when the classifier rejects the content outright."""

    kind = ImportErrorKind.UNRECOGNIZED_CONTENT

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Content rejected: {reason}")


class ImportSupersededError(ChatsiftError):
    """Raised by a background import whose result was superseded by a newer request."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Import for '{key}' was superseded by a newer request")
