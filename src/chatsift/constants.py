"""Central location for the enums and fixed limits shared across chatsift.

Type-safe constants replace magic strings in the pipeline stages and the CLI.
"""

from enum import Enum
from typing import Final

MAX_FILE_SIZE_BYTES: Final[int] = 100 * 1024 * 1024
SUPPORTED_EXTENSIONS: Final[tuple[str, ...]] = ("txt", "html", "zip")


class ContainerKind(str, Enum):
    """Container type of an import, derived from leading bytes only."""

    PLAIN_TEXT = "plain_text"
    MARKUP = "markup"
    ARCHIVE = "archive"
    UNKNOWN = "unknown"


class TextEncoding(str, Enum):
    """Encodings the decoding ladder can settle on."""

    UTF_8 = "utf-8"
    LATIN_1 = "latin-1"
    ASCII = "ascii"


class DecodeQuality(str, Enum):
    """How much the decoded text can be trusted verbatim."""

    CLEAN = "clean"
    LOSSY = "lossy"
    FILTERED = "filtered"


class Strictness(str, Enum):
    """Error policy of a single rung of the decoding ladder."""

    STRICT = "strict"
    REPLACE = "replace"
    FILTER = "filter"


class VerdictStatus(str, Enum):
    """Outcome of the content classifier."""

    ACCEPTED = "accepted"
    ACCEPTED_WITH_WARNING = "accepted_with_warning"
    REJECTED = "rejected"


class PipelineState(str, Enum):
    """States visited by one import pipeline invocation."""

    START = "start"
    SNIFFED = "sniffed"
    EXTRACTED = "extracted"
    DECODED = "decoded"
    SANITIZED = "sanitized"
    CLASSIFIED = "classified"
    DONE = "done"
    REJECTED = "rejected"


class ImportErrorKind(str, Enum):
    """Terminal error categories reported to the import workflow."""

    EMPTY_INPUT = "empty_input"
    TOO_LARGE = "too_large"
    UNREADABLE_SOURCE = "unreadable_source"
    NO_TRANSCRIPT_IN_ARCHIVE = "no_transcript_in_archive"
    UNRECOGNIZED_CONTENT = "unrecognized_content"
