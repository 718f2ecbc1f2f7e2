"""chatsift: turn messy chat export files into clean transcript text."""

from chatsift.constants import ContainerKind, DecodeQuality, TextEncoding, VerdictStatus
from chatsift.exceptions import ChatsiftError, TranscriptImportError
from chatsift.ingest import ImportOutcome, ImportPipeline, NormalizedDocument, ValidationVerdict, normalize

__version__ = "0.1.0"
__all__ = [
    "ChatsiftError",
    "ContainerKind",
    "DecodeQuality",
    "ImportOutcome",
    "ImportPipeline",
    "NormalizedDocument",
    "TextEncoding",
    "TranscriptImportError",
    "ValidationVerdict",
    "VerdictStatus",
    "normalize",
]
