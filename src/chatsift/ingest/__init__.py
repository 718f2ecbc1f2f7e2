"""Import normalization: bytes in, canonical transcript text out."""

from chatsift.ingest.archive import ArchiveExtractor
from chatsift.ingest.classifier import ContentClassifier
from chatsift.ingest.encoding import ENCODING_LADDER, EncodingResolver, decode, detect_likely_encoding
from chatsift.ingest.models import (
    DecodeResult,
    ImportOutcome,
    NormalizedDocument,
    RawInput,
    TranscriptEntry,
    ValidationVerdict,
)
from chatsift.ingest.pipeline import ImportPipeline, normalize
from chatsift.ingest.runner import ImportRunner
from chatsift.ingest.sanitize import clean_lines, sanitize
from chatsift.ingest.sniffer import classify_container

__all__ = [
    "ENCODING_LADDER",
    "ArchiveExtractor",
    "ContentClassifier",
    "DecodeResult",
    "EncodingResolver",
    "ImportOutcome",
    "ImportPipeline",
    "ImportRunner",
    "NormalizedDocument",
    "RawInput",
    "TranscriptEntry",
    "ValidationVerdict",
    "classify_container",
    "clean_lines",
    "decode",
    "detect_likely_encoding",
    "normalize",
    "sanitize",
]
