"""Value types passed between the stages of the import pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any

from chatsift.constants import ContainerKind, DecodeQuality, PipelineState, TextEncoding, VerdictStatus


@dataclass(frozen=True, slots=True)
class RawInput:
    """Bytes of one import plus the untrusted filename supplied with them."""

    data: bytes
    filename: str | None = None

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str | None:
        """Lower-cased filename extension without the dot, if any."""
        if not self.filename:
            return None
        return PurePath(self.filename).suffix[1:].lower() or None


@dataclass(frozen=True, slots=True)
class TranscriptEntry:
    """Archive member selected as the transcript."""

    name: str
    data: bytes


@dataclass(frozen=True, slots=True)
class DecodeResult:
    """Text produced by the decoding ladder and the rung that produced it."""

    text: str
    encoding: TextEncoding
    quality: DecodeQuality
    rung: int


@dataclass(frozen=True, slots=True)
class ValidationVerdict:
    """Classifier outcome.

    ``REJECTED`` verdicts never reach the downstream parser; warnings are
    reported to the caller but do not stop the import.
    """

    status: VerdictStatus
    reasons: tuple[str, ...] = ()

    @classmethod
    def accepted(cls) -> ValidationVerdict:
        return cls(VerdictStatus.ACCEPTED)

    @classmethod
    def warning(cls, *reasons: str) -> ValidationVerdict:
        return cls(VerdictStatus.ACCEPTED_WITH_WARNING, tuple(reasons))

    @classmethod
    def rejected(cls, reason: str) -> ValidationVerdict:
        return cls(VerdictStatus.REJECTED, (reason,))

    @property
    def is_accepted(self) -> bool:
        return self.status is not VerdictStatus.REJECTED

    @property
    def has_warnings(self) -> bool:
        return self.status is VerdictStatus.ACCEPTED_WITH_WARNING

    @property
    def reason(self) -> str | None:
        return "; ".join(self.reasons) if self.reasons else None

    def merge(self, other: ValidationVerdict) -> ValidationVerdict:
        """Combine two verdicts; the more severe status wins and reasons accumulate."""
        severity = list(VerdictStatus)
        status = max(self.status, other.status, key=severity.index)
        reasons = self.reasons + tuple(r for r in other.reasons if r not in self.reasons)
        return ValidationVerdict(status, reasons)


@dataclass(frozen=True, slots=True)
class NormalizedDocument:
    """Canonical text handed to the message-grammar parser.

    Consumers should check ``quality`` before trusting ``text`` verbatim.
    """

    text: str
    encoding_used: TextEncoding
    quality: DecodeQuality
    source_container: ContainerKind
    source_name: str | None = None
    likely_encoding: str | None = None

    def lines(self) -> list[str]:
        return self.text.split("\n")


@dataclass(frozen=True, slots=True)
class ImportOutcome:
    """Successful result of one pipeline invocation."""

    document: NormalizedDocument
    verdict: ValidationVerdict
    states: tuple[PipelineState, ...] = field(default_factory=tuple)

    @property
    def final_state(self) -> PipelineState:
        return self.states[-1] if self.states else PipelineState.START

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly summary used by the CLI report."""
        doc = self.document
        return {
            "source_name": doc.source_name,
            "source_container": doc.source_container.value,
            "encoding_used": doc.encoding_used.value,
            "likely_encoding": doc.likely_encoding,
            "quality": doc.quality.value,
            "verdict": self.verdict.status.value,
            "warnings": list(self.verdict.reasons),
            "characters": len(doc.text),
            "lines": len(doc.text.splitlines()),
            "states": [state.value for state in self.states],
        }
