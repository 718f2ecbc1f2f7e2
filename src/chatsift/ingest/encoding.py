"""Decoding of export bytes through a fixed strict-to-lenient ladder.

Exports come from phones in every locale: mostly UTF-8, sometimes Latin-1 or
a Windows code page, sometimes truncated mid-sequence or padded with junk. The
ladder below is tried top to bottom and always terminates, so decoding never
fails an import; instead the result carries a quality flag.

Once strict UTF-8 fails, the ladder only loosens strictness: UTF-8 with
substitution keeps every valid sequence and replaces the broken ones with
U+FFFD, so a truncated or lightly corrupted export stays readable. A lenient
Python decoder never raises, so that rung settles every non-UTF-8 input too.
The Latin-1, ASCII and filtered rungs terminate the chain for ladders that
drop the lenient UTF-8 rung.
"""

from __future__ import annotations

import codecs
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from chatsift.constants import DecodeQuality, Strictness, TextEncoding
from chatsift.ingest.models import DecodeResult

logger = logging.getLogger(__name__)

DETECTION_SAMPLE_SIZE: Final[int] = 1024
# Latin-1 prose is mostly ASCII; a sample dominated by high bytes is not text.
MAX_TEXT_HIGH_BIT_RATIO: Final[float] = 0.5

# Everything outside printable ASCII, except LF and CR.
_UNPRINTABLE_BYTES: Final[bytes] = bytes(b for b in range(256) if not (32 <= b < 127 or b in (10, 13)))


@dataclass(frozen=True, slots=True)
class EncodingCandidate:
    """One rung of the decoding ladder."""

    encoding: TextEncoding
    strictness: Strictness
    quality: DecodeQuality

    @property
    def label(self) -> str:
        return f"{self.encoding.value}/{self.strictness.value}"


ENCODING_LADDER: Final[tuple[EncodingCandidate, ...]] = (
    EncodingCandidate(TextEncoding.UTF_8, Strictness.STRICT, DecodeQuality.CLEAN),
    EncodingCandidate(TextEncoding.UTF_8, Strictness.REPLACE, DecodeQuality.LOSSY),
    EncodingCandidate(TextEncoding.LATIN_1, Strictness.STRICT, DecodeQuality.LOSSY),
    EncodingCandidate(TextEncoding.ASCII, Strictness.REPLACE, DecodeQuality.LOSSY),
    EncodingCandidate(TextEncoding.ASCII, Strictness.FILTER, DecodeQuality.FILTERED),
)


def filter_printable(data: bytes) -> bytes:
    """Drop every byte outside printable ASCII, keeping LF and CR."""
    return data.translate(None, _UNPRINTABLE_BYTES)


def _attempt(candidate: EncodingCandidate, data: bytes) -> str | None:
    """Run one rung; ``None`` means the rung did not produce text."""
    if candidate.strictness is Strictness.FILTER:
        return filter_printable(data).decode(candidate.encoding.value)
    if candidate.strictness is Strictness.REPLACE:
        return data.decode(candidate.encoding.value, errors="replace")
    try:
        return data.decode(candidate.encoding.value)
    except UnicodeDecodeError as exc:
        logger.debug("%s rejected input at byte %d: %s", candidate.label, exc.start, exc.reason)
        return None


class EncodingResolver:
    """Decode bytes with an ordered ladder of ``EncodingCandidate`` rungs.

    ``decode`` is total as long as the ladder ends in a lenient rung, which
    ``ENCODING_LADDER`` does.
    """

    def __init__(self, ladder: Sequence[EncodingCandidate] = ENCODING_LADDER) -> None:
        if not ladder or ladder[-1].strictness is Strictness.STRICT:
            msg = "decoding ladder must end in a lenient rung"
            raise ValueError(msg)
        self.ladder = tuple(ladder)

    def decode(self, data: bytes) -> DecodeResult:
        for rung, candidate in enumerate(self.ladder):
            text = _attempt(candidate, data)
            if text is None:
                continue
            self._log_outcome(rung, candidate, len(data))
            return DecodeResult(text=text, encoding=candidate.encoding, quality=candidate.quality, rung=rung)

        # Unreachable: the last rung is lenient and never returns None.
        msg = "decoding ladder exhausted without a terminal rung"
        raise RuntimeError(msg)

    @staticmethod
    def _log_outcome(rung: int, candidate: EncodingCandidate, size: int) -> None:
        if rung == 0:
            logger.debug("Decoded %d bytes as %s", size, candidate.label)
        elif candidate.quality is DecodeQuality.FILTERED:
            logger.warning("Decoded %d bytes only after filtering to printable ASCII", size)
        else:
            logger.info("Decoded %d bytes with fallback %s (rung %d)", size, candidate.label, rung)


def high_bit_ratio(sample: bytes) -> float:
    """Share of bytes in ``sample`` with the high bit set."""
    if not sample:
        return 0.0
    return sum(1 for byte in sample if byte > 0x7F) / len(sample)


def detect_likely_encoding(data: bytes) -> str:
    """Best-guess encoding label for diagnostics.

    Looks at byte-order marks and at the proportion of high-bit bytes in the
    first ``DETECTION_SAMPLE_SIZE`` bytes:

    * no high-bit bytes: ``ascii``;
    * valid UTF-8 (a sequence cut at the sample edge is tolerated): ``utf-8``;
    * otherwise ``latin-1``, or ``binary`` when more than
      ``MAX_TEXT_HIGH_BIT_RATIO`` of the sample has the high bit set.

    The result never changes the order in which ``EncodingResolver`` tries
    encodings.
    """
    if data.startswith(codecs.BOM_UTF8):
        return "utf-8-sig"
    if data.startswith(codecs.BOM_UTF16_LE):
        return "utf-16-le"
    if data.startswith(codecs.BOM_UTF16_BE):
        return "utf-16-be"

    sample = data[:DETECTION_SAMPLE_SIZE]
    ratio = high_bit_ratio(sample)
    if ratio == 0.0:
        return TextEncoding.ASCII.value

    # Only a sample shorter than the input can end mid-sequence.
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(sample, final=len(data) <= DETECTION_SAMPLE_SIZE)
    except UnicodeDecodeError:
        return "binary" if ratio > MAX_TEXT_HIGH_BIT_RATIO else TextEncoding.LATIN_1.value
    return TextEncoding.UTF_8.value


_DEFAULT_RESOLVER = EncodingResolver()


def decode(data: bytes) -> DecodeResult:
    """Decode ``data`` with the default resolver."""
    return _DEFAULT_RESOLVER.decode(data)
