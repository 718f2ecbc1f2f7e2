"""Tests for the decoding ladder and the advisory encoding detector."""

import os

import pytest

from chatsift.constants import DecodeQuality, Strictness, TextEncoding
from chatsift.ingest.encoding import (
    ENCODING_LADDER,
    EncodingCandidate,
    EncodingResolver,
    decode,
    detect_likely_encoding,
    filter_printable,
    high_bit_ratio,
)

STRICT_UTF8 = EncodingCandidate(TextEncoding.UTF_8, Strictness.STRICT, DecodeQuality.CLEAN)
LATIN_1 = EncodingCandidate(TextEncoding.LATIN_1, Strictness.STRICT, DecodeQuality.LOSSY)
STRICT_ASCII = EncodingCandidate(TextEncoding.ASCII, Strictness.STRICT, DecodeQuality.LOSSY)
ASCII_REPLACE = EncodingCandidate(TextEncoding.ASCII, Strictness.REPLACE, DecodeQuality.LOSSY)
FILTERED = EncodingCandidate(TextEncoding.ASCII, Strictness.FILTER, DecodeQuality.FILTERED)

PORTUGUESE_CHAT = "12/05/2023, 10:01 - Jo\u00e3o: n\u00e3o sei, voc\u00ea j\u00e1 viu?\n"


class TestLadderShape:
    def test_ladder_order(self):
        assert [(c.encoding, c.strictness) for c in ENCODING_LADDER] == [
            (TextEncoding.UTF_8, Strictness.STRICT),
            (TextEncoding.UTF_8, Strictness.REPLACE),
            (TextEncoding.LATIN_1, Strictness.STRICT),
            (TextEncoding.ASCII, Strictness.REPLACE),
            (TextEncoding.ASCII, Strictness.FILTER),
        ]

    def test_only_first_rung_is_clean(self):
        qualities = [c.quality for c in ENCODING_LADDER]
        assert qualities[0] is DecodeQuality.CLEAN
        assert qualities[-1] is DecodeQuality.FILTERED
        assert all(q is DecodeQuality.LOSSY for q in qualities[1:-1])

    def test_ladder_must_end_leniently(self):
        with pytest.raises(ValueError, match="lenient"):
            EncodingResolver((STRICT_UTF8, STRICT_ASCII))
        with pytest.raises(ValueError):
            EncodingResolver(())


class TestDecode:
    @pytest.mark.parametrize(
        "text",
        ["", "plain ascii", "12/05/2023, 10:01 - Jo\u00e3o: ol\u00e1 \U0001f44b", "\x00 nul is valid utf-8", "\u041f\u0440\u0438\u0432\u0435\u0442"],
    )
    def test_valid_utf8_is_clean_and_exact(self, text):
        result = decode(text.encode("utf-8"))
        assert result.quality is DecodeQuality.CLEAN
        assert result.encoding is TextEncoding.UTF_8
        assert result.text == text
        assert result.rung == 0

    def test_truncated_utf8_falls_to_lenient_utf8(self):
        data = ("a" * 400 + " ol\u00e1").encode("utf-8")[:-1]
        result = decode(data)
        assert result.rung == 1
        assert result.encoding is TextEncoding.UTF_8
        assert result.quality is DecodeQuality.LOSSY
        assert result.text.endswith("ol\ufffd")

    def test_short_accented_chat_with_stray_byte_keeps_its_accents(self):
        data = (PORTUGUESE_CHAT * 2).encode("utf-8") + b"\xff"
        result = decode(data)
        assert result.encoding is TextEncoding.UTF_8
        assert result.quality is DecodeQuality.LOSSY
        assert result.text == PORTUGUESE_CHAT * 2 + "\ufffd"

    def test_emoji_cut_mid_sequence(self):
        data = "12/05/2023, 10:01 - Jo\u00e3o: ol\u00e1, tudo bem? \U0001f44b".encode()[:-2]
        result = decode(data)
        assert result.encoding is TextEncoding.UTF_8
        assert result.text.startswith("12/05/2023, 10:01 - Jo\u00e3o: ol\u00e1, tudo bem? ")
        assert result.text.count("\ufffd") == 1

    def test_latin1_bytes_stay_on_lenient_utf8(self):
        result = decode(PORTUGUESE_CHAT.encode("latin-1"))
        assert result.rung == 1
        assert result.encoding is TextEncoding.UTF_8
        assert result.quality is DecodeQuality.LOSSY
        assert result.text == "12/05/2023, 10:01 - Jo\ufffdo: n\ufffdo sei, voc\ufffd j\ufffd viu?\n"

    def test_binary_junk_is_lossy_utf8(self):
        result = decode(b"\xff\xfe\x00bad\x01\x02\r\nok\x90")
        assert result.encoding is TextEncoding.UTF_8
        assert result.quality is DecodeQuality.LOSSY
        assert result.text == "\ufffd\ufffd\x00bad\x01\x02\r\nok\ufffd"

    @pytest.mark.parametrize("size", [0, 1, 7, 64, 1024])
    def test_decode_is_total(self, size):
        result = decode(os.urandom(size))
        assert isinstance(result.text, str)
        assert result.encoding is TextEncoding.UTF_8
        assert result.rung in (0, 1)


class TestTerminalRungs:
    def test_latin1_rung(self):
        resolver = EncodingResolver((STRICT_UTF8, LATIN_1, FILTERED))
        result = resolver.decode(PORTUGUESE_CHAT.encode("latin-1"))
        assert result.rung == 1
        assert result.encoding is TextEncoding.LATIN_1
        assert result.text == PORTUGUESE_CHAT

    def test_ascii_replacement_rung(self):
        resolver = EncodingResolver((STRICT_UTF8, STRICT_ASCII, ASCII_REPLACE, FILTERED))
        result = resolver.decode(b"he said \x93hi\x94")
        assert result.rung == 2
        assert result.text == "he said \ufffdhi\ufffd"

    def test_filtered_rung(self):
        resolver = EncodingResolver((STRICT_UTF8, STRICT_ASCII, FILTERED))
        result = resolver.decode(b"\xff\xfe\x00bad\x01\x02\r\nok\x90")
        assert result.quality is DecodeQuality.FILTERED
        assert result.encoding is TextEncoding.ASCII
        assert result.text == "bad\r\nok"

    def test_filtered_text_only_holds_printable_ascii(self):
        result = EncodingResolver((FILTERED,)).decode(bytes(range(256)) * 3)
        assert all(ch in "\r\n" or 32 <= ord(ch) < 127 for ch in result.text)


class TestHelpers:
    def test_filter_printable_keeps_newlines(self):
        assert filter_printable(b"a\tb\nc\rd\x7fe\x00") == b"ab\nc\rde"

    def test_high_bit_ratio(self):
        assert high_bit_ratio(b"") == 0.0
        assert high_bit_ratio(b"abcd") == 0.0
        assert high_bit_ratio(b"ab\xe1\xff") == 0.5


class TestDetectLikelyEncoding:
    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            (b"\xef\xbb\xbfhello", "utf-8-sig"),
            (b"\xff\xfeh\x00", "utf-16-le"),
            (b"\xfe\xff\x00h", "utf-16-be"),
            (b"plain ascii", "ascii"),
            (b"", "ascii"),
            ("ol\u00e1".encode(), "utf-8"),
            ("ol\u00e1".encode("latin-1"), "latin-1"),
            (b"\x89PNG\xff\xd8\xff\xe0", "binary"),
        ],
    )
    def test_labels(self, data, expected):
        assert detect_likely_encoding(data) == expected

    def test_short_input_ending_in_lead_byte_is_latin1(self):
        assert detect_likely_encoding(b"12/05/2023, 10:01 - Ana: ol\xe1") == "latin-1"

    def test_sequence_cut_at_sample_edge_still_utf8(self):
        data = b"a" * 1023 + "\u00e9".encode()
        assert detect_likely_encoding(data) == "utf-8"

    def test_input_ending_exactly_at_sample_edge_is_final(self):
        data = b"a" * 1023 + b"\xc3"
        assert detect_likely_encoding(data) == "latin-1"

    def test_only_leading_kilobyte_is_sampled(self):
        data = b"a" * 2048 + "\u00e9".encode("latin-1")
        assert detect_likely_encoding(data) == "ascii"

    def test_advisory_label_does_not_change_ladder(self):
        data = b"\xff\xfeh\x00i\x00"
        assert detect_likely_encoding(data) == "utf-16-le"
        assert decode(data).rung != 0
