"""Resource limits for chat export archives.

Archives are inspected through their central directory before any member is
decompressed, so oversized or highly compressed members are refused without
inflating them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import zipfile

__all__ = [
    "ZipCompressionBombError",
    "ZipMemberCountError",
    "ZipMemberSizeError",
    "ZipTotalSizeError",
    "ZipValidationError",
    "ZipValidationSettings",
    "ensure_safe_member_size",
    "validate_zip_contents",
]


class ZipValidationError(ValueError):
    """Base exception for archive validation errors."""


class ZipMemberCountError(ZipValidationError):
    """Raised when an archive holds more members than allowed."""

    def __init__(self, member_count: int, max_member_count: int) -> None:
        self.member_count = member_count
        self.max_member_count = max_member_count
        super().__init__(f"archive contains too many files ({member_count} > {max_member_count})")


class ZipMemberSizeError(ZipValidationError):
    """Raised when a member's declared size exceeds the per-member limit."""

    def __init__(self, member_name: str, member_size: int, max_member_size: int) -> None:
        self.member_name = member_name
        self.member_size = member_size
        self.max_member_size = max_member_size
        super().__init__(
            f"archive member '{member_name}' ({member_size} bytes) exceeds maximum size of {max_member_size} bytes"
        )


class ZipTotalSizeError(ZipValidationError):
    """Raised when the summed uncompressed size exceeds the limit."""

    def __init__(self, total_size: int, max_total_size: int) -> None:
        self.total_size = total_size
        self.max_total_size = max_total_size
        super().__init__(f"archive uncompressed size ({total_size} bytes) exceeds {max_total_size} bytes")


class ZipCompressionBombError(ZipValidationError):
    """Raised when a member has a suspiciously high compression ratio."""

    def __init__(self, member_name: str, ratio: float, max_ratio: float) -> None:
        self.member_name = member_name
        self.ratio = ratio
        self.max_ratio = max_ratio
        super().__init__(
            f"archive member '{member_name}' has suspicious compression ratio ({ratio:.1f}:1 > {max_ratio}:1)"
        )


@dataclass(frozen=True, slots=True)
class ZipValidationSettings:
    """Constraints applied to an archive before reading a member."""

    max_total_size: int = 500 * 1024 * 1024
    max_member_size: int = 100 * 1024 * 1024
    max_member_count: int = 2000
    max_compression_ratio: float = 100.0


def validate_zip_contents(zf: zipfile.ZipFile, *, limits: ZipValidationSettings | None = None) -> None:
    """Validate archive-wide limits.

    Checks the member count, the total uncompressed size and the compression
    ratio of every member. Per-member size is checked only for the member that
    is actually read, see ``ensure_safe_member_size``.
    """
    limits = limits or ZipValidationSettings()
    members = zf.infolist()
    if len(members) > limits.max_member_count:
        raise ZipMemberCountError(len(members), limits.max_member_count)

    total_size = 0
    for info in members:
        if info.compress_size > 0 and info.file_size > 0:
            ratio = info.file_size / info.compress_size
            if ratio > limits.max_compression_ratio:
                raise ZipCompressionBombError(info.filename, ratio, limits.max_compression_ratio)

        total_size += info.file_size
        if total_size > limits.max_total_size:
            raise ZipTotalSizeError(total_size, limits.max_total_size)


def ensure_safe_member_size(
    zf: zipfile.ZipFile,
    member_name: str,
    *,
    limits: ZipValidationSettings | None = None,
) -> None:
    """Ensure an individual member stays within the size limit before reading."""
    limits = limits or ZipValidationSettings()
    info = zf.getinfo(member_name)
    if info.file_size > limits.max_member_size:
        raise ZipMemberSizeError(member_name, info.file_size, limits.max_member_size)
