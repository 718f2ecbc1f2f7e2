from __future__ import annotations

import io
import os
import zipfile
from collections.abc import Callable, Mapping

import pytest

from chatsift.config.settings import ImportSettings
from chatsift.ingest.pipeline import ImportPipeline

ZipBuilder = Callable[..., bytes]


def build_zip(entries: Mapping[str, bytes | str], *, compression: int = zipfile.ZIP_DEFLATED) -> bytes:
    """Build an in-memory zip; names ending in ``/`` become directory entries."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=compression) as zf:
        for name, content in entries.items():
            if name.endswith("/"):
                zf.writestr(zipfile.ZipInfo(name), b"")
            else:
                zf.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep CHATSIFT_* variables and stray .chatsift.toml files out of tests."""
    for name in list(os.environ):
        if name.startswith("CHATSIFT_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def make_zip() -> ZipBuilder:
    return build_zip


@pytest.fixture
def sample_chat() -> str:
    return (
        "12/05/2023, 10:01 - Alice: hello\n"
        "12/05/2023, 10:02 - Bob: hi there\n"
        "12/05/2023, 10:03 - Alice: \u200eIMG-20230512-WA0001.jpg (file attached)\n"
    )


@pytest.fixture
def sample_html() -> str:
    return (
        "<!DOCTYPE html>\n<html><head><title>WhatsApp Chat with Bob</title></head>"
        "<body><div>12/05/2023 10:01 Alice: hello</div></body></html>\n"
    )


@pytest.fixture
def settings() -> ImportSettings:
    return ImportSettings()


@pytest.fixture
def pipeline(settings: ImportSettings) -> ImportPipeline:
    return ImportPipeline(settings)
