from __future__ import annotations

import shutil
from pathlib import Path
from typing import Callable, Iterator

import fitz
import pytest

from pdf_merger.domain.models import ConversionResult
from pdf_merger.infrastructure.config import AppConfig
from pdf_merger.services.merge_job import MergeJob

PdfFactory = Callable[..., Path]


class CopyConverter:
    """Stands in for Ghostscript by copying the source unchanged."""

    def __init__(self) -> None:
        self.calls: list[tuple[Path, Path]] = []

    def convert(self, source: Path, target: Path) -> ConversionResult:
        self.calls.append((source, target))
        shutil.copyfile(source, target)
        return ConversionResult(succeeded=True, returncode=0)


class FailingConverter:
    def __init__(self) -> None:
        self.calls: list[tuple[Path, Path]] = []

    def convert(self, source: Path, target: Path) -> ConversionResult:
        self.calls.append((source, target))
        return ConversionResult(succeeded=False, returncode=1, detail="gs exploded")


def build_pdf_bytes(sizes: list[tuple[float, float]], version: str = "1.3") -> bytes:
    document = fitz.open()
    try:
        for index, (width, height) in enumerate(sizes, start=1):
            page = document.new_page(width=width, height=height)
            page.insert_text((20, 40), f"page {index}")
        content = document.tobytes(deflate=True, garbage=3)
    finally:
        document.close()
    assert content.startswith(b"%PDF-")
    assert len(version) == 3
    return content[:5] + version.encode("ascii") + content[8:]


@pytest.fixture
def pdf_factory(tmp_path: Path) -> PdfFactory:
    base = tmp_path / "sources"
    base.mkdir(parents=True, exist_ok=True)

    def _create(
        name: str, sizes: list[tuple[float, float]] | None = None, version: str = "1.3"
    ) -> Path:
        path = base / name
        path.write_bytes(build_pdf_bytes(sizes or [(612, 792)], version=version))
        return path

    return _create


@pytest.fixture
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        storage_root=str(tmp_path / "storage"),
        temp_folder="tmp",
        output_name="merged.pdf",
        converter_timeout_seconds=0,
        strict_normalization=False,
        max_pdf_size_mb=50,
    )


@pytest.fixture
def converter() -> CopyConverter:
    return CopyConverter()


@pytest.fixture
def failing_converter() -> FailingConverter:
    return FailingConverter()


@pytest.fixture
def job(config: AppConfig, converter: CopyConverter) -> Iterator[MergeJob]:
    merge_job = MergeJob(config, converter=converter)
    try:
        yield merge_job
    finally:
        merge_job.close()


@pytest.fixture
def read_pages() -> Callable[[bytes], list[tuple[float, float, str]]]:
    def _read(content: bytes) -> list[tuple[float, float, str]]:
        with fitz.open(stream=content, filetype="pdf") as document:
            return [
                (page.rect.width, page.rect.height, page.get_text("text").strip())
                for page in document
            ]

    return _read
