"""Merge job facade.

A :class:`MergeJob` owns one template engine, one document registry and the
temporary files created for it. Use it as a context manager so temporary files
are removed on every exit path::

    with MergeJob() as job:
        job.add_pdf_path("cover.pdf")
        job.add_pdf_content(upload_bytes, pages=[2, 1])
        job.merge(duplex=True)
        job.save("out/merged.pdf")
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Sequence

from pdf_merger.adapters.pymupdf_adapter import PyMuPdfTemplateEngine
from pdf_merger.domain.errors import JobStateError, ValidationError
from pdf_merger.domain.models import (
    ALL_PAGES,
    MergeSummary,
    Orientation,
    OutputPayload,
    SourceDocument,
)
from pdf_merger.infrastructure.config import AppConfig
from pdf_merger.infrastructure.converter import GhostscriptConverter, VersionConverter
from pdf_merger.infrastructure.storage import FileStorage, LocalFileStorage
from pdf_merger.services.document_registry import DocumentRegistry, parse_orientation
from pdf_merger.services.merge_service import MergeService, TemplateEngine
from pdf_merger.services.output_emitter import OutputEmitter
from pdf_merger.services.temp_file_store import TemporaryFileStore
from pdf_merger.services.version_normalizer import VersionNormalizer

LOGGER = logging.getLogger("pdf_merger.job")


class JobState(str, Enum):
    OPEN = "open"
    MERGED = "merged"
    FAILED = "failed"
    CLOSED = "closed"


class MergeJob:
    def __init__(
        self,
        config: AppConfig | None = None,
        storage: FileStorage | None = None,
        converter: VersionConverter | None = None,
        engine: TemplateEngine | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self.storage = storage or LocalFileStorage(self.config.storage_root)
        self.converter = converter or GhostscriptConverter(
            self.config.ghostscript_executable, timeout=self.config.converter_timeout
        )
        self.engine = engine or PyMuPdfTemplateEngine()
        self.temp_files = TemporaryFileStore(self.storage, self.config.temp_folder)
        self.normalizer = VersionNormalizer(
            self.temp_files,
            self.converter,
            threshold=self.config.version_threshold,
            strict=self.config.strict_normalization,
        )
        self.registry = DocumentRegistry(self.temp_files, self.normalizer)
        self.merge_service = MergeService(self.engine)
        self.emitter = OutputEmitter(self.engine, self.storage, self.config.output_name)
        self.state = JobState.OPEN
        self.summary: MergeSummary | None = None

    def __enter__(self) -> "MergeJob":
        return self

    def __exit__(self, exc_type, exc, traceback) -> None:
        self.close()

    @property
    def documents(self) -> tuple[SourceDocument, ...]:
        return self.registry.documents

    @property
    def temporary_files(self) -> tuple[Path, ...]:
        return self.temp_files.paths

    @property
    def file_name(self) -> str:
        return self.emitter.file_name

    def set_file_name(self, file_name: str) -> "MergeJob":
        self.emitter.file_name = file_name
        return self

    def _require_state(self, *allowed: JobState) -> None:
        if self.state not in allowed:
            raise JobStateError(f"Operation not allowed while job is {self.state.value}")

    def add_pdf_path(
        self,
        path: str | Path,
        pages: str | Sequence[int] = ALL_PAGES,
        orientation: Orientation | str | None = None,
    ) -> SourceDocument:
        self._require_state(JobState.OPEN)
        return self.registry.add_by_path(path, pages, orientation)

    def add_pdf_content(
        self,
        content: bytes,
        pages: str | Sequence[int] = ALL_PAGES,
        orientation: Orientation | str | None = None,
    ) -> SourceDocument:
        self._require_state(JobState.OPEN)
        if len(content) > self.config.max_pdf_size_bytes:
            raise ValidationError(
                f"PDF exceeds per-file limit of {self.config.max_pdf_size_mb} MB"
            )
        return self.registry.add_by_content(content, pages, orientation)

    def merge(
        self, orientation: Orientation | str | None = None, duplex: bool = False
    ) -> MergeSummary:
        self._require_state(JobState.OPEN)
        default_orientation = parse_orientation(orientation)
        try:
            self.summary = self.merge_service.merge(
                self.registry.documents, default_orientation, duplex
            )
        except Exception:
            self.state = JobState.FAILED
            raise
        self.state = JobState.MERGED
        return self.summary

    def duplex_merge(self, orientation: Orientation | str | None = None) -> MergeSummary:
        return self.merge(orientation, duplex=True)

    def inline(self) -> OutputPayload:
        self._require_state(JobState.MERGED)
        return self.emitter.inline()

    def download(self, file_name: str | None = None) -> OutputPayload:
        self._require_state(JobState.MERGED)
        return self.emitter.download(file_name)

    def to_bytes(self) -> bytes:
        self._require_state(JobState.MERGED)
        return self.emitter.to_bytes()

    def output(self) -> bytes:
        return self.to_bytes()

    def save(self, file_path: str | None = None) -> Path:
        self._require_state(JobState.MERGED)
        return self.emitter.save(file_path)

    def close(self) -> None:
        if self.state == JobState.CLOSED:
            return
        try:
            self.engine.close()
        finally:
            self.temp_files.cleanup()
            self.state = JobState.CLOSED
            LOGGER.debug("Merge job closed")
