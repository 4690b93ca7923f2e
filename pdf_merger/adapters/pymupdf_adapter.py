from __future__ import annotations

import logging
from pathlib import Path
from typing import cast

import fitz  # type: ignore[import-untyped]

from pdf_merger.domain.errors import ParsingError
from pdf_merger.domain.models import (
    Orientation,
    OutputMode,
    OutputPayload,
    PageSize,
    TemplateHandle,
)

LOGGER = logging.getLogger("pdf_merger.adapter")


class PyMuPdfTemplateEngine:
    """Page-template import and re-emission on top of PyMuPDF.

    One instance holds one output document and must not be shared between
    merge jobs. Source documents stay open until :meth:`close` so PyMuPDF's
    per-source object maps remain valid while pages are being copied.
    """

    def __init__(self) -> None:
        self._output = fitz.open()
        self._sources: list[fitz.Document] = []
        self._source: fitz.Document | None = None
        self._source_path: Path | None = None

    @staticmethod
    def _optimized_bytes(document: fitz.Document) -> bytes:
        return cast(
            bytes,
            document.tobytes(
                garbage=4,
                clean=True,
                deflate=True,
                deflate_images=True,
                deflate_fonts=True,
            ),
        )

    @property
    def page_count(self) -> int:
        return int(self._output.page_count)

    def set_source_file(self, path: Path) -> int:
        try:
            source = fitz.open(str(path))
        except Exception as exc:
            raise ParsingError(f"Unable to open source PDF '{path}'") from exc
        if not source.is_pdf:
            source.close()
            raise ParsingError(f"'{path}' is not a PDF document")
        self._sources.append(source)
        self._source = source
        self._source_path = Path(path)
        LOGGER.debug("Opened %s with %d pages", path, source.page_count)
        return int(source.page_count)

    def _current_source(self) -> fitz.Document:
        if self._source is None:
            raise ParsingError("No source file selected")
        return self._source

    def import_page(self, page_number: int) -> TemplateHandle | None:
        source = self._current_source()
        if page_number < 1 or page_number > source.page_count:
            return None
        return TemplateHandle(source=cast(Path, self._source_path), page_number=page_number)

    def get_template_size(self, template: TemplateHandle) -> PageSize:
        rect = self._current_source()[template.page_number - 1].rect
        return PageSize(width=float(rect.width), height=float(rect.height))

    def add_page(self, orientation: Orientation, size: PageSize) -> None:
        oriented = size.oriented(orientation)
        self._output.new_page(width=oriented.width, height=oriented.height)

    def use_template(self, template: TemplateHandle) -> None:
        source = self._current_source()
        source_page = source[template.page_number - 1]
        if not source_page.get_contents():
            # nothing to draw, the page stays blank
            return
        target = self._output[self._output.page_count - 1]
        try:
            target.show_pdf_page(target.rect, source, template.page_number - 1)
        except Exception as exc:
            raise ParsingError(
                f"Unable to copy page {template.page_number} of '{template.source}'"
            ) from exc

    def output(self, name: str, mode: OutputMode) -> bytes | OutputPayload:
        try:
            content = self._optimized_bytes(self._output)
        except Exception as exc:
            raise ParsingError("Unable to render merged PDF") from exc
        if mode == OutputMode.STRING:
            return content
        disposition = "inline" if mode == OutputMode.INLINE else "attachment"
        return OutputPayload(file_name=name, content=content, disposition=disposition)

    def close(self) -> None:
        for source in self._sources:
            source.close()
        self._sources.clear()
        self._source = None
        self._output.close()
