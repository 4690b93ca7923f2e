from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, Sequence

from pdf_merger.domain.errors import EmptyJobError, PageNotFoundError
from pdf_merger.domain.models import (
    MergeSummary,
    Orientation,
    OutputMode,
    OutputPayload,
    PageSize,
    PlacedPage,
    SourceDocument,
    TemplateHandle,
)

LOGGER = logging.getLogger("pdf_merger.merge")


class TemplateEngine(Protocol):
    @property
    def page_count(self) -> int: ...

    def set_source_file(self, path: Path) -> int: ...

    def import_page(self, page_number: int) -> TemplateHandle | None: ...

    def get_template_size(self, template: TemplateHandle) -> PageSize: ...

    def add_page(self, orientation: Orientation, size: PageSize) -> None: ...

    def use_template(self, template: TemplateHandle) -> None: ...

    def output(self, name: str, mode: OutputMode) -> bytes | OutputPayload: ...

    def close(self) -> None: ...


class MergeService:
    def __init__(self, engine: TemplateEngine) -> None:
        self.engine = engine

    @staticmethod
    def resolve_orientation(
        document: SourceDocument, default: Orientation | None, size: PageSize
    ) -> Orientation:
        return document.orientation or default or size.orientation

    def _page_numbers(self, document: SourceDocument, count: int) -> Sequence[int]:
        if document.all_pages:
            return range(1, count + 1)
        return document.pages  # type: ignore[return-value]

    def merge(
        self,
        documents: Sequence[SourceDocument],
        default_orientation: Orientation | None = None,
        duplex: bool = False,
    ) -> MergeSummary:
        if not documents:
            raise EmptyJobError("No PDFs to merge.")

        placed: list[PlacedPage] = []
        last_index = len(documents) - 1
        for index, document in enumerate(documents):
            source_name = str(document.original_path or document.path)
            count = self.engine.set_source_file(document.path)
            contributed = 0
            for page_number in self._page_numbers(document, count):
                template = self.engine.import_page(page_number)
                if template is None:
                    raise PageNotFoundError(page_number, source_name)
                size = self.engine.get_template_size(template)
                orientation = self.resolve_orientation(document, default_orientation, size)
                self.engine.add_page(orientation, size)
                self.engine.use_template(template)
                placed.append(
                    PlacedPage(
                        source=document.original_path or document.path,
                        page_number=page_number,
                        orientation=orientation,
                        size=size.oriented(orientation),
                    )
                )
                contributed += 1
                LOGGER.debug("Added page %s from %s", page_number, document.path)

            if duplex and contributed % 2 and index < last_index:
                last_page = placed[-1]
                self.engine.add_page(last_page.orientation, last_page.size)
                placed.append(
                    PlacedPage(
                        source=document.original_path or document.path,
                        page_number=None,
                        orientation=last_page.orientation,
                        size=last_page.size,
                    )
                )
                LOGGER.debug("Added duplex padding page after %s", document.path)

        summary = MergeSummary(documents=len(documents), pages=tuple(placed))
        LOGGER.info(
            "Merged %d PDFs into %d pages (%d blank)",
            summary.documents,
            summary.page_count,
            summary.blank_pages,
        )
        return summary
