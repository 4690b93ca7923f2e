from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Sequence

from pdf_merger.domain.errors import NotFoundError, ValidationError
from pdf_merger.domain.models import ALL_PAGES, Orientation, PageSelection, SourceDocument
from pdf_merger.services.temp_file_store import TemporaryFileStore
from pdf_merger.services.version_normalizer import VersionNormalizer

LOGGER = logging.getLogger("pdf_merger.registry")

ORIENTATION_ALIASES = {
    "p": Orientation.PORTRAIT,
    "portrait": Orientation.PORTRAIT,
    "l": Orientation.LANDSCAPE,
    "landscape": Orientation.LANDSCAPE,
}


def parse_orientation(value: Orientation | str | None) -> Orientation | None:
    if value is None or isinstance(value, Orientation):
        return value
    if isinstance(value, str):
        orientation = ORIENTATION_ALIASES.get(value.strip().lower())
        if orientation is not None:
            return orientation
    raise ValidationError(f"Invalid orientation {value!r}. Use 'portrait' or 'landscape'.")


def validate_pages(pages: str | Sequence[int], source: Path) -> PageSelection:
    if isinstance(pages, (bytes, bytearray)):
        raise ValidationError(f"{source}'s pages could not be validated")
    if isinstance(pages, str):
        if pages.strip().lower() == ALL_PAGES:
            return ALL_PAGES
        raise ValidationError(f"{source}'s pages could not be validated")

    try:
        selection = tuple(pages)
    except TypeError as exc:
        raise ValidationError(f"{source}'s pages could not be validated") from exc

    if not selection:
        raise ValidationError(f"{source}'s page selection is empty")
    for page in selection:
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise ValidationError(f"{source}'s pages could not be validated: {page!r}")
    return selection


class DocumentRegistry:
    """Ordered, append-only list of the sources of one merge job."""

    def __init__(self, store: TemporaryFileStore, normalizer: VersionNormalizer) -> None:
        self.store = store
        self.normalizer = normalizer
        self._documents: list[SourceDocument] = []

    @property
    def documents(self) -> tuple[SourceDocument, ...]:
        return tuple(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[SourceDocument]:
        return iter(self.documents)

    def add_by_path(
        self,
        path: str | Path,
        pages: str | Sequence[int] = ALL_PAGES,
        orientation: Orientation | str | None = None,
    ) -> SourceDocument:
        source = Path(path)
        if not source.is_file():
            raise NotFoundError(f"Could not locate PDF on '{source}'")

        selection = validate_pages(pages, source)
        override = parse_orientation(orientation)
        normalized = self.normalizer.normalize(source)

        document = SourceDocument(
            path=normalized,
            pages=selection,
            orientation=override,
            original_path=source,
        )
        self._documents.append(document)
        LOGGER.debug("Registered %s (pages=%s, orientation=%s)", source, selection, override)
        return document

    def add_by_content(
        self,
        content: bytes,
        pages: str | Sequence[int] = ALL_PAGES,
        orientation: Orientation | str | None = None,
    ) -> SourceDocument:
        selection = validate_pages(pages, Path("<content>"))
        override = parse_orientation(orientation)
        path = self.store.stage(content)
        return self.add_by_path(path, selection, override)
