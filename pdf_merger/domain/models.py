from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

ALL_PAGES = "all"

PageSelection = str | tuple[int, ...]


class Orientation(str, Enum):
    PORTRAIT = "P"
    LANDSCAPE = "L"

    @classmethod
    def for_size(cls, width: float, height: float) -> "Orientation":
        return cls.LANDSCAPE if width > height else cls.PORTRAIT


class OutputMode(str, Enum):
    INLINE = "I"
    DOWNLOAD = "D"
    STRING = "S"


@dataclass(frozen=True)
class PageSize:
    width: float
    height: float

    @property
    def orientation(self) -> Orientation:
        return Orientation.for_size(self.width, self.height)

    def oriented(self, orientation: Orientation) -> "PageSize":
        long_edge = max(self.width, self.height)
        short_edge = min(self.width, self.height)
        if orientation == Orientation.LANDSCAPE:
            return PageSize(width=long_edge, height=short_edge)
        return PageSize(width=short_edge, height=long_edge)


@dataclass(frozen=True)
class SourceDocument:
    path: Path
    pages: PageSelection = ALL_PAGES
    orientation: Orientation | None = None
    original_path: Path | None = None

    @property
    def all_pages(self) -> bool:
        return self.pages == ALL_PAGES


@dataclass(frozen=True)
class TemplateHandle:
    source: Path
    page_number: int


@dataclass(frozen=True)
class PlacedPage:
    source: Path
    page_number: int | None
    orientation: Orientation
    size: PageSize

    @property
    def is_blank(self) -> bool:
        return self.page_number is None


@dataclass(frozen=True)
class MergeSummary:
    documents: int
    pages: tuple[PlacedPage, ...] = field(default_factory=tuple)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def blank_pages(self) -> int:
        return len([page for page in self.pages if page.is_blank])


@dataclass(frozen=True)
class OutputPayload:
    file_name: str
    content: bytes
    disposition: str
    media_type: str = "application/pdf"

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": self.media_type,
            "Content-Disposition": f'{self.disposition}; filename="{self.file_name}"',
            "Content-Length": str(len(self.content)),
        }


@dataclass(frozen=True)
class ConversionResult:
    succeeded: bool
    returncode: int | None = None
    detail: str = ""
