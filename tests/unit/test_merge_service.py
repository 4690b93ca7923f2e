from pathlib import Path

import pytest

from pdf_merger.adapters.pymupdf_adapter import PyMuPdfTemplateEngine
from pdf_merger.domain.errors import EmptyJobError, PageNotFoundError, ParsingError
from pdf_merger.domain.models import Orientation, OutputMode, PageSize, SourceDocument
from pdf_merger.services.merge_service import MergeService


@pytest.fixture
def engine():
    template_engine = PyMuPdfTemplateEngine()
    try:
        yield template_engine
    finally:
        template_engine.close()


def _render(engine: PyMuPdfTemplateEngine) -> bytes:
    return engine.output("merged.pdf", OutputMode.STRING)


@pytest.mark.unit
def test_all_pages_are_copied_in_order(engine, pdf_factory, read_pages) -> None:
    source = pdf_factory("three.pdf", [(200, 300), (210, 300), (220, 300)])

    summary = MergeService(engine).merge([SourceDocument(path=source)])

    assert summary.page_count == 3
    assert [page.page_number for page in summary.pages] == [1, 2, 3]
    pages = read_pages(_render(engine))
    assert [width for width, _, _ in pages] == pytest.approx([200, 210, 220])
    assert [text for _, _, text in pages] == ["page 1", "page 2", "page 3"]


@pytest.mark.unit
def test_explicit_selection_keeps_order_and_duplicates(engine, pdf_factory, read_pages) -> None:
    source = pdf_factory("three.pdf", [(200, 300), (210, 300), (220, 300)])

    summary = MergeService(engine).merge([SourceDocument(path=source, pages=(3, 1, 3))])

    assert [page.page_number for page in summary.pages] == [3, 1, 3]
    pages = read_pages(_render(engine))
    assert [text for _, _, text in pages] == ["page 3", "page 1", "page 3"]


@pytest.mark.unit
@pytest.mark.parametrize("page_number", [0, 3])
def test_out_of_range_page_names_page_and_source(
    engine, pdf_factory, page_number: int
) -> None:
    source = pdf_factory("two.pdf", [(200, 300), (200, 300)])

    with pytest.raises(PageNotFoundError) as excinfo:
        MergeService(engine).merge([SourceDocument(path=source, pages=(1, page_number))])

    assert excinfo.value.page_number == page_number
    assert f"'{page_number}'" in str(excinfo.value)
    assert "two.pdf" in str(excinfo.value)


@pytest.mark.unit
def test_empty_document_list_raises_before_extraction(engine) -> None:
    with pytest.raises(EmptyJobError):
        MergeService(engine).merge([])
    assert engine.page_count == 0


@pytest.mark.unit
def test_unreadable_source_raises_parsing_error(engine, tmp_path: Path) -> None:
    with pytest.raises(ParsingError):
        MergeService(engine).merge([SourceDocument(path=tmp_path / "vanished.pdf")])


@pytest.mark.unit
def test_duplex_pads_odd_documents_except_last(engine, pdf_factory, read_pages) -> None:
    documents = [
        SourceDocument(path=pdf_factory("a.pdf", [(200, 300)] * 3)),
        SourceDocument(path=pdf_factory("b.pdf", [(200, 300)] * 2)),
        SourceDocument(path=pdf_factory("c.pdf", [(200, 300)] * 5)),
    ]

    summary = MergeService(engine).merge(documents, duplex=True)

    assert summary.page_count == 11
    assert summary.blank_pages == 1
    assert [index for index, page in enumerate(summary.pages) if page.is_blank] == [3]
    pages = read_pages(_render(engine))
    assert len(pages) == 11
    assert pages[3][2] == ""
    assert pages[4][2] == "page 1"


@pytest.mark.unit
def test_duplex_blank_page_reuses_last_geometry(engine, pdf_factory) -> None:
    documents = [
        SourceDocument(path=pdf_factory("wide.pdf", [(200, 300), (800, 600)]), pages=(2,)),
        SourceDocument(path=pdf_factory("tail.pdf", [(200, 300)])),
    ]

    summary = MergeService(engine).merge(documents, duplex=True)

    blank = summary.pages[1]
    assert blank.is_blank
    assert blank.orientation == Orientation.LANDSCAPE
    assert blank.size == PageSize(800, 600)


@pytest.mark.unit
def test_without_duplex_no_padding(engine, pdf_factory) -> None:
    documents = [
        SourceDocument(path=pdf_factory("a.pdf", [(200, 300)] * 3)),
        SourceDocument(path=pdf_factory("b.pdf", [(200, 300)])),
    ]
    assert MergeService(engine).merge(documents).page_count == 4


@pytest.mark.unit
def test_orientation_derived_from_geometry(engine, pdf_factory, read_pages) -> None:
    source = pdf_factory("wide.pdf", [(800, 600)])

    summary = MergeService(engine).merge([SourceDocument(path=source)])

    assert summary.pages[0].orientation == Orientation.LANDSCAPE
    width, height, _ = read_pages(_render(engine))[0]
    assert (width, height) == pytest.approx((800, 600))


@pytest.mark.unit
def test_merge_default_overrides_geometry(engine, pdf_factory, read_pages) -> None:
    source = pdf_factory("wide.pdf", [(800, 600)])

    summary = MergeService(engine).merge(
        [SourceDocument(path=source)], default_orientation=Orientation.PORTRAIT
    )

    assert summary.pages[0].orientation == Orientation.PORTRAIT
    width, height, _ = read_pages(_render(engine))[0]
    assert (width, height) == pytest.approx((600, 800))


@pytest.mark.unit
def test_document_override_beats_merge_default(engine, pdf_factory) -> None:
    source = pdf_factory("wide.pdf", [(800, 600)])
    documents = [
        SourceDocument(path=source, orientation=Orientation.LANDSCAPE),
        SourceDocument(path=source),
    ]

    summary = MergeService(engine).merge(documents, default_orientation=Orientation.PORTRAIT)

    assert [page.orientation for page in summary.pages] == [
        Orientation.LANDSCAPE,
        Orientation.PORTRAIT,
    ]
