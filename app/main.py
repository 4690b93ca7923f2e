from __future__ import annotations

import logging

import streamlit as st

from pdf_merger.domain.models import MergeSummary
from pdf_merger.infrastructure.config import AppConfig
from pdf_merger.services.merge_job import MergeJob
from pdf_merger.services.page_ranges import parse_page_ranges

ORIENTATION_CHOICES = {
    "Auto (from page shape)": None,
    "Portrait": "portrait",
    "Landscape": "landscape",
}


def _init_state() -> None:
    st.session_state.setdefault("merged_pdf_bytes", b"")
    st.session_state.setdefault("merged_pdf_name", "merged.pdf")
    st.session_state.setdefault("merged_summary", None)


def _merge_uploads(
    config: AppConfig,
    items: list[tuple[bytes, str, str | None]],
    file_name: str,
    default_orientation: str | None,
    duplex: bool,
) -> tuple[bytes, MergeSummary]:
    with MergeJob(config) as job:
        job.set_file_name(file_name)
        for content, page_spec, orientation in items:
            job.add_pdf_content(content, parse_page_ranges(page_spec), orientation)
        summary = job.merge(default_orientation, duplex=duplex)
        return job.to_bytes(), summary


def _render_summary(summary: MergeSummary) -> None:
    metric_col_1, metric_col_2, metric_col_3 = st.columns(3)
    metric_col_1.metric("Documents", summary.documents)
    metric_col_2.metric("Pages", summary.page_count)
    metric_col_3.metric("Blank pages", summary.blank_pages)

    st.dataframe(
        [
            {
                "Source": page.source.name,
                "Page": "blank" if page.is_blank else page.page_number,
                "Orientation": page.orientation.name.title(),
                "Size (pt)": f"{page.size.width:.0f} x {page.size.height:.0f}",
            }
            for page in summary.pages
        ],
        use_container_width=True,
    )


def _merge_tab(config: AppConfig) -> None:
    st.subheader("Merge PDFs", anchor=False)
    st.caption("Files are merged in upload order. Pages accept formats like 1,3,6,12-16.")

    uploaded = st.file_uploader(
        f"Load one or more PDFs (max {config.max_pdf_size_mb} MB each)",
        type=["pdf"],
        accept_multiple_files=True,
        key="merge_upload",
    )
    if not uploaded:
        st.info("No PDFs loaded yet.")
        return

    items: list[tuple[bytes, str, str | None]] = []
    for index, item in enumerate(uploaded):
        name_col, pages_col, orientation_col = st.columns([2, 2, 1])
        with name_col:
            st.markdown(f"**{item.name}**")
        with pages_col:
            page_spec = st.text_input("Pages", value="all", key=f"pages_{index}_{item.name}")
        with orientation_col:
            choice = st.selectbox(
                "Orientation",
                list(ORIENTATION_CHOICES),
                key=f"orientation_{index}_{item.name}",
            )
        items.append((item.getvalue(), page_spec, ORIENTATION_CHOICES[choice]))

    st.divider()
    options_col, name_col = st.columns(2)
    with options_col:
        default_choice = st.selectbox("Default orientation", list(ORIENTATION_CHOICES))
        duplex = st.checkbox("Duplex (pad odd documents with a blank page)")
    with name_col:
        file_name = st.text_input("Output file name", value=config.output_name)

    if st.button("Merge", type="primary", use_container_width=True):
        try:
            content, summary = _merge_uploads(
                config, items, file_name, ORIENTATION_CHOICES[default_choice], duplex
            )
            st.session_state.merged_pdf_bytes = content
            st.session_state.merged_pdf_name = file_name
            st.session_state.merged_summary = summary
        except Exception as exc:
            st.session_state.merged_pdf_bytes = b""
            st.session_state.merged_summary = None
            st.error(str(exc))

    if st.session_state.merged_summary is not None:
        _render_summary(st.session_state.merged_summary)
        st.download_button(
            "Download merged PDF",
            data=st.session_state.merged_pdf_bytes,
            file_name=st.session_state.merged_pdf_name,
            mime="application/pdf",
            type="primary",
            use_container_width=True,
        )


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    st.set_page_config(page_title="PDF Merger", layout="wide")
    st.title("PDF Merger", anchor=False)

    config = AppConfig()
    _init_state()
    _merge_tab(config)


if __name__ == "__main__":
    main()
