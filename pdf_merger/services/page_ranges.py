from __future__ import annotations

import re

from pdf_merger.domain.errors import ValidationError
from pdf_merger.domain.models import ALL_PAGES

RANGE_PATTERN = re.compile(r"(\d+)\s*-\s*(\d+)")


def parse_page_ranges(spec: str) -> str | list[int]:
    """Turn text like ``"1,3,6, 12-16"`` into an ordered page list.

    Blank input or ``"all"`` selects every page. Order and duplicates are
    kept as written.
    """

    cleaned = spec.strip()
    if not cleaned or cleaned.lower() == ALL_PAGES:
        return ALL_PAGES

    parts = [part.strip() for part in cleaned.split(",") if part.strip()]
    if not parts:
        raise ValidationError("Enter one or more page numbers or ranges.")

    pages: list[int] = []
    for part in parts:
        if re.fullmatch(r"\d+", part):
            page = int(part)
            if page < 1:
                raise ValidationError(f"Page {page} is out of range.")
            pages.append(page)
            continue

        range_match = RANGE_PATTERN.fullmatch(part)
        if range_match:
            start = int(range_match.group(1))
            end = int(range_match.group(2))
            if start < 1 or start > end:
                raise ValidationError(f"Invalid range '{part}'. Start must be >= 1 and <= end.")
            pages.extend(range(start, end + 1))
            continue

        raise ValidationError(f"Invalid token '{part}'. Use formats like 1,3,5-7.")

    return pages
