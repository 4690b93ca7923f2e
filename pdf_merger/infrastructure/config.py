from __future__ import annotations

import os
from dataclasses import dataclass

VERSION_THRESHOLD = (1, 4)


def _get_int_env(name: str, default: int, *, allow_zero: bool = False) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    if parsed == 0 and allow_zero:
        return parsed
    return parsed if parsed > 0 else default


def _get_str_env(name: str, default: str) -> str:
    value = os.getenv(name, "").strip()
    return value or default


def _get_bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class AppConfig:
    storage_root: str = _get_str_env("PDF_MERGER_STORAGE_ROOT", "storage")
    temp_folder: str = _get_str_env("PDF_MERGER_TEMP_FOLDER", "tmp")
    output_name: str = _get_str_env("PDF_MERGER_OUTPUT_NAME", "merged.pdf")
    ghostscript_executable: str = _get_str_env("PDF_MERGER_GS_EXECUTABLE", "gs")
    converter_timeout_seconds: int = _get_int_env(
        "PDF_MERGER_CONVERTER_TIMEOUT", 0, allow_zero=True
    )
    strict_normalization: bool = _get_bool_env("PDF_MERGER_STRICT_NORMALIZATION", False)
    max_pdf_size_mb: int = _get_int_env("PDF_MERGER_MAX_PDF_MB", 50)
    version_threshold: tuple[int, ...] = VERSION_THRESHOLD

    @property
    def max_pdf_size_bytes(self) -> int:
        return self.max_pdf_size_mb * 1024 * 1024

    @property
    def converter_timeout(self) -> int | None:
        return self.converter_timeout_seconds or None
