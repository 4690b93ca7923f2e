from __future__ import annotations

import logging
import re
from pathlib import Path

from pdf_merger.domain.errors import NormalizationFailure
from pdf_merger.infrastructure.config import VERSION_THRESHOLD
from pdf_merger.infrastructure.converter import VersionConverter
from pdf_merger.services.temp_file_store import TemporaryFileStore

LOGGER = logging.getLogger("pdf_merger.normalizer")

VERSION_TOKEN_PATTERN = re.compile(r"\d+")
LINE_END_PATTERN = re.compile(rb"[\r\n]")
HEADER_READ_LIMIT = 1024


def parse_version(header_line: str) -> tuple[int, ...] | None:
    tokens = VERSION_TOKEN_PATTERN.findall(header_line)
    if not tokens:
        return None
    return tuple(int(token) for token in tokens)


def read_declared_version(path: Path) -> tuple[int, ...] | None:
    with Path(path).open("rb") as handle:
        header = handle.read(HEADER_READ_LIMIT)
    first_line = LINE_END_PATTERN.split(header, maxsplit=1)[0]
    return parse_version(first_line.decode("latin-1"))


class VersionNormalizer:
    """Downgrade sources whose header declares a version above the threshold."""

    def __init__(
        self,
        store: TemporaryFileStore,
        converter: VersionConverter,
        threshold: tuple[int, ...] = VERSION_THRESHOLD,
        strict: bool = False,
    ) -> None:
        self.store = store
        self.converter = converter
        self.threshold = threshold
        self.strict = strict

    def needs_conversion(self, version: tuple[int, ...] | None) -> bool:
        return version is not None and version > self.threshold

    def normalize(self, path: Path) -> Path:
        version = read_declared_version(path)
        if not self.needs_conversion(version):
            return path

        target = self.store.reserve()
        LOGGER.info(
            "Converting %s from version %s to %s",
            path,
            ".".join(map(str, version or ())),
            ".".join(map(str, self.threshold)),
        )
        result = self.converter.convert(path, target)
        if not result.succeeded:
            detail = result.detail or result.returncode
            if self.strict:
                raise NormalizationFailure(f"Could not downgrade '{path}': {detail}")
            LOGGER.warning("Could not downgrade '%s': %s", path, detail)
        return target
