from __future__ import annotations

import logging
from pathlib import Path
from typing import cast

from pdf_merger.domain.models import OutputMode, OutputPayload
from pdf_merger.infrastructure.storage import FileStorage
from pdf_merger.services.merge_service import TemplateEngine

LOGGER = logging.getLogger("pdf_merger.output")


class OutputEmitter:
    """Render the engine's assembled document.

    Only meaningful after a successful merge; :class:`MergeJob` enforces
    that ordering before delegating here.
    """

    def __init__(self, engine: TemplateEngine, storage: FileStorage, file_name: str) -> None:
        self.engine = engine
        self.storage = storage
        self.file_name = file_name

    def inline(self) -> OutputPayload:
        return cast(OutputPayload, self.engine.output(self.file_name, OutputMode.INLINE))

    def download(self, file_name: str | None = None) -> OutputPayload:
        return cast(
            OutputPayload, self.engine.output(file_name or self.file_name, OutputMode.DOWNLOAD)
        )

    def to_bytes(self) -> bytes:
        return cast(bytes, self.engine.output(self.file_name, OutputMode.STRING))

    def save(self, file_path: str | None = None) -> Path:
        target = self.storage.put(file_path or self.file_name, self.to_bytes())
        LOGGER.info("Saved merged PDF to %s", target)
        return target
