from __future__ import annotations

import logging
import uuid
from pathlib import Path

from pdf_merger.infrastructure.storage import FileStorage

LOGGER = logging.getLogger("pdf_merger.temp")


class TemporaryFileStore:
    def __init__(self, storage: FileStorage, folder: str = "tmp") -> None:
        self.storage = storage
        self.folder = folder.strip("/") or "tmp"
        self._relative_paths: list[str] = []

    @property
    def paths(self) -> tuple[Path, ...]:
        return tuple(self.storage.path(relative) for relative in self._relative_paths)

    def _new_relative_path(self) -> str:
        if not self.storage.exists(self.folder):
            self.storage.make_directory(self.folder)
        relative = f"{self.folder}/{uuid.uuid4().hex}.pdf"
        self._relative_paths.append(relative)
        return relative

    def stage(self, content: bytes) -> Path:
        relative = self._new_relative_path()
        path = self.storage.put(relative, content)
        LOGGER.debug("Staged %d bytes at %s", len(content), path)
        return path

    def reserve(self) -> Path:
        return self.storage.path(self._new_relative_path())

    def cleanup(self) -> None:
        for relative in self._relative_paths:
            try:
                self.storage.delete([relative])
            except Exception as exc:
                LOGGER.warning("Failed to delete temporary file %s: %s", relative, exc)
        LOGGER.debug("Removed %d temporary files", len(self._relative_paths))
        self._relative_paths.clear()
