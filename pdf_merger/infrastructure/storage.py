from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Protocol

from pdf_merger.domain.errors import FileIOError

LOGGER = logging.getLogger("pdf_merger.storage")


class FileStorage(Protocol):
    def exists(self, relative_path: str) -> bool: ...

    def put(self, relative_path: str, content: bytes) -> Path: ...

    def delete(self, relative_paths: Iterable[str]) -> None: ...

    def make_directory(self, relative_path: str) -> Path: ...

    def path(self, relative_path: str) -> Path: ...


class LocalFileStorage:
    """Disk-backed storage rooted at a single directory.

    Callers address files with paths relative to the root; ``path`` maps
    them to absolute locations for collaborators that need a real file.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).expanduser().resolve(strict=False)

    def path(self, relative_path: str) -> Path:
        return self.root / relative_path

    def exists(self, relative_path: str) -> bool:
        return self.path(relative_path).exists()

    def make_directory(self, relative_path: str) -> Path:
        directory = self.path(relative_path)
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    def put(self, relative_path: str, content: bytes) -> Path:
        target = self.path(relative_path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as exc:
            raise FileIOError(f"Unable to write {relative_path}") from exc
        LOGGER.debug("Wrote %d bytes to %s", len(content), target)
        return target

    def delete(self, relative_paths: Iterable[str]) -> None:
        for relative_path in relative_paths:
            self.path(relative_path).unlink(missing_ok=True)
