"""External PDF version downgrade through Ghostscript."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol

from pdf_merger.domain.models import ConversionResult

LOGGER = logging.getLogger("pdf_merger.converter")


class VersionConverter(Protocol):
    def convert(self, source: Path, target: Path) -> ConversionResult: ...


def build_ghostscript_command(
    executable: str, source: Path, target: Path, compatibility: str = "1.4"
) -> list[str]:
    """Construct the Ghostscript command rewriting *source* as *compatibility*."""

    return [
        executable,
        "-sDEVICE=pdfwrite",
        "-dNOPAUSE",
        "-dBATCH",
        "-dSAFER",
        "-q",
        f"-dCompatibilityLevel={compatibility}",
        f"-sOutputFile={target}",
        str(source),
    ]


class GhostscriptConverter:
    """Run Ghostscript as a blocking subprocess.

    Failures are reported through :class:`ConversionResult` rather than
    raised; the caller decides whether a failed conversion is fatal.
    """

    def __init__(
        self, executable: str = "gs", timeout: int | None = None, compatibility: str = "1.4"
    ) -> None:
        self.executable = executable
        self.timeout = timeout
        self.compatibility = compatibility

    def convert(self, source: Path, target: Path) -> ConversionResult:
        command = build_ghostscript_command(self.executable, source, target, self.compatibility)
        LOGGER.debug("Executing command: %s", " ".join(command))
        try:
            completed = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=False,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            return ConversionResult(
                succeeded=False, detail=f"Converter executable not found: {self.executable}"
            )
        except subprocess.TimeoutExpired:
            return ConversionResult(
                succeeded=False, detail=f"Converter timed out after {self.timeout}s"
            )
        except OSError as exc:
            return ConversionResult(succeeded=False, detail=str(exc))

        if completed.returncode != 0:
            return ConversionResult(
                succeeded=False,
                returncode=completed.returncode,
                detail=completed.stderr.strip(),
            )
        if not target.exists():
            return ConversionResult(
                succeeded=False,
                returncode=completed.returncode,
                detail=f"Converter produced no output at {target}",
            )
        return ConversionResult(succeeded=True, returncode=completed.returncode)
