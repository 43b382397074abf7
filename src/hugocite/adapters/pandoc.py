"""Abstractions for invoking pandoc to expand citations."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging
import os
from pathlib import Path
import shutil
import subprocess
import tempfile

from hugocite.core.config import PandocOptions
from hugocite.core.exceptions import (
    CitationProcessingError,
    PandocExecutionError,
    PandocNotFoundError,
)


logger = logging.getLogger(__name__)


class PandocLog:
    """File-backed sink collecting pandoc's combined stdout and stderr."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"PandocLog({str(self.path)!r})"

    def clear(self) -> None:
        """Discard any previous content, creating the file when needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("", encoding="utf-8")

    def read(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return ""

    @property
    def is_empty(self) -> bool:
        try:
            return self.path.stat().st_size == 0
        except FileNotFoundError:
            return True

    def discard(self) -> None:
        """Remove the log file."""
        self.path.unlink(missing_ok=True)


@dataclass(slots=True)
class PandocInvocation:
    """Record of a completed pandoc run."""

    argv: list[str]
    input_path: Path
    output_path: Path
    log: PandocLog
    returncode: int


class PandocRunner:
    """Utility class encapsulating pandoc invocations."""

    def __init__(self, options: PandocOptions | None = None) -> None:
        self._options = options or PandocOptions()
        self._cached_executable: str | None = None

    @property
    def options(self) -> PandocOptions:
        return self._options

    def require_executable(self) -> str:
        """Return the pandoc executable or raise when it cannot be found."""
        executable = self._resolve_executable()
        if executable is None:
            raise PandocNotFoundError(
                f"pandoc executable '{self._options.executable}' not found in PATH."
            )
        return executable

    def build_arguments(
        self,
        bibliography: Sequence[Path],
        *,
        output_path: Path,
        input_path: Path,
    ) -> list[str]:
        """Return the pandoc arguments, without the executable itself."""
        options = self._options
        arguments = ["-f", options.source_format, "-t", options.target_format]
        if options.atx_headers:
            arguments.append("--atx-headers")
        if options.citeproc:
            arguments.append("--citeproc")
        arguments.extend(f"--bibliography={path}" for path in bibliography)
        arguments.extend(["-o", str(output_path), str(input_path)])
        return arguments

    def create_output_path(self, input_path: Path) -> Path:
        """Create an empty, uniquely named file to receive pandoc output."""
        temp_dir = self._options.temp_dir
        if temp_dir is not None:
            temp_dir.mkdir(parents=True, exist_ok=True)
        handle, name = tempfile.mkstemp(
            prefix=f"{input_path.stem}.",
            suffix=".md",
            dir=str(temp_dir) if temp_dir is not None else None,
        )
        os.close(handle)
        return Path(name)

    def run(
        self,
        input_path: Path,
        bibliography: Sequence[Path],
        *,
        log: PandocLog,
    ) -> PandocInvocation:
        """Run pandoc over *input_path*, blocking until it exits."""
        executable = self.require_executable()
        output_path = self.create_output_path(input_path)
        argv = [
            executable,
            *self.build_arguments(bibliography, output_path=output_path, input_path=input_path),
        ]

        log.clear()
        logger.debug("Running %s", " ".join(argv))
        try:
            with log.path.open("w", encoding="utf-8") as handle:
                result = subprocess.run(
                    argv,
                    check=False,
                    stdout=handle,
                    stderr=subprocess.STDOUT,
                )
        except FileNotFoundError as exc:
            self._cached_executable = None
            raise PandocNotFoundError("pandoc executable could not be located.") from exc
        except OSError as exc:
            raise CitationProcessingError(f"Failed to invoke pandoc: {exc}") from exc

        if result.returncode != 0:
            raise PandocExecutionError(
                result.returncode, log_path=log.path, output_path=output_path
            )

        return PandocInvocation(
            argv=argv,
            input_path=input_path,
            output_path=output_path,
            log=log,
            returncode=result.returncode,
        )

    def _resolve_executable(self) -> str | None:
        if self._cached_executable:
            return self._cached_executable

        candidate = self._options.executable
        if os.sep in candidate or (os.altsep and os.altsep in candidate):
            path = Path(candidate).expanduser()
            executable = str(path) if path.is_file() and os.access(path, os.X_OK) else None
        else:
            try:
                executable = shutil.which(candidate)
            except (AssertionError, OSError, ValueError):
                executable = None

        if executable:
            self._cached_executable = executable
        return executable


__all__ = ["PandocInvocation", "PandocLog", "PandocRunner"]
