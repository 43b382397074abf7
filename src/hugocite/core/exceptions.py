"""Custom exception hierarchy for the citation post-processing pipeline."""

from __future__ import annotations

from pathlib import Path


class CitationProcessingError(RuntimeError):
    """Base exception for citation processing failures."""


class ConfigurationError(CitationProcessingError):
    """Raised when the pipeline is configured in a way it cannot honour."""


class PandocNotFoundError(ConfigurationError):
    """Raised when citations must be resolved but pandoc cannot be located."""


class BibliographyNotFoundError(ConfigurationError):
    """Raised when a declared bibliography file does not exist."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f"Bibliography file '{path}' does not exist.")


class PandocExecutionError(CitationProcessingError):
    """Raised when pandoc exits with a non-zero status."""

    def __init__(
        self,
        returncode: int,
        *,
        log_path: Path,
        output_path: Path | None = None,
    ) -> None:
        self.returncode = returncode
        self.log_path = log_path
        self.output_path = output_path
        super().__init__(
            f"Pandoc execution failed with exit code {returncode}. See '{log_path}' for details."
        )


class MalformedOutputError(CitationProcessingError):
    """Raised when pandoc output contains a reference block that is never closed."""

    def __init__(self, marker: str, line: int) -> None:
        self.marker = marker
        self.line = line
        super().__init__(f"Unterminated block '{marker}' opened on line {line} of pandoc output.")


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


__all__ = [
    "BibliographyNotFoundError",
    "CitationProcessingError",
    "ConfigurationError",
    "MalformedOutputError",
    "PandocExecutionError",
    "PandocNotFoundError",
    "exception_messages",
]
