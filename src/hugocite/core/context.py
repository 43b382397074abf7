"""Export context handed over by the upstream Markdown exporter."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import CitationsConfig
from .exceptions import ConfigurationError
from .front_matter import front_matter_bibliography


@dataclass(frozen=True, slots=True)
class ExportContext:
    """Everything the citation pipeline needs to know about one exported draft."""

    outfile: Path
    front_matter: str
    bibliography: str | None = None
    bibliography_override: str | None = None
    level_offset: int = 0
    enabled: bool = True
    base_dir: Path | None = None

    def __post_init__(self) -> None:
        if self.level_offset < 0:
            raise ConfigurationError(
                f"Heading level offset must be >= 0, got {self.level_offset}."
            )

    @classmethod
    def from_config(
        cls,
        outfile: Path | str,
        front_matter: str,
        config: CitationsConfig,
        *,
        base_dir: Path | None = None,
    ) -> ExportContext:
        """Build a context from a resolved document configuration.

        Without a bibliography in *config*, the one declared in *front_matter*
        applies and its relative paths resolve against the draft's directory.
        """
        outfile = Path(outfile)
        bibliography = config.bibliography
        if bibliography is None and config.bibliography_override is None:
            declared = front_matter_bibliography(front_matter)
            if declared is not None:
                bibliography = declared
                base_dir = outfile.parent
        return cls(
            outfile=outfile,
            front_matter=front_matter,
            bibliography=bibliography,
            bibliography_override=config.bibliography_override,
            level_offset=config.level_offset,
            enabled=config.enabled,
            base_dir=base_dir,
        )


__all__ = ["ExportContext"]
