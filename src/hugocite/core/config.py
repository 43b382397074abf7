"""Configuration models used by the citation pipeline.

PandocOptions

`executable` (`str`)
: Name or path of the pandoc binary. Bare names are looked up on `PATH`.

`source_format` (`str`)
: Pandoc reader used for the exported draft.

`target_format` (`str`)
: Pandoc writer and extension set. The default disables the `citations`
  extension so citations are expanded inline, and swaps `simple_tables` for
  `pipe_tables` which is the only table dialect Hugo renders.

`atx_headers` (`bool`)
: Force `#`-style headings in pandoc output.

`citeproc` (`bool`)
: Append `--citeproc` after the fixed arguments. Pandoc 2.11 and later only
  process citations when asked to.

`temp_dir` (`Path | None`)
: Directory receiving the temporary pandoc output. Defaults to the system
  temporary directory.

`log_file` (`Path | None`)
: Location of the pandoc log. Defaults to `hugocite-pandoc.log` inside the
  system temporary directory.

CitationsConfig

`enabled` (`bool`)
: Toggle citation processing without discarding configuration.

`bibliography` (`str | list[str] | None`)
: Bibliography files declared by the document. Lists are joined with newlines,
  matching repeated declarations.

`bibliography_override` (`str | None`)
: Comma separated override that takes precedence over `bibliography`.

`level_offset` (`int`)
: Heading offset applied to the generated "References" heading.

`pandoc` (`PandocOptions`)
: Nested options controlling the pandoc invocation.

ProjectConfig

`documents` (`dict[str, DocumentConfig]`)
: Per-document overrides keyed by the draft file name. Unset values are
  inherited from the project.
"""

from __future__ import annotations

from pathlib import Path
import tempfile
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from .exceptions import ConfigurationError


DEFAULT_LOG_NAME = "hugocite-pandoc.log"


class PandocOptions(BaseModel):
    """Options forwarded to the pandoc invocation."""

    model_config = ConfigDict(extra="forbid")

    executable: str = "pandoc"
    source_format: str = "markdown"
    target_format: str = "markdown-citations-simple_tables+pipe_tables"
    atx_headers: bool = True
    citeproc: bool = False
    temp_dir: Path | None = None
    log_file: Path | None = None

    def resolved_log_file(self) -> Path:
        """Return the log location, falling back to the temporary directory."""
        if self.log_file is not None:
            return self.log_file
        return Path(tempfile.gettempdir()) / DEFAULT_LOG_NAME


def _join_declarations(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return "\n".join(str(item) for item in value)
    return value


class CitationsConfig(BaseModel):
    """Citation settings for a single document."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    bibliography: str | None = None
    bibliography_override: str | None = None
    level_offset: int = Field(default=0, ge=0)
    pandoc: PandocOptions = Field(default_factory=PandocOptions)

    @field_validator("bibliography", mode="before")
    @classmethod
    def _coerce_bibliography(cls, value: Any) -> Any:
        return _join_declarations(value)


class DocumentConfig(BaseModel):
    """Document-level overrides; `None` means inherit from the project."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool | None = None
    bibliography: str | None = None
    bibliography_override: str | None = None
    level_offset: int | None = Field(default=None, ge=0)

    @field_validator("bibliography", mode="before")
    @classmethod
    def _coerce_bibliography(cls, value: Any) -> Any:
        return _join_declarations(value)


class ProjectConfig(CitationsConfig):
    """Project configuration, typically read from ``hugocite.yml``."""

    documents: dict[str, DocumentConfig] = Field(default_factory=dict)

    def for_document(self, name: str | None = None) -> CitationsConfig:
        """Return the configuration of *name* with project values inherited."""
        payload = self.model_dump(exclude={"documents"})
        overrides = self.documents.get(name) if name else None
        if overrides is not None:
            payload.update(overrides.model_dump(exclude_none=True))
        return CitationsConfig.model_validate(payload)


def load_config(path: Path | str) -> ProjectConfig:
    """Load a YAML configuration file into a `ProjectConfig`."""
    config_path = Path(path)
    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"Unable to read configuration '{config_path}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in '{config_path}': {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Configuration '{config_path}' must be a mapping.")

    # Accept both a bare mapping and one nested under a `citations` key.
    section = raw.get("citations", raw)
    try:
        return ProjectConfig.model_validate(section)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration in '{config_path}': {exc}") from exc


__all__ = [
    "DEFAULT_LOG_NAME",
    "CitationsConfig",
    "DocumentConfig",
    "PandocOptions",
    "ProjectConfig",
    "load_config",
]
