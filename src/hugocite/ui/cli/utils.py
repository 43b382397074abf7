"""Helpers shared by the CLI commands."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from hugocite.core.config import CitationsConfig, ProjectConfig, load_config


def resolve_document_config(
    draft: Path,
    *,
    config_path: Path | None = None,
    document: str | None = None,
    bibliography: Sequence[str] | None = None,
    bibliography_override: str | None = None,
    level_offset: int | None = None,
    disable: bool = False,
    pandoc: str | None = None,
    citeproc: bool | None = None,
    log_file: Path | None = None,
) -> tuple[CitationsConfig, Path | None]:
    """Merge project configuration and command line flags for *draft*.

    Returns the document configuration and the directory relative
    bibliography paths are resolved against (`None` meaning the working
    directory).
    """
    project = load_config(config_path) if config_path is not None else ProjectConfig()
    config = project.for_document(document or draft.name)
    base_dir = config_path.parent if config_path is not None else None

    updates: dict[str, Any] = {}
    if bibliography:
        updates["bibliography"] = "\n".join(bibliography)
        base_dir = None
    if bibliography_override is not None:
        updates["bibliography_override"] = bibliography_override
        base_dir = None
    if level_offset is not None:
        updates["level_offset"] = level_offset
    if disable:
        updates["enabled"] = False

    pandoc_updates: dict[str, Any] = {}
    if pandoc is not None:
        pandoc_updates["executable"] = pandoc
    if citeproc is not None:
        pandoc_updates["citeproc"] = citeproc
    if log_file is not None:
        pandoc_updates["log_file"] = log_file
    if pandoc_updates:
        updates["pandoc"] = config.pandoc.model_copy(update=pandoc_updates)

    if updates:
        config = config.model_copy(update=updates)
    return config, base_dir


def format_path(path: Path) -> str:
    """Render *path* relative to the working directory when possible."""
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except (OSError, ValueError):
        return str(path)


__all__ = ["format_path", "resolve_document_config"]
