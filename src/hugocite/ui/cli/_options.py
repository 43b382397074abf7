"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
BIBLIOGRAPHY_PANEL = "Bibliography"
PANDOC_PANEL = "Pandoc"

DraftArgument = Annotated[
    Path,
    typer.Argument(
        metavar="DRAFT",
        help="Markdown file written by the exporter, rewritten in place.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
    ),
]

FrontMatterOption = Annotated[
    Path | None,
    typer.Option(
        "--front-matter",
        help=(
            "File holding the front matter the page should end up with. "
            "Defaults to the YAML block already at the top of DRAFT."
        ),
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="YAML project configuration providing defaults and per-document overrides.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

DocumentOption = Annotated[
    str | None,
    typer.Option(
        "--document",
        help="Name of the per-document configuration entry (defaults to the DRAFT file name).",
        rich_help_panel=INPUTS_PANEL,
    ),
]

BibliographyOption = Annotated[
    list[str] | None,
    typer.Option(
        "--bibliography",
        "-b",
        help="Bibliography file(s); repeat the option or separate entries with commas.",
        rich_help_panel=BIBLIOGRAPHY_PANEL,
    ),
]

BibliographyOverrideOption = Annotated[
    str | None,
    typer.Option(
        "--bibliography-override",
        help="Comma separated bibliography list taking precedence over any declaration.",
        rich_help_panel=BIBLIOGRAPHY_PANEL,
    ),
]

LevelOffsetOption = Annotated[
    int | None,
    typer.Option(
        "--level-offset",
        min=0,
        help="Heading level offset used to size the generated References heading.",
        rich_help_panel=BIBLIOGRAPHY_PANEL,
    ),
]

DisableOption = Annotated[
    bool,
    typer.Option(
        "--disable",
        help="Leave the draft untouched even when it cites references.",
    ),
]

PandocOption = Annotated[
    str | None,
    typer.Option(
        "--pandoc",
        help="Pandoc executable name or path.",
        rich_help_panel=PANDOC_PANEL,
    ),
]

CiteprocOption = Annotated[
    bool | None,
    typer.Option(
        "--citeproc/--no-citeproc",
        help="Pass --citeproc to pandoc (required by pandoc 2.11 and later).",
        rich_help_panel=PANDOC_PANEL,
    ),
]

LogFileOption = Annotated[
    Path | None,
    typer.Option(
        "--log-file",
        help="Where to keep pandoc's diagnostics.",
        dir_okay=False,
        rich_help_panel=PANDOC_PANEL,
    ),
]


__all__ = [
    "BibliographyOption",
    "BibliographyOverrideOption",
    "CiteprocOption",
    "ConfigOption",
    "DisableOption",
    "DocumentOption",
    "DraftArgument",
    "FrontMatterOption",
    "LevelOffsetOption",
    "LogFileOption",
    "PandocOption",
]
