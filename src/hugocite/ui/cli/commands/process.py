"""Implementation of the `hugocite process` command."""

from __future__ import annotations

import typer

from hugocite.adapters.pandoc import PandocLog, PandocRunner
from hugocite.core.context import ExportContext
from hugocite.core.exceptions import CitationProcessingError
from hugocite.core.front_matter import split_front_matter
from hugocite.core.pipeline import CitationPipeline, PipelineOutcome, PipelineResult

from .._options import (
    BibliographyOption,
    BibliographyOverrideOption,
    CiteprocOption,
    ConfigOption,
    DisableOption,
    DocumentOption,
    DraftArgument,
    FrontMatterOption,
    LevelOffsetOption,
    LogFileOption,
    PandocOption,
)
from ..diagnostics import CliEmitter
from ..state import emit_error, get_cli_state
from ..utils import format_path, resolve_document_config


_SUMMARIES = {
    PipelineOutcome.DISABLED: "Citation processing disabled; {path} left untouched.",
    PipelineOutcome.UNCHANGED: "No citations in {path}; nothing to do.",
    PipelineOutcome.NORMALISED: "No citations in {path}; front matter restored.",
    PipelineOutcome.NO_BIBLIOGRAPHY: "No bibliography declared for {path}; skipped pandoc.",
    PipelineOutcome.CONVERTED: "Resolved citations in {path}.",
}


def _present(result: PipelineResult) -> None:
    console = get_cli_state().console
    path = format_path(result.outfile)
    console.print(_SUMMARIES[result.outcome].format(path=path), highlight=False)
    if result.log is not None:
        console.print(
            f"See '{result.log.path}' for possible pandoc warnings.", highlight=False
        )


def process(
    draft: DraftArgument,
    front_matter: FrontMatterOption = None,
    config: ConfigOption = None,
    document: DocumentOption = None,
    bibliography: BibliographyOption = None,
    bibliography_override: BibliographyOverrideOption = None,
    level_offset: LevelOffsetOption = None,
    disable: DisableOption = False,
    pandoc: PandocOption = None,
    citeproc: CiteprocOption = None,
    log_file: LogFileOption = None,
) -> None:
    """Resolve citations in an exported Hugo draft through pandoc."""
    state = get_cli_state()
    try:
        document_config, base_dir = resolve_document_config(
            draft,
            config_path=config,
            document=document,
            bibliography=bibliography,
            bibliography_override=bibliography_override,
            level_offset=level_offset,
            disable=disable,
            pandoc=pandoc,
            citeproc=citeproc,
            log_file=log_file,
        )
        if front_matter is not None:
            front_matter_text = front_matter.read_text(encoding="utf-8")
        else:
            front_matter_text, _ = split_front_matter(draft.read_text(encoding="utf-8"))

        context = ExportContext.from_config(
            draft, front_matter_text, document_config, base_dir=base_dir
        )
        runner = PandocRunner(document_config.pandoc)
        pipeline = CitationPipeline(
            runner,
            log=PandocLog(document_config.pandoc.resolved_log_file()),
            emitter=CliEmitter(state),
        )
        result = pipeline.run(context)
    except CitationProcessingError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    _present(result)


__all__ = ["process"]
