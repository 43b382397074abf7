"""End-to-end citation post-processing of an exported Hugo draft."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
from pathlib import Path

from hugocite.adapters.pandoc import PandocLog, PandocRunner

from .bibliography import (
    BibliographyCollection,
    BibliographyIssue,
    BibliographyList,
    audit_citations,
    resolve_bibliography,
    select_bibliography_spec,
)
from .citations import find_citation_keys, requires_citation_processing
from .context import ExportContext
from .diagnostics import DiagnosticEmitter, LoggingEmitter
from .fixups import FixupContext, apply_fixups
from .front_matter import remove_pandoc_fields, restore_front_matter


logger = logging.getLogger(__name__)


class PipelineOutcome(str, Enum):
    """What the pipeline ended up doing with a draft."""

    DISABLED = "disabled"
    UNCHANGED = "unchanged"
    NORMALISED = "normalised"
    NO_BIBLIOGRAPHY = "no-bibliography"
    CONVERTED = "converted"


@dataclass(slots=True)
class PipelineResult:
    """Summary of a pipeline execution."""

    outcome: PipelineOutcome
    outfile: Path
    bibliography: BibliographyList = ()
    log: PandocLog | None = None
    issues: list[BibliographyIssue] = field(default_factory=list)

    @property
    def written(self) -> bool:
        return self.outcome in (PipelineOutcome.NORMALISED, PipelineOutcome.CONVERTED)


class CitationPipeline:
    """Resolve citations in exported drafts through pandoc."""

    def __init__(
        self,
        runner: PandocRunner | None = None,
        *,
        log: PandocLog | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.runner = runner or PandocRunner()
        self.log = log or PandocLog(self.runner.options.resolved_log_file())
        self.emitter = emitter or LoggingEmitter()

    def run(self, context: ExportContext) -> PipelineResult:
        outfile = context.outfile
        logger.debug("Processing citations in %s", outfile)
        contents = outfile.read_text(encoding="utf-8")
        payload = {"outfile": str(outfile)}

        if not context.enabled:
            return PipelineResult(PipelineOutcome.DISABLED, outfile)

        if not requires_citation_processing(
            context.front_matter, contents, enabled=context.enabled
        ):
            self.emitter.event("citations_skipped", payload)
            return self._normalise(context, contents)

        self.runner.require_executable()

        bibliography = resolve_bibliography(
            select_bibliography_spec(context), base_dir=context.base_dir
        )
        if not bibliography:
            self.emitter.event("bibliography_missing", payload)
            return PipelineResult(PipelineOutcome.NO_BIBLIOGRAPHY, outfile)

        issues = self._audit(contents, bibliography)

        invocation = self.runner.run(outfile, bibliography, log=self.log)
        converted = invocation.output_path.read_text(encoding="utf-8")
        body = apply_fixups(converted, FixupContext(level_offset=context.level_offset))
        outfile.write_text(
            remove_pandoc_fields(context.front_matter) + "\n" + body, encoding="utf-8"
        )
        invocation.output_path.unlink()
        self.emitter.event(
            "pandoc_run",
            {**payload, "bibliography": [str(path) for path in bibliography]},
        )

        retained: PandocLog | None = None
        if self.log.is_empty:
            self.log.discard()
        else:
            retained = self.log
            self.emitter.event("pandoc_log_retained", {**payload, "log": str(self.log.path)})

        return PipelineResult(
            PipelineOutcome.CONVERTED,
            outfile,
            bibliography=bibliography,
            log=retained,
            issues=issues,
        )

    def _normalise(self, context: ExportContext, contents: str) -> PipelineResult:
        restored = restore_front_matter(contents, context.front_matter)
        if restored is None:
            return PipelineResult(PipelineOutcome.UNCHANGED, context.outfile)
        context.outfile.write_text(restored, encoding="utf-8")
        self.emitter.event("front_matter_restored", {"outfile": str(context.outfile)})
        return PipelineResult(PipelineOutcome.NORMALISED, context.outfile)

    def _audit(self, contents: str, bibliography: BibliographyList) -> list[BibliographyIssue]:
        collection = BibliographyCollection()
        collection.load_files(bibliography)
        issues = [*collection.issues, *audit_citations(find_citation_keys(contents), collection)]
        for issue in issues:
            if issue.key:
                self.emitter.warning(f"{issue.message} ({issue.key})")
            else:
                self.emitter.warning(f"{issue.message} ({issue.source})")
        return issues


def process_citations(context: ExportContext, **kwargs: object) -> PipelineResult:
    """Run a `CitationPipeline` with default collaborators over *context*."""
    return CitationPipeline(**kwargs).run(context)  # type: ignore[arg-type]


__all__ = [
    "CitationPipeline",
    "PipelineOutcome",
    "PipelineResult",
    "process_citations",
]
