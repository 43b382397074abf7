"""Primary public API for hugocite."""

from __future__ import annotations

from hugocite.adapters.pandoc import PandocInvocation, PandocLog, PandocRunner
from hugocite.core.bibliography import (
    BibliographyCollection,
    BibliographyIssue,
    BibliographyList,
    audit_citations,
    resolve_bibliography,
    select_bibliography_spec,
)
from hugocite.core.citations import (
    contains_citation_key,
    find_citation_keys,
    requires_citation_processing,
)
from hugocite.core.config import CitationsConfig, PandocOptions, ProjectConfig, load_config
from hugocite.core.context import ExportContext
from hugocite.core.exceptions import (
    BibliographyNotFoundError,
    CitationProcessingError,
    ConfigurationError,
    MalformedOutputError,
    PandocExecutionError,
    PandocNotFoundError,
)
from hugocite.core.fixups import FixupContext, apply_fixups
from hugocite.core.front_matter import (
    front_matter_bibliography,
    remove_pandoc_fields,
    restore_front_matter,
)
from hugocite.core.pipeline import (
    CitationPipeline,
    PipelineOutcome,
    PipelineResult,
    process_citations,
)
from hugocite.version import get_version


__version__ = get_version()

__all__ = [
    "BibliographyCollection",
    "BibliographyIssue",
    "BibliographyList",
    "BibliographyNotFoundError",
    "CitationPipeline",
    "CitationProcessingError",
    "CitationsConfig",
    "ConfigurationError",
    "ExportContext",
    "FixupContext",
    "MalformedOutputError",
    "PandocExecutionError",
    "PandocInvocation",
    "PandocLog",
    "PandocNotFoundError",
    "PandocOptions",
    "PandocRunner",
    "PipelineOutcome",
    "PipelineResult",
    "ProjectConfig",
    "__version__",
    "apply_fixups",
    "audit_citations",
    "contains_citation_key",
    "find_citation_keys",
    "front_matter_bibliography",
    "get_version",
    "load_config",
    "process_citations",
    "remove_pandoc_fields",
    "requires_citation_processing",
    "resolve_bibliography",
    "restore_front_matter",
    "select_bibliography_spec",
]
