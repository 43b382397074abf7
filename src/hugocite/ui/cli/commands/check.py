"""Implementation of the `hugocite check` command."""

from __future__ import annotations

from rich import box
from rich.table import Table
import typer

from hugocite.core.bibliography import (
    BibliographyCollection,
    audit_citations,
    resolve_bibliography,
    select_bibliography_spec,
)
from hugocite.core.citations import find_citation_keys
from hugocite.core.context import ExportContext
from hugocite.core.exceptions import CitationProcessingError
from hugocite.core.front_matter import split_front_matter

from .._options import (
    BibliographyOption,
    BibliographyOverrideOption,
    ConfigOption,
    DocumentOption,
    DraftArgument,
)
from ..state import emit_error, emit_warning, get_cli_state
from ..utils import format_path, resolve_document_config


def check(
    draft: DraftArgument,
    config: ConfigOption = None,
    document: DocumentOption = None,
    bibliography: BibliographyOption = None,
    bibliography_override: BibliographyOverrideOption = None,
) -> None:
    """List the citation keys of a draft and report those missing from its bibliography."""
    state = get_cli_state()
    console = state.console
    try:
        document_config, base_dir = resolve_document_config(
            draft,
            config_path=config,
            document=document,
            bibliography=bibliography,
            bibliography_override=bibliography_override,
        )
        contents = draft.read_text(encoding="utf-8")
        front_matter, _ = split_front_matter(contents)
        context = ExportContext.from_config(
            draft, front_matter, document_config, base_dir=base_dir
        )
        files = resolve_bibliography(select_bibliography_spec(context), base_dir=context.base_dir)
    except CitationProcessingError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    keys = find_citation_keys(contents)
    if not keys:
        console.print(f"No citation keys found in {format_path(draft)}.", highlight=False)
        return
    if not files:
        emit_warning(f"No bibliography declared for {format_path(draft)}.")

    collection = BibliographyCollection()
    collection.load_files(files)
    for skipped in collection.skipped_files:
        emit_warning(f"Skipping non-BibTeX bibliography '{format_path(skipped)}'.")
    for issue in collection.issues:
        emit_warning(f"{issue.message} ({issue.source})")

    missing = {issue.key for issue in audit_citations(keys, collection)} if files else set(keys)

    table = Table(title="Citations", box=box.SIMPLE, header_style="bold")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("Title")
    for key in keys:
        reference = collection.find(key)
        if reference is not None:
            table.add_row(key, "[green]found[/]", str(reference.get("title") or ""))
        elif key in missing:
            table.add_row(key, "[red]missing[/]", "")
        else:
            table.add_row(key, "[yellow]unchecked[/]", "")
    console.print(table)

    if missing:
        emit_error(f"{len(missing)} citation key(s) not found in the bibliography.")
        raise typer.Exit(code=1)


__all__ = ["check"]
