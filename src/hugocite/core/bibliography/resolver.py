"""Resolution of raw bibliography declarations into validated file lists."""

from __future__ import annotations

import logging
from pathlib import Path
import re

from ..context import ExportContext
from ..exceptions import BibliographyNotFoundError


logger = logging.getLogger(__name__)

BibliographyList = tuple[Path, ...]

_SEPARATOR_RE = re.compile(r"[,\n]")


def select_bibliography_spec(context: ExportContext) -> str | None:
    """Return the raw bibliography declaration that applies to *context*.

    The override wins over values declared in the document itself.
    """
    for candidate in (context.bibliography_override, context.bibliography):
        if candidate is not None and candidate.strip():
            return candidate
    return None


def resolve_bibliography(raw: str | None, *, base_dir: Path | None = None) -> BibliographyList:
    """Split, canonicalise, validate and deduplicate a bibliography declaration."""
    if raw is None or not raw.strip():
        return ()

    root = base_dir if base_dir is not None else Path.cwd()
    resolved: dict[Path, None] = {}
    for piece in _SEPARATOR_RE.split(raw):
        name = piece.strip()
        if not name:
            continue
        candidate = Path(name).expanduser()
        if not candidate.is_absolute():
            candidate = root / candidate
        if not candidate.exists():
            raise BibliographyNotFoundError(name)
        path = candidate.resolve()
        if path in resolved:
            logger.debug("Ignoring duplicate bibliography '%s'", name)
            continue
        resolved[path] = None
    return tuple(resolved)


__all__ = ["BibliographyList", "resolve_bibliography", "select_bibliography_spec"]
