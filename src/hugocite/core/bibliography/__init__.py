"""Bibliography handling for the citation pipeline.

Architecture
: `resolve_bibliography` turns the raw declaration found on a document into
  an ordered tuple of absolute paths. It is the only piece the pipeline needs
  before running pandoc and it fails loudly on missing files.
: `BibliographyCollection` parses BibTeX files with pybtex so cited keys can
  be audited ahead of the pandoc run, where an unknown key would otherwise
  surface as a silent "???" in the rendered page.

Usage Example

```pycon
>>> from hugocite.core.bibliography import resolve_bibliography
>>> resolve_bibliography("")
()
```
"""

from __future__ import annotations

from .collection import BIBTEX_SUFFIXES, BibliographyCollection, audit_citations
from .issues import BibliographyIssue
from .resolver import BibliographyList, resolve_bibliography, select_bibliography_spec


__all__ = [
    "BIBTEX_SUFFIXES",
    "BibliographyCollection",
    "BibliographyIssue",
    "BibliographyList",
    "audit_citations",
    "resolve_bibliography",
    "select_bibliography_spec",
]
