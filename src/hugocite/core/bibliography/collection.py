"""Aggregation of BibTeX references used to audit citation keys."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from pybtex.database import Entry, Person
from pybtex.database.input import bibtex
from pybtex.exceptions import PybtexError

from .issues import BibliographyIssue


BIBTEX_SUFFIXES = frozenset({".bib", ".bibtex"})


class BibliographyCollection:
    """Aggregate references from one or more BibTeX sources.

    Only BibTeX files are parsed. CSL JSON or YAML bibliographies are accepted
    by pandoc but skipped here, so keys they define cannot be audited.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Entry] = {}
        self._sources: dict[str, set[Path]] = {}
        self._issues: list[BibliographyIssue] = []
        self._skipped: list[Path] = []

    @property
    def issues(self) -> Sequence[BibliographyIssue]:
        """Return the list of issues discovered while loading references."""
        return tuple(self._issues)

    @property
    def skipped_files(self) -> Sequence[Path]:
        """Return bibliographies that are not BibTeX and were not loaded."""
        return tuple(self._skipped)

    @property
    def complete(self) -> bool:
        """Return True when every bibliography could be inspected."""
        return not self._skipped

    def load_files(self, files: Iterable[Path | str]) -> None:
        """Load BibTeX entries from one or more files."""
        for file_path in files:
            path = Path(file_path)
            if path.suffix.lower() not in BIBTEX_SUFFIXES:
                self._skipped.append(path)
                continue
            self._load_file(path)

    def _load_file(self, file_path: Path) -> None:
        file_path = file_path.resolve()
        parser = bibtex.Parser()

        try:
            data = parser.parse_file(str(file_path))
        except (OSError, PybtexError) as exc:
            self._issues.append(
                BibliographyIssue(
                    message=f"Failed to parse '{file_path}': {exc}",
                    key=None,
                    source=file_path,
                )
            )
            return

        if not data.entries:
            self._issues.append(
                BibliographyIssue(
                    message="No references found in file.",
                    key=None,
                    source=file_path,
                )
            )

        for key, entry in data.entries.items():
            if key in self._entries:
                self._sources[key].add(file_path)
                continue
            self._entries[key] = entry
            self._sources[key] = {file_path}

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def find(self, reference_key: str) -> dict[str, Any] | None:
        """Return a portable summary of a specific reference."""
        entry = self._entries.get(reference_key)
        if entry is None:
            return None

        authors = [_person_text(person) for person in entry.persons.get("author", [])]
        return {
            "key": reference_key,
            "type": entry.type,
            "title": entry.fields.get("title"),
            "year": entry.fields.get("year"),
            "authors": authors,
            "source_files": sorted(str(path) for path in self._sources[reference_key]),
        }


def _person_text(person: Person) -> str:
    parts = [*person.first_names, *person.middle_names, *person.prelast_names, *person.last_names]
    return " ".join(str(part) for part in parts if part) or str(person)


def audit_citations(
    keys: Iterable[str], collection: BibliographyCollection
) -> list[BibliographyIssue]:
    """Return one issue per cited key that no loaded BibTeX file defines."""
    if not collection.complete:
        return []
    return [
        BibliographyIssue(message="Citation key not found in any bibliography.", key=key)
        for key in keys
        if key not in collection
    ]


__all__ = ["BIBTEX_SUFFIXES", "BibliographyCollection", "audit_citations"]
