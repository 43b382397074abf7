from pathlib import Path
import textwrap

import pytest

from hugocite.core.bibliography import (
    BibliographyCollection,
    audit_citations,
    resolve_bibliography,
    select_bibliography_spec,
)
from hugocite.core.context import ExportContext
from hugocite.core.exceptions import BibliographyNotFoundError


def _write(
    tmp_path: Path,
    filename: str,
    payload: str,
) -> Path:
    file_path = tmp_path / filename
    file_path.write_text(textwrap.dedent(payload).strip() + "\n", encoding="utf-8")
    return file_path


def test_resolve_bibliography_deduplicates_in_first_seen_order(tmp_path: Path) -> None:
    first = _write(tmp_path, "a.bib", "")
    second = _write(tmp_path, "b.bib", "")

    resolved = resolve_bibliography("a.bib, b.bib, a.bib", base_dir=tmp_path)

    assert resolved == (first.resolve(), second.resolve())


def test_resolve_bibliography_accepts_newline_declarations(tmp_path: Path) -> None:
    first = _write(tmp_path, "a.bib", "")
    second = _write(tmp_path, "b.bib", "")

    resolved = resolve_bibliography("a.bib\n  b.bib  \n\n", base_dir=tmp_path)

    assert resolved == (first.resolve(), second.resolve())


def test_resolve_bibliography_returns_absolute_paths(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _write(tmp_path, "refs.bib", "")
    monkeypatch.chdir(tmp_path)

    (resolved,) = resolve_bibliography("refs.bib")

    assert resolved.is_absolute()
    assert resolved == (tmp_path / "refs.bib").resolve()


def test_resolve_bibliography_follows_symlinks(tmp_path: Path) -> None:
    target = _write(tmp_path, "real.bib", "")
    link = tmp_path / "link.bib"
    link.symlink_to(target)

    resolved = resolve_bibliography(f"{link}, {target}")

    assert resolved == (target.resolve(),)


def test_resolve_bibliography_reports_missing_file(tmp_path: Path) -> None:
    _write(tmp_path, "a.bib", "")

    with pytest.raises(BibliographyNotFoundError) as excinfo:
        resolve_bibliography("a.bib, missing.bib", base_dir=tmp_path)

    assert excinfo.value.path == Path("missing.bib")
    assert "missing.bib" in str(excinfo.value)


@pytest.mark.parametrize("raw", [None, "", "  \n ", ","])
def test_resolve_bibliography_empty_declaration(raw: str | None) -> None:
    assert resolve_bibliography(raw) == ()


def test_select_bibliography_spec_prefers_override(tmp_path: Path) -> None:
    context = ExportContext(
        outfile=tmp_path / "post.md",
        front_matter="",
        bibliography="declared.bib",
        bibliography_override="override.bib",
    )
    assert select_bibliography_spec(context) == "override.bib"


def test_select_bibliography_spec_falls_back_to_declaration(tmp_path: Path) -> None:
    context = ExportContext(
        outfile=tmp_path / "post.md",
        front_matter="",
        bibliography="declared.bib",
        bibliography_override="  ",
    )
    assert select_bibliography_spec(context) == "declared.bib"

    empty = ExportContext(outfile=tmp_path / "post.md", front_matter="")
    assert select_bibliography_spec(empty) is None


def test_bibliography_collection_loads_multiple_files(tmp_path: Path) -> None:
    file_one = _write(
        tmp_path,
        "first.bib",
        """
        @article{smith2020,
            title = {Example Article},
            author = {Smith, John},
            year = {2020},
            journal = {Journal of Testing},
        }
        """,
    )
    file_two = _write(
        tmp_path,
        "second.bib",
        """
        @book{doe2021,
            title = {Example Book},
            author = {Doe, Jane},
            year = {2021},
            publisher = {Publishing House},
        }
        """,
    )

    collection = BibliographyCollection()
    collection.load_files([file_one, file_two])

    assert "smith2020" in collection
    assert "doe2021" in collection
    smith = collection.find("smith2020")
    assert smith is not None
    assert smith["title"] == "Example Article"
    assert smith["authors"] == ["John Smith"]
    doe = collection.find("doe2021")
    assert doe is not None
    assert doe["source_files"] == [str(file_two.resolve())]
    assert not collection.issues
    assert collection.complete


def test_bibliography_collection_reports_empty_file(tmp_path: Path) -> None:
    empty = _write(tmp_path, "empty.bib", "% nothing here")

    collection = BibliographyCollection()
    collection.load_files([empty])

    assert [issue.message for issue in collection.issues] == ["No references found in file."]


def test_bibliography_collection_skips_csl_json(tmp_path: Path) -> None:
    csl = _write(tmp_path, "refs.json", "[]")

    collection = BibliographyCollection()
    collection.load_files([csl])

    assert collection.skipped_files == (csl,)
    assert not collection.complete


def test_audit_citations_reports_unknown_keys(tmp_path: Path) -> None:
    bib = _write(
        tmp_path,
        "refs.bib",
        """
        @misc{known,
            title = {Known},
        }
        """,
    )
    collection = BibliographyCollection()
    collection.load_files([bib])

    issues = audit_citations(["known", "unknown"], collection)

    assert [issue.key for issue in issues] == ["unknown"]


def test_audit_citations_is_silent_when_collection_incomplete(tmp_path: Path) -> None:
    collection = BibliographyCollection()
    collection.load_files([_write(tmp_path, "refs.yaml", "references: []")])

    assert audit_citations(["anything"], collection) == []
