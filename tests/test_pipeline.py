from __future__ import annotations

from pathlib import Path
import textwrap
from typing import Any

import pytest

from hugocite.adapters import pandoc as pandoc_mod
from hugocite.adapters.pandoc import PandocLog, PandocRunner
from hugocite.core.config import PandocOptions
from hugocite.core.context import ExportContext
from hugocite.core.exceptions import (
    BibliographyNotFoundError,
    MalformedOutputError,
    PandocExecutionError,
    PandocNotFoundError,
)
from hugocite.core.pipeline import CitationPipeline, PipelineOutcome, process_citations


YAML_FRONT_MATTER = '---\ntitle: Demo\nbibliography: refs.bib\ncsl: ieee.csl\n---\n'
TOML_FRONT_MATTER = '+++\ntitle = "Demo"\ncsl = "ieee.csl"\n+++\n'

PANDOC_OUTPUT = textwrap.dedent(
    """
    As argued by Doe (2021). {{\\< youtube abc123 \\>}}

    ::: {#refs .references}
    ::: {#ref-doe2021}
    Doe, Jane. 2021. *Example*.
    :::
    :::
    """
).lstrip("\n")


class _StubResult:
    def __init__(self, returncode: int = 0) -> None:
        self.returncode = returncode


class RecordingEmitter:
    debug_enabled = False

    def __init__(self) -> None:
        self.warnings: list[str] = []
        self.events: list[tuple[str, dict[str, Any]]] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self.warnings.append(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        raise AssertionError(message)

    def event(self, name: str, payload: Any) -> None:
        self.events.append((name, dict(payload)))

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.events]


@pytest.fixture
def site(tmp_path: Path) -> Path:
    (tmp_path / "refs.bib").write_text(
        "@book{doe2021,\n  title = {Example},\n  author = {Doe, Jane},\n  year = {2021},\n}\n",
        encoding="utf-8",
    )
    return tmp_path


def _draft(site: Path, body: str) -> Path:
    draft = site / "post.md"
    draft.write_text(YAML_FRONT_MATTER + "\n" + body, encoding="utf-8")
    return draft


def _pipeline(
    site: Path,
    monkeypatch: pytest.MonkeyPatch,
    *,
    output: str = PANDOC_OUTPUT,
    returncode: int = 0,
    diagnostics: str = "",
    calls: list[list[str]] | None = None,
) -> tuple[CitationPipeline, RecordingEmitter]:
    monkeypatch.setattr(pandoc_mod.shutil, "which", lambda _: "/usr/bin/pandoc")

    def fake_run(cmd: list[str], **kwargs: Any) -> _StubResult:
        if calls is not None:
            calls.append(cmd)
        Path(cmd[cmd.index("-o") + 1]).write_text(output, encoding="utf-8")
        if diagnostics:
            kwargs["stdout"].write(diagnostics)
        return _StubResult(returncode)

    monkeypatch.setattr(pandoc_mod.subprocess, "run", fake_run)
    emitter = RecordingEmitter()
    runner = PandocRunner(PandocOptions(temp_dir=site / "tmp"))
    pipeline = CitationPipeline(runner, log=PandocLog(site / "pandoc.log"), emitter=emitter)
    return pipeline, emitter


def _context(draft: Path, front_matter: str = YAML_FRONT_MATTER, **kwargs: Any) -> ExportContext:
    kwargs.setdefault("bibliography", "refs.bib")
    kwargs.setdefault("base_dir", draft.parent)
    return ExportContext(outfile=draft, front_matter=front_matter, **kwargs)


def test_pipeline_converts_citations(site: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    draft = _draft(site, "As argued by [@doe2021].\n")
    calls: list[list[str]] = []
    pipeline, emitter = _pipeline(site, monkeypatch, calls=calls)

    result = pipeline.run(_context(draft))

    assert result.outcome is PipelineOutcome.CONVERTED
    assert result.bibliography == ((site / "refs.bib").resolve(),)
    assert f"--bibliography={(site / 'refs.bib').resolve()}" in calls[0]
    expected_body = textwrap.dedent(
        """
        As argued by Doe (2021). {{< youtube abc123 >}}

        # References {#references}

        <div id="refs" class="references">
          <div></div>

        <div id="ref-doe2021">
          <div></div>

        Doe, Jane. 2021. *Example*.
        </div>
        </div> <!-- ending references -->
        """
    ).lstrip("\n")
    assert draft.read_text(encoding="utf-8") == (
        "---\ntitle: Demo\nbibliography: refs.bib\n---\n" + "\n" + expected_body
    )
    assert list((site / "tmp").iterdir()) == []
    assert not (site / "pandoc.log").exists()
    assert result.log is None
    assert emitter.names == ["pandoc_run"]
    assert not result.issues


def test_pipeline_writes_site_front_matter(site: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    draft = _draft(site, "[@doe2021]\n")
    pipeline, _ = _pipeline(site, monkeypatch)

    pipeline.run(_context(draft, TOML_FRONT_MATTER, level_offset=2))

    contents = draft.read_text(encoding="utf-8")
    assert contents.startswith('+++\ntitle = "Demo"\n+++\n\nAs argued')
    assert "### References {#references}" in contents


def test_pipeline_retains_non_empty_log(site: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    draft = _draft(site, "[@doe2021]\n")
    pipeline, emitter = _pipeline(site, monkeypatch, diagnostics="[WARNING] something\n")

    result = pipeline.run(_context(draft))

    assert result.log is not None
    assert result.log.read() == "[WARNING] something\n"
    assert ("pandoc_log_retained", {"outfile": str(draft), "log": str(site / "pandoc.log")}) in (
        emitter.events
    )


def test_pipeline_nocite_triggers_conversion(
    site: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    front_matter = '---\ntitle: Demo\nnocite: ["@doe2021"]\n---\n'
    draft = site / "post.md"
    draft.write_text(front_matter + "\nNo inline citation.\n", encoding="utf-8")
    calls: list[list[str]] = []
    pipeline, _ = _pipeline(site, monkeypatch, calls=calls)

    result = pipeline.run(_context(draft, front_matter))

    assert result.outcome is PipelineOutcome.CONVERTED
    assert len(calls) == 1
    assert draft.read_text(encoding="utf-8").startswith("---\ntitle: Demo\n---\n\n")


def test_pipeline_without_citations_is_a_noop(
    site: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    draft = _draft(site, "Mail user@example.com for details.\n")
    before = draft.read_bytes()
    calls: list[list[str]] = []
    pipeline, emitter = _pipeline(site, monkeypatch, calls=calls)

    result = pipeline.run(_context(draft))

    assert result.outcome is PipelineOutcome.UNCHANGED
    assert draft.read_bytes() == before
    assert calls == []
    assert emitter.names == ["citations_skipped"]


def test_pipeline_without_citations_restores_front_matter(
    site: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    draft = _draft(site, "Nothing cited.\n")
    pipeline, emitter = _pipeline(site, monkeypatch)

    result = pipeline.run(_context(draft, TOML_FRONT_MATTER))

    assert result.outcome is PipelineOutcome.NORMALISED
    assert result.written
    assert draft.read_text(encoding="utf-8") == TOML_FRONT_MATTER + "\nNothing cited.\n"
    assert emitter.names == ["citations_skipped", "front_matter_restored"]


def test_pipeline_disabled_leaves_draft(site: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    draft = _draft(site, "[@doe2021]\n")
    before = draft.read_bytes()
    calls: list[list[str]] = []
    pipeline, _ = _pipeline(site, monkeypatch, calls=calls)

    result = pipeline.run(_context(draft, TOML_FRONT_MATTER, enabled=False))

    assert result.outcome is PipelineOutcome.DISABLED
    assert draft.read_bytes() == before
    assert calls == []


def test_pipeline_without_bibliography_stops(site: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    draft = _draft(site, "[@doe2021]\n")
    before = draft.read_bytes()
    calls: list[list[str]] = []
    pipeline, emitter = _pipeline(site, monkeypatch, calls=calls)

    result = pipeline.run(_context(draft, bibliography=None))

    assert result.outcome is PipelineOutcome.NO_BIBLIOGRAPHY
    assert draft.read_bytes() == before
    assert calls == []
    assert emitter.names == ["bibliography_missing"]


def test_pipeline_requires_pandoc(site: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    draft = _draft(site, "[@doe2021]\n")
    pipeline, _ = _pipeline(site, monkeypatch)
    monkeypatch.setattr(pandoc_mod.shutil, "which", lambda _: None)

    with pytest.raises(PandocNotFoundError):
        pipeline.run(_context(draft))


def test_pipeline_missing_bibliography_is_fatal(
    site: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    draft = _draft(site, "[@doe2021]\n")
    before = draft.read_bytes()
    pipeline, _ = _pipeline(site, monkeypatch)

    with pytest.raises(BibliographyNotFoundError) as excinfo:
        pipeline.run(_context(draft, bibliography_override="refs.bib, gone.bib"))

    assert excinfo.value.path == Path("gone.bib")
    assert draft.read_bytes() == before


def test_pipeline_pandoc_failure_keeps_draft(site: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    draft = _draft(site, "[@doe2021]\n")
    before = draft.read_bytes()
    pipeline, _ = _pipeline(site, monkeypatch, returncode=1, diagnostics="pandoc: boom\n")

    with pytest.raises(PandocExecutionError) as excinfo:
        pipeline.run(_context(draft))

    assert draft.read_bytes() == before
    assert excinfo.value.output_path is not None and excinfo.value.output_path.exists()
    assert (site / "pandoc.log").read_text(encoding="utf-8") == "pandoc: boom\n"


def test_pipeline_malformed_output_keeps_draft(
    site: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    draft = _draft(site, "[@doe2021]\n")
    before = draft.read_bytes()
    pipeline, _ = _pipeline(site, monkeypatch, output="::: {#ref-doe2021}\nDoe.\n")

    with pytest.raises(MalformedOutputError):
        pipeline.run(_context(draft))

    assert draft.read_bytes() == before


def test_pipeline_warns_about_unknown_keys(site: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    draft = _draft(site, "[@doe2021; @ghost1999]\n")
    pipeline, emitter = _pipeline(site, monkeypatch)

    result = pipeline.run(_context(draft))

    assert [issue.key for issue in result.issues] == ["ghost1999"]
    assert any("ghost1999" in warning for warning in emitter.warnings)


def test_process_citations_shortcut(site: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    draft = _draft(site, "Nothing cited.\n")

    result = process_citations(_context(draft), log=PandocLog(site / "pandoc.log"))

    assert result.outcome is PipelineOutcome.UNCHANGED
