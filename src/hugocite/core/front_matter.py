"""Front matter surgery performed without a YAML or TOML parser.

The exported draft always starts with a YAML block (pandoc reads the
bibliography metadata from it) while the caller may want the final page to
carry a different front matter format. Everything here works line by line so
the block the caller handed over is written back byte for byte, minus the
pandoc-only fields.
"""

from __future__ import annotations

from collections.abc import Iterable
import re


PANDOC_FIELDS: tuple[str, ...] = ("nocite", "csl")
BIBLIOGRAPHY_FIELD = "bibliography"

_YAML_BLOCK_RE = re.compile(r"\A---[ \t]*\n(?:.*?\n)?---[ \t]*(?:\n|\Z)", re.DOTALL)
_NOCITE_RE = re.compile(r"^nocite(?::| =) ", re.MULTILINE)
_BLOCK_SCALAR_RE = re.compile(r"^[|>](?:[1-9]?[+-]?|[+-][1-9])(?:\s+#.*)?$")

_INDENTED = "indented"
_ARRAY = "array"

# (first-line value, lines); the value is None for lines outside any field.
_Chunk = tuple[str | None, list[str]]


def _field_pattern(fields: Iterable[str]) -> re.Pattern[str]:
    names = "|".join(re.escape(field) for field in fields)
    return re.compile(rf"^(?:{names})(?::| =)(?P<value>.*)$")


def _bracket_depth(text: str) -> int:
    return text.count("[") - text.count("]")


def _is_continuation(line: str) -> bool:
    return line[:1] in (" ", "\t") or line.startswith("- ")


def _continuation_mode(value: str) -> str | None:
    """Return how the lines following a key with *value* belong to it."""
    value = value.strip()
    if not value or _BLOCK_SCALAR_RE.match(value):
        return _INDENTED
    if value.startswith("[") and _bracket_depth(value) > 0:
        return _ARRAY
    return None


def _field_chunks(front_matter: str, pattern: re.Pattern[str]) -> list[_Chunk]:
    """Group lines into fields matched by *pattern* and everything else.

    A field owns the lines of its value: the indented or list lines below an
    empty key or a YAML block scalar, and every line up to the closing bracket
    of an array left open on the key line.
    """
    lines = front_matter.splitlines(keepends=True)
    chunks: list[_Chunk] = []
    index = 0
    while index < len(lines):
        line = lines[index]
        index += 1
        match = pattern.match(line.rstrip("\r\n"))
        if match is None:
            chunks.append((None, [line]))
            continue

        value = match.group("value")
        owned = [line]
        mode = _continuation_mode(value)
        depth = _bracket_depth(value)
        while mode is not None and index < len(lines):
            following = lines[index]
            if mode == _ARRAY:
                depth += _bracket_depth(following)
                if depth <= 0:
                    mode = None
            elif not following.strip():
                ahead = index
                while ahead < len(lines) and not lines[ahead].strip():
                    ahead += 1
                if ahead == len(lines) or not _is_continuation(lines[ahead]):
                    break
                owned.extend(lines[index:ahead])
                index = ahead
                continue
            elif not _is_continuation(following):
                break
            owned.append(following)
            index += 1
        chunks.append((value, owned))
    return chunks


def remove_pandoc_fields(front_matter: str, fields: Iterable[str] = PANDOC_FIELDS) -> str:
    """Return *front_matter* without the lines defining any of *fields*.

    Multi-line values (YAML lists and block scalars, TOML arrays) are removed
    along with their key.
    """
    names = tuple(fields)
    if not names:
        return front_matter

    return "".join(
        "".join(lines)
        for value, lines in _field_chunks(front_matter, _field_pattern(names))
        if value is None
    )


def _unquote(item: str) -> str:
    item = item.strip()
    if len(item) >= 2 and item[0] == item[-1] and item[0] in "\"'":
        return item[1:-1].strip()
    return item


def front_matter_bibliography(front_matter: str) -> str | None:
    """Return the bibliography files the front matter declares, one per line.

    Scalars, comma separated strings, YAML lists and TOML arrays are
    understood. Returns `None` when no non-empty declaration exists.
    """
    for value, lines in _field_chunks(front_matter, _field_pattern((BIBLIOGRAPHY_FIELD,))):
        if value is None:
            continue

        value = value.strip()
        following = [line.strip() for line in lines[1:] if line.strip()]
        if not value:
            pieces = [item[2:] if item.startswith("- ") else item for item in following]
        else:
            if _BLOCK_SCALAR_RE.match(value):
                text = " ".join(following)
            else:
                text = " ".join([value, *following])
            text = _unquote(text)
            pieces = text.removeprefix("[").removesuffix("]").split(",")

        entries = [entry for entry in (_unquote(piece) for piece in pieces) if entry]
        if entries:
            return "\n".join(entries)
    return None


def has_nocite(front_matter: str) -> bool:
    """Return True when the front matter declares a ``nocite`` field."""
    return _NOCITE_RE.search(front_matter) is not None


def is_yaml_front_matter(front_matter: str) -> bool:
    """Return True when *front_matter* is a ``---`` fenced YAML block."""
    return _YAML_BLOCK_RE.match(front_matter) is not None


def split_front_matter(contents: str) -> tuple[str, str]:
    """Split a draft into its leading YAML block and the remaining body."""
    match = _YAML_BLOCK_RE.match(contents)
    if match is None:
        return "", contents
    return match.group(0), contents[match.end() :]


def restore_front_matter(contents: str, front_matter: str) -> str | None:
    """Swap the draft's YAML block for *front_matter*.

    Returns `None` when *front_matter* is already YAML, in which case the draft
    carries it already and must be left alone.
    """
    if is_yaml_front_matter(front_matter):
        return None
    _, body = split_front_matter(contents)
    return front_matter + body


__all__ = [
    "BIBLIOGRAPHY_FIELD",
    "PANDOC_FIELDS",
    "front_matter_bibliography",
    "has_nocite",
    "is_yaml_front_matter",
    "remove_pandoc_fields",
    "restore_front_matter",
    "split_front_matter",
]
