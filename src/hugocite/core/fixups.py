"""Repairs applied to pandoc's Markdown so Hugo renders it as intended.

Pandoc emits its own dialect: shortcodes come back escaped and the rendered
bibliography is wrapped in fenced divs which Hugo does not understand. The
shortcode pass is a plain substitution. The fenced divs are handled by a
single scan over the lines with an explicit stack, so each closing fence is
paired with the innermost open block and nothing already rewritten is ever
looked at again.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

from .exceptions import MalformedOutputError


REFERENCES_TITLE = "References"
REFERENCES_ANCHOR = "references"

# Hugo mangles a block-level element whose only children are Markdown, so each
# generated div starts with an empty nested one.
PLACEHOLDER = "  <div></div>"

_SHORTCODE_RE = re.compile(r"\{\{\\<\s*(?P<body>.+?)\s*\\>\}\}", re.DOTALL)
_CLOSE_RE = re.compile(r"^:{3,}[ \t]*$")
_OPEN_RE = re.compile(r"^:{3,}[ \t]*\S")
_REF_OPEN_RE = re.compile(r"^:{3,} \{#ref-(?P<key>[^\s}]+)(?:\s[^}]*)?\}[ \t]*$")
_REFS_OPEN_RE = re.compile(r"^:{3,} \{#refs \.references(?:\s[^}]*)?\}[ \t]*$")

_OTHER = "other"
_REFERENCE = "reference"
_REFERENCES = "references"


@dataclass(frozen=True, slots=True)
class FixupContext:
    """Per-document settings used while repairing pandoc output."""

    level_offset: int = 0

    @property
    def heading_marker(self) -> str:
        return "#" * (self.level_offset + 1)


def unescape_shortcodes(content: str) -> str:
    """Turn ``{{\\< name \\>}}`` back into ``{{< name >}}``."""
    return _SHORTCODE_RE.sub(lambda match: f"{{{{< {match.group('body')} >}}}}", content)


def _reference_opening(key: str) -> list[str]:
    return [f'<div id="ref-{key}">', PLACEHOLDER, ""]


def _references_opening(context: FixupContext) -> list[str]:
    return [
        f"{context.heading_marker} {REFERENCES_TITLE} {{#{REFERENCES_ANCHOR}}}",
        "",
        '<div id="refs" class="references">',
        PLACEHOLDER,
        "",
    ]


_CLOSINGS = {
    _REFERENCE: "</div>",
    _REFERENCES: "</div> <!-- ending references -->",
}


def rewrite_reference_blocks(content: str, context: FixupContext | None = None) -> str:
    """Rewrite pandoc's reference divs into HTML blocks Hugo passes through.

    Raises `MalformedOutputError` when a reference block is never closed.
    """
    context = context or FixupContext()
    output: list[str] = []
    stack: list[tuple[str, str, int]] = []
    references_seen = False

    for number, line in enumerate(content.splitlines(keepends=True), start=1):
        text = line.rstrip("\r\n")
        ending = line[len(text) :]

        if _CLOSE_RE.match(text):
            if not stack:
                output.append(line)
                continue
            kind, _, _ = stack.pop()
            output.append(_CLOSINGS.get(kind, text) + ending)
            continue

        if not _OPEN_RE.match(text):
            output.append(line)
            continue

        match = _REF_OPEN_RE.match(text)
        if match is not None:
            stack.append((_REFERENCE, text, number))
            output.append("\n".join(_reference_opening(match.group("key"))) + ending)
            continue

        if not references_seen and _REFS_OPEN_RE.match(text):
            references_seen = True
            stack.append((_REFERENCES, text, number))
            output.append("\n".join(_references_opening(context)) + ending)
            continue

        stack.append((_OTHER, text, number))
        output.append(line)

    for kind, marker, number in stack:
        if kind != _OTHER:
            raise MalformedOutputError(marker, number)

    return "".join(output)


def apply_fixups(content: str, context: FixupContext | None = None) -> str:
    """Run every repair pass over pandoc output, in order."""
    content = unescape_shortcodes(content)
    return rewrite_reference_blocks(content, context)


__all__ = [
    "PLACEHOLDER",
    "REFERENCES_ANCHOR",
    "REFERENCES_TITLE",
    "FixupContext",
    "apply_fixups",
    "rewrite_reference_blocks",
    "unescape_shortcodes",
]
