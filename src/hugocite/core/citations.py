"""Detection of pandoc citation keys in exported drafts."""

from __future__ import annotations

import re

from .front_matter import has_nocite


# Characters allowed inside a citation key after its first character.
_KEY_CHARS = r"\w:.#$%&+?<>~/\-"

CITATION_KEY_RE = re.compile(
    rf"(?<![{_KEY_CHARS}])(?P<suppress>-)?@(?P<key>\w[{_KEY_CHARS}]*)"
)


def contains_citation_key(contents: str) -> bool:
    """Return True when *contents* holds at least one citation key."""
    return CITATION_KEY_RE.search(contents) is not None


def find_citation_keys(contents: str) -> list[str]:
    """Return the distinct citation keys of *contents* in first-seen order."""
    keys: dict[str, None] = {}
    for match in CITATION_KEY_RE.finditer(contents):
        keys.setdefault(_trim_key(match.group("key")), None)
    return list(keys)


def _trim_key(key: str) -> str:
    # Pandoc drops trailing punctuation from keys such as "@doe2021." or "@a:".
    return key.rstrip(":.#$%&+?<>~/-")


def requires_citation_processing(front_matter: str, contents: str, *, enabled: bool) -> bool:
    """Decide whether pandoc must run over the exported draft."""
    if not enabled:
        return False
    return has_nocite(front_matter) or contains_citation_key(contents)


__all__ = [
    "CITATION_KEY_RE",
    "contains_citation_key",
    "find_citation_keys",
    "requires_citation_processing",
]
