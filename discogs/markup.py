"""Cleanup of Discogs inline markup in artist biographies."""

import re

# Ordered: [url=...]text[/url] must be handled before bare tags are dropped
_REPLACEMENTS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\[a=([^\]]+)\]"), r"\1"),
    (re.compile(r"\[l=([^\]]+)\]"), r"\1"),
    (re.compile(r"\[url=([^\]]+)\]([^\[]*)\[/url\]"), r"\2"),
    (re.compile(r"\[[almr]\d+\]"), ""),
    (re.compile(r"\[/?[bi]\]"), ""),
]


def clean_profile(profile: str | None) -> str:
    """Strip Discogs markup tags from a profile text for display.

    ``[a=Name]`` and ``[l=Label]`` keep their names, ``[url=...]text[/url]``
    keeps its text, bold/italic tags and bare id references are removed.
    """
    if not profile:
        return ""

    text = profile
    for pattern, replacement in _REPLACEMENTS:
        text = pattern.sub(replacement, text)
    return text.replace("\r\n", "\n").strip()
