"""Plain-text preview snippets from note content.

The projection is lossy. Front matter, inline properties, table rules and
markdown decoration are dropped; the remaining lines are joined into one
string for the card renderer to clamp.
"""

from __future__ import annotations

import re

FRONT_MATTER_FENCE = "---"

_INLINE_PROPERTY_RE = re.compile(r"[\w-]+::.+")
# A separator row needs at least one pipe so bare "---" rules survive.
_TABLE_SEPARATOR_RE = re.compile(r"[\s|\-:]*\|[\s|\-:]*")
_HEADING_RE = re.compile(r"^#+\s", re.MULTILINE)
_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
_ITALIC_RE = re.compile(r"\*(.+?)\*")
_LIST_MARKER_RE = re.compile(r"^[>\-*+]\s", re.MULTILINE)
_WIKI_LINK_RE = re.compile(r"\[\[(.+?)\]\]")
_MARKDOWN_LINK_RE = re.compile(r"\[(.+?)\]\(.+?\)")


def strip_front_matter(text: str) -> str:
    """Drop a leading ``---`` fenced block, only when it is closed."""
    if not text.startswith(FRONT_MATTER_FENCE):
        return text
    lines = text.split("\n")
    for idx in range(1, len(lines)):
        if lines[idx].strip() == FRONT_MATTER_FENCE:
            return "\n".join(lines[idx + 1 :]).strip()
    return text


def strip_link_brackets(text: str) -> str:
    """Keep only display text of ``[[page]]`` and ``[text](url)`` links."""
    text = _WIKI_LINK_RE.sub(r"\1", text)
    return _MARKDOWN_LINK_RE.sub(r"\1", text)


def extract_preview(raw: str, remove_link_brackets: bool = True) -> str:
    """Project note content to a single-line plain-text snippet.

    Returns ``""`` for empty documents and for documents holding only front
    matter. No length truncation happens here.
    """
    text = strip_front_matter(raw.strip())
    text = "\n".join(
        line
        for line in text.split("\n")
        if not _INLINE_PROPERTY_RE.fullmatch(line) and not _TABLE_SEPARATOR_RE.fullmatch(line)
    )

    text = _HEADING_RE.sub("", text)
    text = _BOLD_RE.sub(r"\1", text)
    text = _ITALIC_RE.sub(r"\1", text)
    text = _LIST_MARKER_RE.sub("", text)
    text = text.replace("|", " ")

    if remove_link_brackets:
        text = strip_link_brackets(text)

    lines = [line.strip() for line in text.strip().split("\n")]
    return " ".join(line for line in lines if line)


__all__ = [
    "FRONT_MATTER_FENCE",
    "strip_front_matter",
    "strip_link_brackets",
    "extract_preview",
]
