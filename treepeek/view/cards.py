"""Preview cards and their line layout in the preview pane.

A card is built once per preview pass. Layout is plain text tagged with a
role per line; the terminal frame maps roles to theme colors.
"""

from __future__ import annotations

import textwrap
import time
from dataclasses import dataclass

from ..ansi import clip_ansi_line, display_width, truncate_plain
from ..preview.kinds import TEXT_KIND, PreviewKind
from ..store.types import FileNode

ELLIPSIS = "…"

ROLE_TITLE = "title"
ROLE_SNIPPET = "snippet"
ROLE_META = "meta"
ROLE_BLANK = "blank"


@dataclass(frozen=True)
class PreviewCard:
    """Everything the preview pane shows for one file."""

    path: str
    name: str
    basename: str
    kind: PreviewKind = TEXT_KIND
    snippet: str = ""
    resource_url: str = ""
    mtime: float = 0.0
    size: int = 0

    @classmethod
    def from_file(
        cls,
        file: FileNode,
        kind: PreviewKind,
        snippet: str = "",
        resource_url: str = "",
    ) -> PreviewCard:
        return cls(
            path=file.path,
            name=file.name,
            basename=file.basename,
            kind=kind,
            snippet=snippet,
            resource_url=resource_url,
            mtime=file.mtime,
            size=file.size,
        )


@dataclass(frozen=True)
class CardLine:
    role: str
    text: str
    card_index: int | None = None


def format_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024 or unit == "GB":
            return f"{int(value)} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"


def format_meta(card: PreviewCard) -> str:
    stamp = time.strftime("%Y-%m-%d %H:%M", time.localtime(card.mtime)) if card.mtime else "-"
    return f"{stamp} · {format_size(card.size)}"


def wrap_snippet(text: str, width: int, max_lines: int) -> list[str]:
    """Wrap ``text`` into at most ``max_lines`` rows of ``width`` columns.

    When text is cut, the final row ends with an ellipsis.
    """
    if max_lines <= 0 or width <= 0 or not text:
        return []
    wrapped = textwrap.wrap(text, width=width, break_long_words=True, break_on_hyphens=False)
    if len(wrapped) <= max_lines:
        return wrapped
    kept = wrapped[:max_lines]
    last = kept[-1]
    if display_width(last) + 1 > width:
        last = clip_ansi_line(last, width - 1)
    kept[-1] = last + ELLIPSIS
    return kept


def card_body(card: PreviewCard, width: int, preview_lines: int) -> list[str]:
    """Body rows of ``card``, padded to exactly ``preview_lines`` rows."""
    if card.kind.kind == "image":
        body = [f"{card.kind.glyph} {card.kind.label}", truncate_plain(card.resource_url, width)]
    elif card.kind.kind == "placeholder":
        body = [f"{card.kind.glyph} {card.kind.label}"]
    else:
        body = wrap_snippet(card.snippet, width, preview_lines)
    body = body[:preview_lines]
    return body + [""] * (preview_lines - len(body))


def layout_cards(
    cards: list[PreviewCard],
    width: int,
    preview_lines: int,
    *,
    collapsed: bool = False,
    compact: bool = False,
) -> list[CardLine]:
    """Lay out every card as tagged lines.

    Collapsed mode shows titles only. Compact mode drops the metadata line
    and the blank spacer between cards.
    """
    lines: list[CardLine] = []
    for index, card in enumerate(cards):
        if index and not compact and not collapsed:
            lines.append(CardLine(ROLE_BLANK, ""))
        lines.append(CardLine(ROLE_TITLE, truncate_plain(card.basename, width), index))
        if collapsed:
            continue
        for row in card_body(card, width, preview_lines):
            lines.append(CardLine(ROLE_SNIPPET, row, index))
        if not compact:
            lines.append(CardLine(ROLE_META, truncate_plain(format_meta(card), width), index))
    return lines


__all__ = [
    "ROLE_TITLE",
    "ROLE_SNIPPET",
    "ROLE_META",
    "ROLE_BLANK",
    "PreviewCard",
    "CardLine",
    "format_size",
    "format_meta",
    "wrap_snippet",
    "card_body",
    "layout_cards",
]
