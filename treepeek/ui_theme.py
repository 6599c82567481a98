"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the tree pane, preview cards and status line.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    divider: str
    reverse: str
    reset: str
    tree_marker: str
    tree_dir: str
    tree_root: str
    tree_drop_target: str
    card_title: str
    card_snippet: str
    card_meta: str
    card_active_accent: str
    card_active_neutral: str
    card_focus_marker: str
    header: str
    header_dim: str
    notice: str
    menu_border: str
    menu_selected: str


DEFAULT_THEME = UITheme(
    name="default",
    divider="\033[2m",
    reverse="\033[7m",
    reset="\033[0m",
    tree_marker="\033[38;5;44m",
    tree_dir="\033[1;34m",
    tree_root="\033[1;38;5;81m",
    tree_drop_target="\033[4;38;5;214m",
    card_title="\033[1;38;5;252m",
    card_snippet="\033[38;5;250m",
    card_meta="\033[2;38;5;109m",
    card_active_accent="\033[1;38;5;81m",
    card_active_neutral="\033[1;38;5;248m",
    card_focus_marker="\033[38;5;229m",
    header="\033[1;38;5;81m",
    header_dim="\033[2;38;5;250m",
    notice="\033[38;5;214m",
    menu_border="\033[38;5;45m",
    menu_selected="\033[7;38;5;81m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    divider="\033[2;38;5;31m",
    reverse="\033[7m",
    reset="\033[0m",
    tree_marker="\033[38;5;39m",
    tree_dir="\033[1;38;5;45m",
    tree_root="\033[1;38;5;39m",
    tree_drop_target="\033[4;38;5;215m",
    card_title="\033[1;38;5;153m",
    card_snippet="\033[38;5;252m",
    card_meta="\033[2;38;5;73m",
    card_active_accent="\033[1;38;5;45m",
    card_active_neutral="\033[1;38;5;248m",
    card_focus_marker="\033[38;5;153m",
    header="\033[1;38;5;45m",
    header_dim="\033[2;38;5;110m",
    notice="\033[38;5;215m",
    menu_border="\033[38;5;39m",
    menu_selected="\033[7;38;5;45m",
)

PLAIN_THEME = UITheme(
    name="plain",
    divider="",
    reverse="",
    reset="",
    tree_marker="",
    tree_dir="",
    tree_root="",
    tree_drop_target="",
    card_title="",
    card_snippet="",
    card_meta="",
    card_active_accent="",
    card_active_neutral="",
    card_focus_marker="",
    header="",
    header_dim="",
    notice="",
    menu_border="",
    menu_selected="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    candidate = str(name or "").strip().lower()
    return _THEMES.get(candidate, DEFAULT_THEME)


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "resolve_theme",
]
