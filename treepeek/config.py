"""Persistent JSON config helpers.

Stores the collapse set, sort order, tree width, preview line count and the
display settings. Malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from .icons import FolderIconStyle
from .sorting import SortOrder
from .state import (
    DEFAULT_PREVIEW_LINES,
    DEFAULT_TREE_WIDTH,
    TREE_WIDTH_MIN,
    CollapseSelectionStore,
    ViewSettings,
    ViewState,
    clamp_preview_lines,
)

logger = logging.getLogger(__name__)

APP_NAME = "treepeek"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Write failures are logged, never raised; the view keeps running with its
    in-memory state.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.error("could not save config %s: %s", CONFIG_PATH, exc)


def _coerce_bool(value: object, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _coerce_int(value: object, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return int(value)


@dataclass
class ViewConfig:
    """Flat persisted record for one view."""

    collapsed_folders: list[str] = field(default_factory=list)
    sort_order: SortOrder = SortOrder.NAME_ASC
    tree_width: int = DEFAULT_TREE_WIDTH
    preview_lines: int = DEFAULT_PREVIEW_LINES
    settings: ViewSettings = field(default_factory=ViewSettings)

    @classmethod
    def from_mapping(cls, data: dict[str, object]) -> ViewConfig:
        """Build a sanitized config from raw JSON data."""
        raw_collapsed = data.get("collapsed_folders")
        collapsed = (
            [item for item in raw_collapsed if isinstance(item, str)]
            if isinstance(raw_collapsed, list)
            else []
        )
        if "folder_icon_style" in data:
            icon_style = FolderIconStyle.parse(data.get("folder_icon_style"))
        elif isinstance(data.get("show_folder_icons"), bool):
            # legacy boolean toggle
            icon_style = FolderIconStyle.FOLDER if data["show_folder_icons"] else FolderIconStyle.NONE
        else:
            icon_style = FolderIconStyle.CUSTOM
        raw_icons = data.get("folder_icons")
        icons = (
            {k: v for k, v in raw_icons.items() if isinstance(k, str) and isinstance(v, str)}
            if isinstance(raw_icons, dict)
            else {}
        )
        return cls(
            collapsed_folders=collapsed,
            sort_order=SortOrder.parse(data.get("sort_order")),
            tree_width=max(TREE_WIDTH_MIN, _coerce_int(data.get("tree_width"), DEFAULT_TREE_WIDTH)),
            preview_lines=clamp_preview_lines(_coerce_int(data.get("preview_lines"), DEFAULT_PREVIEW_LINES)),
            settings=ViewSettings(
                remove_link_brackets=_coerce_bool(data.get("remove_link_brackets"), True),
                compact_mode=_coerce_bool(data.get("compact_mode"), False),
                use_accent_color=_coerce_bool(data.get("use_accent_color"), True),
                folder_icon_style=icon_style,
                folder_icons=icons,
            ),
        )

    @classmethod
    def from_state(cls, store: CollapseSelectionStore, settings: ViewSettings) -> ViewConfig:
        view = store.view
        return cls(
            collapsed_folders=store.collapsed_paths(),
            sort_order=view.sort_order,
            tree_width=view.tree_width,
            preview_lines=view.preview_lines,
            settings=settings,
        )

    def to_mapping(self) -> dict[str, object]:
        return {
            "collapsed_folders": list(self.collapsed_folders),
            "sort_order": self.sort_order.value,
            "tree_width": int(self.tree_width),
            "preview_lines": int(self.preview_lines),
            "remove_link_brackets": self.settings.remove_link_brackets,
            "compact_mode": self.settings.compact_mode,
            "use_accent_color": self.settings.use_accent_color,
            "folder_icon_style": self.settings.folder_icon_style.value,
            "folder_icons": dict(self.settings.folder_icons),
        }

    def build_state(self) -> CollapseSelectionStore:
        """Create the in-memory collapse/selection store for a newly opened view."""
        return CollapseSelectionStore(
            sorted(self.collapsed_folders),
            ViewState(
                sort_order=self.sort_order,
                preview_lines=self.preview_lines,
                tree_width=self.tree_width,
            ),
        )


def load_view_config() -> ViewConfig:
    """Load and sanitize the persisted view record."""
    data = load_config()
    config = ViewConfig.from_mapping(data)
    if "show_folder_icons" in data and "folder_icon_style" not in data:
        save_view_config(config)
    return config


def save_view_config(config: ViewConfig) -> None:
    """Persist ``config``, keeping unrelated keys already in the file."""
    data = load_config()
    data.pop("show_folder_icons", None)
    data.update(config.to_mapping())
    save_config(data)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "DEFAULT_CONFIG_PATH",
    "ViewConfig",
    "load_config",
    "save_config",
    "load_view_config",
    "save_view_config",
]
