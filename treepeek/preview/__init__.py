"""Preview-card helpers: snippet extraction and file-kind classification."""

from __future__ import annotations

from .kinds import IMAGE_KIND, TEXT_KIND, PreviewKind, classify
from .text import extract_preview, strip_front_matter, strip_link_brackets

__all__ = [
    "IMAGE_KIND",
    "TEXT_KIND",
    "PreviewKind",
    "classify",
    "extract_preview",
    "strip_front_matter",
    "strip_link_brackets",
]
