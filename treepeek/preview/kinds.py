"""File-extension table deciding how a preview card shows a file."""

from __future__ import annotations

from dataclasses import dataclass

from ..store.types import FileNode

IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "svg", "webp", "bmp"})
AUDIO_EXTENSIONS = frozenset({"mp3", "wav", "ogg", "m4a", "flac", "aac", "wma"})
VIDEO_EXTENSIONS = frozenset({"mp4", "webm", "mov", "mkv", "avi", "wmv", "flv"})


@dataclass(frozen=True)
class PreviewKind:
    """How one file is previewed: ``image``, ``placeholder`` or ``text``."""

    kind: str
    glyph: str = ""
    label: str = ""


IMAGE_KIND = PreviewKind("image", glyph="▣", label="Image")
TEXT_KIND = PreviewKind("text")
CANVAS_KIND = PreviewKind("placeholder", glyph="▦", label="Canvas")
EXCALIDRAW_KIND = PreviewKind("placeholder", glyph="✎", label="Excalidraw")
PDF_KIND = PreviewKind("placeholder", glyph="▤", label="PDF document")
AUDIO_KIND = PreviewKind("placeholder", glyph="♫", label="Audio file")
VIDEO_KIND = PreviewKind("placeholder", glyph="▶", label="Video file")


def classify(file: FileNode) -> PreviewKind:
    """Pick the preview kind for ``file``; images win, then special types."""
    ext = file.extension
    if ext in IMAGE_EXTENSIONS:
        return IMAGE_KIND
    if ext == "canvas":
        return CANVAS_KIND
    if ext == "excalidraw" or file.basename.endswith(".excalidraw"):
        return EXCALIDRAW_KIND
    if ext == "pdf":
        return PDF_KIND
    if ext in AUDIO_EXTENSIONS:
        return AUDIO_KIND
    if ext in VIDEO_EXTENSIONS:
        return VIDEO_KIND
    return TEXT_KIND


__all__ = [
    "IMAGE_EXTENSIONS",
    "AUDIO_EXTENSIONS",
    "VIDEO_EXTENSIONS",
    "PreviewKind",
    "IMAGE_KIND",
    "TEXT_KIND",
    "classify",
]
