"""Free-name probing for new and duplicated entries."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from .store.types import join_path

NEW_FILE_STEM = "Untitled"
NEW_FILE_EXTENSION = "md"
NEW_FOLDER_STEM = "New folder"


def candidate_name(stem: str, extension: str, counter: int) -> str:
    """Name tried on probe step ``counter`` (0 is the bare name)."""
    base = stem if counter == 0 else f"{stem} {counter}"
    return f"{base}.{extension}" if extension else base


async def next_available_path(
    exists: Callable[[str], Awaitable[bool]],
    folder_path: str,
    stem: str,
    extension: str = "",
) -> str:
    """Return the first unused path under ``folder_path``.

    Tries the bare name, then ``"<stem> 1"``, ``"<stem> 2"``... Each existence
    check is awaited before the next one is issued.
    """
    counter = 0
    while True:
        path = join_path(folder_path, candidate_name(stem, extension, counter))
        if not await exists(path):
            return path
        counter += 1


__all__ = [
    "NEW_FILE_STEM",
    "NEW_FILE_EXTENSION",
    "NEW_FOLDER_STEM",
    "candidate_name",
    "next_available_path",
]
