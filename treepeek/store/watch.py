"""Poll-based change detection for a directory-backed store.

Scans capture path metadata for the whole visible tree plus a cheap digest.
The watcher compares consecutive scans and emits one ``ChangeEvent`` per
observed difference batch.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .types import ChangeEvent, ChangeKind

logger = logging.getLogger(__name__)

DEFAULT_POLL_SECONDS = 1.0


@dataclass(frozen=True)
class TreeScan:
    """Metadata for every visible entry under a store root."""

    entries: dict[str, tuple[bool, int, int]]
    signature: str


def _update_digest(digest, token: str) -> None:
    """Append a token plus separator byte to a hash digest."""
    digest.update(token.encode("utf-8", errors="surrogateescape"))
    digest.update(b"\0")


def scan_tree(root: Path) -> TreeScan:
    """Walk ``root`` and collect ``path -> (is_dir, mtime_ns, size)``.

    Dot-prefixed entries are skipped, matching what the store lists.
    Unreadable directories contribute nothing.
    """
    entries: dict[str, tuple[bool, int, int]] = {}
    pending: list[tuple[Path, str]] = [(root, "")]
    while pending:
        directory, prefix = pending.pop()
        try:
            with os.scandir(directory) as iterator:
                children = list(iterator)
        except OSError:
            continue
        for child in children:
            if child.name.startswith("."):
                continue
            rel = f"{prefix}/{child.name}" if prefix else child.name
            try:
                is_dir = child.is_dir(follow_symlinks=False)
                st = child.stat(follow_symlinks=False)
            except OSError:
                continue
            entries[rel] = (is_dir, int(st.st_mtime_ns), 0 if is_dir else int(st.st_size))
            if is_dir:
                pending.append((Path(child.path), rel))

    digest = hashlib.blake2b(digest_size=20)
    _update_digest(digest, f"root:{root}")
    for rel in sorted(entries):
        is_dir, mtime_ns, size = entries[rel]
        _update_digest(digest, f"{rel}:{1 if is_dir else 0}:{mtime_ns}:{size}")
    return TreeScan(entries=entries, signature=digest.hexdigest())


def classify_change(previous: TreeScan, current: TreeScan) -> ChangeEvent | None:
    """Summarize the difference between two scans as a single event.

    Only-added paths read as ``created``, only-removed as ``deleted``, both as
    ``renamed``. Pure metadata changes read as ``modified``. Every added,
    removed or changed path is listed in ``paths``.
    """
    if previous.signature == current.signature:
        return None
    added = current.entries.keys() - previous.entries.keys()
    removed = previous.entries.keys() - current.entries.keys()
    changed = {
        rel
        for rel, meta in current.entries.items()
        if rel in previous.entries and previous.entries[rel] != meta
    }
    paths = tuple(sorted(added | removed | changed))
    if added and removed:
        return ChangeEvent(ChangeKind.RENAMED, path=min(added), old_path=min(removed), paths=paths)
    if added:
        return ChangeEvent(ChangeKind.CREATED, path=min(added), paths=paths)
    if removed:
        return ChangeEvent(ChangeKind.DELETED, path=min(removed), paths=paths)
    return ChangeEvent(ChangeKind.MODIFIED, path=paths[0] if paths else "", paths=paths)


class TreeWatcher:
    """Asyncio poll loop that reports external tree changes."""

    def __init__(
        self,
        scan: Callable[[], TreeScan],
        emit: Callable[[ChangeEvent], None],
        interval: float = DEFAULT_POLL_SECONDS,
    ) -> None:
        self._scan = scan
        self._emit = emit
        self._interval = interval
        self._baseline: TreeScan | None = None
        self._rebaselines = 0
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def rebaseline(self, scan: TreeScan) -> None:
        """Adopt ``scan`` as the last observed state without emitting."""
        self._baseline = scan
        self._rebaselines += 1

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="treepeek-watch")

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def poll_once(self) -> ChangeEvent | None:
        """Scan once, emit and return the change relative to the baseline.

        A scan that overlapped a ``rebaseline`` is discarded; the newer
        baseline already covers the store's own mutation.
        """
        rebaselines = self._rebaselines
        current = await asyncio.to_thread(self._scan)
        if rebaselines != self._rebaselines:
            logger.debug("discarding poll scan that overlapped a rebaseline")
            return None
        previous = self._baseline
        self._baseline = current
        if previous is None:
            return None
        event = classify_change(previous, current)
        if event is not None:
            logger.debug("external change detected: %s %s", event.kind.value, event.path)
            self._emit(event)
        return event

    async def _run(self) -> None:
        while True:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("tree watch poll failed")
            await asyncio.sleep(self._interval)


__all__ = [
    "DEFAULT_POLL_SECONDS",
    "TreeScan",
    "scan_tree",
    "classify_change",
    "TreeWatcher",
]
