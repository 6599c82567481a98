"""Serialization of the tree and preview render passes.

Renders are requested from user input, store change events, a one-shot
post-open timer and settings edits. The tree pass is guarded by a single
latch: overlapping requests are dropped, not queued. The preview pass has no
guard because it rebuilds its card list from scratch.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

INITIAL_RERENDER_SECONDS = 1.0
QUIET_RERENDER_SECONDS = 0.3


class RenderScheduler:
    """Own the render token and the timers that re-trigger render passes."""

    def __init__(
        self,
        render_tree: Callable[[], Awaitable[None]],
        render_preview: Callable[[], Awaitable[None]],
    ) -> None:
        self._render_tree = render_tree
        self._render_preview = render_preview
        self._tree_rendering = False
        self._tasks: set[asyncio.Task] = set()
        self._delayed: asyncio.TimerHandle | None = None
        self._quiet: asyncio.TimerHandle | None = None
        self.tree_renders = 0
        self.dropped_tree_requests = 0

    @property
    def tree_render_in_progress(self) -> bool:
        return self._tree_rendering

    async def request_tree_render(self) -> bool:
        """Run one tree pass unless one is already in flight.

        Returns ``False`` when the request was dropped.
        """
        if self._tree_rendering:
            self.dropped_tree_requests += 1
            return False
        self._tree_rendering = True
        try:
            self.tree_renders += 1
            await self._render_tree()
        finally:
            self._tree_rendering = False
        return True

    async def request_preview_render(self) -> None:
        await self._render_preview()

    def _spawn(self, coro: Awaitable[object], label: str) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)

        def done(finished: asyncio.Task) -> None:
            self._tasks.discard(finished)
            if finished.cancelled():
                return
            exc = finished.exception()
            if exc is not None:
                logger.error("%s render failed", label, exc_info=exc)

        task.add_done_callback(done)
        return task

    def schedule_tree_render(self) -> asyncio.Task:
        """Fire-and-forget tree request; failures are logged."""
        return self._spawn(self.request_tree_render(), "tree")

    def schedule_preview_render(self) -> asyncio.Task:
        """Fire-and-forget preview request; failures are logged."""
        return self._spawn(self.request_preview_render(), "preview")

    def schedule_delayed_tree_render(self, delay: float = INITIAL_RERENDER_SECONDS) -> None:
        """Arm the one-shot re-render issued shortly after the view opens."""
        if self._delayed is not None:
            return
        loop = asyncio.get_running_loop()
        self._delayed = loop.call_later(delay, self.schedule_tree_render)

    def request_tree_render_after_quiet(self, delay: float = QUIET_RERENDER_SECONDS) -> None:
        """Issue one more tree request once ``delay`` passes with no new calls."""
        if self._quiet is not None:
            self._quiet.cancel()
        loop = asyncio.get_running_loop()
        self._quiet = loop.call_later(delay, self._quiet_elapsed)

    def _quiet_elapsed(self) -> None:
        self._quiet = None
        self.schedule_tree_render()

    async def drain(self) -> None:
        """Wait for every spawned render task to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Cancel timers and pending render tasks."""
        for handle in (self._delayed, self._quiet):
            if handle is not None:
                handle.cancel()
        self._quiet = None
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()


__all__ = [
    "INITIAL_RERENDER_SECONDS",
    "QUIET_RERENDER_SECONDS",
    "RenderScheduler",
]
