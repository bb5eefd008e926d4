"""Periodic refresh of a group discussion.

``CommentPoller`` re-fetches the full comment list on a fixed interval and
hands it to a callback.  It is a cancellable asyncio task owned by whoever
displays the discussion: ``stop()`` (or leaving the ``async with`` block)
cancels it, so no timer outlives its view.

At most one fetch is in flight at a time.  A tick or a manual
``refresh_now()`` that arrives while a fetch is running is skipped rather
than queued, so slow responses never pile up concurrent requests.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from typing import Any

from taskcollab.client.comments import CommentsClient
from taskcollab.client.errors import CollabError
from taskcollab.client.models import Comment

logger = logging.getLogger(__name__)


class CommentPoller:
    """Polls ``CommentsClient.list`` for one group until stopped."""

    def __init__(
        self,
        comments: CommentsClient,
        group_id: Any,
        on_update: Callable[[list[Comment]], None],
        *,
        interval: float = 30.0,
        on_error: Callable[[CollabError], None] | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._comments = comments
        self.group_id = group_id
        self._on_update = on_update
        self._on_error = on_error
        self.interval = interval
        self._lock = asyncio.Lock()
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    async def poll_once(self) -> list[Comment] | None:
        """Fetch once and deliver the result.

        Returns:
            The fetched comments, or None when skipped (a fetch was already
            in flight) or when the fetch failed.
        """
        if self._lock.locked():
            logger.debug("Comment poll for group %s skipped: fetch in flight", self.group_id)
            return None

        async with self._lock:
            try:
                comments = await self._comments.list(self.group_id)
            except CollabError as exc:
                if self._on_error is not None:
                    self._on_error(exc)
                else:
                    logger.warning("Comment poll for group %s failed: %s", self.group_id, exc.message)
                return None

        self._on_update(comments)
        return comments

    async def refresh_now(self) -> list[Comment] | None:
        """Manual refresh; shares the in-flight guard with the timer."""
        return await self.poll_once()

    async def _run(self) -> None:
        while True:
            try:
                await self.poll_once()
            except Exception:
                # Keep polling after a failed tick
                logger.exception("Comment poll for group %s failed", self.group_id)
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        logger.debug("Polling comments for group %s every %.0fs", self.group_id, self.interval)
        self._task = asyncio.create_task(self._run(), name=f"comment-poller-{self.group_id}")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def __aenter__(self) -> "CommentPoller":
        self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.stop()
