"""Tests for the comment poller: in-flight guard, error handling and lifetime."""

from __future__ import annotations

import asyncio

import pytest

from taskcollab.client import CommentsClient, NetworkFailure
from taskcollab.client.errors import CollabError
from taskcollab.client.models import Comment
from taskcollab.polling import CommentPoller
from tests.fakes import FakeTaskStore


class GatedComments:
    """Comments source whose fetches block until released."""

    def __init__(self) -> None:
        self.calls = 0
        self.gate = asyncio.Event()

    async def list(self, group_id: int) -> list[Comment]:
        self.calls += 1
        await self.gate.wait()
        return [Comment(id=self.calls, content="hello", group_id=group_id)]


class FailingComments:
    async def list(self, group_id: int) -> list[Comment]:
        raise NetworkFailure("Network error. Please try again.")


class TestPollOnce:
    @pytest.mark.asyncio
    async def test_delivers_comments(self, store: FakeTaskStore, comments: CommentsClient) -> None:
        store.add_comment(3, "first")
        store.add_comment(3, "second")
        received: list[list[Comment]] = []

        poller = CommentPoller(comments, 3, received.append)
        result = await poller.poll_once()

        assert [c.content for c in result] == ["first", "second"]
        assert received == [result]

    @pytest.mark.asyncio
    async def test_overlapping_poll_is_skipped(self) -> None:
        source = GatedComments()
        received: list[list[Comment]] = []
        poller = CommentPoller(source, 3, received.append)  # type: ignore[arg-type]

        first = asyncio.create_task(poller.poll_once())
        await asyncio.sleep(0)
        assert poller.in_flight

        skipped = await poller.refresh_now()
        source.gate.set()
        delivered = await first

        assert skipped is None
        assert source.calls == 1
        assert received == [delivered]
        assert not poller.in_flight

    @pytest.mark.asyncio
    async def test_error_goes_to_handler(self) -> None:
        errors: list[CollabError] = []
        received: list[list[Comment]] = []
        poller = CommentPoller(FailingComments(), 3, received.append, on_error=errors.append)  # type: ignore[arg-type]

        assert await poller.poll_once() is None
        assert [e.message for e in errors] == ["Network error. Please try again."]
        assert received == []
        assert not poller.in_flight

    @pytest.mark.asyncio
    async def test_error_without_handler_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        poller = CommentPoller(FailingComments(), 3, lambda batch: None)  # type: ignore[arg-type]

        with caplog.at_level("WARNING", logger="taskcollab.polling"):
            assert await poller.poll_once() is None

        assert "Network error" in caplog.text

    @pytest.mark.asyncio
    async def test_interval_must_be_positive(self, comments: CommentsClient) -> None:
        with pytest.raises(ValueError):
            CommentPoller(comments, 3, lambda batch: None, interval=0)


class TestLifetime:
    @pytest.mark.asyncio
    async def test_polls_repeatedly_until_stopped(self, store: FakeTaskStore, comments: CommentsClient) -> None:
        store.add_comment(3, "hello")
        batches: list[list[Comment]] = []
        two_polls = asyncio.Event()

        def on_update(batch: list[Comment]) -> None:
            batches.append(batch)
            if len(batches) >= 2:
                two_polls.set()

        async with CommentPoller(comments, 3, on_update, interval=0.01) as poller:
            assert poller.running
            await asyncio.wait_for(two_polls.wait(), timeout=2)

        assert not poller.running
        polled = len(batches)
        await asyncio.sleep(0.05)
        assert len(batches) == polled

    @pytest.mark.asyncio
    async def test_stop_cancels_in_flight_fetch(self) -> None:
        source = GatedComments()
        received: list[list[Comment]] = []
        poller = CommentPoller(source, 3, received.append, interval=0.01)  # type: ignore[arg-type]

        poller.start()
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert poller.in_flight

        await poller.stop()

        assert not poller.running
        assert not poller.in_flight
        assert received == []

    @pytest.mark.asyncio
    async def test_start_is_idempotent_and_stop_is_safe_twice(self, comments: CommentsClient) -> None:
        poller = CommentPoller(comments, 3, lambda batch: None, interval=10)
        poller.start()
        task = poller._task
        poller.start()
        assert poller._task is task

        await poller.stop()
        await poller.stop()
        assert not poller.running

    @pytest.mark.asyncio
    async def test_failing_callback_does_not_stop_polling(
        self, store: FakeTaskStore, comments: CommentsClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        store.add_comment(3, "hello")
        calls = 0
        recovered = asyncio.Event()

        def on_update(batch: list[Comment]) -> None:
            nonlocal calls
            calls += 1
            if calls == 1:
                raise RuntimeError("view went away")
            recovered.set()

        async with CommentPoller(comments, 3, on_update, interval=0.01) as poller:
            await asyncio.wait_for(recovered.wait(), timeout=2)
            assert poller.running

        assert not poller.running
        assert "Comment poll for group 3 failed" in caplog.text
