"""Tests for the group discussion calls."""

from __future__ import annotations

import pytest

from taskcollab.client import CommentsClient, NotFound, ValidationFailure
from tests.fakes import FakeTaskStore


class TestCommentsClient:
    @pytest.mark.asyncio
    async def test_list(self, store: FakeTaskStore, comments: CommentsClient) -> None:
        store.add_comment(3, "hello")

        result = await comments.list(3)

        assert [(c.content, c.author_username) for c in result] == [("hello", "bob")]
        assert store.requests[-1].url.path == "/api/groups/3/comments"

    @pytest.mark.asyncio
    async def test_recent(self, store: FakeTaskStore, comments: CommentsClient) -> None:
        for n in range(12):
            store.add_comment(3, f"message {n}")

        result = await comments.recent(3)

        assert len(result) == 10
        assert result[-1].content == "message 11"

    @pytest.mark.asyncio
    async def test_create_update_delete(self, store: FakeTaskStore, comments: CommentsClient) -> None:
        await comments.create(3, "first draft")
        comment_id = store.comments[3][0]["id"]

        await comments.update(3, comment_id, "final")
        assert store.comments[3][0]["content"] == "final"
        assert (await comments.list(3))[0].edited is True

        await comments.delete(3, comment_id)
        assert await comments.count(3) == 0

    @pytest.mark.asyncio
    async def test_blank_comment_is_rejected(self, comments: CommentsClient) -> None:
        with pytest.raises(ValidationFailure, match="required"):
            await comments.create(3, "   ")

    @pytest.mark.asyncio
    async def test_missing_comment(self, comments: CommentsClient) -> None:
        with pytest.raises(NotFound):
            await comments.delete(3, 99)
