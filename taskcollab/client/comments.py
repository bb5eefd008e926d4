"""Group discussion calls against ``/groups/{group_id}/comments``."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from attrs import field, frozen

from .errors import NotFound, ValidationFailure
from .http import Client, error_message, is_success
from .models import Comment


def _comments_url(group_id: Any, suffix: str = "") -> str:
    return f"/groups/{quote(str(group_id), safe='')}/comments{suffix}"


def _check(status_code: int, body: Any, default: str) -> Mapping[str, Any]:
    if is_success(status_code) and isinstance(body, Mapping) and body.get("success", False):
        return body
    message = error_message(body, default)
    if status_code == 404 or "not found" in message.lower():
        raise NotFound(message)
    raise ValidationFailure(message)


@frozen
class CommentsClient:
    client: Client = field()

    async def list(self, group_id: Any) -> list[Comment]:
        """Return the full discussion for a group, oldest first."""
        status_code, body = await self.client.request_json("get", _comments_url(group_id))
        body = _check(status_code, body, "Failed to fetch comments")
        return [Comment.from_dict(raw) for raw in body.get("comments") or []]

    async def recent(self, group_id: Any) -> list[Comment]:
        status_code, body = await self.client.request_json("get", _comments_url(group_id, "/recent"))
        body = _check(status_code, body, "Failed to fetch recent comments")
        return [Comment.from_dict(raw) for raw in body.get("comments") or []]

    async def create(self, group_id: Any, content: str) -> Mapping[str, Any]:
        status_code, body = await self.client.request_json(
            "post", _comments_url(group_id), json_body={"content": content}
        )
        return _check(status_code, body, "Failed to post comment")

    async def update(self, group_id: Any, comment_id: Any, content: str) -> Mapping[str, Any]:
        status_code, body = await self.client.request_json(
            "put",
            _comments_url(group_id, f"/{quote(str(comment_id), safe='')}"),
            json_body={"content": content},
        )
        return _check(status_code, body, "Failed to update comment")

    async def delete(self, group_id: Any, comment_id: Any) -> None:
        status_code, body = await self.client.request_json(
            "delete", _comments_url(group_id, f"/{quote(str(comment_id), safe='')}")
        )
        _check(status_code, body, "Failed to delete comment")

    async def count(self, group_id: Any) -> int:
        status_code, body = await self.client.request_json("get", _comments_url(group_id, "/count"))
        if not is_success(status_code) or not isinstance(body, Mapping):
            raise ValidationFailure(error_message(body, "Failed to fetch comment count"))
        return int(body.get("count", 0))
