"""Board-level task calls: listing a group's tasks, creating and deleting.

These calls are not version-checked; edits to an existing task go through
``VersionedRecordClient.write``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from attrs import field, frozen

from ..workflow import parse_status
from .errors import NotFound, ValidationFailure
from .http import Client, error_message, is_success
from .models import CreateTaskRequest, TaskRecord

logger = logging.getLogger(__name__)


def _quote(value: Any) -> str:
    return quote(str(value), safe="")


def _check(status_code: int, body: Any, default: str) -> Mapping[str, Any]:
    """Raise the matching taxonomy error unless the body reports success."""
    ok = is_success(status_code) and isinstance(body, Mapping) and body.get("success", False)
    if ok:
        return body
    message = error_message(body, default)
    if status_code == 404 or "not found" in message.lower():
        raise NotFound(message)
    raise ValidationFailure(message)


@frozen
class TasksClient:
    client: Client = field()

    async def list_by_group(self, group_id: Any) -> list[TaskRecord]:
        """Return every task in a group, ordered by deadline by the store."""
        status_code, body = await self.client.request_json(
            "get", f"/tasks/group/{_quote(group_id)}"
        )
        body = _check(status_code, body, "Failed to fetch tasks")
        return [TaskRecord.from_dict(raw) for raw in body.get("tasks") or []]

    async def list_by_group_and_status(self, group_id: Any, status: Any) -> list[TaskRecord]:
        status = parse_status(status)
        status_code, body = await self.client.request_json(
            "get", f"/tasks/group/{_quote(group_id)}/status/{status.value}"
        )
        body = _check(status_code, body, "Failed to fetch tasks")
        return [TaskRecord.from_dict(raw) for raw in body.get("tasks") or []]

    async def create(self, request: CreateTaskRequest) -> Any:
        """Create a task and return the id the store assigned to it.

        The store acknowledges creation with ``{message, userId: <task id>, success}``.
        """
        status_code, body = await self.client.request_json(
            "post", "/tasks", json_body=request.to_dict()
        )
        body = _check(status_code, body, "Failed to create task")
        task_id = body.get("userId")
        logger.info("Created task %s in group %s", task_id, request.group_id)
        return task_id

    async def delete(self, task_id: Any) -> None:
        status_code, body = await self.client.request_json("delete", f"/tasks/{_quote(task_id)}")
        _check(status_code, body, "Failed to delete task")
        logger.info("Deleted task %s", task_id)
