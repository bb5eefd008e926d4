"""Task board for one group: tasks bucketed into status columns.

The board re-fetches the whole group on ``refresh()``.  Register
``board.refresh_after_update`` as a refresh listener on a
``ConflictResolutionController`` and the board follows every applied edit.
"""

from __future__ import annotations

import datetime
import logging
from typing import Any

from taskcollab.client.models import TaskRecord
from taskcollab.client.tasks import TasksClient
from taskcollab.workflow import TaskStatus

logger = logging.getLogger(__name__)

# Tasks without a deadline sort after every dated task
_NO_DEADLINE = datetime.datetime.max


def _deadline_key(task: TaskRecord) -> tuple[datetime.datetime, Any]:
    deadline = task.deadline
    if deadline is None:
        return _NO_DEADLINE, task.id
    return deadline.replace(tzinfo=None), task.id


class TaskBoard:
    """Status columns of a group's tasks, ordered by deadline."""

    def __init__(self, tasks: TasksClient, group_id: Any) -> None:
        self._tasks = tasks
        self.group_id = group_id
        self._columns: dict[TaskStatus, list[TaskRecord]] = {status: [] for status in TaskStatus}
        self.loaded = False

    @property
    def columns(self) -> dict[TaskStatus, list[TaskRecord]]:
        return {status: list(tasks) for status, tasks in self._columns.items()}

    def column(self, status: TaskStatus | str) -> list[TaskRecord]:
        return list(self._columns[TaskStatus(status)])

    def find(self, task_id: Any) -> TaskRecord | None:
        for tasks in self._columns.values():
            for task in tasks:
                if task.id == task_id:
                    return task
        return None

    def __len__(self) -> int:
        return sum(len(tasks) for tasks in self._columns.values())

    def load(self, tasks: list[TaskRecord]) -> None:
        columns: dict[TaskStatus, list[TaskRecord]] = {status: [] for status in TaskStatus}
        for task in tasks:
            columns[task.status].append(task)
        for bucket in columns.values():
            bucket.sort(key=_deadline_key)
        self._columns = columns
        self.loaded = True

    async def refresh(self) -> None:
        """Re-fetch every task in the group."""
        tasks = await self._tasks.list_by_group(self.group_id)
        self.load(tasks)
        logger.debug("Board for group %s refreshed: %d task(s)", self.group_id, len(tasks))

    async def refresh_after_update(self, record: TaskRecord) -> None:
        """Refresh listener for controllers editing tasks of this group."""
        if record.group_id is not None and record.group_id != self.group_id:
            return
        await self.refresh()
