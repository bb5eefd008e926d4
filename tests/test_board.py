"""Tests for the group task board and the board-level task calls."""

from __future__ import annotations

import datetime

import pytest

from taskcollab.board import TaskBoard
from taskcollab.client import NotFound, TasksClient
from taskcollab.client.models import CreateTaskRequest, TaskRecord
from taskcollab.workflow import TaskStatus
from tests.fakes import FakeTaskStore, make_task


def _record(task_id: int, status: str = "TODO", deadline: str | None = "2030-01-15T17:00:00", **kw: object) -> TaskRecord:
    return TaskRecord.from_dict(make_task(task_id, status=status, deadline=deadline, **kw))


class TestTaskBoard:
    @pytest.mark.asyncio
    async def test_load_buckets_by_status(self, tasks: TasksClient) -> None:
        board = TaskBoard(tasks, group_id=1)
        board.load([_record(1), _record(2, "DONE"), _record(3, "IN_PROGRESS"), _record(4)])

        assert [t.id for t in board.column("TODO")] == [1, 4]
        assert [t.id for t in board.column(TaskStatus.IN_PROGRESS)] == [3]
        assert [t.id for t in board.column(TaskStatus.DONE)] == [2]
        assert len(board) == 4
        assert board.loaded

    @pytest.mark.asyncio
    async def test_columns_sorted_by_deadline_undated_last(self, tasks: TasksClient) -> None:
        board = TaskBoard(tasks, group_id=1)
        board.load([
            _record(1, deadline=None),
            _record(2, deadline="2030-03-01T00:00:00"),
            _record(3, deadline="2030-01-01T00:00:00"),
        ])
        assert [t.id for t in board.column("TODO")] == [3, 2, 1]

    @pytest.mark.asyncio
    async def test_find(self, tasks: TasksClient) -> None:
        board = TaskBoard(tasks, group_id=1)
        board.load([_record(1), _record(2, "DONE")])
        assert board.find(2).status is TaskStatus.DONE
        assert board.find(9) is None

    @pytest.mark.asyncio
    async def test_columns_are_copies(self, tasks: TasksClient) -> None:
        board = TaskBoard(tasks, group_id=1)
        board.load([_record(1)])
        board.columns[TaskStatus.TODO].clear()
        assert len(board) == 1

    @pytest.mark.asyncio
    async def test_refresh_fetches_group(self, store: FakeTaskStore, tasks: TasksClient) -> None:
        store.add_task(1, groupId=1)
        store.add_task(2, groupId=1, status="DONE")
        store.add_task(3, groupId=2)
        board = TaskBoard(tasks, group_id=1)

        await board.refresh()

        assert len(board) == 2
        assert board.find(3) is None

    @pytest.mark.asyncio
    async def test_update_from_other_group_is_ignored(self, store: FakeTaskStore, tasks: TasksClient) -> None:
        store.add_task(1, groupId=1)
        board = TaskBoard(tasks, group_id=1)
        await board.refresh()
        requests_before = len(store.requests)

        await board.refresh_after_update(_record(3, groupId=2))

        assert len(store.requests) == requests_before


class TestTasksClient:
    @pytest.mark.asyncio
    async def test_list_by_group_and_status(self, store: FakeTaskStore, tasks: TasksClient) -> None:
        store.add_task(1, status="DONE")
        store.add_task(2, status="TODO")

        done = await tasks.list_by_group_and_status(1, "DONE")

        assert [t.id for t in done] == [1]
        assert store.requests[-1].url.path == "/api/tasks/group/1/status/DONE"

    @pytest.mark.asyncio
    async def test_create_returns_new_task_id(self, store: FakeTaskStore, tasks: TasksClient) -> None:
        task_id = await tasks.create(CreateTaskRequest(
            title="Plan sprint",
            deadline=datetime.datetime(2030, 5, 1, 9, 0),
            group_id=1,
            user_id=7,
        ))

        assert store.tasks[task_id]["title"] == "Plan sprint"
        assert store.tasks[task_id]["assignedUserId"] == 7
        assert store.tasks[task_id]["createdBy"] == 7
        assert store.tasks[task_id]["version"] == 0

    @pytest.mark.asyncio
    async def test_delete_missing_task(self, tasks: TasksClient) -> None:
        with pytest.raises(NotFound):
            await tasks.delete(42)

    @pytest.mark.asyncio
    async def test_delete(self, store: FakeTaskStore, tasks: TasksClient) -> None:
        store.add_task(1)
        await tasks.delete(1)
        assert 1 not in store.tasks
