from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from taskcollab.client import Client, CommentsClient, TasksClient, VersionedRecordClient
from taskcollab.session import UserSession
from tests.fakes import BASE_URL, FakeTaskStore


@pytest.fixture
def store() -> FakeTaskStore:
    return FakeTaskStore()


@pytest_asyncio.fixture
async def client(store: FakeTaskStore) -> AsyncIterator[Client]:
    client = Client(
        base_url=BASE_URL,
        session=UserSession(user_id=7, username="me"),
        httpx_args={"transport": store.transport},
    )
    async with client:
        yield client


@pytest.fixture
def records(client: Client) -> VersionedRecordClient:
    return VersionedRecordClient(client)


@pytest.fixture
def tasks(client: Client) -> TasksClient:
    return TasksClient(client)


@pytest.fixture
def comments(client: Client) -> CommentsClient:
    return CommentsClient(client)
