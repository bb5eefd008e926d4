"""Smoke tests for the typer commands against the in-memory store."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from taskcollab.cli import app
from taskcollab.client import Client
from taskcollab.session import UserSession
from tests.fakes import BASE_URL, FakeTaskStore

runner = CliRunner()


@pytest.fixture
def cli_store(monkeypatch: pytest.MonkeyPatch) -> FakeTaskStore:
    store = FakeTaskStore()

    def build_client(user_id: str) -> Client:
        return Client(
            base_url=BASE_URL,
            session=UserSession(user_id=user_id),
            httpx_args={"transport": store.transport},
        )

    monkeypatch.setattr("taskcollab.cli.tasks.build_client", build_client)
    monkeypatch.setattr("taskcollab.cli.comments.build_client", build_client)
    return store


class TestCli:
    def test_show(self, cli_store: FakeTaskStore) -> None:
        cli_store.add_task(1, version=3, title="Quarterly report")

        result = runner.invoke(app, ["show", "1", "--user-id", "7"])

        assert result.exit_code == 0, result.output
        assert "Quarterly report" in result.output

    def test_show_missing_task(self, cli_store: FakeTaskStore) -> None:
        result = runner.invoke(app, ["show", "9", "--user-id", "7"])

        assert result.exit_code == 1
        assert "not found" in result.output.lower()

    def test_edit_status(self, cli_store: FakeTaskStore) -> None:
        cli_store.add_task(1, version=0)

        result = runner.invoke(app, ["edit", "1", "--status", "in_progress", "--user-id", "7"])

        assert result.exit_code == 0, result.output
        assert cli_store.tasks[1]["status"] == "IN_PROGRESS"
        assert cli_store.tasks[1]["version"] == 1

    def test_edit_rejects_unknown_status(self, cli_store: FakeTaskStore) -> None:
        cli_store.add_task(1)

        result = runner.invoke(app, ["edit", "1", "--status", "blocked", "--user-id", "7"])

        assert result.exit_code != 0
        assert cli_store.writes() == []

    def test_edit_without_changes(self, cli_store: FakeTaskStore) -> None:
        result = runner.invoke(app, ["edit", "1", "--user-id", "7"])
        assert result.exit_code == 2

    def test_board(self, cli_store: FakeTaskStore) -> None:
        cli_store.add_task(1, title="Collect data")
        cli_store.add_task(2, title="Ship it", status="DONE")

        result = runner.invoke(app, ["board", "1", "--user-id", "7"])

        assert result.exit_code == 0, result.output
        assert "Collect data" in result.output
        assert "Ship it" in result.output

    def test_comments(self, cli_store: FakeTaskStore) -> None:
        cli_store.add_comment(1, "Looks good")

        result = runner.invoke(app, ["comments", "1", "--user-id", "7"])

        assert result.exit_code == 0, result.output
        assert "Looks good" in result.output
