"""Task commands: show, edit (with conflict resolution) and board.

The edit command is the terminal front-end of the conflict flow:

- The edit is sent with the version the task had when it was loaded
- On a version conflict both sides are shown in one table and the user
  chooses Refresh & Retry, Manual Merge, Force Overwrite or Cancel — the
  choice is never made for them
- A network failure keeps the edit; the user may resend it unchanged

Usage:
    taskcollab edit 42 --status IN_PROGRESS --user-id 7
    taskcollab board 3
"""

from __future__ import annotations

import asyncio
import datetime
from typing import Any, Optional

import questionary
import typer
from rich.console import Console

from taskcollab.board import TaskBoard
from taskcollab.cli.render import (
    board_columns,
    conflict_table,
    notice_line,
    pending_intent_panel,
    task_panel,
)
from taskcollab.client import Client, CollabError, TasksClient, VersionedRecordClient
from taskcollab.config import settings
from taskcollab.conflict import (
    Conflicted,
    ConflictResolutionController,
    Editing,
    ResolutionStrategy,
)
from taskcollab.session import UserSession
from taskcollab.workflow import InvalidStatusError, parse_status

# Module-level console used by the task commands
console = Console()

RESOLUTION_CHOICES: dict[str, ResolutionStrategy | None] = {
    "Refresh & retry (discard my changes)": ResolutionStrategy.REFRESH_RETRY,
    "Manual merge (load latest, keep my changes for reference)": ResolutionStrategy.MANUAL_MERGE,
    "Force overwrite (apply my changes on top of latest)": ResolutionStrategy.FORCE_OVERWRITE,
    "Cancel": None,
}

USER_ID_OPTION = typer.Option(
    ...,
    "--user-id",
    envvar="TASKCOLLAB_USER_ID",
    help="Id of the acting user (sent as the User-Id header).",
)


def build_client(user_id: str) -> Client:
    return Client(
        base_url=settings.api_base_url,
        session=UserSession(user_id=user_id),
        timeout=settings.request_timeout_seconds,
    )


def _status_option(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        return parse_status(value.upper()).value
    except InvalidStatusError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _parse_deadline(value: Optional[str]) -> Optional[datetime.datetime]:
    if value is None:
        return None
    try:
        return datetime.datetime.fromisoformat(value)
    except ValueError as exc:
        raise typer.BadParameter(f"Not an ISO date-time: {value}") from exc


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


def show(
    task_id: int = typer.Argument(..., help="Task to display."),
    user_id: str = USER_ID_OPTION,
) -> None:
    """Show a task with its current version."""

    async def _show() -> None:
        async with build_client(user_id) as client:
            record = await VersionedRecordClient(client).fetch(task_id)
        console.print(task_panel(record))

    try:
        asyncio.run(_show())
    except CollabError as exc:
        console.print(f"[red]{exc.message}[/red]")
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# edit
# ---------------------------------------------------------------------------


async def _resolve_interactively(controller: ConflictResolutionController) -> None:
    """Drive the controller until it is back in Viewing."""
    while True:
        snapshot = controller.snapshot
        if snapshot.notice is not None:
            console.print(notice_line(snapshot.notice))

        if isinstance(snapshot.state, Editing):
            retry = await questionary.confirm(
                "Send the same changes again?", default=True
            ).ask_async()
            if not retry:
                controller.cancel_edit()
                console.print("[yellow]Edit discarded.[/yellow]")
                return
            await controller.submit_edit()
            continue

        if isinstance(snapshot.state, Conflicted):
            console.print(conflict_table(snapshot.state.conflict))
            choice = await questionary.select(
                "How do you want to resolve this?",
                choices=list(RESOLUTION_CHOICES),
            ).ask_async()

            # None covers Ctrl+C as well as an explicit cancel
            strategy = RESOLUTION_CHOICES.get(choice) if choice is not None else None
            if strategy is None:
                controller.cancel_edit()
                console.print("[yellow]Conflict left unresolved; nothing was changed.[/yellow]")
                return
            await controller.resolve_conflict(strategy)
            continue

        return


def edit(
    task_id: int = typer.Argument(..., help="Task to edit."),
    status: Optional[str] = typer.Option(
        None, "--status", callback=_status_option, help="TODO, IN_PROGRESS or DONE."
    ),
    title: Optional[str] = typer.Option(None, "--title"),
    description: Optional[str] = typer.Option(None, "--description"),
    deadline: Optional[str] = typer.Option(
        None, "--deadline", help="ISO date-time, e.g. 2026-11-01T17:00."
    ),
    assign: Optional[int] = typer.Option(None, "--assign", help="User id of the new assignee."),
    user_id: str = USER_ID_OPTION,
) -> None:
    """Edit a task; resolves version conflicts interactively."""
    changes: dict[str, Any] = {}
    if status is not None:
        changes["status"] = status
    if title is not None:
        changes["title"] = title
    if description is not None:
        changes["description"] = description
    if deadline is not None:
        changes["deadline"] = _parse_deadline(deadline)
    if assign is not None:
        changes["assignedUserId"] = assign

    if not changes:
        console.print("[yellow]Nothing to change: pass at least one field option.[/yellow]")
        raise typer.Exit(code=2)

    async def _edit() -> None:
        async with build_client(user_id) as client:
            controller = ConflictResolutionController(VersionedRecordClient(client), task_id)
            await controller.load()
            controller.begin_edit(changes)
            await controller.submit_edit()
            await _resolve_interactively(controller)

            snapshot = controller.snapshot
            if snapshot.record is not None:
                console.print(task_panel(snapshot.record))
            if snapshot.pending_intent:
                console.print(pending_intent_panel(snapshot.pending_intent))

    try:
        asyncio.run(_edit())
    except CollabError as exc:
        console.print(f"[red]{exc.message}[/red]")
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# board
# ---------------------------------------------------------------------------


def board(
    group_id: int = typer.Argument(..., help="Group whose tasks to show."),
    user_id: str = USER_ID_OPTION,
) -> None:
    """Show a group's tasks in status columns."""

    async def _board() -> TaskBoard:
        async with build_client(user_id) as client:
            task_board = TaskBoard(TasksClient(client), group_id)
            await task_board.refresh()
        return task_board

    try:
        task_board = asyncio.run(_board())
    except CollabError as exc:
        console.print(f"[red]{exc.message}[/red]")
        raise typer.Exit(code=1)

    if not len(task_board):
        console.print("[dim]No tasks in this group yet.[/dim]")
        return
    console.print(board_columns(task_board))
