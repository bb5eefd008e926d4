"""Rich renderables for tasks, conflicts, boards and discussions."""

from __future__ import annotations

import datetime
from collections.abc import Mapping
from typing import Any

from rich.columns import Columns
from rich.panel import Panel
from rich.table import Table

from taskcollab.board import TaskBoard
from taskcollab.client.models import Comment, TaskRecord
from taskcollab.conflict import ConflictRecord, Notice
from taskcollab.formatting import format_datetime, format_value, relative_deadline, short_deadline
from taskcollab.workflow import STATUS_LABELS, TaskStatus

STATUS_STYLES: dict[TaskStatus, str] = {
    TaskStatus.TODO: "cyan",
    TaskStatus.IN_PROGRESS: "yellow",
    TaskStatus.DONE: "green",
}

_NOTICE_STYLES = {"error": "red", "warning": "yellow", "info": "green"}


def task_panel(record: TaskRecord, now: datetime.datetime | None = None) -> Panel:
    """Build the detail panel for one task."""
    style = STATUS_STYLES[record.status]
    lines = [f"[bold {style}]{STATUS_LABELS[record.status]}[/bold {style}] · v{record.version}"]

    if record.description:
        lines.append(f"\n{record.description}")

    if record.deadline is not None:
        text, overdue = relative_deadline(record.deadline, now)
        colour = "red" if overdue else "dim"
        lines.append(f"\nDeadline: {format_datetime(record.deadline)} [{colour}]({text})[/{colour}]")

    assignee = record.assigned_username or (
        f"user {record.assigned_user_id}" if record.assigned_user_id is not None else None
    )
    lines.append(f"Assigned to: {assignee}" if assignee else "[dim italic]Not assigned[/dim italic]")

    creator = record.created_by_username or record.created_by
    lines.append(f"[dim]Created by {creator} · {format_datetime(record.created_at)}[/dim]")
    if record.updated_at and record.updated_at != record.created_at:
        lines.append(f"[dim]Last updated {format_datetime(record.updated_at)}[/dim]")

    return Panel("\n".join(lines), title=record.title, border_style="blue")


def conflict_table(conflict: ConflictRecord) -> Table:
    """Side-by-side view of the user's pending changes and the store's record."""
    table = Table(
        title="Task was changed by someone else",
        caption=conflict.message or None,
        show_lines=True,
    )
    table.add_column("Field", style="bold")
    table.add_column(f"Your change (from v{conflict.version_at_edit_start})", style="magenta")
    table.add_column(f"Current (v{conflict.current_version})", style="cyan")
    for name, mine, theirs in conflict.diff():
        table.add_row(name, format_value(mine), format_value(theirs))
    return table


def pending_intent_panel(pending: Mapping[str, Any]) -> Panel:
    lines = [f"{name}: [magenta]{format_value(value)}[/magenta]" for name, value in pending.items()]
    return Panel(
        "\n".join(lines),
        title="Not applied — re-enter what you still need",
        border_style="yellow",
    )


def notice_line(notice: Notice) -> str:
    colour = _NOTICE_STYLES.get(notice.level, "white")
    return f"[{colour}]{notice.message}[/{colour}]"


def board_columns(board: TaskBoard, now: datetime.datetime | None = None) -> Columns:
    panels = []
    for status, tasks in board.columns.items():
        style = STATUS_STYLES[status]
        if tasks:
            body = "\n".join(
                f"#{task.id} {task.title}"
                + (f" [dim]({short_deadline(task.deadline, now)})[/dim]" if task.deadline else "")
                for task in tasks
            )
        else:
            body = "[dim]No tasks[/dim]"
        panels.append(Panel(
            body,
            title=f"{STATUS_LABELS[status]} ({len(tasks)})",
            border_style=style,
            width=36,
        ))
    return Columns(panels)


def comment_line(comment: Comment) -> str:
    author = comment.author_username or comment.author_id
    edited = " [dim](edited)[/dim]" if comment.edited else ""
    return (
        f"[dim]{format_datetime(comment.created_at)}[/dim] "
        f"[bold]{author}[/bold]: {comment.content}{edited}"
    )
