"""Group discussion command.

Usage:
    taskcollab comments 3 --user-id 7
    taskcollab comments 3 --watch      # keep polling until Ctrl+C
"""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
from rich.console import Console

from taskcollab.cli.render import comment_line
from taskcollab.cli.tasks import USER_ID_OPTION, build_client
from taskcollab.client import CollabError, CommentsClient
from taskcollab.client.models import Comment
from taskcollab.config import settings
from taskcollab.polling import CommentPoller

console = Console()


def comments(
    group_id: int = typer.Argument(..., help="Group whose discussion to show."),
    watch: bool = typer.Option(False, "--watch", help="Keep polling for new messages."),
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        help="Seconds between polls with --watch (default: TASKCOLLAB_COMMENT_POLL_INTERVAL_SECONDS).",
    ),
    user_id: str = USER_ID_OPTION,
) -> None:
    """Print a group's discussion, optionally following new messages."""
    seen: set[int] = set()

    def show_new(batch: list[Comment]) -> None:
        for comment in batch:
            if comment.id not in seen:
                seen.add(comment.id)
                console.print(comment_line(comment))

    def show_error(exc: CollabError) -> None:
        console.print(f"[red]{exc.message}[/red]")

    async def _comments() -> None:
        async with build_client(user_id) as client:
            comments_client = CommentsClient(client)
            if not watch:
                show_new(await comments_client.list(group_id))
                if not seen:
                    console.print("[dim]No messages yet.[/dim]")
                return

            poller = CommentPoller(
                comments_client,
                group_id,
                show_new,
                interval=interval or settings.comment_poll_interval_seconds,
                on_error=show_error,
            )
            async with poller:
                # Runs until interrupted; leaving the block cancels the poller
                await asyncio.Event().wait()

    try:
        asyncio.run(_comments())
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped watching.[/yellow]")
    except CollabError as exc:
        console.print(f"[red]{exc.message}[/red]")
        raise typer.Exit(code=1)
