"""taskcollab CLI — view and edit shared group tasks.

Entry point registered in pyproject.toml:
    taskcollab = "taskcollab.cli:app"

Commands:
    taskcollab show      — show a task and its version
    taskcollab edit      — edit a task, resolving version conflicts interactively
    taskcollab board     — show a group's tasks by status
    taskcollab comments  — show (or --watch) a group's discussion

Usage:
    taskcollab --help
    taskcollab edit 42 --status DONE --user-id 7
    TASKCOLLAB_USER_ID=7 taskcollab board 3
"""

import logging
from typing import Optional

import typer
from rich.logging import RichHandler

from taskcollab.cli.comments import comments as comments_command
from taskcollab.cli.tasks import board, edit, show
from taskcollab.config import settings

app = typer.Typer(
    name="taskcollab",
    help="taskcollab CLI — view and edit shared group tasks",
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (default: TASKCOLLAB_LOG_LEVEL or WARNING).",
    ),
) -> None:
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


app.command()(show)
app.command()(edit)
app.command()(board)
app.command(name="comments")(comments_command)
