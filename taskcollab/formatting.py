"""Display helpers shared by the CLI and the board.

Deadline wording follows the web client: the detail view says
"5 hours left" / "3 days left" / "2 hours overdue", the board uses the
compact "5h left" / "3d left" / "Overdue".
"""

from __future__ import annotations

import datetime
import enum
import math
from typing import Any

from taskcollab.workflow import STATUS_LABELS, TaskStatus


def _hours_until(deadline: datetime.datetime, now: datetime.datetime | None) -> float:
    if now is None:
        now = datetime.datetime.now(deadline.tzinfo)
    return (deadline - now).total_seconds() / 3600


def relative_deadline(
    deadline: datetime.datetime,
    now: datetime.datetime | None = None,
) -> tuple[str, bool]:
    """Describe the time left until ``deadline``.

    Returns:
        ``(text, is_overdue)``.
    """
    hours = _hours_until(deadline, now)
    if hours < 0:
        return f"{abs(math.ceil(hours))} hours overdue", True
    if hours < 24:
        return f"{math.ceil(hours)} hours left", False
    return f"{math.ceil(hours / 24)} days left", False


def short_deadline(deadline: datetime.datetime, now: datetime.datetime | None = None) -> str:
    hours = _hours_until(deadline, now)
    if hours < 0:
        return "Overdue"
    if hours < 24:
        return f"{math.ceil(hours)}h left"
    return f"{math.ceil(hours / 24)}d left"


def format_datetime(value: datetime.datetime | None) -> str:
    if value is None:
        return "-"
    return value.strftime("%Y-%m-%d %H:%M")


def format_value(value: Any) -> str:
    """Render a task field value for humans."""
    if value is None:
        return "-"
    if isinstance(value, TaskStatus):
        return STATUS_LABELS[value]
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, datetime.datetime):
        return format_datetime(value)
    return str(value)
