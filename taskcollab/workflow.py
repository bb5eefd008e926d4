"""Task lifecycle states and status validation.

The workflow is deliberately flat: TODO, IN_PROGRESS and DONE form a closed
set and any state may move to any other (DONE → TODO included).  The only
rule enforced is membership.  A status edit is nothing more than the generic
edit path with ``{"status": new_status}`` as its changes.
"""

from __future__ import annotations

import enum
from typing import Any


class TaskStatus(str, enum.Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"

    def __str__(self) -> str:
        return str(self.value)


STATUS_LABELS: dict[TaskStatus, str] = {
    TaskStatus.TODO: "To Do",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.DONE: "Done",
}


class InvalidStatusError(ValueError):
    """Raised for a value outside the task status set."""


def is_valid_status(value: Any) -> bool:
    """Return True if ``value`` names one of the task statuses."""
    if isinstance(value, TaskStatus):
        return True
    if not isinstance(value, str):
        return False
    return value in TaskStatus._value2member_map_


def parse_status(value: Any) -> TaskStatus:
    """Coerce ``value`` to a TaskStatus.

    Raises:
        InvalidStatusError: If the value is not a member of the status set.
    """
    if not is_valid_status(value):
        valid = ", ".join(s.value for s in TaskStatus)
        raise InvalidStatusError(f"Invalid status {value!r} (expected one of: {valid})")
    return TaskStatus(value)


def can_transition(current: Any, target: Any) -> bool:
    """Any valid status is reachable from any other valid status."""
    return is_valid_status(current) and is_valid_status(target)


def status_change(new_status: Any) -> dict[str, TaskStatus]:
    """Build the changes mapping for a status edit."""
    return {"status": parse_status(new_status)}
