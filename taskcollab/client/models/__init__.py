""" Contains all the data models used in inputs/outputs """

from ...workflow import TaskStatus
from .comment import Comment
from .create_task_request import CreateTaskRequest
from .task_record import EDITABLE_FIELDS, TaskRecord
from .update_task_request import UpdateTaskRequest

__all__ = (
    "Comment",
    "CreateTaskRequest",
    "EDITABLE_FIELDS",
    "TaskRecord",
    "TaskStatus",
    "UpdateTaskRequest",
)
