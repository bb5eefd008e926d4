""" A client library for accessing the task collaboration store """
from .comments import CommentsClient
from .errors import (
    CollabError,
    ControllerStateError,
    ErrorKind,
    NetworkFailure,
    NotFound,
    ValidationFailure,
)
from .http import Client
from .records import Applied, Conflict, Failed, VersionedRecordClient, WriteOutcome
from .tasks import TasksClient

__all__ = (
    "Applied",
    "Client",
    "CollabError",
    "CommentsClient",
    "Conflict",
    "ControllerStateError",
    "ErrorKind",
    "Failed",
    "NetworkFailure",
    "NotFound",
    "TasksClient",
    "ValidationFailure",
    "VersionedRecordClient",
    "WriteOutcome",
)
