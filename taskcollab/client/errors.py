"""Error taxonomy for calls against the task store.

Four kinds of failure are distinguished:

  VERSION_CONFLICT — the caller's version is stale; recoverable through the
                     conflict-resolution flow (never raised, only reported
                     as a ``Conflict`` write outcome)
  VALIDATION       — the store rejected the payload, or answered with a body
                     the client cannot read; terminal for the attempt
  NOT_FOUND        — the record is missing or was deleted
  NETWORK          — transport-level failure; no store state changed
"""

from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    VERSION_CONFLICT = "version_conflict"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    NETWORK = "network"

    def __str__(self) -> str:
        return str(self.value)


class CollabError(Exception):
    """Base class for failures reported by the task store client."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(CollabError):
    """The requested record does not exist."""

    kind = ErrorKind.NOT_FOUND


class NetworkFailure(CollabError):
    """The request never produced a response from the store."""

    kind = ErrorKind.NETWORK


class ValidationFailure(CollabError):
    """The store answered but refused the request."""

    kind = ErrorKind.VALIDATION


class ControllerStateError(RuntimeError):
    """An edit action was requested in a state that does not allow it."""


__all__ = [
    "CollabError",
    "ControllerStateError",
    "ErrorKind",
    "NetworkFailure",
    "NotFound",
    "ValidationFailure",
]
