"""Reads and version-checked writes of a single task.

``VersionedRecordClient.write`` never raises for a store-side rejection.  It
classifies the response into exactly one outcome:

  Applied   — the store accepted the write; the record is now at
              ``expected_version + 1``
  Conflict  — the caller's version was stale; carries the store's current
              record and version so the caller can reconcile
  Failed    — anything else (validation, not found, transport error)

The only conflict signal is a response body carrying both ``currentVersion``
and ``currentData``.  The HTTP status is not consulted for that decision.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Union
from urllib.parse import quote

from attrs import field, frozen

from ..workflow import status_change
from .errors import CollabError, ErrorKind, NetworkFailure, NotFound, ValidationFailure
from .http import Client, error_message, is_success
from .models import TaskRecord, UpdateTaskRequest

logger = logging.getLogger(__name__)

_UNREADABLE_CONFLICT_MESSAGE = (
    "Task was changed by someone else, but the latest version could not be read. "
    "Reload the task and try again."
)


# ---------------------------------------------------------------------------
# Write outcomes
# ---------------------------------------------------------------------------


@frozen
class Applied:
    """The write was accepted.

    ``record`` is None when the store acknowledged the write but the record
    could not be read back; callers then apply the changes to their own base.
    """

    record: TaskRecord | None
    version: int


@frozen
class Conflict:
    """The write was rejected because the caller's version is stale."""

    current_record: TaskRecord
    current_version: int
    message: str = ""


@frozen
class Failed:
    """The write was rejected for a reason other than a version mismatch."""

    reason: str
    kind: ErrorKind = ErrorKind.VALIDATION

    @property
    def retryable(self) -> bool:
        """A transport failure left the store untouched; the same edit may be resent."""
        return self.kind is ErrorKind.NETWORK


WriteOutcome = Union[Applied, Conflict, Failed]


def _task_url(task_id: Any) -> str:
    return "/tasks/{task_id}".format(task_id=quote(str(task_id), safe=""))


def _is_version_conflict(body: Any) -> bool:
    return (
        isinstance(body, Mapping)
        and body.get("currentVersion") is not None
        and body.get("currentData") is not None
    )


def _is_not_found(status_code: int, message: str) -> bool:
    return status_code == 404 or "not found" in message.lower() or "deleted" in message.lower()


def _extract_record(body: Any) -> dict[str, Any] | None:
    """Find an updated task in a success body, either inline or nested."""
    if TaskRecord.is_record(body):
        return body
    if isinstance(body, Mapping):
        for key in ("task", "data"):
            nested = body.get(key)
            if TaskRecord.is_record(nested):
                return nested
    return None


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


@frozen
class VersionedRecordClient:
    """Fetches and writes tasks against the store's version check."""

    client: Client = field()

    async def fetch(self, task_id: Any) -> TaskRecord:
        """Fetch the current record and version.

        Raises:
            NotFound:          If the store has no task with this id.
            NetworkFailure:    On transport error.
            ValidationFailure: On any other rejection.
        """
        status_code, body = await self.client.request_json("get", _task_url(task_id))

        if status_code == 404:
            raise NotFound(error_message(body, "Task not found"))
        if not is_success(status_code) or (isinstance(body, Mapping) and body.get("success") is False):
            message = error_message(body, "Failed to fetch task")
            if _is_not_found(status_code, message):
                raise NotFound(message)
            raise ValidationFailure(message)
        if not TaskRecord.is_record(body):
            raise ValidationFailure("Store returned an incomplete task")

        try:
            return TaskRecord.from_dict(body)
        except (KeyError, TypeError, ValueError) as exc:
            raise ValidationFailure(f"Store returned an unreadable task: {exc}") from exc

    async def write(
        self,
        task_id: Any,
        expected_version: int,
        changes: Mapping[str, Any],
    ) -> WriteOutcome:
        """Write ``changes`` if the store is still at ``expected_version``.

        Args:
            task_id:          Task identity.
            expected_version: The version the caller believes is current.
            changes:          Partial update keyed by wire field name.

        Returns:
            Applied, Conflict or Failed — never raises for store rejections.
        """
        request = UpdateTaskRequest(version=expected_version, changes=dict(changes))

        try:
            status_code, body = await self.client.request_json(
                "put", _task_url(task_id), json_body=request.to_dict()
            )
        except NetworkFailure as exc:
            return Failed(reason=exc.message, kind=ErrorKind.NETWORK)

        if _is_version_conflict(body):
            try:
                current_version = int(body["currentVersion"])
                current = TaskRecord.from_dict({**body["currentData"], "version": current_version})
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Unreadable conflict body for task %s: %r", task_id, exc)
                return Failed(reason=_UNREADABLE_CONFLICT_MESSAGE, kind=ErrorKind.VALIDATION)
            message = error_message(body, "Task has been modified by another user.")
            logger.warning(
                "Version conflict on task %s: expected %d, store at %d",
                task_id, expected_version, current_version,
            )
            return Conflict(current_record=current, current_version=current_version, message=message)

        if is_success(status_code) and isinstance(body, Mapping) and body.get("success", True):
            return await self._applied(task_id, expected_version, body)

        reason = error_message(body, "Failed to update task")
        kind = ErrorKind.NOT_FOUND if _is_not_found(status_code, reason) else ErrorKind.VALIDATION
        logger.warning("Write to task %s rejected (%s): %s", task_id, kind, reason)
        return Failed(reason=reason, kind=kind)

    async def write_status(self, task_id: Any, expected_version: int, status: Any) -> WriteOutcome:
        """Status edit — the generic write with ``{"status": status}``."""
        return await self.write(task_id, expected_version, status_change(status))

    async def _applied(
        self,
        task_id: Any,
        expected_version: int,
        body: Mapping[str, Any],
    ) -> WriteOutcome:
        raw = _extract_record(body)
        try:
            if raw is not None:
                record = TaskRecord.from_dict(raw)
            else:
                # The store acknowledged without echoing the record; read it back
                record = await self.fetch(task_id)
        except (CollabError, KeyError, TypeError, ValueError) as exc:
            # The write itself was accepted; the caller rebuilds the record
            logger.warning("Task %s updated but its record could not be read: %s", task_id, exc)
            return Applied(record=None, version=expected_version + 1)

        # A later writer may already have moved the store past our version
        logger.info(
            "Task %s written at version %d, store at %d",
            task_id, expected_version + 1, record.version,
        )
        return Applied(record=record, version=record.version)
