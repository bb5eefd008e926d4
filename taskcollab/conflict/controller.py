"""Edit lifecycle for one task under optimistic concurrency.

The controller owns the local copy of the task, its known version and at
most one pending edit.  States form a tagged union:

  Viewing     — no pending edit
  Editing     — an EditSession is open, not yet submitted
  Submitting  — a write is in flight; every other action is rejected
  Conflicted  — the store rejected the write for a stale version; a
                ConflictRecord waits for the user's resolution

A conflict is resolved by exactly one user-chosen strategy:

  REFRESH_RETRY    — adopt the store's record; the user's changes are dropped
  MANUAL_MERGE     — adopt the store's record; the user's changes are kept as
                     ``pending_intent`` and reported in a notice, never applied
  FORCE_OVERWRITE  — re-send the user's changes against the store's current
                     version; may conflict again if a third writer got in first

The local record is only replaced when a write is applied or a conflict is
resolved by adopting the store's state.  Canceling leaves it untouched.
"""

from __future__ import annotations

import enum
import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Union

from attrs import frozen

from taskcollab.client.errors import CollabError, ControllerStateError, ErrorKind
from taskcollab.client.models import TaskRecord
from taskcollab.client.records import Applied, Conflict, VersionedRecordClient, WriteOutcome
from taskcollab.conflict.session import ConflictRecord, EditSession
from taskcollab.formatting import format_value
from taskcollab.workflow import status_change

logger = logging.getLogger(__name__)


class ResolutionStrategy(str, enum.Enum):
    REFRESH_RETRY = "refreshRetry"
    MANUAL_MERGE = "manualMerge"
    FORCE_OVERWRITE = "forceOverwrite"

    def __str__(self) -> str:
        return str(self.value)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------


@frozen
class Viewing:
    name = "viewing"


@frozen
class Editing:
    session: EditSession
    name = "editing"


@frozen
class Submitting:
    session: EditSession
    name = "submitting"


@frozen
class Conflicted:
    conflict: ConflictRecord
    name = "conflicted"


ControllerState = Union[Viewing, Editing, Submitting, Conflicted]

_VIEWING = Viewing()

_WRITE_INTERRUPTED_MESSAGE = "The update did not complete. Your changes are kept; try again."


@frozen
class Notice:
    """A dismissible message for the user."""

    message: str
    kind: ErrorKind | None = None
    level: str = "error"


@frozen
class ControllerSnapshot:
    """Read-only view of the controller handed to observers."""

    state: ControllerState
    record: TaskRecord | None
    version: int | None
    notice: Notice | None = None
    pending_intent: Mapping[str, Any] | None = None

    @property
    def conflict(self) -> ConflictRecord | None:
        if isinstance(self.state, Conflicted):
            return self.state.conflict
        return None

    @property
    def session(self) -> EditSession | None:
        if isinstance(self.state, (Editing, Submitting)):
            return self.state.session
        return None


Observer = Callable[[ControllerSnapshot], None]
RefreshListener = Callable[[TaskRecord], Union[Awaitable[None], None]]


def describe_changes(changes: Mapping[str, Any]) -> str:
    return ", ".join(f"{name} → {format_value(value)}" for name, value in changes.items())


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------


class ConflictResolutionController:
    """Drives edits of one task through the store's version check."""

    def __init__(
        self,
        records: VersionedRecordClient,
        task_id: Any,
        record: TaskRecord | None = None,
    ) -> None:
        self._records = records
        self.task_id = task_id
        self._record = record
        self._state: ControllerState = _VIEWING
        self._notice: Notice | None = None
        self._pending_intent: Mapping[str, Any] | None = None
        self._observers: list[Observer] = []
        self._refresh_listeners: list[RefreshListener] = []

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def record(self) -> TaskRecord | None:
        return self._record

    @property
    def version(self) -> int | None:
        return self._record.version if self._record is not None else None

    @property
    def snapshot(self) -> ControllerSnapshot:
        return ControllerSnapshot(
            state=self._state,
            record=self._record,
            version=self.version,
            notice=self._notice,
            pending_intent=self._pending_intent,
        )

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register ``observer`` for every change; returns an unsubscribe callable."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def add_refresh_listener(self, listener: RefreshListener) -> Callable[[], None]:
        """Register ``listener`` to run after every applied write (e.g. a board refresh)."""
        self._refresh_listeners.append(listener)

        def remove() -> None:
            if listener in self._refresh_listeners:
                self._refresh_listeners.remove(listener)

        return remove

    def _emit(self) -> None:
        snapshot = self.snapshot
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception:
                logger.exception("Controller observer failed for task %s", self.task_id)

    def _transition(self, state: ControllerState, *, notice: Notice | None = None) -> None:
        logger.debug("Task %s: %s -> %s", self.task_id, self._state.name, state.name)
        self._state = state
        self._notice = notice
        self._emit()

    def _require(self, *allowed: type, action: str) -> None:
        if not isinstance(self._state, allowed):
            raise ControllerStateError(f"Cannot {action} while {self._state.name}")

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> TaskRecord:
        """Fetch the task and make it the local truth.

        Raises:
            NotFound, NetworkFailure, ValidationFailure: The failure is also
            reported as a notice before it propagates.
        """
        self._require(Viewing, action="reload the task")
        try:
            record = await self._records.fetch(self.task_id)
        except CollabError as exc:
            self._transition(_VIEWING, notice=Notice(message=exc.message, kind=exc.kind))
            raise
        self._record = record
        self._transition(_VIEWING)
        return record

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def begin_edit(self, fields: Mapping[str, Any] | None = None) -> EditSession:
        """Open an edit against the currently known version."""
        self._require(Viewing, action="start an edit")
        if self._record is None:
            raise ControllerStateError("Cannot start an edit before the task is loaded")
        session = EditSession(version_at_edit_start=self._record.version, changes=fields)
        self._transition(Editing(session=session))
        return session

    def set_field(self, name: str, value: Any) -> EditSession:
        self._require(Editing, action="change a field")
        session = self._state.session.with_field(name, value)
        self._transition(Editing(session=session))
        return session

    async def submit_edit(self) -> WriteOutcome:
        """Send the open edit to the store and react to the outcome."""
        self._require(Editing, action="submit")
        session = self._state.session
        if session.is_empty:
            raise ControllerStateError("Nothing to submit")

        outcome = await self._submit(session, restore=Editing(session=session))

        if isinstance(outcome, Applied):
            await self._apply(outcome, session)
        elif isinstance(outcome, Conflict):
            self._enter_conflict(session, outcome)
        elif outcome.retryable:
            # Nothing reached the store; keep the edit so it can be re-sent as is
            self._transition(
                Editing(session=session),
                notice=Notice(message=outcome.reason, kind=outcome.kind),
            )
        else:
            self._transition(_VIEWING, notice=Notice(message=outcome.reason, kind=outcome.kind))
        return outcome

    async def apply_status_change(self, new_status: Any) -> WriteOutcome:
        """Open, fill and submit a status edit in one step."""
        self.begin_edit(status_change(new_status))
        return await self.submit_edit()

    def cancel_edit(self) -> None:
        """Drop the open edit or the active conflict without touching the local record."""
        self._require(Editing, Conflicted, action="cancel")
        if isinstance(self._state, Conflicted):
            logger.info("Task %s: conflict dismissed without resolution", self.task_id)
        self._transition(_VIEWING)

    # ------------------------------------------------------------------
    # Conflict resolution
    # ------------------------------------------------------------------

    async def resolve_conflict(self, strategy: ResolutionStrategy | str) -> WriteOutcome | None:
        """Resolve the active conflict with the user's chosen strategy.

        Returns:
            The outcome of the overwrite for FORCE_OVERWRITE, otherwise None
            (the other strategies never write).
        """
        self._require(Conflicted, action="resolve a conflict")
        strategy = ResolutionStrategy(strategy)
        conflict = self._state.conflict
        logger.info("Task %s: resolving conflict with %s", self.task_id, strategy.name)

        if strategy is ResolutionStrategy.REFRESH_RETRY:
            self._record = conflict.current_record
            self._pending_intent = None
            self._transition(_VIEWING)
            return None

        if strategy is ResolutionStrategy.MANUAL_MERGE:
            self._record = conflict.current_record
            self._pending_intent = conflict.user_changes
            notice = Notice(
                message=(
                    "The task was refreshed to the latest version. "
                    f"Your changes were not applied: {describe_changes(conflict.user_changes)}. "
                    "Re-enter the values you still want."
                ),
                kind=ErrorKind.VERSION_CONFLICT,
                level="warning",
            )
            self._transition(_VIEWING, notice=notice)
            return None

        session = conflict.as_session()
        outcome = await self._submit(session, restore=Conflicted(conflict=conflict))

        if isinstance(outcome, Applied):
            await self._apply(outcome, session, base=conflict.current_record)
        elif isinstance(outcome, Conflict):
            self._enter_conflict(session, outcome)
        elif outcome.retryable:
            self._transition(
                Conflicted(conflict=conflict),
                notice=Notice(message=outcome.reason, kind=outcome.kind),
            )
        else:
            self._transition(_VIEWING, notice=Notice(message=outcome.reason, kind=outcome.kind))
        return outcome

    # ------------------------------------------------------------------
    # Notices
    # ------------------------------------------------------------------

    def dismiss_notice(self) -> None:
        if self._notice is not None:
            self._notice = None
            self._emit()

    def clear_pending_intent(self) -> None:
        if self._pending_intent is not None:
            self._pending_intent = None
            self._emit()

    # ------------------------------------------------------------------
    # Outcome handling
    # ------------------------------------------------------------------

    async def _submit(self, session: EditSession, restore: ControllerState) -> WriteOutcome:
        """Send ``session`` against its base version; the controller never stays in Submitting.

        If the write raises instead of returning an outcome (including
        cancellation), ``restore`` is re-entered with an error notice and the
        exception propagates.
        """
        self._transition(Submitting(session=session))
        try:
            return await self._records.write(
                self.task_id, session.version_at_edit_start, session.changes
            )
        except BaseException:
            logger.exception("Write of task %s did not complete", self.task_id)
            self._transition(restore, notice=Notice(message=_WRITE_INTERRUPTED_MESSAGE))
            raise

    def _enter_conflict(self, session: EditSession, outcome: Conflict) -> None:
        conflict = ConflictRecord.from_session(
            session,
            current_record=outcome.current_record,
            current_version=outcome.current_version,
            message=outcome.message,
        )
        self._transition(
            Conflicted(conflict=conflict),
            notice=Notice(message=outcome.message, kind=ErrorKind.VERSION_CONFLICT, level="warning"),
        )

    async def _apply(
        self,
        outcome: Applied,
        session: EditSession,
        base: TaskRecord | None = None,
    ) -> None:
        record = outcome.record
        if record is None:
            base = base or self._record
            record = base.with_changes(session.changes, version=outcome.version)
        self._record = record
        self._pending_intent = None
        self._transition(_VIEWING, notice=Notice(message="Task updated", level="info"))
        await self._notify_refresh(record)

    async def _notify_refresh(self, record: TaskRecord) -> None:
        for listener in list(self._refresh_listeners):
            try:
                result = listener(record)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Refresh listener failed after update of task %s", self.task_id)
