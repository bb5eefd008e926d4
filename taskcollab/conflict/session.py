"""Pending edits and the conflicts they can turn into.

An ``EditSession`` records what the user changed since the last known-good
version.  It is consumed on a successful write, discarded on cancel or on a
terminal failure, and promoted into a ``ConflictRecord`` when the store
rejects the write for a version mismatch.  A ``ConflictRecord`` lives only
until the user picks a resolution or cancels; it is never persisted.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from attrs import evolve, field, frozen

from taskcollab.client.models import EDITABLE_FIELDS, TaskRecord
from taskcollab.workflow import parse_status


def _freeze(changes: Mapping[str, Any] | None) -> Mapping[str, Any]:
    """Validate field names and return a read-only copy of ``changes``."""
    frozen_changes = dict(changes or {})
    unknown = set(frozen_changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")
    if "status" in frozen_changes:
        frozen_changes["status"] = parse_status(frozen_changes["status"])
    return MappingProxyType(frozen_changes)


@frozen
class EditSession:
    """The user's intended partial update and the version it was made against."""

    version_at_edit_start: int
    changes: Mapping[str, Any] = field(factory=dict, converter=_freeze)

    def with_field(self, name: str, value: Any) -> "EditSession":
        return evolve(self, changes={**self.changes, name: value})

    @property
    def is_empty(self) -> bool:
        return not self.changes


@frozen
class ConflictRecord:
    """A rejected edit paired with the store's authoritative state."""

    user_changes: Mapping[str, Any] = field(converter=_freeze)
    version_at_edit_start: int
    current_version: int
    current_record: TaskRecord
    message: str = ""

    @classmethod
    def from_session(
        cls,
        session: EditSession,
        current_record: TaskRecord,
        current_version: int,
        message: str = "",
    ) -> "ConflictRecord":
        return cls(
            user_changes=session.changes,
            version_at_edit_start=session.version_at_edit_start,
            current_version=current_version,
            current_record=current_record,
            message=message,
        )

    def as_session(self) -> EditSession:
        """The user's changes re-based on the store's current version."""
        return EditSession(version_at_edit_start=self.current_version, changes=self.user_changes)

    def diff(self) -> Iterator[tuple[str, Any, Any]]:
        """Yield ``(field, user_value, current_value)`` for every field the user touched."""
        for name, value in self.user_changes.items():
            yield name, value, self.current_record.get(name)
