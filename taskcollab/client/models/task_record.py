from __future__ import annotations

import datetime
from collections.abc import Mapping
from typing import Any, TypeVar

import attrs
from attrs import define as _attrs_define
from attrs import field as _attrs_field

from ...workflow import TaskStatus
from ..types import format_datetime, parse_datetime

T = TypeVar("T", bound="TaskRecord")

# Wire keys a client may change through an update request
EDITABLE_FIELDS: tuple[str, ...] = ("title", "description", "deadline", "status", "assignedUserId")

_WIRE_TO_ATTR: dict[str, str] = {
    "title": "title",
    "description": "description",
    "deadline": "deadline",
    "status": "status",
    "groupId": "group_id",
    "assignedUserId": "assigned_user_id",
    "assignedUsername": "assigned_username",
    "createdBy": "created_by",
    "createdByUsername": "created_by_username",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


@_attrs_define
class TaskRecord:
    """ A task as stored by the record store — the versioned record.

        Attributes:
            id (int):
            version (int): Incremented by exactly one on every accepted write.
            title (str):
            description (None | str):
            deadline (datetime.datetime | None):
            status (TaskStatus):
            group_id (int | None):
            assigned_user_id (int | None):
            assigned_username (None | str):
            created_by (int | None):
            created_by_username (None | str):
            created_at (datetime.datetime | None):
            updated_at (datetime.datetime | None):
     """

    id: int
    version: int
    title: str
    description: None | str = None
    deadline: datetime.datetime | None = None
    status: TaskStatus = TaskStatus.TODO
    group_id: int | None = None
    assigned_user_id: int | None = None
    assigned_username: None | str = None
    created_by: int | None = None
    created_by_username: None | str = None
    created_at: datetime.datetime | None = None
    updated_at: datetime.datetime | None = None
    additional_properties: dict[str, Any] = _attrs_field(init=False, factory=dict)

    def payload(self) -> dict[str, Any]:
        """Return the wire representation without identity and version."""
        return {
            "title": self.title,
            "description": self.description,
            "deadline": format_datetime(self.deadline),
            "status": self.status.value,
            "groupId": self.group_id,
            "assignedUserId": self.assigned_user_id,
            "assignedUsername": self.assigned_username,
            "createdBy": self.created_by,
            "createdByUsername": self.created_by_username,
            "createdAt": format_datetime(self.created_at),
            "updatedAt": format_datetime(self.updated_at),
        }

    def to_dict(self) -> dict[str, Any]:
        field_dict: dict[str, Any] = {}
        field_dict.update(self.additional_properties)
        field_dict.update({
            "id": self.id,
            "version": self.version,
        })
        field_dict.update(self.payload())
        return field_dict

    def get(self, wire_key: str) -> Any:
        """Return the attribute behind a wire key (e.g. ``assignedUserId``)."""
        return getattr(self, _WIRE_TO_ATTR[wire_key])

    def with_changes(self: T, changes: Mapping[str, Any], version: int | None = None) -> T:
        """Return a copy with wire-keyed ``changes`` applied.

        ``None`` values are skipped, matching the store's partial-update rule
        that absent and null fields leave the stored value untouched.
        """
        updates: dict[str, Any] = {}
        for key, value in changes.items():
            if value is None:
                continue
            attr = _WIRE_TO_ATTR[key]
            if attr == "status":
                value = TaskStatus(value)
            elif attr == "deadline":
                value = parse_datetime(value)
            elif attr == "assigned_user_id" and value != self.assigned_user_id:
                # Username is resolved by the store; unknown until the next fetch
                updates["assigned_username"] = None
            updates[attr] = value
        if version is not None:
            updates["version"] = version
        record = attrs.evolve(self, **updates)
        record.additional_properties = dict(self.additional_properties)
        return record

    @classmethod
    def from_dict(cls: type[T], src_dict: Mapping[str, Any]) -> T:
        d = dict(src_dict)
        # Envelope keys from the store's response wrapper are not task data
        d.pop("success", None)
        d.pop("message", None)

        id = d.pop("id")
        version = d.pop("version")
        title = d.pop("title")

        status_raw = d.pop("status", None)
        status = TaskStatus(status_raw) if status_raw is not None else TaskStatus.TODO

        task_record = cls(
            id=id,
            version=version,
            title=title,
            description=d.pop("description", None),
            deadline=parse_datetime(d.pop("deadline", None)),
            status=status,
            group_id=d.pop("groupId", None),
            assigned_user_id=d.pop("assignedUserId", None),
            assigned_username=d.pop("assignedUsername", None),
            created_by=d.pop("createdBy", None),
            created_by_username=d.pop("createdByUsername", None),
            created_at=parse_datetime(d.pop("createdAt", None)),
            updated_at=parse_datetime(d.pop("updatedAt", None)),
        )

        task_record.additional_properties = d
        return task_record

    @classmethod
    def is_record(cls, src_dict: Any) -> bool:
        """True if a response body carries a full task (id, version and title)."""
        return (
            isinstance(src_dict, Mapping)
            and src_dict.get("id") is not None
            and src_dict.get("version") is not None
            and src_dict.get("title") is not None
        )
