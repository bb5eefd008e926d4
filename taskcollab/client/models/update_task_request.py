from __future__ import annotations

import datetime
import enum
from collections.abc import Mapping
from typing import Any, TypeVar

from attrs import define as _attrs_define
from attrs import field as _attrs_field

from .task_record import EDITABLE_FIELDS

T = TypeVar("T", bound="UpdateTaskRequest")


def _encode(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, datetime.datetime):
        return value.isoformat()
    return value


@_attrs_define
class UpdateTaskRequest:
    """ Request body for PUT /tasks/{task_id}.

        Attributes:
            version (int): The version the caller believes is current.
            changes (dict[str, Any]): Partial update keyed by wire field name.
     """

    version: int
    changes: dict[str, Any] = _attrs_field(factory=dict)

    def __attrs_post_init__(self) -> None:
        unknown = set(self.changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

    def to_dict(self) -> dict[str, Any]:
        field_dict: dict[str, Any] = {key: _encode(value) for key, value in self.changes.items()}
        field_dict["version"] = self.version
        return field_dict

    @classmethod
    def from_dict(cls: type[T], src_dict: Mapping[str, Any]) -> T:
        d = dict(src_dict)
        version = d.pop("version")
        return cls(version=version, changes=d)
