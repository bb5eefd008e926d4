from __future__ import annotations

import datetime
from collections.abc import Mapping
from typing import Any, TypeVar

from attrs import define as _attrs_define
from attrs import field as _attrs_field

from ..types import format_datetime, parse_datetime

T = TypeVar("T", bound="Comment")


@_attrs_define
class Comment:
    """ A message in a group discussion.

        Attributes:
            id (int):
            content (str):
            group_id (int | None):
            author_id (int | None):
            author_username (None | str):
            created_at (datetime.datetime | None):
            updated_at (datetime.datetime | None):
            edited (bool):
            can_edit (bool): Whether the acting user may edit this comment.
            can_delete (bool): Whether the acting user may delete this comment.
     """

    id: int
    content: str
    group_id: int | None = None
    author_id: int | None = None
    author_username: None | str = None
    created_at: datetime.datetime | None = None
    updated_at: datetime.datetime | None = None
    edited: bool = False
    can_edit: bool = False
    can_delete: bool = False
    additional_properties: dict[str, Any] = _attrs_field(init=False, factory=dict)

    def to_dict(self) -> dict[str, Any]:
        field_dict: dict[str, Any] = {}
        field_dict.update(self.additional_properties)
        field_dict.update({
            "id": self.id,
            "content": self.content,
            "groupId": self.group_id,
            "authorId": self.author_id,
            "authorUsername": self.author_username,
            "createdAt": format_datetime(self.created_at),
            "updatedAt": format_datetime(self.updated_at),
            "edited": self.edited,
            "canEdit": self.can_edit,
            "canDelete": self.can_delete,
        })
        return field_dict

    @classmethod
    def from_dict(cls: type[T], src_dict: Mapping[str, Any]) -> T:
        d = dict(src_dict)

        # The store has emitted both spellings of the edited flag
        edited = d.pop("edited", None)
        is_edited = d.pop("isEdited", None)

        comment = cls(
            id=d.pop("id"),
            content=d.pop("content"),
            group_id=d.pop("groupId", None),
            author_id=d.pop("authorId", None),
            author_username=d.pop("authorUsername", None),
            created_at=parse_datetime(d.pop("createdAt", None)),
            updated_at=parse_datetime(d.pop("updatedAt", None)),
            edited=bool(edited if edited is not None else is_edited),
            can_edit=bool(d.pop("canEdit", False)),
            can_delete=bool(d.pop("canDelete", False)),
        )

        comment.additional_properties = d
        return comment
