from __future__ import annotations

import datetime
from typing import Any

from attrs import define as _attrs_define

from ..types import UNSET, Unset


@_attrs_define
class CreateTaskRequest:
    """ Request body for POST /tasks.

        Attributes:
            title (str):
            deadline (datetime.datetime): Must lie in the future; checked by the store.
            group_id (int):
            description (None | str | Unset):
            user_id (int | None | Unset): Initial assignee.
     """

    title: str
    deadline: datetime.datetime
    group_id: int
    description: None | str | Unset = UNSET
    user_id: int | None | Unset = UNSET

    def to_dict(self) -> dict[str, Any]:
        field_dict: dict[str, Any] = {
            "title": self.title,
            "deadline": self.deadline.isoformat(),
            "groupId": self.group_id,
        }
        if not isinstance(self.description, Unset):
            field_dict["description"] = self.description
        if not isinstance(self.user_id, Unset):
            field_dict["userId"] = self.user_id

        return field_dict
