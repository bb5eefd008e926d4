""" Contains some shared types for properties """

from __future__ import annotations

import datetime
from typing import Any, Literal

from attrs import define


@define
class Unset:
    def __bool__(self) -> Literal[False]:
        return False


UNSET: Unset = Unset()


def parse_datetime(data: Any) -> datetime.datetime | None:
    """Parse an ISO-8601 timestamp as sent by the store (local date-time)."""
    if data is None or isinstance(data, Unset):
        return None
    if isinstance(data, datetime.datetime):
        return data
    return datetime.datetime.fromisoformat(str(data))


def format_datetime(value: datetime.datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


__all__ = ["UNSET", "Unset", "format_datetime", "parse_datetime"]
