"""Record: a single credential in the vault."""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field, replace
from typing import Any, Dict

from lockbox.errors import MalformedData

_REQUIRED_FIELDS = ("service", "login", "password")


def new_record_id() -> str:
    return secrets.token_hex(8)


@dataclass
class Record:
    service: str
    login: str
    password: str
    group: str = ""
    deleted: bool = False
    record_id: str = field(default_factory=new_record_id)

    def __repr__(self) -> str:
        # Never let the password reach a log line or traceback.
        return (
            f"Record(service={self.service!r}, login={self.login!r}, "
            f"group={self.group!r}, deleted={self.deleted!r}, "
            f"record_id={self.record_id!r})"
        )

    @property
    def sort_key(self) -> tuple:
        return (self.group, self.service)

    def copy(self) -> Record:
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.record_id,
            "group": self.group,
            "service": self.service,
            "login": self.login,
            "password": self.password,
            "is_deleted": self.deleted,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Record:
        if not isinstance(data, dict):
            raise MalformedData(f"Record must be an object, got {type(data).__name__}")

        for name in _REQUIRED_FIELDS:
            if name not in data:
                raise MalformedData(f"Record is missing required field '{name}'")
            if not isinstance(data[name], str):
                raise MalformedData(f"Record field '{name}' must be a string")

        group = data.get("group", "")
        if group is None:
            group = ""
        if not isinstance(group, str):
            raise MalformedData("Record field 'group' must be a string")

        deleted = data.get("is_deleted", False)
        if not isinstance(deleted, bool):
            raise MalformedData("Record field 'is_deleted' must be a boolean")

        record_id = data.get("id")
        if record_id is None:
            record_id = new_record_id()
        elif not isinstance(record_id, str) or not record_id:
            raise MalformedData("Record field 'id' must be a non-empty string")

        return cls(
            service=data["service"],
            login=data["login"],
            password=data["password"],
            group=group,
            deleted=deleted,
            record_id=record_id,
        )
