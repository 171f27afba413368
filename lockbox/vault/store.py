"""RecordStore: ordered record set, its JSON form, trash and purge."""

from __future__ import annotations

import json
from typing import Iterable, List, Optional

from lockbox.errors import MalformedData, RecordNotFound
from lockbox.vault.models import Record


def sort_records(records: Iterable[Record]) -> List[Record]:
    """Return records ordered by (group, service); ties keep their order."""
    return sorted(records, key=lambda r: r.sort_key)


def purge_records(records: Iterable[Record]) -> List[Record]:
    """Return the records not marked deleted, relative order preserved."""
    return [r for r in records if not r.deleted]


class RecordStore:
    """In-memory record sequence. Positions index the full sequence."""

    def __init__(self, records: Optional[Iterable[Record]] = None):
        self.records: List[Record] = list(records or [])

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def __getitem__(self, index: int) -> Record:
        return self.records[index]

    def copy(self) -> RecordStore:
        return RecordStore(r.copy() for r in self.records)

    # ------------------------------------------------------------------
    #  Views
    # ------------------------------------------------------------------
    def active(self) -> List[Record]:
        return [r for r in self.records if not r.deleted]

    def trash(self) -> List[Record]:
        return [r for r in self.records if r.deleted]

    def active_indices(self) -> List[int]:
        return [i for i, r in enumerate(self.records) if not r.deleted]

    def trash_indices(self) -> List[int]:
        return [i for i, r in enumerate(self.records) if r.deleted]

    def index_of(self, record_id: str) -> int:
        for i, r in enumerate(self.records):
            if r.record_id == record_id:
                return i
        raise RecordNotFound(f"No record with id {record_id!r}")

    # ------------------------------------------------------------------
    #  Mutations
    # ------------------------------------------------------------------
    def add(self, record: Record) -> None:
        if any(r.record_id == record.record_id for r in self.records):
            raise ValueError(f"Record id {record.record_id!r} already exists")
        self.records.append(record)

    def sort(self) -> None:
        self.records = sort_records(self.records)

    def soft_delete(self, index: int) -> None:
        self._check_index(index)
        self.records[index].deleted = True

    def restore(self, index: int) -> None:
        self._check_index(index)
        self.records[index].deleted = False

    def purge(self) -> int:
        """Drop every trashed record; returns how many were removed."""
        before = len(self.records)
        self.records = purge_records(self.records)
        return before - len(self.records)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.records):
            raise IndexError(f"Record index {index} out of range")

    # ------------------------------------------------------------------
    #  Serialisation
    # ------------------------------------------------------------------
    def serialize(self) -> bytes:
        self.sort()
        payload = [r.to_dict() for r in self.records]
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode(
            "utf-8"
        )

    @classmethod
    def deserialize(cls, data: bytes) -> RecordStore:
        try:
            payload = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise MalformedData(f"Vault payload is not valid JSON: {exc}") from None

        if payload is None:
            payload = []
        if not isinstance(payload, list):
            raise MalformedData("Vault payload must be a list of records")

        store = cls(Record.from_dict(item) for item in payload)
        ids = {r.record_id for r in store.records}
        if len(ids) != len(store.records):
            raise MalformedData("Vault payload contains duplicate record ids")
        store.sort()
        return store
