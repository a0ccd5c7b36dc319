from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Protocol, Sequence, Tuple

from common.validation import validate_record

from .models import StudentRecord


logger = logging.getLogger(__name__)

DELETE_PROMPT = "Are you sure you want to delete this record?"
CLEAR_PROMPT = "This will permanently delete all records. Continue?"

Confirm = Callable[[str], bool]
OnChange = Callable[[Sequence[StudentRecord]], None]


class RecordIndexError(IndexError):
    """Raised when an update or delete targets a position outside the store."""


class InvalidRecordError(ValueError):
    """Raised when a record failing field validation is handed to the store."""

    def __init__(self, errors: Dict[str, str]) -> None:
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


class RecordStorage(Protocol):
    def load(self) -> List[StudentRecord]: ...

    def save(self, records: Sequence[StudentRecord]) -> None: ...


class RecordStore:
    """
    Ordered, persistence-backed collection of student records.

    - Loaded once from `storage` on construction.
    - Every mutation (add, update, delete, clear) writes the full sequence back
      through `storage.save` and then calls `on_change` with the new contents.
    - `delete` and `clear` ask `confirm(prompt)` first; a declined prompt leaves
      memory and storage untouched.
    - A failed save propagates after the in-memory list has already changed.
    - Duplicate student IDs are accepted.
    """

    def __init__(
        self,
        storage: RecordStorage,
        *,
        confirm: Confirm,
        on_change: Optional[OnChange] = None,
    ) -> None:
        self._storage = storage
        self._confirm = confirm
        self._on_change = on_change
        self._records: List[StudentRecord] = list(storage.load())

    @property
    def records(self) -> Tuple[StudentRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get(self, index: int) -> StudentRecord:
        self._check_index(index)
        return self._records[index]

    def add(self, record: StudentRecord) -> None:
        self._check_valid(record)
        self._records.append(record)
        logger.info("Added record at index %d", len(self._records) - 1)
        self._commit()

    def update(self, index: int, record: StudentRecord) -> None:
        self._check_index(index)
        self._check_valid(record)
        self._records[index] = record
        logger.info("Updated record at index %d", index)
        self._commit()

    def delete(self, index: int) -> bool:
        """Remove the record at `index` after confirmation. Returns True if removed."""
        self._check_index(index)
        if not self._confirm(DELETE_PROMPT):
            logger.debug("Delete of index %d declined", index)
            return False
        del self._records[index]
        logger.info("Deleted record at index %d", index)
        self._commit()
        return True

    def clear(self) -> bool:
        """Remove every record after confirmation. Returns True if cleared."""
        if not self._confirm(CLEAR_PROMPT):
            logger.debug("Clear declined")
            return False
        self._records = []
        logger.info("Cleared all records")
        self._commit()
        return True

    def _check_index(self, index: int) -> None:
        # Negative positions are rejected rather than counted from the end
        if not 0 <= index < len(self._records):
            raise RecordIndexError(f"record index {index} out of range (size {len(self._records)})")

    @staticmethod
    def _check_valid(record: StudentRecord) -> None:
        result = validate_record(record.to_json_dict())
        if not result.ok:
            raise InvalidRecordError(result.errors)

    def _commit(self) -> None:
        self._storage.save(self.records)
        if self._on_change is not None:
            self._on_change(self.records)


__all__ = [
    "CLEAR_PROMPT",
    "DELETE_PROMPT",
    "InvalidRecordError",
    "RecordIndexError",
    "RecordStorage",
    "RecordStore",
]
