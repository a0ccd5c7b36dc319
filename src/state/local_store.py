from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4

from cryptography.fernet import Fernet, InvalidToken
from pydantic import ValidationError

from common.validation import validate_record

from .models import RecordList, StudentRecord


logger = logging.getLogger(__name__)

# Environment variable names for convenience configuration
ENV_STORAGE_FILE = "STUDENT_RECORDS_FILE"
ENV_STORAGE_KEY = "STUDENT_RECORDS_KEY"
ENV_FERNET_KEY = "STUDENT_RECORDS_FERNET_KEY"

DEFAULT_STORAGE_FILE = Path(".data") / "local_storage.json"
DEFAULT_STORAGE_KEY = "student_records_data"


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    val = os.environ.get(name)
    return val if val not in (None, "") else default


def _to_fernet(key: str | bytes) -> Fernet:
    """Construct a Fernet instance from a user-provided key.

    The key must be a URL-safe base64-encoded 32-byte key (str or bytes),
    as returned by `cryptography.fernet.Fernet.generate_key()`.
    """
    if isinstance(key, str):
        key_bytes = key.encode("utf-8")
    else:
        key_bytes = key
    return Fernet(key_bytes)


class LocalStorage:
    """
    File-backed string key-value storage, optionally encrypted at rest.

    - Backed by a single JSON file: { key: value, ... }. Values written here are text;
      values of any other type under other keys are preserved on rewrite.
    - With a Fernet key, values are stored as Fernet tokens; `get_item` decrypts.
    - A missing or corrupt file reads as an empty mapping.
    - Writes go to a temporary sibling file that is renamed over the target, so a
      failed write leaves the previous file intact. Write errors propagate.
    """

    def __init__(
        self,
        path: Optional[os.PathLike[str] | str] = None,
        *,
        fernet_key: Optional[str | bytes] = None,
    ) -> None:
        self._path = Path(path) if path else DEFAULT_STORAGE_FILE
        self._fernet = _to_fernet(fernet_key) if fernet_key else None

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> Dict[str, Any]:
        # Raw mapping; values under keys owned by other writers are kept as-is
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as ex:
            logger.warning("Ignoring unreadable storage file %s: %s", self._path, ex)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring storage file %s: top-level value is not an object", self._path)
            return {}
        return raw

    def _write_all(self, data: Dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(f"{self._path.name}.tmp-{uuid4().hex}")
        try:
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp, self._path)
        finally:
            if tmp.exists():
                tmp.unlink()

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored text for `key`, or None when absent or not text.

        Raises:
        - ValueError if the value cannot be decrypted with the configured key.
        """
        value = self._read_all().get(key)
        if not isinstance(value, str):
            return None
        if self._fernet is None:
            return value
        try:
            return self._fernet.decrypt(value.encode("ascii")).decode("utf-8")
        except (InvalidToken, UnicodeError) as ex:
            raise ValueError(f"Failed to decrypt storage value for key {key!r}") from ex

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        if self._fernet is not None:
            value = self._fernet.encrypt(value.encode("utf-8")).decode("ascii")
        data[key] = value
        self._write_all(data)


def _dump_records_json(records: Sequence[StudentRecord]) -> str:
    # Compact JSON; field order follows the model
    return json.dumps([r.to_json_dict() for r in records], separators=(",", ":"))


def _load_records_json(text: str) -> List[StudentRecord]:
    return RecordList.validate_python(json.loads(text))


def _rule_errors(records: Sequence[StudentRecord]) -> Dict[int, Dict[str, str]]:
    """Index -> field errors for every loaded record that breaks a field rule."""
    out: Dict[int, Dict[str, str]] = {}
    for i, record in enumerate(records):
        result = validate_record(record.to_json_dict())
        if not result.ok:
            out[i] = result.errors
    return out


class LocalRecordStorage:
    """
    The record store's only I/O boundary: one storage key holding a JSON array.

    - `load()` never raises for bad data: an absent key, text that is not JSON,
      JSON that is not an array of records, a record breaking a field rule, or an
      undecryptable value all yield [].
    - `save(records)` overwrites the key with the full array; failures propagate.

    Environment variables (optional)
    - `STUDENT_RECORDS_FILE`:       path of the storage file
    - `STUDENT_RECORDS_KEY`:        storage key (default "student_records_data")
    - `STUDENT_RECORDS_FERNET_KEY`: urlsafe base64-encoded key for Fernet
    """

    def __init__(self, storage: LocalStorage, *, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key

    # -------- Construction helpers --------
    @classmethod
    def from_env(cls, *, path: Optional[os.PathLike[str] | str] = None) -> "LocalRecordStorage":
        """Build from environment variables; an explicit `path` wins over the env."""
        file_path = path or _getenv(ENV_STORAGE_FILE)
        key = _getenv(ENV_STORAGE_KEY, DEFAULT_STORAGE_KEY)
        fernet_key = _getenv(ENV_FERNET_KEY)
        storage = LocalStorage(file_path, fernet_key=fernet_key)
        return cls(storage, key=key or DEFAULT_STORAGE_KEY)

    @property
    def key(self) -> str:
        return self._key

    # -------- Core operations --------
    def load(self) -> List[StudentRecord]:
        try:
            text = self._storage.get_item(self._key)
        except ValueError as ex:
            logger.warning("Treating storage key %r as empty: %s", self._key, ex)
            return []
        if text is None:
            return []
        try:
            records = _load_records_json(text)
        except (ValueError, ValidationError) as ex:
            logger.warning("Treating storage key %r as empty: unparsable records (%s)", self._key, ex)
            return []
        invalid = _rule_errors(records)
        if invalid:
            # A stored record breaking a field rule makes the whole value invalid data
            logger.warning("Treating storage key %r as empty: invalid records at %s", self._key, sorted(invalid))
            return []
        logger.debug("Loaded %d record(s) from key %r", len(records), self._key)
        return records

    def save(self, records: Sequence[StudentRecord]) -> None:
        self._storage.set_item(self._key, _dump_records_json(records))
        logger.debug("Saved %d record(s) to key %r", len(records), self._key)


__all__ = [
    "DEFAULT_STORAGE_KEY",
    "ENV_FERNET_KEY",
    "ENV_STORAGE_FILE",
    "ENV_STORAGE_KEY",
    "LocalStorage",
    "LocalRecordStorage",
]
