"""
Student record models, the persisted key-value storage, and the in-memory store.

Records are serialized as a JSON array under a single storage key and may be
encrypted at rest via Fernet.
"""

from .models import StudentRecord
from .record_store import RecordIndexError, RecordStore

__all__ = ["RecordIndexError", "RecordStore", "StudentRecord"]
