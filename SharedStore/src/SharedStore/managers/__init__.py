from .base import (
    Record, RecordStore, StoreResult,
    BaseSchema, RecordSchema, RecordManager,
    utcnow, isoformat, strip_readonly,
)
from .documentManager import DocumentRecordStore
from .failoverManager import FailoverRepository

__all__ = [
    "Record", "RecordStore", "StoreResult",
    "BaseSchema", "RecordSchema", "RecordManager",
    "DocumentRecordStore", "FailoverRepository",
    "utcnow", "isoformat", "strip_readonly",
]
