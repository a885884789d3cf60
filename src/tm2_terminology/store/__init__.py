"""
Store Module

Record store interface and backends.
"""

from tm2_terminology.store.record_types import Category, CodeRecord
from tm2_terminology.store.base import RecordStore
from tm2_terminology.store.memory_store import MemoryRecordStore
from tm2_terminology.store.http_store import HttpRecordStore, HttpStoreConfig

__all__ = [
    "Category",
    "CodeRecord",
    "RecordStore",
    "MemoryRecordStore",
    "HttpRecordStore",
    "HttpStoreConfig",
]
