"""
Record Store Gateway

Uniform async access to the six record tables and to file storage.
Views receive a RecordStore and never touch a session or bucket directly.
"""
from app.gateway.base import RecordStore, Filters, Order
from app.gateway.sql_store import SQLRecordStore
from app.gateway.memory_store import InMemoryRecordStore, get_memory_store
from app.gateway.storage import FileStorage, LocalFileStorage, S3FileStorage, get_file_storage

__all__ = [
    "RecordStore",
    "Filters",
    "Order",
    "SQLRecordStore",
    "InMemoryRecordStore",
    "get_memory_store",
    "FileStorage",
    "LocalFileStorage",
    "S3FileStorage",
    "get_file_storage",
]
