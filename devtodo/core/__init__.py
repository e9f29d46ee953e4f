"""Core functionality for devtodo."""

from .kv_store import FileKeyValueStore, KeyValueStore, MemoryKeyValueStore

__all__ = [
    'FileKeyValueStore',
    'KeyValueStore',
    'MemoryKeyValueStore',
]
