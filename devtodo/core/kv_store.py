"""Key-value stores backing the task storage manager."""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from .constants import STORE_FILE_NAME

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Durable string key-value store."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...

    def clear(self) -> None:
        ...

    def keys(self) -> List[str]:
        ...


class MemoryKeyValueStore:
    """Dictionary backed store, for tests and embedding."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def keys(self) -> List[str]:
        return list(self._data)


class FileKeyValueStore:
    """Stores every key in a single JSON document on disk.

    Each write replaces the whole file through a temporary file so readers
    never observe a partially written document.
    """

    def __init__(self, data_dir: Path):
        """Initialize file store.

        Args:
            data_dir: Directory holding the store file (created if missing)
        """
        self.data_dir = data_dir
        self.store_file = data_dir / STORE_FILE_NAME
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _load(self) -> Dict[str, str]:
        """Load the store document from disk."""
        if not self.store_file.exists():
            return {}
        with open(self.store_file, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Invalid store file: {self.store_file}")
        return data

    def _save(self, data: Dict[str, str]) -> None:
        """Atomically write the store document to disk."""
        fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, prefix=".store-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp_path, self.store_file)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
        logger.debug("Wrote %d keys to %s", len(data), self.store_file)

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)

    def clear(self) -> None:
        self._save({})

    def keys(self) -> List[str]:
        return list(self._load())
