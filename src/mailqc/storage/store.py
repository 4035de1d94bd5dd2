"""Key-value stores for persisted state.

``KeyValueStore`` mirrors the browser local-storage API the dashboard was
built on: string values under string keys, whole-value reads and writes,
no transactions. Repositories receive a store by injection.
"""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

from ..errors import StorageError, StorageQuotaError
from ..utils.log import get_logger

logger = get_logger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol that all stores must implement."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...


def _check_key(key: str) -> str:
    if not key or not _KEY_PATTERN.match(key):
        raise ValueError(f"Invalid storage key: {key!r}")
    return key


class MemoryStore:
    """In-process store. An optional byte quota makes writes fail like a full browser store."""

    def __init__(self, quota_bytes: Optional[int] = None):
        self._data: dict[str, str] = {}
        self.quota_bytes = quota_bytes

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(_check_key(key))

    def set_item(self, key: str, value: str) -> None:
        _check_key(key)
        if self.quota_bytes is not None:
            used = sum(len(v.encode("utf-8")) for k, v in self._data.items() if k != key)
            if used + len(value.encode("utf-8")) > self.quota_bytes:
                raise StorageQuotaError(f"Storage quota of {self.quota_bytes} bytes exceeded")
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(_check_key(key), None)

    def keys(self) -> list[str]:
        return list(self._data)

    def clear(self) -> None:
        self._data.clear()


class JsonFileStore:
    """One ``<key>.json`` file per key under a directory."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        return self.root / f"{_check_key(key)}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read {path.name}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            tmp.write_text(value, encoding="utf-8")
            os.replace(tmp, path)
        except OSError as e:
            if tmp.exists():
                tmp.unlink()
            raise StorageError(f"Failed to write {path.name}: {e}") from e

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def keys(self) -> list[str]:
        if not self.root.exists():
            return []
        return sorted(p.stem for p in self.root.glob("*.json"))

    def clear(self) -> None:
        for key in self.keys():
            self.remove_item(key)


def read_json(store: KeyValueStore, key: str, default: Any) -> Any:
    """Read and decode a JSON value. Never raises: failures log and return ``default``."""
    try:
        raw = store.get_item(key)
    except StorageError as e:
        logger.error("Error reading %s: %s", key, e)
        return default
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error("Corrupt JSON under %s: %s", key, e)
        return default


def write_json(store: KeyValueStore, key: str, value: Any) -> bool:
    """Encode and write a JSON value. Returns False (and logs) on failure."""
    try:
        store.set_item(key, json.dumps(value, ensure_ascii=False))
        return True
    except (StorageError, TypeError, ValueError) as e:
        logger.error("Error saving %s: %s", key, e)
        return False
