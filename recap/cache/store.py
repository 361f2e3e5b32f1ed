"""Durable key/value stores holding JSON-serializable values.

Unreadable or corrupt entries are reported as misses: `get` returns the default
instead of raising.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Protocol

from recap.db.cache_entries import (
    get_cache_value,
    set_cache_value,
    delete_cache_value,
)

logger = logging.getLogger(__name__)


class Cache(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...


_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class FileCache:
    """One JSON file per key inside a directory.

    Writes go to a temporary file which then replaces the target, so a crash mid
    write leaves the previous value intact.
    """

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def get(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        if not path.exists():
            return default
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable cache entry {key}: {e}")
            return default

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(value), encoding="utf-8")
        tmp_path.replace(path)

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class DatabaseCache:
    """Cache backed by the Postgres `cache_entries` table."""

    def get(self, key: str, default: Any = None) -> Any:
        try:
            value = get_cache_value(key)
        except ValueError as e:
            logger.warning(f"Ignoring unreadable cache entry {key}: {e}")
            return default
        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        set_cache_value(key, value)

    def remove(self, key: str) -> None:
        delete_cache_value(key)


class NamespacedCache:
    """A view of another cache where every key is prefixed with `namespace`.

    Several users share one backend this way without ever seeing each other's
    entries.
    """

    def __init__(self, cache: Cache, namespace: str):
        self.cache = cache
        self.namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get(self, key: str, default: Any = None) -> Any:
        return self.cache.get(self._key(key), default)

    def set(self, key: str, value: Any) -> None:
        self.cache.set(self._key(key), value)

    def remove(self, key: str) -> None:
        self.cache.remove(self._key(key))
