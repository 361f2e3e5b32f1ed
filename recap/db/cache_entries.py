"""Database operations for the key/value cache table."""

import json
import logging
from datetime import datetime, timezone
from typing import Any

from psycopg.types.json import Jsonb

from .connection import get_db_cursor

logger = logging.getLogger(__name__)


def get_cache_value(key: str) -> Any | None:
    """Get the stored JSON value for a key, or None if the key is absent.

    Raises:
        ValueError: If the stored value is not valid JSON.
    """
    with get_db_cursor() as cursor:
        cursor.execute(
            """
            SELECT value
            FROM cache_entries
            WHERE key = %s
            """,
            (key,),
        )
        row = cursor.fetchone()
    if row is None:
        return None
    value = row[0]
    # JSONB comes back decoded; a plain text column would not.
    if isinstance(value, (str, bytes)):
        return json.loads(value)
    return value


def set_cache_value(key: str, value: Any) -> None:
    """Insert or overwrite the JSON value for a key."""
    now = datetime.now(timezone.utc)
    with get_db_cursor() as cursor:
        cursor.execute(
            """
            INSERT INTO cache_entries (key, value, updated_at)
            VALUES (%s, %s, %s)
            ON CONFLICT (key)
            DO UPDATE SET
                value = EXCLUDED.value,
                updated_at = EXCLUDED.updated_at
            """,
            (key, Jsonb(value), now),
        )
    logger.debug(f"Stored cache entry {key}")


def delete_cache_value(key: str) -> bool:
    """Delete the value for a key. Returns True if a row was removed."""
    with get_db_cursor() as cursor:
        cursor.execute("DELETE FROM cache_entries WHERE key = %s", (key,))
        deleted = cursor.rowcount > 0
    if deleted:
        logger.debug(f"Deleted cache entry {key}")
    return deleted
