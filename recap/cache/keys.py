"""Cache keys and value shapes shared by the loader and the enrichment engine."""

import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)


def activities_cache_key(year: int) -> str:
    return f"activities_cache_{year}"


def kom_cache_key(year: int) -> str:
    return f"kom_cache_{year}"


def encode_achievements(achievements: Mapping[int, int]) -> dict[str, int]:
    """JSON objects only have string keys, so ids are stored as strings."""
    return {str(activity_id): count for activity_id, count in achievements.items()}


def decode_achievements(raw: Any) -> dict[int, int]:
    """Rebuild an achievement map from its cached form.

    Anything that is not a mapping of integer-like ids to non-negative integer
    counts is ignored.
    """
    if not isinstance(raw, Mapping):
        if raw is not None:
            logger.warning(f"Ignoring cached achievements of type {type(raw).__name__}")
        return {}

    achievements: dict[int, int] = {}
    for key, value in raw.items():
        try:
            activity_id = int(key)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring cached achievement with bad id {key!r}")
            continue
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            logger.warning(f"Ignoring cached achievement {key}={value!r}")
            continue
        achievements[activity_id] = value
    return achievements
