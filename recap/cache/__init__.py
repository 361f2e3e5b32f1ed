from .store import Cache, FileCache, DatabaseCache, NamespacedCache
from .keys import (
    activities_cache_key,
    kom_cache_key,
    encode_achievements,
    decode_achievements,
)

__all__ = [
    "Cache",
    "FileCache",
    "DatabaseCache",
    "NamespacedCache",
    "activities_cache_key",
    "kom_cache_key",
    "encode_achievements",
    "decode_achievements",
]
