import logging
from dataclasses import dataclass

from recap.agg.classify import parse_activities
from recap.cache import Cache, activities_cache_key
from recap.integrations.strava.client import StravaClient
from recap.integrations.strava.errors import StravaRateLimitError
from recap.integrations.strava.models import StravaActivity

logger = logging.getLogger(__name__)


@dataclass
class LoadedActivities:
    activities: list[StravaActivity]
    from_cache: bool = False


def _read_cached_list(cache: Cache, key: str) -> list:
    """The cached raw list under `key`, or an empty list if it can't be read."""
    try:
        cached = cache.get(key, [])
    except Exception:
        logger.exception(f"Failed to read cached activities {key}")
        return []
    return cached if isinstance(cached, list) else []


async def load_year_activities(
    client: StravaClient, cache: Cache, year: int
) -> LoadedActivities:
    """Fetch a year's activities from Strava, falling back to the cache when rate limited.

    A successful fetch overwrites the cached list for the year. The fetch is tried
    once; when Strava answers 429 and a non-empty list for the year was cached
    earlier, that list is returned instead with `from_cache=True`.

    Raises:
        StravaRateLimitError: If rate limited and nothing usable is cached.
        StravaAPIError: For any other error status.
    """
    key = activities_cache_key(year)
    try:
        raw_activities = await client.get_activities(year)
    except StravaRateLimitError:
        cached = _read_cached_list(cache, key)
        if cached:
            logger.warning(
                f"Rate limited fetching {year} activities, "
                f"using {len(cached)} cached activities"
            )
            return LoadedActivities(
                activities=parse_activities(cached), from_cache=True
            )
        logger.error(f"Rate limited fetching {year} activities and nothing is cached")
        raise

    try:
        cache.set(key, raw_activities)
    except Exception:
        logger.exception(f"Failed to cache activities for {year}, continuing")
    logger.info(f"Loaded {len(raw_activities)} activities for {year} from Strava")
    return LoadedActivities(activities=parse_activities(raw_activities))
