"""Per-user view state: selected year, sport filter and the derived data."""

import logging
import random
from collections.abc import Iterable

from recap.agg.classify import classify
from recap.cache import Cache
from recap.enrich import EnrichmentOrchestrator, REQUEST_DELAY_SECONDS
from recap.integrations.strava.client import StravaClient
from recap.integrations.strava.models import StravaActivity, StravaPhoto
from recap.load.strava import load_year_activities
from recap.models import ClassifiedDataset

logger = logging.getLogger(__name__)


class ActivitySession:
    """Holds one user's current year, filter, and enrichment orchestrator.

    Classification is re-run explicitly whenever the activity list or the filter
    changes, and every resulting dataset is handed to the orchestrator. Each new
    dataset also picks one of its photo activities at random to feature.
    """

    def __init__(
        self,
        client: StravaClient,
        cache: Cache,
        user_timezone: str | None = None,
        request_delay: float = REQUEST_DELAY_SECONDS,
        rng: random.Random | None = None,
    ):
        self.client = client
        self.cache = cache
        self.user_timezone = user_timezone
        self.orchestrator = EnrichmentOrchestrator(
            client, cache, request_delay=request_delay
        )
        self.rng = rng or random.Random()
        self.year: int | None = None
        self.filters: list[str] = []
        self.activities: list[StravaActivity] = []
        self.from_cache = False
        self.dataset = ClassifiedDataset()
        self.photo_activity: StravaActivity | None = None
        self._photos: dict[int, list[StravaPhoto]] = {}

    async def load_year(self, year: int) -> ClassifiedDataset:
        """Fetch and classify a year's activities.

        Switching to a different year clears the sport filter.

        Raises:
            StravaRateLimitError: If rate limited with nothing cached for the year.
            StravaAPIError: For other Strava errors.
        """
        loaded = await load_year_activities(self.client, self.cache, year)
        if year != self.year:
            self.filters = []
        self.year = year
        self.activities = loaded.activities
        self.from_cache = loaded.from_cache
        return self._reclassify()

    async def retry(self) -> ClassifiedDataset:
        """Re-fetch the current year, e.g. after being served a cached list."""
        if self.year is None:
            raise ValueError("No year has been loaded yet")
        self.from_cache = False
        return await self.load_year(self.year)

    def set_filters(self, filters: Iterable[str]) -> ClassifiedDataset:
        new_filters = list(dict.fromkeys(filters))
        if new_filters == self.filters:
            return self.dataset
        self.filters = new_filters
        return self._reclassify()

    async def featured_photos(self) -> list[StravaPhoto]:
        """Photos of the featured activity, fetched once per activity."""
        if self.photo_activity is None:
            return []
        activity_id = self.photo_activity.id
        if activity_id not in self._photos:
            self._photos[activity_id] = await self.client.get_activity_photos(
                activity_id
            )
        return self._photos[activity_id]

    def close(self) -> None:
        """Stop background work. The session must not be used afterwards."""
        self.orchestrator.close()

    def _reclassify(self) -> ClassifiedDataset:
        self.dataset = classify(self.activities, self.filters, self.user_timezone)
        with_photos = self.dataset.with_photos
        self.photo_activity = self.rng.choice(with_photos) if with_photos else None
        if self.year is not None:
            self.orchestrator.on_dataset(self.year, self.dataset)
        return self.dataset
