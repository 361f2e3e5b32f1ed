"""Incremental KOM enrichment.

The engine walks a list of candidate activities, fetching each one's detail from
Strava strictly one at a time, and counts the segment efforts ranked first among all
athletes. The resulting achievement map is written to the cache after every
resolved activity so an interrupted run loses at most the request in flight.

A 429 from Strava pauses the run: the unresolved ids, starting with the one that
was rate limited, are kept in `state.pending` and a later `run(..., resume=True)`
picks up exactly there. Any other failure resolves that one activity as zero KOMs.
"""

import asyncio
import logging
from collections.abc import Iterable, Sequence
from typing import Protocol

from recap.cache import Cache, kom_cache_key, encode_achievements, decode_achievements
from recap.integrations.strava.errors import StravaRateLimitError
from recap.integrations.strava.models import StravaActivity, StravaActivityDetail
from recap.models import EnrichmentResult, EnrichmentState, EnrichmentStatus, Progress

logger = logging.getLogger(__name__)

# Spacing between detail requests, to stay under Strava's observed rate limit.
REQUEST_DELAY_SECONDS = 0.15
RATE_LIMIT_PAUSE_REASON = "Rate limited (429) - resume to continue"


class ActivityDetailSource(Protocol):
    async def get_activity_detail(self, activity_id: int) -> StravaActivityDetail: ...


def candidate_ids(activities: Iterable[StravaActivity]) -> list[int]:
    """Ids of the activities worth enriching, in order.

    Activities with no recorded achievements cannot hold a KOM, so they are skipped.
    """
    return [a.id for a in activities if a.achievement_count and a.achievement_count > 0]


class EnrichmentEngine:
    """Builds the achievement map for one year.

    Each call to `run` is stamped with a run id. Results are only applied while that
    id is still current and the engine has not been discarded, so a request that
    resolves after a refresh or a year change never touches the map or the cache.
    """

    def __init__(
        self,
        client: ActivityDetailSource,
        cache: Cache,
        year: int,
        request_delay: float = REQUEST_DELAY_SECONDS,
    ):
        self.client = client
        self.cache = cache
        self.year = year
        self.request_delay = request_delay
        self.state = EnrichmentState()
        self.achievements: dict[int, int] = {}
        self._run_id = 0
        self._discarded = False

    @property
    def status(self) -> EnrichmentStatus:
        return self.state.status

    @property
    def cache_key(self) -> str:
        return kom_cache_key(self.year)

    def result(self) -> EnrichmentResult:
        return EnrichmentResult(
            status=self.state.status, achievements=dict(self.achievements)
        )

    def discard(self) -> None:
        """Invalidate every run of this engine. Late results are dropped."""
        self._discarded = True
        self._run_id += 1

    def _is_current(self, run_id: int) -> bool:
        return not self._discarded and run_id == self._run_id

    def _load_cached(self) -> None:
        try:
            cached = decode_achievements(self.cache.get(self.cache_key, {}))
        except Exception:
            logger.exception(f"Failed to read cached achievements for {self.year}")
            cached = {}
        # Entries already in memory win; the map never loses entries.
        self.achievements = {**cached, **self.achievements}

    def _persist(self) -> None:
        try:
            self.cache.set(self.cache_key, encode_achievements(self.achievements))
        except Exception:
            logger.exception(
                f"Failed to persist achievements for {self.year}, continuing"
            )

    async def run(
        self, candidates: Sequence[int], resume: bool = False
    ) -> EnrichmentResult:
        """Resolve the KOM count of every candidate activity.

        Args:
            candidates: Activity ids to enrich, in fetch order. Ignored on resume.
            resume: Continue a paused run from `state.pending` instead of starting
                over. A no-op unless the engine is paused with pending work.

        Returns:
            The status the run stopped in (completed or paused) and the map.
        """
        if self._discarded:
            return self.result()
        if resume:
            if self.state.status != EnrichmentStatus.PAUSED or not self.state.pending:
                logger.debug(f"Nothing to resume for {self.year}")
                return self.result()
            ordered = list(self.state.pending)
            total = self.state.progress.total
        else:
            if self.state.status == EnrichmentStatus.RUNNING:
                logger.info(f"Enrichment for {self.year} is already running")
                return self.result()
            ordered = list(candidates)
            total = len(ordered)

        self._run_id += 1
        run_id = self._run_id
        self._load_cached()

        to_fetch = [i for i in ordered if i not in self.achievements]
        self.state = EnrichmentState(
            status=EnrichmentStatus.RUNNING,
            progress=Progress(completed=total - len(to_fetch), total=total),
            pending=list(to_fetch),
        )
        logger.info(
            f"{'Resuming' if resume else 'Starting'} KOM enrichment for {self.year}: "
            f"{len(to_fetch)} to fetch, {total - len(to_fetch)}/{total} already cached"
        )

        for index, activity_id in enumerate(to_fetch):
            if not self._is_current(run_id):
                logger.info(f"Stopping stale enrichment run for {self.year}")
                return self.result()

            fetched = False
            try:
                detail = await self.client.get_activity_detail(activity_id)
                koms = detail.kom_count()
                fetched = True
            except StravaRateLimitError:
                if not self._is_current(run_id):
                    return self.result()
                self.state.pending = to_fetch[index:]
                self.state.status = EnrichmentStatus.PAUSED
                self.state.pause_reason = RATE_LIMIT_PAUSE_REASON
                logger.warning(
                    f"Rate limited on activity {activity_id}, pausing enrichment for "
                    f"{self.year} with {len(self.state.pending)} activities pending"
                )
                return self.result()
            except Exception as e:
                logger.warning(
                    f"Failed to fetch activity {activity_id}, recording 0 KOMs: "
                    f"{type(e).__name__}: {e}"
                )
                koms = 0

            if not self._is_current(run_id):
                logger.info(f"Discarding late result for activity {activity_id}")
                return self.result()

            self.achievements[activity_id] = koms
            self._persist()
            self.state.progress.completed += 1
            self.state.pending = to_fetch[index + 1 :]
            logger.debug(
                f"Activity {activity_id}: {koms} KOMs "
                f"({self.state.progress.completed}/{self.state.progress.total})"
            )

            if fetched and self.request_delay > 0:
                await asyncio.sleep(self.request_delay)

        if self._is_current(run_id):
            self.state.status = EnrichmentStatus.COMPLETED
            self.state.pending = []
            logger.info(
                f"KOM enrichment for {self.year} completed: "
                f"{sum(self.achievements.values())} KOMs across "
                f"{len(self.achievements)} activities"
            )
        return self.result()
