import asyncio
import logging

from recap.cache import Cache
from recap.models import ClassifiedDataset, EnrichmentSnapshot, EnrichmentStatus
from .engine import (
    ActivityDetailSource,
    EnrichmentEngine,
    REQUEST_DELAY_SECONDS,
    candidate_ids,
)

logger = logging.getLogger(__name__)


class EnrichmentOrchestrator:
    """Ties classified datasets to the lifecycle of one enrichment engine per year.

    Runs are scheduled as asyncio tasks on the running loop. At most one run is in
    flight at a time; triggers that arrive while one is running are ignored.
    """

    def __init__(
        self,
        client: ActivityDetailSource,
        cache: Cache,
        request_delay: float = REQUEST_DELAY_SECONDS,
    ):
        self.client = client
        self.cache = cache
        self.request_delay = request_delay
        self.year: int | None = None
        self.dataset: ClassifiedDataset | None = None
        self.engine: EnrichmentEngine | None = None
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def status(self) -> EnrichmentStatus:
        if self.engine is None:
            return EnrichmentStatus.IDLE
        return self.engine.status

    @property
    def achievements(self) -> dict[int, int]:
        if self.engine is None:
            return {}
        return dict(self.engine.achievements)

    def snapshot(self) -> EnrichmentSnapshot:
        if self.engine is None:
            return EnrichmentSnapshot(year=self.year)
        state = self.engine.state
        return EnrichmentSnapshot(
            year=self.year,
            status=state.status,
            progress=state.progress.model_copy(),
            pause_reason=state.pause_reason,
            achievements=dict(self.engine.achievements),
        )

    def on_dataset(
        self, year: int, dataset: ClassifiedDataset
    ) -> asyncio.Task | None:
        """Handle a freshly classified dataset.

        A new year throws away the previous engine and its state. A run is started
        when the dataset is new, has at least one activity, and nothing is running.
        """
        if year != self.year or self.engine is None:
            self._replace_engine(year)

        if dataset is self.dataset:
            return None
        self.dataset = dataset

        if dataset.is_empty:
            logger.debug(f"No activities for {year}, not starting enrichment")
            return None
        if self.is_running:
            logger.info(f"Enrichment for {year} already running, ignoring new dataset")
            return None
        return self._start(resume=False)

    def resume(self) -> asyncio.Task | None:
        """Continue a paused run. Does nothing unless the engine is paused."""
        if self.engine is None or self.engine.status != EnrichmentStatus.PAUSED:
            logger.debug("Resume requested but enrichment is not paused")
            return None
        if self.is_running:
            return None
        return self._start(resume=True)

    def refresh(self) -> asyncio.Task | None:
        """Start a new pass over the current candidates, using the cache as baseline."""
        if self.engine is None or self.dataset is None:
            logger.debug("Refresh requested before any dataset arrived")
            return None
        if self.is_running:
            logger.info(f"Enrichment for {self.year} already running, ignoring refresh")
            return None
        return self._start(resume=False)

    async def wait(self) -> None:
        """Wait for the current run, if any, to stop."""
        if self._task is not None:
            await self._task

    def close(self) -> None:
        """Discard the current engine and cancel its run, if any."""
        if self.engine is not None:
            self.engine.discard()
        task, self._task = self._task, None
        if task is not None and not task.done():
            logger.info(f"Cancelling enrichment run for {self.year}")
            task.cancel()

    def _replace_engine(self, year: int) -> None:
        if self.engine is not None:
            logger.info(
                f"Discarding enrichment state for {self.engine.year} "
                f"(status={self.engine.status})"
            )
            self.engine.discard()
        self.year = year
        self.dataset = None
        self._task = None
        self.engine = EnrichmentEngine(
            self.client, self.cache, year, request_delay=self.request_delay
        )

    def _start(self, resume: bool) -> asyncio.Task:
        if self.engine is None:
            raise RuntimeError("No enrichment engine; a dataset must arrive first")
        dataset = self.dataset or ClassifiedDataset()
        candidates = [] if resume else candidate_ids(dataset.all)
        self._task = asyncio.create_task(self.engine.run(candidates, resume=resume))
        return self._task
