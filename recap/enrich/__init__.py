from .engine import (
    EnrichmentEngine,
    ActivityDetailSource,
    candidate_ids,
    REQUEST_DELAY_SECONDS,
    RATE_LIMIT_PAUSE_REASON,
)
from .orchestrator import EnrichmentOrchestrator

__all__ = [
    "EnrichmentEngine",
    "EnrichmentOrchestrator",
    "ActivityDetailSource",
    "candidate_ids",
    "REQUEST_DELAY_SECONDS",
    "RATE_LIMIT_PAUSE_REASON",
]
