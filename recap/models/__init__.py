from .activity import ClassifiedDataset, Month, MONTHS, empty_months
from .enrichment import (
    EnrichmentStatus,
    EnrichmentState,
    EnrichmentResult,
    EnrichmentSnapshot,
    Progress,
)

__all__ = [
    "ClassifiedDataset",
    "Month",
    "MONTHS",
    "empty_months",
    "EnrichmentStatus",
    "EnrichmentState",
    "EnrichmentResult",
    "EnrichmentSnapshot",
    "Progress",
]
