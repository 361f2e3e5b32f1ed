"""Models describing the state of a KOM enrichment run."""

from enum import StrEnum

from pydantic import BaseModel, Field


class EnrichmentStatus(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class Progress(BaseModel):
    completed: int = 0
    total: int = 0


class EnrichmentState(BaseModel):
    """Mutable state of one engine, owned exclusively by that engine."""

    status: EnrichmentStatus = EnrichmentStatus.IDLE
    progress: Progress = Field(default_factory=Progress)
    pending: list[int] = Field(
        default_factory=list,
        description="Unresolved activity ids, in the order they will be fetched",
    )
    pause_reason: str | None = None


class EnrichmentResult(BaseModel):
    """What a call to `EnrichmentEngine.run` hands back."""

    status: EnrichmentStatus
    achievements: dict[int, int]


class EnrichmentSnapshot(BaseModel):
    """Read-only view of the orchestrator, as served to the UI."""

    year: int | None = None
    status: EnrichmentStatus = EnrichmentStatus.IDLE
    progress: Progress = Field(default_factory=Progress)
    pause_reason: str | None = None
    achievements: dict[int, int] = Field(default_factory=dict)
