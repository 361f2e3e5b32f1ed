from pydantic import BaseModel, Field

from recap.integrations.strava.models import StravaActivity, StravaPhoto
from recap.models import EnrichmentSnapshot, Month
from .env_loader import EnvironmentName


class ActivitiesResponse(BaseModel):
    """A year's classified activities under the current sport filter."""

    year: int
    filters: list[str]
    from_cache: bool = Field(
        description="True when Strava rate limited the list and a cached copy was served"
    )
    all: list[StravaActivity]
    by_month: dict[Month, list[StravaActivity]]
    by_type: dict[str, list[StravaActivity]]
    available_sports: list[str]
    with_photos: list[StravaActivity]


class ActivityPhotosResponse(BaseModel):
    """Photos of the activity featured for the current filter."""

    activity_id: int | None = Field(
        description="The featured activity, or None when no activity has photos"
    )
    activity_name: str | None = None
    photos: list[StravaPhoto]


class EnrichmentCommandResponse(BaseModel):
    """Response for resume/refresh commands."""

    started: bool = Field(description="Whether the command started a new run")
    snapshot: EnrichmentSnapshot


class EnvironmentResponse(BaseModel):
    environment: EnvironmentName
