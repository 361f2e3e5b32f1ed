from __future__ import annotations

from pydantic import BaseModel, ConfigDict, TypeAdapter


class StravaAthlete(BaseModel):
    id: int
    resource_state: int | None = None


class StravaActivity(BaseModel):
    """A summary activity pulled from the Strava athlete activity list.

    `sport_type` and `start_date` are left optional and unparsed here. Strava
    occasionally returns records without them and the classifier decides what to do
    with those, so a single odd record never fails validation of the whole list.
    """

    model_config = ConfigDict(extra="allow")

    id: int
    name: str | None = None
    type: str | None = None
    sport_type: str | None = None
    start_date: str | None = None
    start_date_local: str | None = None
    timezone: str | None = None
    achievement_count: int | None = 0
    pr_count: int | None = None
    kudos_count: int | None = None
    total_photo_count: int | None = None
    distance: float | None = None
    moving_time: int | None = None
    elapsed_time: int | None = None
    total_elevation_gain: float | None = None
    average_speed: float | None = None
    max_speed: float | None = None
    average_heartrate: float | None = None
    max_heartrate: float | None = None
    average_watts: float | None = None
    average_temp: float | None = None
    gear_id: str | None = None
    athlete: StravaAthlete | None = None


activity_list_adapter = TypeAdapter(list[StravaActivity])


class StravaSegmentEffort(BaseModel):
    """One effort on a segment within a detailed activity."""

    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    name: str | None = None
    # Rank among all athletes on the segment leaderboard; 1 means a KOM/QOM.
    kom_rank: int | None = None
    pr_rank: int | None = None


class StravaActivityDetail(BaseModel):
    """A detailed activity, as returned by GET /activities/{id}."""

    model_config = ConfigDict(extra="ignore")

    id: int
    achievement_count: int | None = None
    segment_efforts: list[StravaSegmentEffort] = []

    def kom_count(self) -> int:
        """Count the segment efforts ranked first among all athletes."""
        return sum(1 for effort in self.segment_efforts if effort.kom_rank == 1)


class StravaZoneRange(BaseModel):
    """One zone. The top zone is open-ended and Strava reports its max as -1."""

    min: int
    max: int


class StravaHeartRateZones(BaseModel):
    custom_zones: bool = False
    zones: list[StravaZoneRange] = []


class StravaPowerZones(BaseModel):
    zones: list[StravaZoneRange] = []


class StravaAthleteZones(BaseModel):
    """The athlete's training zones, as returned by GET /athlete/zones."""

    model_config = ConfigDict(extra="allow")

    heart_rate: StravaHeartRateZones | None = None
    power: StravaPowerZones | None = None


class StravaPhoto(BaseModel):
    """A photo attached to an activity.

    `urls` and `sizes` are keyed by the requested size, as a string.
    """

    model_config = ConfigDict(extra="allow")

    unique_id: str | None = None
    activity_id: int | None = None
    activity_name: str | None = None
    caption: str | None = None
    created_at: str | None = None
    created_at_local: str | None = None
    default_photo: bool = False
    urls: dict[str, str] = {}
    sizes: dict[str, list[int]] = {}


photo_list_adapter = TypeAdapter(list[StravaPhoto])
