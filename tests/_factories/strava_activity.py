from typing import Any, Mapping

from recap.integrations.strava.models import (
    StravaActivity,
    StravaActivityDetail,
    StravaAthlete,
    StravaSegmentEffort,
)


class StravaActivityFactory:
    def __init__(self, activity: StravaActivity | None = None):
        if activity is None:
            activity = StravaActivity(
                id=1,
                name="Test Ride",
                type="Ride",
                sport_type="Ride",
                start_date="2024-03-05T08:00:00Z",
                start_date_local="2024-03-05T09:00:00Z",
                timezone="(GMT+01:00) Europe/Paris",
                achievement_count=0,
                pr_count=0,
                kudos_count=0,
                total_photo_count=0,
                distance=40000.0,
                moving_time=5400,
                elapsed_time=5600,
                total_elevation_gain=350.0,
                average_speed=7.4,
                max_speed=15.2,
                athlete=StravaAthlete(id=1, resource_state=1),
            )
        self.activity = activity

    def make(self, update: Mapping[str, Any] | None = None) -> StravaActivity:
        """Copy the template with `update` applied.

        Overriding only `start_date` moves `start_date_local` along with it, as for
        an athlete on UTC.
        """
        update = dict(update or {})
        if "start_date" in update and "start_date_local" not in update:
            update["start_date_local"] = update["start_date"]
        return self.activity.model_copy(deep=True, update=update)

    def make_raw(self, update: Mapping[str, Any] | None = None) -> dict:
        """The activity as Strava would send it over the wire."""
        return self.make(update).model_dump(mode="json", exclude_none=True)


def make_detail(activity_id: int, kom_ranks: list[int | None]) -> StravaActivityDetail:
    """A detailed activity with one segment effort per entry in `kom_ranks`."""
    return StravaActivityDetail(
        id=activity_id,
        segment_efforts=[
            StravaSegmentEffort(id=activity_id * 100 + i, kom_rank=rank)
            for i, rank in enumerate(kom_ranks)
        ],
    )
