from typing import Literal

from pydantic import BaseModel, Field

from recap.integrations.strava.models import StravaActivity

Month = Literal[
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

MONTHS: list[Month] = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


def empty_months() -> dict[Month, list[StravaActivity]]:
    return {month: [] for month in MONTHS}


class ClassifiedDataset(BaseModel):
    """The filtered, bucketed view of one year's activities.

    `all`, `by_month` and `by_type` are always derived together by `classify`;
    `available_sports` is computed from the unfiltered records.
    """

    all: list[StravaActivity] = Field(default_factory=list)
    by_month: dict[Month, list[StravaActivity]] = Field(default_factory=empty_months)
    by_type: dict[str, list[StravaActivity]] = Field(default_factory=dict)
    available_sports: list[str] = Field(default_factory=list)
    with_photos: list[StravaActivity] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return len(self.all) == 0
