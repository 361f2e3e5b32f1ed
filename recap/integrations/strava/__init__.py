from .client import StravaClient
from .errors import StravaAPIError, StravaRateLimitError
from .models import (
    StravaActivity,
    StravaActivityDetail,
    StravaAthlete,
    StravaAthleteZones,
    StravaPhoto,
    StravaSegmentEffort,
)

__all__ = [
    "StravaClient",
    "StravaAPIError",
    "StravaRateLimitError",
    "StravaActivity",
    "StravaActivityDetail",
    "StravaAthlete",
    "StravaAthleteZones",
    "StravaPhoto",
    "StravaSegmentEffort",
]
