from .strava_activity import StravaActivityFactory, make_detail
from .fakes import FakeStravaClient, InMemoryCache

__all__ = [
    "StravaActivityFactory",
    "make_detail",
    "FakeStravaClient",
    "InMemoryCache",
]
