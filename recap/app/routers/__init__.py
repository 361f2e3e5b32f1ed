from .activities import router as activities_router
from .athlete import router as athlete_router
from .koms import router as koms_router

__all__ = [
    "activities_router",
    "athlete_router",
    "koms_router",
]
