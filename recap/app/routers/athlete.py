from fastapi import APIRouter, Depends

from recap.app.dependencies import activity_session, strava_http_errors
from recap.integrations.strava.models import StravaAthleteZones
from recap.session import ActivitySession

router = APIRouter(prefix="/athlete", tags=["athlete"])


@router.get("/zones", response_model=StravaAthleteZones)
async def read_athlete_zones(
    session: ActivitySession = Depends(activity_session),
) -> StravaAthleteZones:
    """Get the athlete's heart rate and power zones, straight from Strava."""
    with strava_http_errors():
        return await session.client.get_athlete_zones()
