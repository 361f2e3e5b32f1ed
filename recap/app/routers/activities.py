import logging

from fastapi import APIRouter, Depends, Query

from recap.app.dependencies import (
    activity_session,
    load_or_raise,
    session_for_year,
    strava_http_errors,
)
from recap.app.models import ActivitiesResponse, ActivityPhotosResponse
from recap.session import ActivitySession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/activities", tags=["activities"])


def _activities_response(session: ActivitySession, year: int) -> ActivitiesResponse:
    dataset = session.dataset
    return ActivitiesResponse(
        year=year,
        filters=session.filters,
        from_cache=session.from_cache,
        all=dataset.all,
        by_month=dataset.by_month,
        by_type=dataset.by_type,
        available_sports=dataset.available_sports,
        with_photos=dataset.with_photos,
    )


@router.get("/{year}", response_model=ActivitiesResponse)
async def read_activities(
    year: int,
    sport_type: list[str] = Query(
        default=[],
        description="Sport types to keep. Repeat the parameter for several; "
        "omit it to keep every sport.",
    ),
    session: ActivitySession = Depends(session_for_year),
) -> ActivitiesResponse:
    """Get a year's activities bucketed by month and by sport type.

    The first request for a year fetches it from Strava; changing the sport filter
    only re-classifies. Either can kick off KOM enrichment in the background.
    """
    session.set_filters(sport_type)
    return _activities_response(session, year)


@router.post("/{year}/retry", response_model=ActivitiesResponse)
async def retry_activities(
    year: int,
    session: ActivitySession = Depends(activity_session),
) -> ActivitiesResponse:
    """Re-fetch a year's activities from Strava, e.g. after a cached list was served."""
    logger.info(f"Retrying activity fetch for {year}")
    await load_or_raise(session, year, retry=True)
    return _activities_response(session, year)


@router.get("/{year}/photos", response_model=ActivityPhotosResponse)
async def read_featured_photos(
    year: int, session: ActivitySession = Depends(session_for_year)
) -> ActivityPhotosResponse:
    """Get the photos of one activity picked at random from the filtered year."""
    featured = session.photo_activity
    with strava_http_errors():
        photos = await session.featured_photos()
    return ActivityPhotosResponse(
        activity_id=featured.id if featured else None,
        activity_name=featured.name if featured else None,
        photos=photos,
    )
