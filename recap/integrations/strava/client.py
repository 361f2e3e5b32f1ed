from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
import logging

import httpx

from .errors import StravaAPIError, StravaRateLimitError
from .models import (
    StravaActivityDetail,
    StravaAthlete,
    StravaAthleteZones,
    StravaPhoto,
    photo_list_adapter,
)

logger = logging.getLogger(__name__)

API_URL = "https://www.strava.com/api/v3"
PER_PAGE = 200
PHOTO_SIZE = 2000
# Strava has no meaningful data before this year.
FIRST_SUPPORTED_YEAR = 2010


def year_bounds(year: int) -> tuple[int, int]:
    """Return the (after, before) epoch timestamps bounding a calendar year in UTC."""
    after = datetime(year, 1, 1, tzinfo=timezone.utc)
    before = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    return int(after.timestamp()), int(before.timestamp())


@dataclass
class StravaClient:
    """Thin async client over the Strava v3 API.

    The access token is treated as opaque: it is never refreshed or inspected here.
    """

    access_token: str
    base_url: str = API_URL
    timeout: float = 20
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)

    def _auth_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
        }

    async def _request(
        self, method: str, path: str, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        """Make a single API request, translating error statuses into exceptions.

        Raises:
            StravaRateLimitError: On a 429 response.
            StravaAPIError: On any other non-2xx response.
            httpx.HTTPError: On transport failures.
        """
        url = f"{self.base_url.rstrip('/')}{path}"
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self.transport
        ) as client:
            response = await client.request(
                method, url, headers=self._auth_headers(), params=params
            )

        if response.status_code == 429:
            logger.warning(f"Strava rate limit hit for {method} {path}")
            raise StravaRateLimitError(f"Failed api call to {url}")
        if not response.is_success:
            logger.error(
                f"Strava API returned error for {method} {path}: "
                f"{response.status_code} {response.text}"
            )
            raise StravaAPIError(response.status_code, f"Failed api call to {url}")
        return response

    async def get_athlete(self) -> StravaAthlete:
        """Get the athlete the access token belongs to."""
        response = await self._request("GET", "/athlete")
        return StravaAthlete.model_validate(response.json())

    async def get_activities(self, year: int) -> list[dict]:
        """Get the raw activity list for one calendar year.

        Pages through the athlete's activities until a short page comes back. Each
        page is reversed before it is appended, so records within a page run newest
        first. The records are returned unvalidated so they can be cached exactly as
        received.
        """
        current_year = datetime.now(timezone.utc).year
        if year < FIRST_SUPPORTED_YEAR or year > current_year:
            logger.info(f"Year {year} is outside the supported range, skipping fetch")
            return []

        after, before = year_bounds(year)
        page = 1
        activities: list[dict] = []
        logger.info(f"Fetching Strava activities for {year} (page size: {PER_PAGE})")

        while True:
            params = {
                "after": after,
                "before": before,
                "page": page,
                "per_page": PER_PAGE,
            }
            logger.debug(f"Requesting Strava activities page {page}: {params}")
            response = await self._request("GET", "/athlete/activities", params=params)
            payload: list[dict] = response.json()
            activities.extend(reversed(payload))

            if len(payload) < PER_PAGE:
                break
            page += 1

        logger.info(
            f"Completed fetching activities for {year}: "
            f"{len(activities)} total across {page} pages"
        )
        return activities

    async def get_activity_detail(self, activity_id: int) -> StravaActivityDetail:
        """Get one detailed activity including its segment efforts."""
        response = await self._request("GET", f"/activities/{activity_id}")
        return StravaActivityDetail.model_validate(response.json())

    async def get_athlete_zones(self) -> StravaAthleteZones:
        """Get the authenticated athlete's heart rate and power zones."""
        response = await self._request("GET", "/athlete/zones")
        return StravaAthleteZones.model_validate(response.json())

    async def get_activity_photos(
        self, activity_id: int, size: int = PHOTO_SIZE
    ) -> list[StravaPhoto]:
        """Get the photos attached to one activity, with URLs for the given size."""
        params = {"size": size, "photo_sources": "true"}
        response = await self._request(
            "GET", f"/activities/{activity_id}/photos", params=params
        )
        return photo_list_adapter.validate_python(response.json())
