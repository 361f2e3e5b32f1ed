import logging
import zoneinfo
from collections.abc import Collection, Iterable
from datetime import datetime, timezone

from pydantic import ValidationError

from recap.integrations.strava.models import StravaActivity
from recap.models import ClassifiedDataset, Month, MONTHS, empty_months

logger = logging.getLogger(__name__)


def parse_start_date(raw: str | None) -> datetime | None:
    """Parse a Strava ISO-8601 timestamp, returning None when it is missing or invalid.

    Naive timestamps are assumed to be UTC.
    """
    if not raw or not raw.strip():
        return None
    try:
        parsed = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def activity_month(start: datetime, user_timezone: str | None = None) -> Month:
    """Return the calendar month an activity starts in, local to `user_timezone`."""
    if user_timezone is not None:
        start = start.astimezone(zoneinfo.ZoneInfo(user_timezone))
    else:
        start = start.astimezone(timezone.utc)
    return MONTHS[start.month - 1]


def local_month(
    activity: StravaActivity, start: datetime, user_timezone: str | None = None
) -> Month:
    """The month an activity belongs to on the athlete's own calendar.

    With an explicit `user_timezone` the UTC start is converted into it. Otherwise
    the wall-clock `start_date_local` Strava records for each activity is used, and
    UTC only when that is missing or unparseable.
    """
    if user_timezone is None:
        # start_date_local is local wall-clock time despite its trailing "Z".
        local_start = parse_start_date(activity.start_date_local)
        if local_start is not None:
            return MONTHS[local_start.month - 1]
    return activity_month(start, user_timezone)


def parse_activities(raw_activities: Iterable[object]) -> list[StravaActivity]:
    """Validate raw activity JSON one record at a time.

    Records that are not objects or have no usable id are dropped and logged;
    the rest of the list is kept.
    """
    activities: list[StravaActivity] = []
    for raw in raw_activities:
        try:
            activities.append(StravaActivity.model_validate(raw))
        except ValidationError as e:
            logger.warning(
                f"Dropping unparseable activity record: {e.error_count()} errors, "
                f"record={raw!r:.200}"
            )
    return activities


def classify(
    activities: Iterable[StravaActivity],
    filters: Collection[str] = (),
    user_timezone: str | None = None,
) -> ClassifiedDataset:
    """Bucket one period's activities by month and by sport type.

    Args:
        activities: The full, unfiltered activity list for the period.
        filters: Sport types to keep. Empty means keep everything.
        user_timezone: IANA zone used to decide which month an activity falls in.
            If None, each activity's own `start_date_local` decides the month.

    Activities with no sport type or no parseable start date are skipped and
    reported, never fatal. `available_sports` is collected before the filter is
    applied, so it is the same whatever the filter is.
    """
    wanted = set(filters)
    all_activities: list[StravaActivity] = []
    by_month = empty_months()
    by_type: dict[str, list[StravaActivity]] = {}
    with_photos: list[StravaActivity] = []
    # dict keeps first-seen order, unlike set
    available_sports: dict[str, None] = {}
    skipped = 0

    for activity in activities:
        start = parse_start_date(activity.start_date)
        if not activity.sport_type or start is None:
            skipped += 1
            logger.warning(
                f"Skipping activity {activity.id} with missing/invalid sport_type "
                f"or start_date: sport_type={activity.sport_type!r}, "
                f"start_date={activity.start_date!r}"
            )
            continue

        sport_type = activity.sport_type
        available_sports.setdefault(sport_type, None)

        if wanted and sport_type not in wanted:
            continue

        by_type.setdefault(sport_type, []).append(activity)
        by_month[local_month(activity, start, user_timezone)].append(activity)
        if activity.total_photo_count and activity.total_photo_count > 0:
            with_photos.append(activity)
        all_activities.append(activity)

    logger.debug(
        f"Classified {len(all_activities)} activities into {len(by_type)} sport types "
        f"(skipped {skipped} invalid, {len(available_sports)} sports available)"
    )
    return ClassifiedDataset(
        all=all_activities,
        by_month=by_month,
        by_type=by_type,
        available_sports=list(available_sports),
        with_photos=with_photos,
    )
