from collections.abc import Mapping

from pydantic import BaseModel

from recap.models import ClassifiedDataset, Month


class MonthKoms(BaseModel):
    """KOM totals for one month, split by sport type."""

    month: Month
    by_sport: dict[str, int]


class KomsOverTime(BaseModel):
    months: list[MonthKoms]
    total: int


def koms_by_month(
    dataset: ClassifiedDataset, achievements: Mapping[int, int]
) -> KomsOverTime:
    """Join the achievement map onto the month buckets of a classified dataset.

    Every sport type present in the dataset gets a (possibly zero) entry in each
    month. Activities without an entry in `achievements` count as zero. When no
    activity has any KOMs the month list is empty.
    """
    sport_types = list(dataset.by_type)
    months: list[MonthKoms] = []
    total = 0

    for month, activities in dataset.by_month.items():
        by_sport = {sport: 0 for sport in sport_types}
        for activity in activities:
            koms = achievements.get(activity.id, 0)
            sport = activity.sport_type
            if koms > 0 and sport:
                by_sport[sport] = by_sport.get(sport, 0) + koms
                total += koms
        months.append(MonthKoms(month=month, by_sport=by_sport))

    if total <= 0:
        return KomsOverTime(months=[], total=0)
    return KomsOverTime(months=months, total=total)
