from .classify import (
    classify,
    parse_activities,
    parse_start_date,
    activity_month,
    local_month,
)
from .koms import koms_by_month, KomsOverTime, MonthKoms

__all__ = [
    "classify",
    "parse_activities",
    "parse_start_date",
    "activity_month",
    "local_month",
    "koms_by_month",
    "KomsOverTime",
    "MonthKoms",
]
