"""Relative date resolution: symbolic periods to concrete inclusive ranges."""

import calendar
from datetime import datetime
from typing import Dict, NamedTuple, Optional, Tuple, Union

from dateutil.relativedelta import relativedelta
from pytz import timezone

from view_filters.config import settings
from view_filters.models.types import ROLLING_PERIOD_DAYS, RELATIVE_PERIOD_LABELS, RelativePeriod
from view_filters.utils.logging import logger


class DateRange(NamedTuple):
    """Inclusive ``[start, end]`` pair."""

    start: datetime
    end: datetime


# Calendar-aligned periods: (reference offsets, period unit)
CALENDAR_PERIODS: Dict[RelativePeriod, Tuple[Dict[str, int], str]] = {
    RelativePeriod.TODAY: ({}, "day"),
    RelativePeriod.YESTERDAY: ({"days": -1}, "day"),
    RelativePeriod.TOMORROW: ({"days": 1}, "day"),
    RelativePeriod.THIS_WEEK: ({}, "week"),
    RelativePeriod.LAST_WEEK: ({"weeks": -1}, "week"),
    RelativePeriod.NEXT_WEEK: ({"weeks": 1}, "week"),
    RelativePeriod.THIS_MONTH: ({}, "month"),
    RelativePeriod.LAST_MONTH: ({"months": -1}, "month"),
    RelativePeriod.NEXT_MONTH: ({"months": 1}, "month"),
    RelativePeriod.THIS_YEAR: ({}, "year"),
    RelativePeriod.LAST_YEAR: ({"years": -1}, "year"),
    RelativePeriod.NEXT_YEAR: ({"years": 1}, "year"),
}


START_OF_DAY = {"hour": 0, "minute": 0, "second": 0, "microsecond": 0}
END_OF_DAY = {"hour": 23, "minute": 59, "second": 59, "microsecond": 999999}


def period_start(dt: datetime, unit: str, first_day_of_week: int = 6) -> datetime:
    """First instant of the day, week, month or year containing ``dt``.

    ``dt`` is expected to be wall-clock (naive). Weeks begin on
    ``first_day_of_week`` (0 = Monday, 6 = Sunday).

    Raises:
        ValueError: If the unit is not one of day, week, month, year
    """
    if unit == "day":
        return dt.replace(**START_OF_DAY)
    if unit == "week":
        return (dt - relativedelta(days=(dt.weekday() - first_day_of_week) % 7)).replace(**START_OF_DAY)
    if unit == "month":
        return dt.replace(day=1, **START_OF_DAY)
    if unit == "year":
        return dt.replace(month=1, day=1, **START_OF_DAY)
    raise ValueError(f"Unrecognized period unit: {unit}")


def period_end(dt: datetime, unit: str, first_day_of_week: int = 6) -> datetime:
    """Last microsecond of the day, week, month or year containing ``dt``."""
    if unit == "day":
        return dt.replace(**END_OF_DAY)
    if unit == "week":
        return (period_start(dt, unit, first_day_of_week) + relativedelta(days=6)).replace(**END_OF_DAY)
    if unit == "month":
        return dt.replace(day=calendar.monthrange(dt.year, dt.month)[1], **END_OF_DAY)
    if unit == "year":
        return dt.replace(month=12, day=31, **END_OF_DAY)
    raise ValueError(f"Unrecognized period unit: {unit}")


def resolve_period(
    period: Union[RelativePeriod, str],
    now: Optional[datetime] = None,
    timezone_str: Optional[str] = None,
    first_day_of_week: Optional[int] = None,
) -> Optional[DateRange]:
    """
    Resolve a relative period key to an inclusive start/end pair.

    Calendar periods (today, this_week, last_month, ...) span from the first
    instant of the period to ``23:59:59.999999`` on its last day. The rolling
    ``last_N_days`` periods span from the start of the day N days ago up to
    ``now`` itself.

    Parameters:
      - period: A relative period key such as "this_week".
      - now: The instant to anchor on. A naive value is treated as wall-clock
        time and yields naive results; an aware value is converted to the
        configured timezone. Defaults to the current time in that timezone.
      - timezone_str: Timezone for calendar boundaries. Defaults to settings.
      - first_day_of_week: 0 = Monday ... 6 = Sunday. Defaults to settings.

    Returns:
      DateRange, or None when the key is not a known period.
    """
    try:
        key = RelativePeriod(period)
    except ValueError:
        logger.debug(f"Unknown relative period '{period}', applying no constraint")
        return None

    tz = timezone(timezone_str or settings.timezone)
    week_start = settings.first_day_of_week if first_day_of_week is None else first_day_of_week

    if now is None:
        now = datetime.now(tz)
    aware = now.tzinfo is not None
    if aware:
        now = now.astimezone(tz)
    wall_clock = now.replace(tzinfo=None)

    if key in ROLLING_PERIOD_DAYS:
        start = period_start(wall_clock - relativedelta(days=ROLLING_PERIOD_DAYS[key]), "day")
        return DateRange(tz.localize(start) if aware else start, now)

    offsets, unit = CALENDAR_PERIODS[key]
    reference = wall_clock + relativedelta(**offsets)
    start = period_start(reference, unit, week_start)
    end = period_end(reference, unit, week_start)

    if aware:
        return DateRange(tz.localize(start), tz.localize(end))
    return DateRange(start, end)


def period_label(period: Union[RelativePeriod, str]) -> str:
    """Display label for a period key, the raw key when it is unknown."""
    try:
        return RELATIVE_PERIOD_LABELS[RelativePeriod(period)]
    except ValueError:
        return str(period)
