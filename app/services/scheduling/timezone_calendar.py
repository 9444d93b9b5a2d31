"""
Timezone Calendar Utility

Local calendar day <-> UTC conversions for IANA timezones.

Local times are always expressed as (calendar date, timezone, minute of day).
Minute values are wall-clock minutes counted from local midnight of the given
date; values >= 1440 fall on the following calendar day. The conversion to an
absolute instant goes through the zone rules (pytz localize), never through
offset arithmetic, so 23 and 25 hour days come out right.

Weekdays use 0=Sunday..6=Saturday, the convention templates are stored in.
`to_sunday_first_weekday` is the single place that maps ISO weekdays to it.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Union

import pytz

from app.core.exceptions import InvalidInput, InvalidTimezone

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class DayRange:
    """A local calendar day expressed as UTC instants"""
    start_utc: datetime
    end_utc: datetime
    weekday: int  # 0=Sunday .. 6=Saturday

    @property
    def length_minutes(self) -> int:
        return int((self.end_utc - self.start_utc).total_seconds() // 60)


def to_sunday_first_weekday(iso_weekday: int) -> int:
    """
    Map an ISO weekday (1=Monday..7=Sunday) to 0=Sunday..6=Saturday.

    Args:
        iso_weekday: value returned by date.isoweekday()

    Returns:
        int in [0, 6]
    """
    if not 1 <= iso_weekday <= 7:
        raise ValueError(f"ISO weekday out of range: {iso_weekday}")
    return iso_weekday % 7


def get_zone(tz_name: str) -> pytz.BaseTzInfo:
    """Return the pytz zone, raising InvalidTimezone for unknown identifiers"""
    if not tz_name:
        raise InvalidTimezone(str(tz_name))
    try:
        return pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        raise InvalidTimezone(tz_name)


def resolve_zone(tz_name: str, fallback: str = "UTC") -> pytz.BaseTzInfo:
    """
    Like get_zone but never fails: unknown zones fall back to `fallback`.

    Stored template timezones go through here so that a bad value degrades
    to UTC instead of breaking slot listing.
    """
    try:
        return get_zone(tz_name)
    except InvalidTimezone:
        logger.warning(f"Invalid timezone '{tz_name}', using {fallback}")
        return get_zone(fallback)


def parse_iso_date(value: Union[date, str]) -> date:
    """Parse a YYYY-MM-DD calendar date"""
    if isinstance(value, datetime):
        raise InvalidInput("Expected a calendar date without time component")
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise InvalidInput(f"Invalid date {value!r}, expected YYYY-MM-DD")


def ensure_utc(value: datetime) -> datetime:
    """Aware UTC datetime; naive values are taken to already be UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _zone(tz: Union[str, pytz.BaseTzInfo]) -> pytz.BaseTzInfo:
    return get_zone(tz) if isinstance(tz, str) else tz


def _localize(zone: pytz.BaseTzInfo, naive: datetime) -> datetime:
    # Ambiguous wall-clock times resolve to the standard-time occurrence,
    # non-existent ones are pushed forward by the DST offset.
    return zone.localize(naive, is_dst=False).astimezone(timezone.utc)


def day_range_utc(day: Union[date, str], tz: Union[str, pytz.BaseTzInfo]) -> DayRange:
    """
    Start and end of the local day as UTC instants, plus the local weekday.

    Args:
        day: local calendar date
        tz: IANA identifier or pytz zone

    Returns:
        DayRange(start_utc, end_utc, weekday)
    """
    day = parse_iso_date(day)
    zone = _zone(tz)
    start_utc = _localize(zone, datetime.combine(day, time.min))
    end_utc = _localize(zone, datetime.combine(day + timedelta(days=1), time.min))
    return DayRange(
        start_utc=start_utc,
        end_utc=end_utc,
        weekday=to_sunday_first_weekday(day.isoweekday()),
    )


def day_length_minutes(day: Union[date, str], tz: Union[str, pytz.BaseTzInfo]) -> int:
    """1440 on regular days, 1380 / 1500 on DST transition days"""
    return day_range_utc(day, tz).length_minutes


def local_minutes_to_utc(day: Union[date, str], tz: Union[str, pytz.BaseTzInfo], minutes: int) -> datetime:
    """Convert a local (date, minute of day) to an aware UTC datetime"""
    day = parse_iso_date(day)
    zone = _zone(tz)
    naive = datetime.combine(day, time.min) + timedelta(minutes=minutes)
    return _localize(zone, naive)


def utc_to_local_minutes(day: Union[date, str], tz: Union[str, pytz.BaseTzInfo], instant: datetime) -> int:
    """Inverse of local_minutes_to_utc: minutes since local midnight of `day`"""
    day = parse_iso_date(day)
    local = ensure_utc(instant).astimezone(_zone(tz))
    return (local.date() - day).days * MINUTES_PER_DAY + local.hour * 60 + local.minute


def local_minutes_to_utc_all(day: Union[date, str], tz: Union[str, pytz.BaseTzInfo], minutes: int) -> List[datetime]:
    """
    Every UTC instant showing the given local wall-clock minute.

    Two instants for a minute inside the repeated hour of a fall-back day,
    otherwise the single instant of local_minutes_to_utc.
    """
    day = parse_iso_date(day)
    zone = _zone(tz)
    naive = datetime.combine(day, time.min) + timedelta(minutes=minutes)
    try:
        return [zone.localize(naive, is_dst=None).astimezone(timezone.utc)]
    except pytz.AmbiguousTimeError:
        return sorted({
            zone.localize(naive, is_dst=True).astimezone(timezone.utc),
            zone.localize(naive, is_dst=False).astimezone(timezone.utc),
        })
    except pytz.NonExistentTimeError:
        return [_localize(zone, naive)]
