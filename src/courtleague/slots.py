"""Match slot expansion from a date range and facility operating hours."""

import logging
import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Callable, Optional, Sequence, Union

from courtleague.errors import CapacityError, InvalidArgumentError, TimeFormatError
from courtleague.models import Court, DayOfWeek, HourValue, MatchSlot, OperatingHours

logger = logging.getLogger(__name__)

_TIME_24H = re.compile(r"^(\d{1,2}):(\d{2})$")
_TIME_12H = re.compile(r"^(\d{1,2}):(\d{2}) ?(AM|PM)$")


def format_operating_hour_value(value: HourValue) -> str:
    """Render a stored opens_at/closes_at value as a time string.

    Stored values may be time objects, strings, raw bytes or NULL.
    """
    if value is None:
        return ""
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, bytes):
        return value.decode()
    if isinstance(value, str):
        return value
    return str(value)


def parse_time_of_day(raw: str) -> time:
    """Parse '17:00', '9:30', '5:30 PM', '05:30pm' and the like.

    Only HH:MM (24-hour) and H:MM AM/PM (12-hour) are accepted. The 12-hour
    form takes hours 0 through 12; "0:30 PM" is half past noon.
    """
    s = raw.strip()
    if not s:
        raise ValueError("time is required")

    m = _TIME_24H.match(s)
    if m:
        h, mi = int(m.group(1)), int(m.group(2))
        if h < 24 and mi < 60:
            return time(h, mi)
        raise ValueError(f"time out of range: {raw!r}")

    m = _TIME_12H.match(s.upper())
    if m:
        h, mi, period = int(m.group(1)), int(m.group(2)), m.group(3)
        if h <= 12 and mi < 60:
            if period == "AM" and h == 12:
                h = 0
            elif period == "PM" and h < 12:
                h += 12
            return time(h, mi)
        raise ValueError(f"time out of range: {raw!r}")

    raise ValueError("time must be in HH:MM or H:MM AM/PM format")


def truncate_date(value: Union[date, datetime],
                  tz: Optional[tzinfo] = None) -> datetime:
    """Midnight at the start of ``value``'s day.

    Aware datetimes keep their own zone; plain dates and naive datetimes
    take ``tz`` (or stay naive when it is None).
    """
    zone = tz
    if isinstance(value, datetime) and value.tzinfo is not None:
        zone = value.tzinfo
    return datetime(value.year, value.month, value.day, tzinfo=zone)


def truncate_date_range(start_date: Union[date, datetime],
                        end_date: Union[date, datetime],
                        tz: Optional[tzinfo] = None) -> tuple[datetime, datetime]:
    """Truncate both ends of a league date range to midnight.

    When ``tz`` is None and only one end is an aware datetime, the other end
    takes that zone so the two can be compared.
    """
    zone = tz
    if zone is None:
        for value in (start_date, end_date):
            if isinstance(value, datetime) and value.tzinfo is not None:
                zone = value.tzinfo
                break
    start = truncate_date(start_date, zone)
    end = truncate_date(end_date, zone)
    if end < start:
        raise InvalidArgumentError("start date must be on or before end date")
    return start, end


def as_instant(value: datetime) -> datetime:
    """UTC view of an aware datetime; naive datetimes are returned as is."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)


def _day_windows(day: datetime, opens: time, closes: time,
                 match_duration: timedelta) -> list[tuple[datetime, datetime]]:
    # Aware days step in UTC; a slot always lasts match_duration of elapsed time
    zone = day.tzinfo
    cursor = as_instant(datetime.combine(day.date(), opens, tzinfo=zone))
    close = as_instant(datetime.combine(day.date(), closes, tzinfo=zone))
    windows = []
    while cursor + match_duration <= close:
        end = cursor + match_duration
        if zone is None:
            windows.append((cursor, end))
        else:
            windows.append((cursor.astimezone(zone), end.astimezone(zone)))
        cursor = end
    return windows


def build_hours_by_day(operating_hours: Sequence[OperatingHours],
                       formatter: Callable[[HourValue], str] = format_operating_hour_value,
                       ) -> dict[int, tuple[time, time]]:
    """Map weekday (0=Sunday) -> (opens, closes).

    Days whose stored values format to an empty string are left out (closed).
    """
    result: dict[int, tuple[time, time]] = {}
    for hours in operating_hours:
        opens_raw = formatter(hours.opens_at)
        closes_raw = formatter(hours.closes_at)
        if not opens_raw.strip() or not closes_raw.strip():
            continue
        try:
            opens = parse_time_of_day(opens_raw)
        except ValueError as e:
            raise TimeFormatError(
                f"invalid opens_at for day {hours.day_of_week}: {e}",
                day_of_week=hours.day_of_week, field="opens_at",
            ) from e
        try:
            closes = parse_time_of_day(closes_raw)
        except ValueError as e:
            raise TimeFormatError(
                f"invalid closes_at for day {hours.day_of_week}: {e}",
                day_of_week=hours.day_of_week, field="closes_at",
            ) from e
        result[hours.day_of_week] = (opens, closes)
    return result


def build_match_slots(start_date: Union[date, datetime],
                      end_date: Union[date, datetime],
                      courts: Sequence[Court],
                      operating_hours: Sequence[OperatingHours],
                      match_duration: timedelta,
                      tz: Optional[tzinfo] = None,
                      formatter: Callable[[HourValue], str] = format_operating_hour_value,
                      ) -> list[MatchSlot]:
    """Expand the date range into match slots.

    Each open day is cut into back-to-back windows of ``match_duration``
    starting at opening time; a window that would run past closing is
    dropped. Every window is offered once per court.

    Slots are ordered by date, then start time, then court list order.
    """
    if not courts:
        raise InvalidArgumentError("at least one court is required")
    if match_duration <= timedelta(0):
        raise InvalidArgumentError("match duration must be positive")
    start, end = truncate_date_range(start_date, end_date, tz)

    hours_by_day = build_hours_by_day(operating_hours, formatter=formatter)
    if not hours_by_day:
        raise InvalidArgumentError("operating hours are required")

    slots: list[MatchSlot] = []
    day = start
    while day <= end:
        hours = hours_by_day.get(DayOfWeek.from_date(day).value)
        if hours is not None:
            opens, closes = hours
            for slot_start, slot_end in _day_windows(day, opens, closes, match_duration):
                for court in courts:
                    slots.append(MatchSlot(start=slot_start, end=slot_end, court=court))
        day += timedelta(days=1)

    if not slots:
        raise CapacityError("no available match slots in the league date range",
                            available=0)

    logger.debug("Built %d match slots between %s and %s on %d courts",
                 len(slots), start.date(), end.date(), len(courts))
    return slots
