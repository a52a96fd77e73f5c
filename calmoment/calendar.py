"""Civil calendar collaborator used by Moment.

A Calendar binds a time zone and a locale and converts between UTC instants
and local calendar fields. Day-and-coarser shifts are performed on local
wall-clock fields with python-dateutil's relativedelta (which clamps to the
last valid day of a month); hour, minute and second shifts are exact elapsed
time so they stay correct across DST transitions.
"""

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Literal, TypeAlias

from dateutil.relativedelta import relativedelta

from calmoment.errors import CalendarError

logger = logging.getLogger(__name__)

Field: TypeAlias = Literal["years", "months", "days", "hours", "minutes", "seconds"]

_WALL_CLOCK_FIELDS = ("years", "months", "days")
_ELAPSED_FIELDS = ("hours", "minutes", "seconds")


@dataclass(frozen=True, slots=True)
class Fields:
    """Local calendar fields of an instant.

    `weekday` is ISO (Monday=1 .. Sunday=7) and `week_of_year` is the ISO
    week number. Only year..microsecond are used when building an instant.
    """

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0
    microsecond: int = 0
    weekday: int = 1
    week_of_year: int = 1

    @property
    def quarter(self) -> int:
        return (self.month - 1) // 3 + 1

    @property
    def weekday_ordinal(self) -> int:
        """Which occurrence of this weekday within the month (1..5)."""
        return (self.day - 1) // 7 + 1

    def with_days_shifted(self, days: int) -> "Fields":
        """Move the date by whole days, keeping time-of-day fields."""
        try:
            moved = datetime(self.year, self.month, self.day) + timedelta(days=days)
        except (ValueError, OverflowError) as e:
            raise CalendarError(f"Cannot shift {self} by {days} days") from e
        iso = moved.isocalendar()
        return replace(
            self,
            year=moved.year,
            month=moved.month,
            day=moved.day,
            weekday=iso.weekday,
            week_of_year=iso.week,
        )


def zone_key(zone: tzinfo) -> str:
    """Stable name of a zone."""
    return getattr(zone, "key", None) or str(zone)


def cache_key(zone: tzinfo) -> tuple:
    """Identity of a zone for the calendar cache.

    Named IANA zones are identified by their key. Other tzinfo objects may
    share a name while differing in offset (and dateutil zones are not
    hashable), so their fixed offset is part of the key.
    """
    key = getattr(zone, "key", None)
    if key:
        return (type(zone), key)
    return (type(zone), str(zone), zone.utcoffset(None))


class Calendar:
    """Gregorian calendar in a fixed zone and locale."""

    def __init__(self, zone: tzinfo, locale: str):
        self.zone: tzinfo = zone
        self.locale: str = locale

    def __repr__(self) -> str:
        return f"Calendar({zone_key(self.zone)}, {self.locale})"

    def fields_of(self, instant: datetime) -> Fields:
        """Return the local calendar fields of an aware instant.

        Raises:
            CalendarError: If the local date falls outside years 1-9999
        """
        try:
            local = instant.astimezone(self.zone)
        except OverflowError as e:
            raise CalendarError(
                f"{self!r} cannot represent {instant.isoformat()}: {e}"
            ) from e
        iso = local.isocalendar()
        return Fields(
            year=local.year,
            month=local.month,
            day=local.day,
            hour=local.hour,
            minute=local.minute,
            second=local.second,
            microsecond=local.microsecond,
            weekday=iso.weekday,
            week_of_year=iso.week,
        )

    def from_fields(self, fields: Fields) -> datetime:
        """Build the UTC instant for local calendar fields.

        Raises:
            CalendarError: If the fields do not form a valid local date/time
        """
        try:
            local = datetime(
                fields.year,
                fields.month,
                fields.day,
                fields.hour,
                fields.minute,
                fields.second,
                fields.microsecond,
                tzinfo=self.zone,
            )
            return local.astimezone(timezone.utc)
        except (ValueError, OverflowError) as e:
            raise CalendarError(
                f"{self!r} cannot represent {fields.year:04d}-{fields.month:02d}-"
                f"{fields.day:02d} {fields.hour:02d}:{fields.minute:02d}:"
                f"{fields.second:02d}: {e}"
            ) from e

    def add_unit(self, instant: datetime, field: Field, amount: int) -> datetime:
        """Shift an aware instant by `amount` of a calendar field.

        Raises:
            CalendarError: If the result falls outside the representable range
            ValueError: If `field` is not a calendar field
        """
        if field not in _WALL_CLOCK_FIELDS + _ELAPSED_FIELDS:
            raise ValueError(
                f"Unknown calendar field {field!r}.\n"
                f"Valid fields: {', '.join(_WALL_CLOCK_FIELDS + _ELAPSED_FIELDS)}"
            )
        try:
            if field in _WALL_CLOCK_FIELDS:
                local = instant.astimezone(self.zone)
                shifted = local + relativedelta(**{field: amount})
            else:
                shifted = instant + timedelta(**{field: amount})
            return shifted.astimezone(timezone.utc)
        except (ValueError, OverflowError) as e:
            raise CalendarError(f"{self!r} cannot add {amount} {field}: {e}") from e


_calendars: dict[tuple[tuple, str], Calendar] = {}
_calendars_lock = threading.Lock()


def calendar_for(zone: tzinfo, locale: str) -> Calendar:
    """Return the shared Calendar for a (zone, locale) pair."""
    key = (cache_key(zone), locale)
    with _calendars_lock:
        cal = _calendars.get(key)
        if cal is None:
            cal = Calendar(zone, locale)
            _calendars[key] = cal
            logger.debug("Created %r", cal)
        return cal


__all__ = ["Calendar", "Field", "Fields", "cache_key", "calendar_for", "zone_key"]
