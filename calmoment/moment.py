"""Immutable calendar-aware points in time.

A Moment is a UTC instant plus optional time zone and locale overrides. Field
access, calendar arithmetic and start/end snapping happen in the Moment's
effective calendar: its own zone/locale when set, the process-wide defaults
from `calmoment.config` otherwise. Every operation returns a new Moment that
keeps the original overrides.

Example:
    >>> from calmoment import TimeUnit, from_params
    >>> m = from_params([2024, 1, 31, 15, 42], zone="UTC")
    >>> m.add(1, TimeUnit.MONTHS).format("%Y-%m-%d")
    '2024-02-29'
    >>> m.start_of("weeks").format("%Y-%m-%d %H:%M")
    '2024-01-29 00:00'
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone, tzinfo
from functools import total_ordering
from zoneinfo import ZoneInfo

from calmoment.calendar import Calendar, Field, Fields, calendar_for
from calmoment.config import defaults, normalize_locale, resolve_zone
from calmoment.duration import Duration
from calmoment.errors import CalendarError, UnknownUnitError
from calmoment.humanize import formatter
from calmoment.localization import localizer
from calmoment.units import TimeUnit, to_seconds

logger = logging.getLogger(__name__)

# Calendar field and multiplier used to add one of each unit
_FIELD_STEPS: dict[TimeUnit, tuple[Field, int]] = {
    TimeUnit.YEARS: ("years", 1),
    TimeUnit.QUARTERS: ("months", 3),
    TimeUnit.MONTHS: ("months", 1),
    TimeUnit.WEEKS: ("days", 7),
    TimeUnit.DAYS: ("days", 1),
    TimeUnit.HOURS: ("hours", 1),
    TimeUnit.MINUTES: ("minutes", 1),
    TimeUnit.SECONDS: ("seconds", 1),
}

Truncation = Callable[[Fields], Fields]

# start_of cascade, coarsest first. Snapping to a unit applies its step and
# then every step after it, down to seconds.
_CASCADE: tuple[tuple[TimeUnit, Truncation], ...] = (
    (TimeUnit.YEARS, lambda f: replace(f, month=1)),
    (TimeUnit.MONTHS, lambda f: replace(f, day=1)),
    (TimeUnit.DAYS, lambda f: replace(f, hour=0)),
    (TimeUnit.HOURS, lambda f: replace(f, minute=0)),
    (TimeUnit.MINUTES, lambda f: replace(f, second=0, microsecond=0)),
)

# Units snapped at the same depth as MONTHS but with their own first step.
# Weeks start on Monday (ISO weekday 1).
_PEERS: dict[TimeUnit, tuple[TimeUnit, Truncation]] = {
    TimeUnit.QUARTERS: (
        TimeUnit.MONTHS,
        lambda f: replace(f, month=3 * (f.quarter - 1) + 1, day=1),
    ),
    TimeUnit.WEEKS: (
        TimeUnit.MONTHS,
        lambda f: f.with_days_shifted(-(f.weekday - 1)),
    ),
}


@dataclass(frozen=True)
class ShiftResult:
    """Result of a calendar operation (shift or snap).

    Attributes:
        success: True if the operation was applied
        moment: The new moment, or the original one if the operation failed
        error: The exception that prevented the operation, None on success
    """

    success: bool
    moment: "Moment"
    error: Exception | None = None


@total_ordering
@dataclass(frozen=True, eq=False)
class Moment:
    """A point in time with optional zone and locale overrides.

    Equality, hashing and ordering use the instant alone; two moments for
    the same instant in different zones are equal.

    Attributes:
        instant: Timezone-aware datetime, normalized to UTC
        zone: Time zone override, or None for the process default
        locale: Locale identifier override (e.g. "ru_RU"), or None
    """

    instant: datetime
    zone: tzinfo | None = None
    locale: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.instant, datetime) or self.instant.tzinfo is None:
            raise TypeError(
                f"Moment instant must be a timezone-aware datetime.\n"
                f"Got: {self.instant!r}\n"
                f"Hint: Use from_datetime() to interpret a naive datetime in a "
                f"zone, or add tzinfo:\n"
                f"  datetime(..., tzinfo=timezone.utc)"
            )
        object.__setattr__(self, "instant", self.instant.astimezone(timezone.utc))
        if self.zone is not None:
            object.__setattr__(self, "zone", resolve_zone(self.zone))
        if self.locale is not None:
            object.__setattr__(self, "locale", normalize_locale(self.locale))

    # Calendar context

    @property
    def effective_zone(self) -> tzinfo:
        return self.zone if self.zone is not None else defaults().zone

    @property
    def effective_locale(self) -> str:
        return self.locale if self.locale is not None else defaults().locale

    def calendar(self) -> Calendar:
        return calendar_for(self.effective_zone, self.effective_locale)

    def fields(self) -> Fields:
        """Local calendar fields of this moment in its effective zone."""
        return self.calendar().fields_of(self.instant)

    def to_datetime(self) -> datetime:
        """This moment as an aware datetime in its effective zone."""
        return self.instant.astimezone(self.effective_zone)

    def _with_instant(self, instant: datetime) -> "Moment":
        return Moment(instant, self.zone, self.locale)

    # Fields

    @property
    def year(self) -> int:
        return self.fields().year

    @property
    def month(self) -> int:
        """Month of the year, 1-12."""
        return self.fields().month

    @property
    def month_name(self) -> str:
        """Name of the month in the effective locale ("" if untranslated)."""
        return localizer.translate(f"month.{self.month}", self.effective_locale)

    @property
    def day(self) -> int:
        return self.fields().day

    @property
    def hour(self) -> int:
        return self.fields().hour

    @property
    def minute(self) -> int:
        return self.fields().minute

    @property
    def second(self) -> int:
        return self.fields().second

    @property
    def weekday(self) -> int:
        """ISO weekday: Monday is 1, Sunday is 7."""
        return self.fields().weekday

    @property
    def weekday_name(self) -> str:
        return localizer.translate(f"weekday.{self.weekday}", self.effective_locale)

    @property
    def weekday_ordinal(self) -> int:
        """Occurrence of this weekday in the month (the 2nd Tuesday is 2)."""
        return self.fields().weekday_ordinal

    @property
    def week_of_year(self) -> int:
        """ISO 8601 week number."""
        return self.fields().week_of_year

    @property
    def quarter(self) -> int:
        """Quarter of the year, 1-4."""
        return self.fields().quarter

    def get(self, unit: TimeUnit | str) -> int | None:
        """Return the calendar field matching a unit.

        Weeks map to the week of the year and days to the day of the month.
        Returns None for unrecognized unit names.
        """
        resolved = TimeUnit.parse(unit)
        if resolved is None:
            return None
        fields = self.fields()
        match resolved:
            case TimeUnit.SECONDS:
                return fields.second
            case TimeUnit.MINUTES:
                return fields.minute
            case TimeUnit.HOURS:
                return fields.hour
            case TimeUnit.DAYS:
                return fields.day
            case TimeUnit.WEEKS:
                return fields.week_of_year
            case TimeUnit.MONTHS:
                return fields.month
            case TimeUnit.QUARTERS:
                return fields.quarter
            case TimeUnit.YEARS:
                return fields.year

    # Formatting

    def format(self, pattern: str = "%Y-%m-%d %H:%M:%S %z") -> str:
        """Format the local date/time with a strftime pattern."""
        return self.to_datetime().strftime(pattern)

    def epoch(self) -> float:
        """Seconds since 1970-01-01T00:00:00Z."""
        return self.instant.timestamp()

    def from_now(self, now: "Moment | None" = None) -> str:
        """Describe this moment relative to now ("3 hours ago", "Tomorrow").

        The phrase is rendered in this moment's effective locale and is ""
        when the locale has no translation.
        """
        reference = now if now is not None else moment()
        delta = int(reference.interval_since(self).seconds)
        return formatter.format(delta, self.effective_locale)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        parts = [self.instant.isoformat()]
        if self.zone is not None:
            parts.append(f"zone={getattr(self.zone, 'key', self.zone)!s}")
        if self.locale is not None:
            parts.append(f"locale={self.locale}")
        return f"Moment({', '.join(parts)})"

    # Comparison

    def is_equal_to(self, other: "Moment") -> bool:
        return self.instant == other.instant

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Moment):
            return NotImplemented
        return self.instant == other.instant

    def __lt__(self, other: "Moment") -> bool:
        if not isinstance(other, Moment):
            return NotImplemented
        return self.instant < other.instant

    def __hash__(self) -> int:
        return hash(self.instant)

    def interval_since(self, other: "Moment") -> Duration:
        """Signed duration from `other` to this moment (positive if later)."""
        return Duration((self.instant - other.instant).total_seconds())

    def is_close_to(self, other: "Moment", precision: float = 300) -> bool:
        """True if the moments are less than `precision` seconds apart."""
        return abs(self.interval_since(other).seconds) < precision

    # Arithmetic

    def shift(self, value: int | float, unit: TimeUnit | str) -> ShiftResult:
        """Move by `value` units, reporting failures instead of hiding them.

        An int value is calendar arithmetic: years, quarters and months
        follow the calendar (Jan 31 + 1 month is the last day of February)
        and weeks are 7 calendar days. A float value is fixed-duration
        arithmetic that bypasses the calendar (see `units.to_seconds`).
        """
        resolved = TimeUnit.parse(unit)
        if resolved is None:
            logger.debug("Ignoring shift by unknown unit %r", unit)
            return ShiftResult(success=False, moment=self, error=UnknownUnitError(unit))

        try:
            if isinstance(value, float):
                seconds = to_seconds(value, resolved)
                try:
                    instant = self.instant + timedelta(seconds=seconds)
                except OverflowError as e:
                    raise CalendarError(
                        f"Cannot add {seconds} seconds to {self.instant.isoformat()}"
                    ) from e
            else:
                field, multiplier = _FIELD_STEPS[resolved]
                instant = self.calendar().add_unit(
                    self.instant, field, multiplier * value
                )
        except CalendarError as e:
            logger.debug("Shift of %r by %s %s failed: %s", self, value, resolved, e)
            return ShiftResult(success=False, moment=self, error=e)
        return ShiftResult(success=True, moment=self._with_instant(instant))

    def add(
        self, value: "int | float | Duration", unit: TimeUnit | str = TimeUnit.SECONDS
    ) -> "Moment":
        """Return a moment `value` units later.

        Returns this moment unchanged if the unit name is unknown or the
        calendar cannot represent the result; use shift() to tell those
        cases apart.
        """
        if isinstance(value, Duration):
            return self.shift(float(value.interval), TimeUnit.SECONDS).moment
        return self.shift(value, unit).moment

    def subtract(
        self, value: "int | float | Duration", unit: TimeUnit | str = TimeUnit.SECONDS
    ) -> "Moment":
        """Return a moment `value` units earlier (add(-value, unit))."""
        if isinstance(value, Duration):
            return self.add(-value)
        return self.add(-value, unit)

    def __add__(self, other: Duration) -> "Moment":
        if not isinstance(other, Duration):
            return NotImplemented
        return self.add(other)

    __radd__ = __add__

    def __sub__(self, other: "Moment | Duration") -> "Duration | Moment":
        if isinstance(other, Moment):
            return self.interval_since(other)
        if isinstance(other, Duration):
            return self.subtract(other)
        return NotImplemented

    # Snapping

    def try_start_of(self, unit: TimeUnit | str) -> ShiftResult:
        """Snap to the beginning of the enclosing unit, reporting failures."""
        resolved = TimeUnit.parse(unit)
        if resolved is None:
            logger.debug("Ignoring start_of unknown unit %r", unit)
            return ShiftResult(success=False, moment=self, error=UnknownUnitError(unit))
        if resolved is TimeUnit.SECONDS:
            return ShiftResult(success=True, moment=self)

        depth, first = _PEERS.get(resolved, (resolved, None))
        position = [u for u, _ in _CASCADE].index(depth)
        steps = [step for _, step in _CASCADE[position:]]
        if first is not None:
            steps[0] = first

        cal = self.calendar()
        try:
            fields = cal.fields_of(self.instant)
            for step in steps:
                fields = step(fields)
            instant = cal.from_fields(fields)
        except CalendarError as e:
            logger.debug("start_of(%s) of %r failed: %s", resolved, self, e)
            return ShiftResult(success=False, moment=self, error=e)
        return ShiftResult(success=True, moment=self._with_instant(instant))

    def start_of(self, unit: TimeUnit | str) -> "Moment":
        """Return the first instant of the enclosing unit.

        Snapping cascades: start_of("years") also resets month, day, hour,
        minute and second. Weeks start on Monday. Returns this moment
        unchanged for unknown units or when the calendar rejects the result.
        """
        return self.try_start_of(unit).moment

    def try_end_of(self, unit: TimeUnit | str) -> ShiftResult:
        """Snap to the last second of the enclosing unit, reporting failures.

        Stops at the first failing step (snap, add one unit, step back one
        second) and reports it with this moment unchanged.
        """
        resolved = TimeUnit.parse(unit)
        if resolved is None:
            return self.try_start_of(unit)
        result = self.try_start_of(resolved)
        if result.success:
            result = result.moment.shift(1, resolved)
        if result.success:
            result = result.moment.shift(-1, TimeUnit.SECONDS)
        if not result.success:
            return ShiftResult(success=False, moment=self, error=result.error)
        return result

    def end_of(self, unit: TimeUnit | str) -> "Moment":
        """Return the last second of the enclosing unit.

        Defined as start_of(unit) + 1 unit - 1 second. Returns this moment
        unchanged for unknown units or when the calendar cannot represent
        the next unit (see try_end_of).
        """
        return self.try_end_of(unit).moment


# Constructors


def moment(zone: "tzinfo | str | None" = None, locale: str | None = None) -> Moment:
    """Return the current instant (per the configured clock)."""
    return Moment(defaults().now(), zone, locale)


def utc() -> Moment:
    """Return the current instant bound to UTC."""
    return moment(ZoneInfo("UTC"))


def from_datetime(
    value: datetime, zone: "tzinfo | str | None" = None, locale: str | None = None
) -> Moment:
    """Wrap a datetime; naive values are read as wall-clock time in the zone."""
    if value.tzinfo is None:
        local_zone = resolve_zone(zone) if zone is not None else defaults().zone
        value = value.replace(tzinfo=local_zone)
    return Moment(value, zone, locale)


def from_seconds(
    seconds: float, zone: "tzinfo | str | None" = None, locale: str | None = None
) -> Moment:
    """Moment for a Unix timestamp in seconds."""
    return Moment(datetime.fromtimestamp(seconds, tz=timezone.utc), zone, locale)


def from_milliseconds(
    milliseconds: int, zone: "tzinfo | str | None" = None, locale: str | None = None
) -> Moment:
    """Moment for a Unix timestamp in milliseconds."""
    return from_seconds(milliseconds / 1000, zone, locale)


_PARAM_NAMES = ("year", "month", "day", "hour", "minute", "second")

# One day inside datetime.min / datetime.max so every UTC offset can display them
_EARLIEST = datetime(1, 1, 2, tzinfo=timezone.utc)
_LATEST = datetime(9999, 12, 30, 23, 59, 59, tzinfo=timezone.utc)


def from_params(
    params: Sequence[int],
    zone: "tzinfo | str | None" = None,
    locale: str | None = None,
) -> Moment | None:
    """Build a moment from [year, month, day, hour, minute, second].

    Trailing components may be omitted (month and day default to 1, time
    fields to 0). Returns None for an empty sequence or an invalid date.
    """
    if not params:
        return None
    return from_dict(dict(zip(_PARAM_NAMES, params)), zone, locale)


def from_dict(
    values: Mapping[str, int],
    zone: "tzinfo | str | None" = None,
    locale: str | None = None,
) -> Moment | None:
    """Build a moment from a mapping with year/month/day/hour/minute/second keys.

    Missing keys take their defaults. Returns None when no key is recognized
    or the date is invalid.
    """
    known = {name: values[name] for name in _PARAM_NAMES if name in values}
    if "year" not in known:
        return None
    fields = Fields(
        year=known["year"],
        month=known.get("month", 1),
        day=known.get("day", 1),
        hour=known.get("hour", 0),
        minute=known.get("minute", 0),
        second=known.get("second", 0),
    )
    zone = resolve_zone(zone) if zone is not None else None
    effective_zone = zone if zone is not None else defaults().zone
    effective_locale = normalize_locale(locale) if locale else defaults().locale
    try:
        instant = calendar_for(effective_zone, effective_locale).from_fields(fields)
    except CalendarError as e:
        logger.debug("Invalid date fields %r: %s", known, e)
        return None
    return Moment(instant, zone, locale)


def past() -> Moment:
    """The earliest moment whose fields can be read in every zone."""
    return Moment(_EARLIEST)


def future() -> Moment:
    """The latest moment whose fields can be read in every zone."""
    return Moment(_LATEST)


def since(past: Moment) -> Duration:
    """Duration elapsed between `past` and now."""
    return moment().interval_since(past)


def maximum(*moments: Moment) -> Moment | None:
    """Latest of the given moments, or None if there are none."""
    return max(moments, default=None)


def minimum(*moments: Moment) -> Moment | None:
    """Earliest of the given moments, or None if there are none."""
    return min(moments, default=None)


__all__ = [
    "Moment",
    "ShiftResult",
    "from_datetime",
    "from_dict",
    "from_milliseconds",
    "from_params",
    "from_seconds",
    "future",
    "maximum",
    "minimum",
    "moment",
    "past",
    "since",
    "utc",
]
