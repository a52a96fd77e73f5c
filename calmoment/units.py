"""Calendar granularities and their fixed-duration conversions."""

from enum import Enum

from calmoment.util import DAY, FIXED_WEEK, HOUR, MINUTE, MONTH, QUARTER, SECOND, YEAR


class TimeUnit(Enum):
    """A calendar granularity, from seconds up to years.

    Each variant has exactly one canonical name (its value). Members are
    declared finest first, which is the order `start_of` cascades through.
    """

    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    QUARTERS = "quarters"
    YEARS = "years"

    @classmethod
    def parse(cls, name: "str | TimeUnit") -> "TimeUnit | None":
        """Return the unit for a canonical name, or None if it isn't one.

        Lookup is exact: "days" is a unit, "Days" and "day" are not.
        Passing a TimeUnit returns it unchanged.
        """
        if isinstance(name, TimeUnit):
            return name
        try:
            return cls(name)
        except ValueError:
            return None

    @property
    def rank(self) -> int:
        """Position in the finest-to-coarsest ordering (seconds is 0)."""
        return _ORDER.index(self)

    def __str__(self) -> str:
        return self.value


_ORDER: tuple[TimeUnit, ...] = tuple(TimeUnit)

# Fixed (non calendar-aware) length of one unit, in seconds
_FIXED_SECONDS: dict[TimeUnit, int] = {
    TimeUnit.SECONDS: SECOND,
    TimeUnit.MINUTES: MINUTE,
    TimeUnit.HOURS: HOUR,
    TimeUnit.DAYS: DAY,
    TimeUnit.WEEKS: FIXED_WEEK,
    TimeUnit.MONTHS: MONTH,
    TimeUnit.QUARTERS: QUARTER,
    TimeUnit.YEARS: YEAR,
}


def to_seconds(value: float, unit: TimeUnit) -> float:
    """Convert `value` units into seconds using fixed unit lengths.

    Months are 30 days, quarters 90 days and years 365 days. Weeks use
    FIXED_WEEK (605800s), not 7 * DAY.
    """
    return value * _FIXED_SECONDS[unit]


__all__ = ["TimeUnit", "to_seconds"]
