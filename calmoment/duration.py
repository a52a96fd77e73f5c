from dataclasses import dataclass
from typing import TYPE_CHECKING

from calmoment.units import TimeUnit, to_seconds
from calmoment.util import DAY, HOUR, MINUTE, MONTH, WEEK, YEAR

if TYPE_CHECKING:
    from calmoment.moment import Moment


@dataclass(frozen=True, order=True)
class Duration:
    """A signed span of time in seconds.

    `interval` is the only stored value; every other view divides it by a
    fixed unit length and is not calendar-aware (a month is 30 days, a year
    365 days).
    """

    interval: float

    @classmethod
    def of(cls, value: float, unit: "TimeUnit | str") -> "Duration":
        """Build a duration of `value` units using fixed unit lengths.

        Raises:
            ValueError: If `unit` is not a recognized unit name
        """
        resolved = TimeUnit.parse(unit)
        if resolved is None:
            valid = ", ".join(u.value for u in TimeUnit)
            raise ValueError(f"Unknown time unit '{unit}'. Valid units: {valid}")
        return cls(to_seconds(value, resolved))

    @property
    def seconds(self) -> float:
        return self.interval

    @property
    def minutes(self) -> float:
        return self.interval / MINUTE

    @property
    def hours(self) -> float:
        return self.interval / HOUR

    @property
    def days(self) -> float:
        return self.interval / DAY

    @property
    def weeks(self) -> float:
        return self.interval / WEEK

    @property
    def months(self) -> float:
        return self.interval / MONTH

    @property
    def years(self) -> float:
        return self.interval / YEAR

    def ago(self) -> "Moment":
        """Return the moment this long before now."""
        from calmoment.moment import moment

        return moment().subtract(self)

    def from_now(self) -> "Moment":
        """Return the moment this long after now."""
        from calmoment.moment import moment

        return moment().add(self)

    def __add__(self, other: "Duration") -> "Duration":
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(self.interval + other.interval)

    def __sub__(self, other: "Duration") -> "Duration":
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(self.interval - other.interval)

    def __neg__(self) -> "Duration":
        return Duration(-self.interval)

    def __abs__(self) -> "Duration":
        return Duration(abs(self.interval))

    def __str__(self) -> str:
        """Render as [-][Nd ]HH:MM:SS, dropping fractional seconds."""
        sign = "-" if self.interval < 0 else ""
        total = int(abs(self.interval))
        days, rest = divmod(total, DAY)
        hours, rest = divmod(rest, HOUR)
        minutes, seconds = divmod(rest, MINUTE)
        prefix = f"{days}d " if days else ""
        return f"{sign}{prefix}{hours:02d}:{minutes:02d}:{seconds:02d}"


__all__ = ["Duration"]
