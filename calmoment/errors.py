"""Exceptions raised by calmoment's calendar layer."""


class CalendarError(ValueError):
    """The calendar cannot represent a requested field combination or shift."""


class UnknownUnitError(ValueError):
    """A unit name did not match any TimeUnit."""

    def __init__(self, name: object):
        self.name: object = name
        super().__init__(
            f"Unknown time unit {name!r}.\n"
            f"Valid units: seconds, minutes, hours, days, weeks, months, "
            f"quarters, years"
        )


__all__ = ["CalendarError", "UnknownUnitError"]
