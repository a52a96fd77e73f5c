from .config import Settings, configure, defaults, override_settings
from .duration import Duration
from .errors import CalendarError, UnknownUnitError
from .humanize import RelativeTimeFormatter, classify, humanize
from .moment import (
    Moment,
    ShiftResult,
    from_datetime,
    from_dict,
    from_milliseconds,
    from_params,
    from_seconds,
    future,
    maximum,
    minimum,
    moment,
    past,
    since,
    utc,
)
from .parsing import parse
from .units import TimeUnit

__all__ = [
    "Moment",
    "Duration",
    "TimeUnit",
    "ShiftResult",
    "CalendarError",
    "UnknownUnitError",
    "RelativeTimeFormatter",
    "classify",
    "humanize",
    "Settings",
    "configure",
    "defaults",
    "override_settings",
    "moment",
    "utc",
    "parse",
    "from_datetime",
    "from_seconds",
    "from_milliseconds",
    "from_params",
    "from_dict",
    "past",
    "future",
    "since",
    "maximum",
    "minimum",
]
