"""Parsing of loosely-structured date strings.

`parse()` tries an ordered list of strptime patterns and returns the first
match. Patterns without an offset are read as wall-clock time in the target
zone; time-only patterns fall on strptime's default date (1900-01-01).
"""

import logging
import re
from datetime import datetime, timezone, tzinfo

from calmoment.config import defaults, language_code
from calmoment.localization import localizer
from calmoment.moment import Moment, from_datetime

logger = logging.getLogger(__name__)

# Ordered from most to least specific
FORMATS: tuple[str, ...] = (
    # ISO 8601 with offset or Zulu suffix
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    # Dates
    "%Y-%m-%d",
    # 12-hour clock times
    "%I:%M:%S %p",
    "%I:%M %p",
    # US and long-form dates
    "%m/%d/%Y",
    "%B %d, %Y",
    "%B %d, %Y %I:%M %p",
    "%A, %B %d, %Y %I:%M %p",
    # ISO week dates and ordinal dates
    "%G-W%V-%u",
    "%Y-%j",
    # 24-hour clock times
    "%H:%M:%S.%f",
    "%H:%M:%S",
    "%H:%M",
    "%H",
)


_NAMES = (("month", 12), ("weekday", 7))


def _english_names(text: str, locale: str) -> str:
    """Replace the locale's month and weekday names with the English ones."""
    if language_code(locale) == "en":
        return text
    for kind, count in _NAMES:
        for number in range(1, count + 1):
            name = localizer.lookup(f"{kind}.{number}", locale)
            english = localizer.lookup(f"{kind}.{number}", "en")
            if name and english:
                text = re.sub(
                    rf"\b{re.escape(name)}\b", english, text, flags=re.IGNORECASE
                )
    return text


def _strptime(text: str, fmt: str) -> datetime | None:
    try:
        return datetime.strptime(text, fmt)
    except ValueError:
        return None


def parse(
    text: str,
    fmt: str | None = None,
    zone: "tzinfo | str | None" = None,
    locale: str | None = None,
) -> Moment | None:
    """Parse a date string into a Moment.

    Args:
        text: The string to parse
        fmt: A single strptime pattern to use instead of the built-in list
        zone: Zone override for the result, also used to read values
              without an explicit offset
        locale: Locale override for the result. Month and weekday names
                (%B, %A) are matched in this locale (the default locale when
                None), using the names of its string table

    Returns:
        The parsed moment, or None if no pattern matches

    Example:
        >>> parse("2024-03-10T12:00:00Z").epoch()
        1710072000.0
        >>> parse("03/10/2024", zone="Europe/Paris").format("%Y-%m-%d %H:%M %z")
        '2024-03-10 00:00 +0100'
    """
    text = _english_names(text.strip(), locale or defaults().locale)
    for pattern in (fmt,) if fmt is not None else FORMATS:
        parsed = _strptime(text, pattern)
        if parsed is None:
            continue
        if pattern.endswith("Z") and parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return from_datetime(parsed, zone, locale)
    logger.debug("No date pattern matched %r", text)
    return None


__all__ = ["FORMATS", "parse"]
