"""Relative-time rendering ("3 hours ago", "Yesterday", "In 2 weeks").

An elapsed-seconds delta (now - target) is classified into one bucket of a
fixed threshold table and then rendered through the locale string tables.
Positive deltas are past events. Negative deltas are future events and use the
mirrored phrasing of the same bucket; ``abs(delta) < 5`` is "Just now" either
way.
"""

from dataclasses import dataclass

from calmoment.localization import Localizer, localizer
from calmoment.util import DAY, HOUR, MINUTE, MONTH, WEEK, YEAR


@dataclass(frozen=True)
class Bucket:
    """One row of the threshold table.

    Attributes:
        name: Identifier of the bucket (e.g. "minutes", "last_month")
        limit: Exclusive upper bound of the bucket, in seconds
        past: Phrase key for past events
        future: Phrase key for future events
        divisor: Seconds per counted unit; None for fixed phrases
    """

    name: str
    limit: float
    past: str
    future: str
    divisor: int | None = None

    @property
    def counted(self) -> bool:
        return self.divisor is not None


# Counted templates keep a %s slot for the plural marker (see plural_prefix)
BUCKETS: tuple[Bucket, ...] = (
    Bucket("just_now", 5, "Just now", "Just now"),
    Bucket("seconds", MINUTE, "%%d %sseconds ago", "In %%d %sseconds", 1),
    Bucket("minute", 2 * MINUTE, "A minute ago", "In a minute"),
    Bucket("minutes", HOUR, "%%d %sminutes ago", "In %%d %sminutes", MINUTE),
    Bucket("hour", 2 * HOUR, "An hour ago", "In an hour"),
    Bucket("hours", DAY, "%%d %shours ago", "In %%d %shours", HOUR),
    Bucket("yesterday", 2 * DAY, "Yesterday", "Tomorrow"),
    Bucket("days", WEEK, "%%d %sdays ago", "In %%d %sdays", DAY),
    Bucket("last_week", 2 * WEEK, "Last week", "Next week"),
    Bucket("weeks", MONTH, "%%d %sweeks ago", "In %%d %sweeks", WEEK),
    Bucket("last_month", 61 * DAY, "Last month", "Next month"),
    Bucket("months", YEAR, "%%d %smonths ago", "In %%d %smonths", MONTH),
    Bucket("last_year", 2 * YEAR, "Last year", "Next year"),
    Bucket("years", float("inf"), "%%d %syears ago", "In %%d %syears", YEAR),
)


@dataclass(frozen=True)
class Phrase:
    """A classified delta: the bucket, the phrase template and its count.

    `template` is a plain translation key for fixed phrases and a template
    with a plural-marker slot for counted ones; `count` is None for fixed
    phrases.
    """

    bucket: Bucket
    template: str
    count: int | None = None
    future: bool = False

    @property
    def key(self) -> str:
        """The translation key with the default (non-Russian) plural marker."""
        return self.template % "" if self.count is not None else self.template


def classify(delta: int) -> Phrase:
    """Classify an elapsed-seconds delta (now - target) into a phrase.

    Example:
        >>> classify(4).key
        'Just now'
        >>> classify(7200).key, classify(7200).count
        ('%d hours ago', 2)
    """
    delta = int(delta)
    future = delta < 0
    magnitude = -delta if future else delta
    for bucket in BUCKETS:
        if magnitude < bucket.limit:
            break
    template = bucket.future if future else bucket.past
    if bucket.name == "just_now":
        future = False
    count = magnitude // bucket.divisor if bucket.divisor is not None else None
    return Phrase(bucket=bucket, template=template, count=count, future=future)


class RelativeTimeFormatter:
    """Render elapsed-seconds deltas as localized relative-time strings."""

    def __init__(self, strings: Localizer = localizer):
        self.strings: Localizer = strings

    def format(self, delta: int, locale: str) -> str:
        """Return the localized phrase for `delta`, or "" if untranslated."""
        phrase = classify(delta)
        if phrase.count is None:
            return self.strings.translate(phrase.template, locale)
        return self.strings.translate_count(phrase.template, phrase.count, locale)


formatter = RelativeTimeFormatter()


def humanize(delta: int, locale: str = "en") -> str:
    """Render an elapsed-seconds delta with the shared formatter.

    Example:
        >>> humanize(172800)
        '2 days ago'
        >>> humanize(-600)
        'In 10 minutes'
    """
    return formatter.format(delta, locale)


__all__ = [
    "BUCKETS",
    "Bucket",
    "Phrase",
    "RelativeTimeFormatter",
    "classify",
    "formatter",
    "humanize",
]
