"""Process-wide defaults for moments without explicit overrides.

A Moment created without a zone or locale uses the values captured here.
They are captured once, on first use, from the environment:

1. CALMOMENT_TZ / TZ - IANA zone name (falls back to the system zone, then UTC)
2. CALMOMENT_LOCALE - locale identifier such as "en_US" or "ru"
   (falls back to the process locale, then "en_US")

Call `configure()` before first use to pin them explicitly. Once captured they
are never replaced; tests can swap them temporarily with `override_settings()`.
"""

import locale as _locale
import logging
import os
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import tz as dateutil_tz

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en_US"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class Settings:
    """Defaults applied to moments that carry no zone/locale override."""

    zone: tzinfo = timezone.utc
    locale: str = DEFAULT_LOCALE
    clock: Callable[[], datetime] = field(default=_utc_now, compare=False)

    def now(self) -> datetime:
        """Current instant from the configured clock, as an aware UTC datetime."""
        current = self.clock()
        if current.tzinfo is None:
            current = current.replace(tzinfo=timezone.utc)
        return current.astimezone(timezone.utc)


def resolve_zone(zone: "tzinfo | str") -> tzinfo:
    """Return a tzinfo for an IANA name, passing tzinfo objects through.

    Raises:
        ValueError: If the name is not a known zone
    """
    if isinstance(zone, tzinfo):
        return zone
    try:
        return ZoneInfo(zone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(
            f"Unknown time zone {zone!r}.\n"
            f"Hint: Use an IANA zone name such as 'UTC', 'Europe/Paris' "
            f"or 'US/Pacific'"
        ) from e


def normalize_locale(identifier: str) -> str:
    """Normalize 'en-us' / 'en_US.UTF-8' style identifiers to 'en_US'."""
    base = identifier.split(".", 1)[0].split("@", 1)[0].replace("-", "_")
    parts = base.split("_")
    if len(parts) == 1:
        return parts[0].lower()
    return f"{parts[0].lower()}_{parts[1].upper()}"


def language_code(identifier: str) -> str:
    """Return the language part of a locale identifier ('ru_RU' -> 'ru')."""
    return normalize_locale(identifier).split("_", 1)[0]


def _system_zone() -> tzinfo:
    name = os.environ.get("CALMOMENT_TZ") or os.environ.get("TZ")
    if name:
        try:
            return resolve_zone(name.lstrip(":"))
        except ValueError:
            logger.warning("Ignoring unknown time zone %r from environment", name)
    local = dateutil_tz.gettz()
    return local if local is not None else timezone.utc


def _system_locale() -> str:
    name = os.environ.get("CALMOMENT_LOCALE")
    if not name:
        name = _locale.getlocale()[0]
    if not name or name in ("C", "POSIX"):
        return DEFAULT_LOCALE
    return normalize_locale(name)


_settings: Settings | None = None
_lock = threading.Lock()


def defaults() -> Settings:
    """Return the process-wide settings, capturing them on first call."""
    global _settings
    if _settings is None:
        with _lock:
            if _settings is None:
                _settings = Settings(zone=_system_zone(), locale=_system_locale())
                logger.info(
                    "Captured default zone %s and locale %s",
                    _settings.zone,
                    _settings.locale,
                )
    return _settings


def configure(
    zone: "tzinfo | str | None" = None,
    locale: str | None = None,
    clock: Callable[[], datetime] | None = None,
) -> Settings:
    """Pin the process-wide settings before anything reads them.

    Unspecified values are taken from the environment as usual.

    Raises:
        RuntimeError: If the settings were already captured
    """
    global _settings
    with _lock:
        if _settings is not None:
            raise RuntimeError(
                f"calmoment defaults were already captured ({_settings.zone}, "
                f"{_settings.locale}) and cannot be changed mid-run.\n"
                f"Hint: Call configure() at startup, or pass zone=/locale= "
                f"to individual moments"
            )
        _settings = Settings(
            zone=resolve_zone(zone) if zone is not None else _system_zone(),
            locale=normalize_locale(locale) if locale else _system_locale(),
            clock=clock or _utc_now,
        )
        return _settings


@contextmanager
def override_settings(
    zone: "tzinfo | str | None" = None,
    locale: str | None = None,
    clock: Callable[[], datetime] | None = None,
) -> Iterator[Settings]:
    """Temporarily replace the settings (for tests with fixed clocks/zones)."""
    global _settings
    base = defaults()
    replacement = Settings(
        zone=resolve_zone(zone) if zone is not None else base.zone,
        locale=normalize_locale(locale) if locale else base.locale,
        clock=clock or base.clock,
    )
    with _lock:
        previous, _settings = _settings, replacement
    try:
        yield replacement
    finally:
        with _lock:
            _settings = previous


__all__ = [
    "Settings",
    "configure",
    "defaults",
    "language_code",
    "normalize_locale",
    "override_settings",
    "resolve_zone",
]
