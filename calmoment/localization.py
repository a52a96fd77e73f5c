"""Locale string tables for relative-time phrases and calendar names.

Tables live in the `locales/` package directory as one JSON object per
language (``en.json``, ``ru.json``, ...), keyed by the English phrase. A lookup
tries the full locale identifier first (``ru_RU``) and then its language code
(``ru``). Any miss resolves to an empty string rather than an error.
"""

import json
import logging
import threading
from importlib.resources import files

from calmoment.config import language_code, normalize_locale

logger = logging.getLogger(__name__)


def plural_prefix(value: int, language: str) -> str:
    """Return the plural-form marker inserted before a unit word in a key.

    Only Russian distinguishes forms: "__" selects the "one" form (1, 21,
    31 ...), "_" the "few" form (2-4, 22-24 ...), and "" the "many" form
    (0, 5-20, 25-30 ...). Every other language uses "".
    """
    if language != "ru":
        return ""
    xy = value % 100
    y = value % 10
    if y == 0 or y > 4 or 10 < xy < 15:
        return ""
    if 1 < y < 5 and (xy < 10 or xy > 20):
        return "_"
    if y == 1 and xy != 11:
        return "__"
    return ""


class Localizer:
    """Reads and caches the JSON string tables of a package."""

    def __init__(self, package: str = __package__, directory: str = "locales"):
        self.package: str = package
        self.directory: str = directory
        self._tables: dict[str, dict[str, str] | None] = {}
        self._lock = threading.Lock()

    def table(self, name: str) -> dict[str, str] | None:
        """Return the string table for a locale or language, or None."""
        with self._lock:
            if name in self._tables:
                return self._tables[name]
            resource = files(self.package) / self.directory / f"{name}.json"
            try:
                table = json.loads(resource.read_text(encoding="utf-8"))
            except FileNotFoundError:
                table = None
            self._tables[name] = table
            return table

    def lookup(self, key: str, locale: str) -> str | None:
        """Return the translation of `key` for `locale`, or None."""
        identifier = normalize_locale(locale)
        for name in dict.fromkeys((identifier, language_code(identifier))):
            table = self.table(name)
            if table is not None:
                return table.get(key)
        return None

    def translate(self, key: str, locale: str) -> str:
        """Like lookup(), but a miss resolves to the empty string."""
        text = self.lookup(key, locale)
        if text is None:
            logger.debug("No %r translation for %r", locale, key)
            return ""
        return text

    def translate_count(self, template: str, value: int, locale: str) -> str:
        """Translate a counted phrase such as "%%d %sminutes ago".

        `template` carries one ``%s`` slot for the plural marker and an
        escaped ``%%d`` for the count. The marker is chosen from `value` and
        the locale's language, the resulting key is translated and the count
        substituted into the translation.
        """
        key = template % plural_prefix(value, language_code(locale))
        text = self.translate(key, locale)
        if not text:
            return ""
        return text % value


localizer = Localizer()

__all__ = ["Localizer", "localizer", "plural_prefix"]
