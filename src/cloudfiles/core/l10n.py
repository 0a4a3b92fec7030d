"""Localization helpers.

Strings are looked up in gettext catalogs under cloudfiles/locale, falling
back to the untranslated text when no catalog is installed.
"""

from __future__ import annotations

import gettext
from datetime import UTC, datetime, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo

LOCALE_DIR = Path(__file__).resolve().parent.parent / "locale"

_DATE_FORMATS = {
    "date": "%B %d, %Y",
    "time": "%H:%M:%S %Z",
    "datetime": "%B %d, %Y %H:%M:%S %Z",
}


def translate(app: str, text: str) -> str:
    """Translate a string from an app's catalog.

    Args:
        app: Catalog (gettext domain) name, e.g. "files_trashbin".
        text: Source string.

    Returns:
        Translated string, or text itself when untranslated.
    """
    catalog = gettext.translation(app, localedir=LOCALE_DIR, fallback=True)
    return catalog.gettext(text)


class L10N:
    """Formatter bound to an app catalog and a display timezone."""

    def __init__(self, app: str, timezone: str | tzinfo = UTC) -> None:
        self.app = app
        if isinstance(timezone, str):
            timezone = UTC if timezone == "UTC" else ZoneInfo(timezone)
        self.timezone = timezone

    def localize(self, kind: str, value: int | float | datetime) -> str:
        """Format a timestamp for display.

        Args:
            kind: One of "date", "time" or "datetime".
            value: Unix timestamp or datetime.

        Returns:
            Formatted string in the configured timezone.

        Raises:
            ValueError: If kind is unknown.
        """
        fmt = _DATE_FORMATS.get(kind)
        if fmt is None:
            raise ValueError(f"Unknown localization type: {kind}")
        if isinstance(value, datetime):
            moment = value.astimezone(self.timezone)
        else:
            moment = datetime.fromtimestamp(value, self.timezone)
        return moment.strftime(fmt)
