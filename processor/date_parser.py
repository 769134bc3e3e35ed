"""Parsing of date tokens taken from page titles."""
import calendar
import re
from datetime import date, datetime
from typing import Optional

from processor.exceptions import ConfigurationError

MONTH_NAMES = {
    name.lower(): number
    for number, name in enumerate(calendar.month_name) if name
}
MONTH_ABBREVIATIONS = {
    name.lower(): number
    for number, name in enumerate(calendar.month_abbr) if name
}

# Directive -> (group name, regex)
DIRECTIVES = {
    'd': ('day', r'\d{1,2}'),
    'j': ('day', r'\d{1,2}'),
    'm': ('month', r'\d{1,2}'),
    'n': ('month', r'\d{1,2}'),
    'F': ('month_name', '|'.join(sorted(MONTH_NAMES, key=len, reverse=True))),
    'M': ('month_abbr', '|'.join(MONTH_ABBREVIATIONS))
}


def current_year() -> int:
    return datetime.now().year


class DateParser:
    """
    Parser for day/month tokens such as "April, 12" or "25 December".

    The format uses PHP date() letters: d/j for the day, m/n for the month
    number, F for the full month name and M for the abbreviated one. Any
    other letter is rejected, the remaining characters must appear
    literally and a backslash escapes a letter.
    The token carries no year, dates fall into the reference year.
    """

    def __init__(self, date_format: str, reference_year: int = None):
        """
        Args:
            date_format: Format pattern, e.g. "F, j"
            reference_year: Year given to every parsed date
                (default: current year)

        Raises:
            ConfigurationError: If the format lacks a day or a month, or
                uses an unsupported letter
        """
        self.date_format = date_format
        self.reference_year = reference_year or current_year()
        self._pattern = self._compile(date_format)

    def parse(self, token: str) -> Optional[date]:
        """
        Parse a date token.

        Args:
            token: Date part of a page title

        Returns:
            date in the reference year, or None if the token does not match
            the format exactly or names an impossible day
        """
        match = self._pattern.fullmatch(token)
        if not match:
            return None

        groups = match.groupdict()
        if groups.get('month_name'):
            month = MONTH_NAMES[groups['month_name'].lower()]
        elif groups.get('month_abbr'):
            month = MONTH_ABBREVIATIONS[groups['month_abbr'].lower()]
        else:
            month = int(groups['month'])

        try:
            return date(self.reference_year, month, int(groups['day']))
        except ValueError:
            return None

    @classmethod
    def validate_format(cls, date_format: str) -> None:
        """Raise ConfigurationError unless the format is usable."""
        cls._compile(date_format)

    @staticmethod
    def _compile(date_format: str):
        parts = []
        seen = set()
        escaped = False

        for char in date_format:
            if escaped:
                parts.append(re.escape(char))
                escaped = False
            elif char == '\\':
                escaped = True
            elif char in DIRECTIVES:
                group, regex = DIRECTIVES[char]
                kind = 'day' if group == 'day' else 'month'
                if kind in seen:
                    raise ConfigurationError(
                        f"Date format {date_format!r} has more than one "
                        f"{kind} directive"
                    )
                seen.add(kind)
                parts.append(f'(?P<{group}>{regex})')
            elif char.isascii() and char.isalpha():
                raise ConfigurationError(
                    f"Date format {date_format!r} uses unsupported letter "
                    f"{char!r}; escape it with a backslash to match it literally"
                )
            else:
                parts.append(re.escape(char))

        if seen != {'day', 'month'}:
            raise ConfigurationError(
                f"Date format {date_format!r} needs a day (d, j) and a "
                f"month (m, n, F, M)"
            )

        return re.compile(''.join(parts), re.IGNORECASE)
