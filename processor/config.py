"""Request options and environment settings."""
import logging
import os
import re
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from processor.date_parser import DateParser
from processor.exceptions import ConfigurationError
from processor.models import CalendarRequest

logger = logging.getLogger(__name__)

CALENDAR_MODULES = {
    'yasec': 'ext.yasec',
    'fullcalendar': 'ext.fullcalendar'
}

DEFAULT_DATE_FORMAT = 'F_j'
CATEGORY_COLOR_PREFIX = 'categorycolor.'
KEYWORD_COLOR_PREFIX = 'keywordcolor.'


@dataclass
class Settings:
    """Invocation-wide settings read from the environment."""
    wiki_api_url: str
    article_path: str = '/wiki/$1'
    snippet_table_name: Optional[str] = None
    snippet_ttl_seconds: int = 86400
    calendar_library: str = 'yasec'
    reference_year: Optional[int] = None
    log_level: str = 'INFO'
    timeout_seconds: int = 30

    @property
    def calendar_module(self) -> str:
        return CALENDAR_MODULES[self.calendar_library]


def _unescape(value: str) -> str:
    """Wiki markup writes spaces as underscores."""
    return value.replace('_', ' ')


def _parse_int(name: str, value, minimum: int = 0) -> int:
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ConfigurationError(
            f"Option '{name}' must be an integer, got {value!r}"
        )

    if number < minimum:
        raise ConfigurationError(
            f"Option '{name}' must be at least {minimum}, got {number}"
        )
    return number


def load_settings(environ: Mapping[str, str] = None) -> Settings:
    """
    Read and validate settings from environment variables.

    Args:
        environ: Variables to read (default: os.environ)

    Returns:
        Settings object

    Raises:
        ConfigurationError: If a variable is missing or has a bad value
    """
    if environ is None:
        environ = os.environ

    wiki_api_url = environ.get('WIKI_API_URL', '').strip()
    if not wiki_api_url:
        raise ConfigurationError('WIKI_API_URL must be set')

    calendar_library = environ.get('CALENDAR_LIBRARY', 'yasec').strip().lower()
    if calendar_library not in CALENDAR_MODULES:
        raise ConfigurationError(
            f"CALENDAR_LIBRARY must be one of "
            f"{', '.join(sorted(CALENDAR_MODULES))}, got {calendar_library!r}"
        )

    reference_year = None
    if environ.get('REFERENCE_YEAR'):
        reference_year = _parse_int(
            'REFERENCE_YEAR', environ['REFERENCE_YEAR'], minimum=1
        )

    return Settings(
        wiki_api_url=wiki_api_url,
        article_path=environ.get('ARTICLE_PATH', '/wiki/$1'),
        snippet_table_name=environ.get('SNIPPET_TABLE_NAME') or None,
        snippet_ttl_seconds=_parse_int(
            'SNIPPET_TTL_SECONDS',
            environ.get('SNIPPET_TTL_SECONDS', '86400'),
            minimum=1
        ),
        calendar_library=calendar_library,
        reference_year=reference_year,
        log_level=environ.get('LOG_LEVEL', 'INFO'),
        timeout_seconds=_parse_int(
            'TIMEOUT_SECONDS',
            environ.get('TIMEOUT_SECONDS', '30'),
            minimum=1
        )
    )


def parse_options(text: str) -> Dict[str, str]:
    """
    Parse a tag body made of "key = value" lines.

    Args:
        text: Tag body, e.g. "namespace = Template\\nprefix = Foo/"

    Returns:
        Ordered dict of raw option values
    """
    options = {}

    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue

        if '=' not in line:
            logger.warning(f"Ignoring malformed option line: {line!r}")
            continue

        key, value = line.split('=', 1)
        options[key.strip()] = value.strip()

    return options


def build_calendar_request(options: Mapping[str, str]) -> CalendarRequest:
    """
    Validate raw options and build a CalendarRequest.

    Args:
        options: Option name to raw value, in declaration order

    Returns:
        CalendarRequest

    Raises:
        ConfigurationError: If any option value is invalid
    """
    request = CalendarRequest(date_format=_unescape(DEFAULT_DATE_FORMAT))

    for name, value in options.items():
        key = name.strip().lower()
        value = '' if value is None else str(value).strip()

        if key == 'namespace':
            request.namespace = _unescape(value)
        elif key == 'prefix':
            request.prefix = _unescape(value)
        elif key == 'suffix':
            request.suffix = _unescape(value)
        elif key == 'titleregex':
            try:
                request.title_regex = re.compile(value)
            except re.error as e:
                raise ConfigurationError(f"Invalid titleRegex {value!r}: {e}")
        elif key == 'dateformat':
            if not value:
                raise ConfigurationError('Option dateFormat must not be empty')
            request.date_format = _unescape(value)
            DateParser.validate_format(request.date_format)
        elif key == 'symbols':
            request.symbols = _parse_int('symbols', value)
        elif key == 'limit':
            request.limit = _parse_int('limit', value)
        elif key.startswith(CATEGORY_COLOR_PREFIX):
            category = _unescape(name.strip()[len(CATEGORY_COLOR_PREFIX):])
            request.category_colors[category] = _color(name, value)
        elif key.startswith(KEYWORD_COLOR_PREFIX):
            keyword = _unescape(name.strip()[len(KEYWORD_COLOR_PREFIX):])
            request.keyword_colors[keyword] = _color(name, value)
        else:
            logger.warning(f"Ignoring unknown option: {name}")

    if request.title_regex is not None and (request.prefix or request.suffix):
        logger.info('titleRegex is set, prefix and suffix are ignored')

    return request


def _color(name: str, value: str) -> str:
    if not name.split('.', 1)[1].strip():
        raise ConfigurationError(f"Option '{name}' needs a name after the dot")
    if not value:
        raise ConfigurationError(f"Option '{name}' needs a color value")
    return value
