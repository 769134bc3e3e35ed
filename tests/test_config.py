"""Unit tests for request options and settings."""
import pytest

from processor.config import (
    ConfigurationError,
    build_calendar_request,
    load_settings,
    parse_options
)


class TestParseOptions:
    """Test cases for tag body parsing."""

    def test_key_value_lines(self):
        text = "namespace = Template\nprefix = Today_in_History/\n\ndateFormat = F,_j"

        assert parse_options(text) == {
            'namespace': 'Template',
            'prefix': 'Today_in_History/',
            'dateFormat': 'F,_j'
        }

    def test_value_may_contain_equals_sign(self):
        assert parse_options('titleRegex = ^(a=b)') == {'titleRegex': '^(a=b)'}

    def test_malformed_lines_are_ignored(self):
        assert parse_options('just text\nlimit = 3') == {'limit': '3'}

    def test_empty_body(self):
        assert parse_options('') == {}


class TestBuildCalendarRequest:
    """Test cases for CalendarRequest construction."""

    def test_defaults(self):
        request = build_calendar_request({})

        assert request.namespace == ''
        assert request.prefix == ''
        assert request.suffix == ''
        assert request.title_regex is None
        assert request.date_format == 'F j'
        assert request.symbols == 0
        assert request.limit is None

    def test_underscores_are_unescaped(self):
        """Test that wiki-style underscores become spaces."""
        request = build_calendar_request({
            'namespace': 'Project_talk',
            'prefix': 'Today_in_History/',
            'suffix': '_(events)',
            'dateFormat': 'F,_j'
        })

        assert request.namespace == 'Project talk'
        assert request.prefix == 'Today in History/'
        assert request.suffix == ' (events)'
        assert request.date_format == 'F, j'

    def test_regex_is_compiled_verbatim(self):
        request = build_calendar_request({'titleRegex': r'^(\d+_May)'})

        assert request.title_regex.pattern == r'^(\d+_May)'

    def test_numbers(self):
        request = build_calendar_request({'symbols': '150', 'LIMIT': '3'})

        assert request.symbols == 150
        assert request.limit == 3

    def test_color_mappings_keep_order(self):
        """Test repeatable color options and name unescaping."""
        request = build_calendar_request({
            'categorycolor.Public_holidays': 'red',
            'keywordcolor.concert': '#00f',
            'categorycolor.Sports': 'green',
            'keywordcolor.Open_air': 'yellow'
        })

        assert list(request.category_colors.items()) == [
            ('Public holidays', 'red'), ('Sports', 'green')
        ]
        assert list(request.keyword_colors.items()) == [
            ('concert', '#00f'), ('Open air', 'yellow')
        ]

    def test_unknown_options_are_ignored(self):
        request = build_calendar_request({'colour': 'red'})

        assert request.category_colors == {}

    @pytest.mark.parametrize('options', [
        {'symbols': 'many'},
        {'limit': '-1'},
        {'titleRegex': '(unclosed'},
        {'dateFormat': ''},
        {'dateFormat': 'j_F_Y'},
        {'dateFormat': 'F'},
        {'categorycolor.Sports': ''},
        {'keywordcolor.': 'red'},
    ])
    def test_invalid_options(self, options):
        """Test that bad option values abort the request."""
        with pytest.raises(ConfigurationError):
            build_calendar_request(options)


class TestLoadSettings:
    """Test cases for environment settings."""

    def test_defaults(self):
        settings = load_settings({'WIKI_API_URL': 'https://wiki.example.org/w/api.php'})

        assert settings.article_path == '/wiki/$1'
        assert settings.snippet_table_name is None
        assert settings.snippet_ttl_seconds == 86400
        assert settings.calendar_module == 'ext.yasec'
        assert settings.reference_year is None
        assert settings.timeout_seconds == 30

    def test_all_values(self):
        settings = load_settings({
            'WIKI_API_URL': 'https://wiki.example.org/w/api.php',
            'ARTICLE_PATH': '/w/$1',
            'SNIPPET_TABLE_NAME': 'snippets',
            'SNIPPET_TTL_SECONDS': '600',
            'CALENDAR_LIBRARY': 'FullCalendar',
            'REFERENCE_YEAR': '2022',
            'LOG_LEVEL': 'DEBUG',
            'TIMEOUT_SECONDS': '5'
        })

        assert settings.article_path == '/w/$1'
        assert settings.snippet_table_name == 'snippets'
        assert settings.snippet_ttl_seconds == 600
        assert settings.calendar_module == 'ext.fullcalendar'
        assert settings.reference_year == 2022
        assert settings.log_level == 'DEBUG'
        assert settings.timeout_seconds == 5

    @pytest.mark.parametrize('environ', [
        {},
        {'WIKI_API_URL': 'https://w/api.php', 'CALENDAR_LIBRARY': 'jquery'},
        {'WIKI_API_URL': 'https://w/api.php', 'TIMEOUT_SECONDS': 'soon'},
        {'WIKI_API_URL': 'https://w/api.php', 'REFERENCE_YEAR': '0'},
    ])
    def test_invalid_settings(self, environ):
        """Test that bad settings fail with a descriptive error."""
        with pytest.raises(ConfigurationError):
            load_settings(environ)
