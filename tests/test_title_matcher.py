"""Unit tests for TitleMatcher."""
import re

from processor.models import CalendarRequest
from processor.title_matcher import TitleMatcher


class TestTitleMatcher:
    """Test cases for TitleMatcher class."""

    def test_prefix_mode_strips_namespace(self):
        """Test that the prefix is matched after the namespace."""
        matcher = TitleMatcher(
            CalendarRequest(prefix='Today in History/'), 'Template'
        )

        match = matcher.match_title('Template:Today in History/April, 12')

        assert match.title == 'Template:Today in History/April, 12'
        assert match.date_token == 'April, 12'
        assert match.display_title == 'Today in History/April, 12'

    def test_suffix_mode(self):
        """Test suffix-only selection."""
        matcher = TitleMatcher(CalendarRequest(suffix=' (events)'))

        match = matcher.match_title('25 December (events)')

        assert match.date_token == '25 December'
        assert match.display_title == '25 December (events)'

    def test_underscores_become_spaces(self):
        """Test that titles written with underscores still match."""
        matcher = TitleMatcher(CalendarRequest(suffix=' (events)'))

        match = matcher.match_title('1_May_(events)')

        assert match.date_token == '1 May'

    def test_prefix_mode_rejects_non_matching_titles(self):
        """Test titles without prefix, without suffix or without a date."""
        matcher = TitleMatcher(CalendarRequest(prefix='Log/', suffix=' end'))

        assert matcher.match_title('Other/1 May end') is None
        assert matcher.match_title('Log/1 May') is None
        assert matcher.match_title('Log/ end') is None
        assert matcher.match_title('Log/end') is None

    def test_empty_affixes_match_everything(self):
        """Test that the whole title is the date token without affixes."""
        matcher = TitleMatcher(CalendarRequest())

        match = matcher.match_title('May 1')

        assert match.date_token == 'May 1'
        assert match.display_title == 'May 1'

    def test_regex_leading_date(self):
        """Test that a leading date leaves the trailing text as title."""
        matcher = TitleMatcher(
            CalendarRequest(title_regex=re.compile(r'^(\d\d-\d\d) '))
        )

        match = matcher.match_title('06-12 Four Days Event')

        assert match.date_token == '06-12'
        assert match.display_title == 'Four Days Event'

    def test_regex_trailing_date(self):
        """Test that a trailing date leaves the leading text as title."""
        matcher = TitleMatcher(
            CalendarRequest(title_regex=re.compile(r'/(\w+ \d+)$'))
        )

        match = matcher.match_title('Concert/May_3')

        assert match.date_token == 'May 3'
        assert match.display_title == 'Concert'

    def test_regex_without_group_uses_whole_match(self):
        """Test that a pattern without groups yields the matched text."""
        matcher = TitleMatcher(
            CalendarRequest(title_regex=re.compile(r'\d+ May'))
        )

        match = matcher.match_title('Fair 3 May')

        assert match.date_token == '3 May'
        assert match.display_title == 'Fair'

    def test_regex_takes_precedence_over_prefix(self):
        """Test that prefix and suffix are ignored with a regex."""
        matcher = TitleMatcher(CalendarRequest(
            prefix='Never/', title_regex=re.compile(r'^(\d+ May)$')
        ))

        match = matcher.match_title('3 May')

        assert match.display_title == '3 May'

    def test_match_titles_skips_misses(self):
        """Test that only matching titles are returned."""
        matcher = TitleMatcher(CalendarRequest(suffix=' (events)'))

        matches = matcher.match_titles(['1 May (events)', 'Main Page'])

        assert [m.title for m in matches] == ['1 May (events)']
