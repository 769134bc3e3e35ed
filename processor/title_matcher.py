"""Selection of dated pages by title."""
import logging
from typing import Iterable, List, Optional

from processor.models import CalendarRequest, TitleMatch

logger = logging.getLogger(__name__)


class TitleMatcher:
    """Matches page titles against a prefix/suffix pair or a regex."""

    def __init__(self, request: CalendarRequest, namespace_name: str = ''):
        """
        Args:
            request: Calendar options holding the selection rule
            namespace_name: Local name of the namespace the titles live in
        """
        self.prefix = request.prefix
        self.suffix = request.suffix
        self.title_regex = request.title_regex
        self.namespace_name = namespace_name

    def match_titles(self, titles: Iterable[str]) -> List[TitleMatch]:
        """
        Keep the titles matching the selection rule.

        Args:
            titles: Full page titles, including the namespace

        Returns:
            List of TitleMatch objects, one per accepted title
        """
        matches = []

        for title in titles:
            match = self.match_title(title)
            if match:
                matches.append(match)
            else:
                logger.debug(f"Title does not match selection rule: {title}")

        return matches

    def match_title(self, title: str) -> Optional[TitleMatch]:
        text = self._strip_namespace(title)

        if self.title_regex is not None:
            return self._match_regex(title, text)
        return self._match_affixes(title, text)

    def _strip_namespace(self, title: str) -> str:
        text = title.replace('_', ' ')
        if self.namespace_name:
            head = self.namespace_name + ':'
            if text.lower().startswith(head.lower()):
                text = text[len(head):]
        return text

    def _match_affixes(self, title: str, text: str) -> Optional[TitleMatch]:
        if not text.startswith(self.prefix) or not text.endswith(self.suffix):
            return None

        end = len(text) - len(self.suffix)
        if end <= len(self.prefix):
            return None

        return TitleMatch(
            title=title,
            date_token=text[len(self.prefix):end].replace('_', ' '),
            display_title=text
        )

    def _match_regex(self, title: str, text: str) -> Optional[TitleMatch]:
        match = self.title_regex.search(text)
        if not match:
            return None

        date_token = match.group(0)
        if self.title_regex.groups and match.group(1) is not None:
            date_token = match.group(1)

        display_title = (text[:match.start()] + text[match.end():]).strip()

        return TitleMatch(
            title=title,
            date_token=date_token.replace('_', ' '),
            display_title=display_title or text
        )
