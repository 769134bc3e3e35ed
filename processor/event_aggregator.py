"""Event aggregator turning dated wiki pages into calendar events."""
import logging
from datetime import timedelta
from typing import List, Optional

from processor.color_resolver import ColorResolver
from processor.date_parser import DateParser
from processor.models import CalendarRequest, Candidate, Event, TitleMatch
from processor.title_matcher import TitleMatcher

logger = logging.getLogger(__name__)


def _title_key(title: str) -> str:
    # Titles sort in their URL form, spaces written as underscores
    return title.replace(' ', '_')


def _display_order(event: Event):
    return _title_key(event.title), event.start, event.url


def _date_order(event: Event):
    return event.start, _title_key(event.title), event.url


class EventAggregator:
    """Builds the ordered event list of a calendar request."""

    def __init__(self, document_store, snippet_provider=None,
                 reference_year: int = None):
        """
        Args:
            document_store: Wiki page source (see wiki.mediawiki_client)
            snippet_provider: SnippetProvider, or None to skip snippets
            reference_year: Year of all parsed dates (default: current year)
        """
        self.document_store = document_store
        self.snippet_provider = snippet_provider
        self.reference_year = reference_year
        self.titles_scanned = 0

    def build_events(self, request: CalendarRequest) -> List[Event]:
        """
        Build calendar events for a request.

        Args:
            request: Validated calendar options

        Returns:
            Events sorted by title, then start date
        """
        candidates = self.collect_candidates(request)
        events = self.merge_candidates(candidates)
        events = self.apply_limit(events, request.limit)

        logger.info(
            f"Built {len(events)} events from {len(candidates)} dated pages"
        )
        return events

    def collect_candidates(self, request: CalendarRequest) -> List[Candidate]:
        """
        Select, date and enrich the pages of a request.

        Args:
            request: Validated calendar options

        Returns:
            Unordered list of Candidate objects
        """
        date_parser = DateParser(request.date_format, self.reference_year)
        namespace_name = self.document_store.get_namespace_name(
            request.namespace
        )
        titles = self.document_store.list_titles_in_namespace(request.namespace)
        self.titles_scanned = len(titles)

        matches = TitleMatcher(request, namespace_name).match_titles(titles)
        logger.info(
            f"{len(matches)} of {len(titles)} titles match the selection rule"
        )

        color_resolver = ColorResolver(
            request.category_colors, request.keyword_colors
        )
        candidates = []

        for match in matches:
            event_date = date_parser.parse(match.date_token)
            if event_date is None:
                logger.debug(
                    f"Skipping '{match.title}': date {match.date_token!r} "
                    f"does not fit format {request.date_format!r}"
                )
                continue

            candidates.append(self._build_candidate(
                match, event_date, request, color_resolver
            ))

        return candidates

    def _build_candidate(self, match: TitleMatch, event_date,
                         request: CalendarRequest,
                         color_resolver: ColorResolver) -> Candidate:
        store = self.document_store
        candidate = Candidate(
            title=match.title,
            display_title=match.display_title,
            date=event_date,
            url=store.get_canonical_url(match.title)
        )

        categories = []
        if request.category_colors:
            categories = self._lookup(store.get_categories, match.title, [])
        text = ''
        if request.keyword_colors:
            text = self._lookup(store.get_raw_text, match.title, '')
        candidate.color = color_resolver.resolve(
            match.display_title, categories, text
        )

        if request.symbols > 0 and self.snippet_provider is not None:
            candidate.revision_id = self._lookup(
                store.get_latest_revision_id, match.title, None
            )
            if candidate.revision_id is not None:
                candidate.snippet = self.snippet_provider.get_snippet(
                    match.title, candidate.revision_id, request.symbols
                )

        return candidate

    @staticmethod
    def _lookup(getter, title: str, default):
        """Call a page lookup, falling back to default if it fails."""
        try:
            return getter(title)
        except Exception as e:
            lookup = getattr(getter, '__name__', 'lookup')
            logger.warning(f"Failed to read page '{title}' ({lookup}): {e}")
            return default

    @staticmethod
    def merge_candidates(candidates: List[Candidate]) -> List[Event]:
        """
        Merge same-titled candidates on consecutive days into one event.

        The merged event keeps the url, color and snippet of its earliest
        page.

        Args:
            candidates: Candidates in any order

        Returns:
            Events sorted by title, then start date
        """
        ordered = sorted(
            candidates,
            key=lambda c: (_title_key(c.display_title), c.date, c.url)
        )
        events = []
        current = None

        for candidate in ordered:
            if (current is not None
                    and current.title == candidate.display_title
                    and current.end == candidate.date):
                current = Event(
                    title=current.title,
                    start=current.start,
                    end=candidate.date + timedelta(days=1),
                    url=current.url,
                    color=current.color,
                    snippet=current.snippet
                )
                events[-1] = current
                continue

            current = Event.from_candidate(candidate)
            events.append(current)

        return events

    @staticmethod
    def apply_limit(events: List[Event], limit: Optional[int]) -> List[Event]:
        """
        Keep the earliest events and order them for display.

        Args:
            events: Merged events
            limit: Maximum number of events, None for no limit

        Returns:
            At most limit events, sorted by title, then start date
        """
        if limit is not None:
            events = sorted(events, key=_date_order)
            events = events[:limit]

        return sorted(events, key=_display_order)
