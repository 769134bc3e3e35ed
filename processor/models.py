"""Data models for event extraction."""
import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Optional


@dataclass
class CalendarRequest:
    """Options of a single calendar request."""
    namespace: str = ''
    prefix: str = ''
    suffix: str = ''
    title_regex: Optional[re.Pattern] = None
    date_format: str = 'F j'
    symbols: int = 0
    limit: Optional[int] = None
    category_colors: Dict[str, str] = field(default_factory=dict)
    keyword_colors: Dict[str, str] = field(default_factory=dict)


@dataclass
class TitleMatch:
    """Page title accepted by the title matcher."""
    title: str
    date_token: str
    display_title: str


@dataclass
class Candidate:
    """Dated page waiting to be merged into an event."""
    title: str
    display_title: str
    date: date
    url: str
    revision_id: Optional[int] = None
    color: Optional[str] = None
    snippet: Optional[str] = None


@dataclass(frozen=True)
class Event:
    """Calendar event; end date is exclusive."""
    title: str
    start: date
    end: date
    url: str
    color: Optional[str] = None
    snippet: Optional[str] = None

    @classmethod
    def from_candidate(cls, candidate: Candidate) -> 'Event':
        return cls(
            title=candidate.display_title,
            start=candidate.date,
            end=candidate.date + timedelta(days=1),
            url=candidate.url,
            color=candidate.color,
            snippet=candidate.snippet
        )

    def to_dict(self) -> dict:
        """
        Serialize for the calendar widget.

        Returns:
            Dict with ISO dates; color and snippet only when present
        """
        data = {
            'title': self.title,
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'url': self.url
        }

        if self.color:
            data['color'] = self.color
        if self.snippet:
            data['snippet'] = self.snippet

        return data
