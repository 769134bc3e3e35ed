"""Event color assignment."""
from typing import Dict, Iterable, Optional


class ColorResolver:
    """Picks an event color from category and keyword rules."""

    def __init__(self, category_colors: Dict[str, str] = None,
                 keyword_colors: Dict[str, str] = None):
        self.category_colors = category_colors or {}
        self.keyword_colors = keyword_colors or {}

    def resolve(self, title: str, categories: Iterable[str] = (),
                text: str = '') -> Optional[str]:
        """
        Resolve the color of a page.

        Category rules always win over keyword rules. Within each rule the
        first configured entry that applies is used.

        Args:
            title: Display title of the page
            categories: Category names of the page
            text: Raw page text

        Returns:
            Color string or None
        """
        categories = set(categories)
        for category, color in self.category_colors.items():
            if category in categories:
                return color

        title = title.lower()
        text = (text or '').lower()
        for keyword, color in self.keyword_colors.items():
            keyword = keyword.lower()
            if keyword in title or keyword in text:
                return color

        return None
