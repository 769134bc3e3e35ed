"""Cached HTML snippets of calendar pages."""
import logging

from processor.html_truncator import truncate_html

logger = logging.getLogger(__name__)


class SnippetProvider:
    """Provides per-revision page snippets, rendering them on cache miss."""

    CACHE_KEY_PREFIX = 'eventcalendar-snippet:'
    DEFAULT_TTL_SECONDS = 24 * 60 * 60

    def __init__(self, document_store, renderer, cache=None,
                 ttl_seconds: int = DEFAULT_TTL_SECONDS):
        """
        Args:
            document_store: Source of raw page text (get_raw_text)
            renderer: Markup to HTML renderer (render_to_html)
            cache: Key/value cache with get/set, or None to always render
            ttl_seconds: Lifetime of cached snippets
        """
        self.document_store = document_store
        self.renderer = renderer
        self.cache = cache
        self.ttl_seconds = ttl_seconds

    @classmethod
    def cache_key(cls, revision_id) -> str:
        return f"{cls.CACHE_KEY_PREFIX}{revision_id}"

    def get_snippet(self, title: str, revision_id, max_length: int) -> str:
        """
        Get the snippet of a page revision.

        A cached snippet is returned as is, even if the page would render
        differently now. Render failures yield an empty snippet, which is
        not cached.

        Args:
            title: Page title
            revision_id: Latest revision id of the page
            max_length: Budget of visible characters

        Returns:
            HTML snippet, possibly empty
        """
        key = self.cache_key(revision_id)

        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        try:
            html = self.renderer.render_to_html(
                self.document_store.get_raw_text(title), title
            )
        except Exception as e:
            logger.warning(f"Failed to render snippet for '{title}': {e}")
            return ''

        snippet = truncate_html(html, max_length)

        if self.cache is not None:
            self.cache.set(key, snippet, self.ttl_seconds)

        return snippet
