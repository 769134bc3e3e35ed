"""Shared fixtures."""
import pytest

from processor.config import ConfigurationError


class InMemoryWiki:
    """Document store and renderer backed by a dict of pages."""

    NAMESPACES = {'': '', 'main': '', 'template': 'Template', 'project': 'Project'}

    def __init__(self):
        self.pages = {}
        self.render_calls = []
        self.failing_renders = set()
        self.failing_pages = set()

    def add_page(self, title, text, categories=(), revision_id=None):
        self.pages[title] = {
            'text': text,
            'categories': list(categories),
            'revid': revision_id or len(self.pages) + 1000
        }

    def get_namespace_name(self, namespace):
        key = (namespace or '').lower()
        if key not in self.NAMESPACES:
            raise ConfigurationError(f"Unknown namespace: {namespace}")
        return self.NAMESPACES[key]

    def list_titles_in_namespace(self, namespace):
        name = self.get_namespace_name(namespace)
        prefixes = [n + ':' for n in self.NAMESPACES.values() if n]
        if name:
            return [t for t in self.pages if t.startswith(name + ':')]
        return [
            t for t in self.pages
            if not any(t.startswith(p) for p in prefixes)
        ]

    def _page(self, title):
        if title in self.failing_pages:
            raise RuntimeError(f"Lookup failed for {title}")
        return self.pages[title]

    def get_latest_revision_id(self, title):
        return self._page(title)['revid']

    def get_raw_text(self, title):
        return self._page(title)['text']

    def get_categories(self, title):
        return self._page(title)['categories']

    def get_canonical_url(self, title):
        return '/wiki/' + title.replace(' ', '_')

    def render_to_html(self, raw_text, title=None):
        self.render_calls.append(title)
        if title in self.failing_renders:
            raise RuntimeError('Parser crashed')
        paragraphs = [p.strip() for p in raw_text.split('\n\n') if p.strip()]
        return '\n'.join(f'<p>{p}</p>' for p in paragraphs)


class DictCache:
    """Key/value cache kept in memory."""

    def __init__(self):
        self.values = {}
        self.set_calls = []

    def get(self, key):
        return self.values.get(key)

    def set(self, key, value, ttl):
        self.set_calls.append((key, value, ttl))
        self.values[key] = value
        return True


@pytest.fixture
def wiki():
    """Empty in-memory wiki."""
    return InMemoryWiki()


@pytest.fixture
def cache():
    """Empty in-memory snippet cache."""
    return DictCache()
