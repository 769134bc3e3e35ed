"""MediaWiki Action API client used as document store and renderer."""
import logging
import time
from typing import Dict, List, Optional
from urllib.parse import quote

import requests

from processor.config import ConfigurationError

logger = logging.getLogger(__name__)


class WikiApiError(Exception):
    """Error reported by the MediaWiki API or a missing page."""


class MediaWikiClient:
    """Client for the MediaWiki Action API."""

    MAX_RETRIES = 3
    BASE_DELAY = 1  # seconds
    URL_SAFE_CHARS = ';:@$!*(),/~'

    def __init__(self, api_url: str, article_path: str = '/wiki/$1',
                 timeout: int = 30, session: requests.Session = None):
        """
        Initialize the API client.

        Args:
            api_url: URL of api.php
            article_path: Page URL pattern, $1 is replaced by the title
            timeout: HTTP request timeout in seconds (default: 30)
            session: Optional requests session to reuse
        """
        self.api_url = api_url
        self.article_path = article_path
        self.timeout = timeout
        self.session = session or requests.Session()
        self._namespaces: Optional[Dict[str, dict]] = None
        self._pages: Dict[str, dict] = {}

    def get_namespace_name(self, namespace: str) -> str:
        """
        Resolve a namespace name, alias or number to its local name.

        Args:
            namespace: Namespace as written in the calendar options

        Returns:
            Local namespace name, empty for the main namespace

        Raises:
            ConfigurationError: If the wiki has no such namespace
        """
        return self._resolve_namespace(namespace)['name']

    def list_titles_in_namespace(self, namespace: str) -> List[str]:
        """
        List all page titles of a namespace.

        Args:
            namespace: Namespace name, alias or number

        Returns:
            Full page titles, including the namespace prefix
        """
        namespace_id = self._resolve_namespace(namespace)['id']
        params = {
            'action': 'query',
            'list': 'allpages',
            'apnamespace': namespace_id,
            'aplimit': 'max'
        }
        titles = []

        while True:
            data = self._request(params)
            titles.extend(
                page['title'] for page in data['query'].get('allpages', [])
            )
            if 'continue' not in data:
                break
            params = {**params, **data['continue']}

        logger.info(f"Listed {len(titles)} pages in namespace {namespace_id}")
        return titles

    def get_latest_revision_id(self, title: str) -> int:
        return self._get_page(title)['revisions'][0]['revid']

    def get_raw_text(self, title: str) -> str:
        revision = self._get_page(title)['revisions'][0]
        return revision['slots']['main'].get('content', '')

    def get_categories(self, title: str) -> List[str]:
        """Category names of a page, without the namespace prefix."""
        return [
            category['title'].split(':', 1)[-1]
            for category in self._get_page(title).get('categories', [])
        ]

    def get_canonical_url(self, title: str) -> str:
        """
        Build the page URL the way MediaWiki encodes titles.

        Args:
            title: Full page title

        Returns:
            URL such as /wiki/Template:Today_in_History/April,_12
        """
        encoded = quote(title.replace(' ', '_'), safe=self.URL_SAFE_CHARS)
        return self.article_path.replace('$1', encoded)

    def render_to_html(self, raw_text: str, title: str = None) -> str:
        """
        Render wikitext to HTML with action=parse.

        Args:
            raw_text: Wikitext to render
            title: Page title used as parser context

        Returns:
            Rendered HTML
        """
        params = {
            'action': 'parse',
            'text': raw_text,
            'contentmodel': 'wikitext',
            'prop': 'text',
            'disablelimitreport': 1,
            'disableeditsection': 1
        }
        if title:
            params['title'] = title

        data = self._request(params, method='POST')
        return data['parse']['text']

    def _get_page(self, title: str) -> dict:
        if title in self._pages:
            return self._pages[title]

        data = self._request({
            'action': 'query',
            'titles': title,
            'prop': 'revisions|categories',
            'rvprop': 'ids|content',
            'rvslots': 'main',
            'cllimit': 'max'
        })
        pages = data['query'].get('pages', [])
        if not pages or pages[0].get('missing') or not pages[0].get('revisions'):
            raise WikiApiError(f"Page not found: {title}")

        self._pages[title] = pages[0]
        return pages[0]

    def _resolve_namespace(self, namespace: str) -> dict:
        if self._namespaces is None:
            self._namespaces = self._fetch_namespaces()

        key = (namespace or '').replace('_', ' ').strip().lower()
        if key in ('', 'main', '(main)'):
            key = '0'

        if key not in self._namespaces:
            raise ConfigurationError(f"Unknown namespace: {namespace}")
        return self._namespaces[key]

    def _fetch_namespaces(self) -> Dict[str, dict]:
        """
        Fetch namespaces and aliases, keyed by lowercase name and number.

        Returns:
            Dict mapping lookup keys to {'id', 'name'} entries
        """
        data = self._request({
            'action': 'query',
            'meta': 'siteinfo',
            'siprop': 'namespaces|namespacealiases'
        })
        query = data['query']
        namespaces = {}

        for info in query['namespaces'].values():
            entry = {'id': info['id'], 'name': info.get('name', '')}
            namespaces[str(info['id'])] = entry
            for name in (info.get('name'), info.get('canonical')):
                if name:
                    namespaces[name.lower()] = entry

        for alias in query.get('namespacealiases', []):
            entry = namespaces.get(str(alias['id']))
            if entry:
                namespaces[alias['alias'].lower()] = entry

        return namespaces

    def _request(self, params: dict, method: str = 'GET') -> dict:
        """
        Call the API with retry logic.

        Args:
            params: API parameters
            method: HTTP method

        Returns:
            Decoded JSON response

        Raises:
            requests.RequestException: If all retry attempts fail
            WikiApiError: If the API reports an error
        """
        params = {**params, 'format': 'json', 'formatversion': 2}

        for attempt in range(self.MAX_RETRIES):
            try:
                if method == 'POST':
                    response = self.session.post(
                        self.api_url, data=params, timeout=self.timeout
                    )
                else:
                    response = self.session.get(
                        self.api_url, params=params, timeout=self.timeout
                    )
                response.raise_for_status()
                data = response.json()
                break

            except requests.RequestException as e:
                if attempt < self.MAX_RETRIES - 1:
                    # Calculate exponential backoff delay
                    delay = self.BASE_DELAY * (2 ** attempt)
                    logger.warning(
                        f"Request failed (attempt {attempt + 1}/"
                        f"{self.MAX_RETRIES}): {e}. "
                        f"Retrying in {delay} seconds..."
                    )
                    time.sleep(delay)
                else:
                    logger.error(
                        f"All {self.MAX_RETRIES} retry attempts failed. "
                        f"Last error: {e}"
                    )
                    raise

        if 'error' in data:
            error = data['error']
            raise WikiApiError(
                f"{error.get('code', 'unknown')}: {error.get('info', '')}"
            )
        return data
