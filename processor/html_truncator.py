"""HTML-aware truncation of rendered page content."""
from bs4 import BeautifulSoup, Comment, NavigableString

ELLIPSIS = '…'
REMOVED_TAGS = ['script', 'style']
REMOVED_CLASSES = ['mw-editsection']


def truncate_html(html: str, max_length: int) -> str:
    """
    Shorten HTML to at most max_length visible characters.

    The cut happens inside the text node where the budget runs out and
    everything after it is dropped. The result is serialized from the
    parse tree, so every open tag is closed.

    Args:
        html: Rendered HTML
        max_length: Budget of visible characters

    Returns:
        Truncated HTML, with an ellipsis if anything was cut
    """
    if max_length <= 0:
        return ''

    soup = BeautifulSoup(html, 'html.parser')
    _clean(soup)

    remaining = max_length
    previous = None
    for string in list(soup.find_all(string=True)):
        if not string.strip():
            continue

        if len(string) <= remaining:
            remaining -= len(string)
            previous = string
            continue

        # Budget used up exactly: end on the last whole string
        if remaining == 0:
            string = previous
            remaining = len(previous)

        cut = NavigableString(string[:remaining].rstrip() + ELLIPSIS)
        string.replace_with(cut)
        _drop_following(cut, soup)
        break

    return str(soup).strip()


def _clean(soup: BeautifulSoup) -> None:
    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    for tag in soup.find_all(REMOVED_TAGS):
        tag.decompose()

    for css_class in REMOVED_CLASSES:
        for tag in soup.find_all(class_=css_class):
            tag.decompose()

    for wrapper in soup.find_all('div', class_='mw-parser-output'):
        wrapper.unwrap()


def _drop_following(node, root) -> None:
    while node is not None and node is not root:
        for sibling in list(node.next_siblings):
            sibling.extract()
        node = node.parent
