"""
First-link and title extraction from Wikipedia article HTML.

A link qualifies when it sits in a top-level paragraph of the article body,
outside parentheses and italics, and points at another article: not a red
link, not an anchor, not an external URL and not a namespaced page such as
``File:`` or ``Help:``.
"""

from __future__ import annotations

from typing import Iterator
from urllib.parse import unquote, urljoin, urlsplit

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

_PARAGRAPH_SELECTOR = "#mw-content-text .mw-parser-output > p"
_TITLE_SUFFIX = " - Wikipedia"


def extract_first_link(html: str, base_url: str) -> str | None:
    """Return the absolute URL of the first valid link, or None."""
    soup = BeautifulSoup(html, "html.parser")
    for paragraph in soup.select(_PARAGRAPH_SELECTOR):
        for link, depth in _links_with_paren_depth(paragraph):
            if depth > 0:
                continue
            if _within(link, paragraph, "i"):
                continue
            href = _valid_href(link)
            if href is None:
                continue
            return urljoin(base_url, href)
    return None


def extract_title(html: str, url: str) -> str | None:
    """Return the article title from the page heading, <title> or URL."""
    soup = BeautifulSoup(html, "html.parser")

    heading = soup.find(id="firstHeading")
    if heading is not None:
        text = heading.get_text().strip()
        if text:
            return text

    if soup.title is not None:
        text = soup.title.get_text().strip()
        if text:
            return text.removesuffix(_TITLE_SUFFIX)

    return title_from_url(url)


def title_from_url(url: str) -> str | None:
    """Derive a title from a ``/wiki/`` URL, e.g. ``Ancient_Greek`` -> ``Ancient Greek``."""
    path = urlsplit(url).path
    if "/wiki/" not in path:
        return None
    name = path.split("/wiki/", 1)[1]
    if not name:
        return None
    return unquote(name).replace("_", " ")


def _links_with_paren_depth(paragraph: Tag) -> Iterator[tuple[Tag, int]]:
    """Yield each <a> in document order with the parenthesis depth before it."""
    depth = 0
    for node in paragraph.descendants:
        if isinstance(node, Tag):
            if node.name == "a":
                yield node, depth
        elif isinstance(node, NavigableString) and not isinstance(node, Comment):
            depth += node.count("(") - node.count(")")
            depth = max(depth, 0)


def _within(link: Tag, paragraph: Tag, name: str) -> bool:
    for parent in link.parents:
        if parent is paragraph:
            return False
        if parent.name == name:
            return True
    return False


def _valid_href(link: Tag) -> str | None:
    href = link.get("href")
    if not href or not isinstance(href, str):
        return None
    if href.startswith(("http:", "https:", "//")):
        return None
    if "new" in (link.get("class") or []):
        return None
    if href.startswith("#") or ":" in href or not href.startswith("/wiki/"):
        return None
    return href
