"""
Metadata extraction from rendered page markup.

Title and description are resolved from ordered source lists, and the
category from an ordered keyword table. In both cases the first match wins,
so reordering a table changes precedence without touching control flow.
"""

import re
from dataclasses import dataclass, field, replace
from typing import Callable, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup


DEFAULT_CATEGORY = "Website"

# (category, pattern) in priority order
CATEGORY_RULES: list[tuple[str, re.Pattern]] = [
    ("Design", re.compile(r'portfolio|design|creative|agency')),
    ("E-commerce", re.compile(r'e-commerce|shop|store|product')),
    ("Blog", re.compile(r'blog|article|news|magazine')),
    ("App", re.compile(r'app|software|saas|tool')),
    ("Video", re.compile(r'video|animation|motion')),
    ("Landing", re.compile(r'landing|marketing')),
]


@dataclass(frozen=True)
class WebsiteMetadata:
    """Metadata derived from a captured page."""
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    color_palette: list[str] = field(default_factory=list)

    def with_palette(self, palette: list[str]) -> "WebsiteMetadata":
        return replace(self, color_palette=list(palette))


def _meta_content(soup: BeautifulSoup, **attrs) -> Optional[str]:
    tag = soup.find('meta', attrs=attrs)
    if tag is None:
        return None
    return tag.get('content')


def _title_text(soup: BeautifulSoup) -> Optional[str]:
    tag = soup.find('title')
    return tag.get_text() if tag else None


# Ordered sources: each takes the parsed document and returns a candidate
TITLE_SOURCES: list[Callable[[BeautifulSoup], Optional[str]]] = [
    lambda soup: _meta_content(soup, property='og:title'),
    lambda soup: _meta_content(soup, name='twitter:title'),
    _title_text,
]

DESCRIPTION_SOURCES: list[Callable[[BeautifulSoup], Optional[str]]] = [
    lambda soup: _meta_content(soup, property='og:description'),
    lambda soup: _meta_content(soup, name='description'),
    lambda soup: _meta_content(soup, name='twitter:description'),
]


def first_non_empty(soup: BeautifulSoup, sources) -> Optional[str]:
    """Return the first stripped, non-empty value produced by ``sources``."""
    for source in sources:
        value = source(soup)
        if value and value.strip():
            return value.strip()
    return None


def infer_category(title: str, description: str = "", keywords: str = "") -> str:
    text = f"{title} {description} {keywords}".lower()

    for category, pattern in CATEGORY_RULES:
        if pattern.search(text):
            return category

    return DEFAULT_CATEGORY


def _hostname(url: str) -> str:
    try:
        return urlparse(url).hostname or url
    except ValueError:
        return url


def extract_metadata(html: str, url: str) -> WebsiteMetadata:
    """
    Extract title, description and category from page markup.

    Args:
        html: Rendered document markup
        url: The captured URL (hostname is the last-resort title)

    Returns:
        WebsiteMetadata with an empty color palette
    """
    soup = BeautifulSoup(html or "", 'html.parser')

    title = first_non_empty(soup, TITLE_SOURCES) or _hostname(url).strip()
    description = first_non_empty(soup, DESCRIPTION_SOURCES)
    keywords = _meta_content(soup, name='keywords') or ""

    category = infer_category(title, description or "", keywords)

    return WebsiteMetadata(
        title=title,
        description=description,
        category=category,
    )
