# page_scout/crawler/link_extractor.py
"""
Outbound link extraction for the crawl frontier.
"""
from __future__ import annotations

from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from page_scout.utils import normalize_url


def _resolve(base_url: str, href: object) -> Optional[str]:
    if not isinstance(href, str) or not href.strip():
        return None
    try:
        return normalize_url(urljoin(base_url, href.strip()))
    except ValueError:
        return None


def extract_urls(html: str, base_url: str) -> List[str]:
    """
    Return every ``<a href>`` target plus the ``<link rel="canonical">`` target,
    resolved against *base_url* and normalized, deduplicated in document order.

    No scoping is done here: mailto:, javascript: and external links are
    returned as-is and rejected later by the URL filter. Hrefs that cannot be
    resolved are skipped.
    """
    soup = BeautifulSoup(html, "html.parser")
    seen: dict[str, None] = {}

    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        url = _resolve(base_url, tag.get("href"))
        if url:
            seen.setdefault(url, None)

    for tag in soup.find_all("link", href=True):
        if isinstance(tag, Tag) and "canonical" in (tag.get("rel") or []):
            url = _resolve(base_url, tag.get("href"))
            if url:
                seen.setdefault(url, None)
            break

    return list(seen)
