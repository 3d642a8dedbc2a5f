# === FILE: page_scout/parser/html_parser.py ===
"""HTML metadata extraction for PageScout.

:func:`extract_metadata` turns fetched markup into a
:class:`~page_scout.crawler.models.PageMetadata`:

* title, meta description / keywords / robots, canonical link;
* OpenGraph title, description and image;
* every ``application/ld+json`` block that parses as JSON (broken blocks are
  skipped);
* texts of ``h1``/``h2``/``h3`` headings;
* internal vs. external anchor counts, compared by hostname with the page;
* image count and how many images carry a non-empty ``alt``;
* length of the body text.

The metadata is computed once at fetch time and stored with the page record.
"""
from __future__ import annotations

import json
from collections.abc import Sequence
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup
from bs4.element import Tag

from page_scout.crawler.models import PageMetadata
from page_scout.utils import get_domain

__all__: Sequence[str] = ("extract_metadata",)


def _attr(soup: BeautifulSoup, name: str, attrs: dict, key: str) -> str:
    tag = soup.find(name, attrs=attrs)
    if not isinstance(tag, Tag):
        return ""
    value = tag.get(key)
    if isinstance(value, list):
        value = " ".join(value)
    return value or ""


def _rel_canonical(soup: BeautifulSoup) -> Tag | None:
    # bs4 treats rel as a multi-valued attribute
    for tag in soup.find_all("link", href=True):
        if "canonical" in (tag.get("rel") or []):
            return tag
    return None


def extract_metadata(html: str, url: str) -> PageMetadata:
    """Parse *html* fetched from *url* and collect its SEO metadata."""
    soup = BeautifulSoup(html, "html.parser")
    meta = PageMetadata()

    title_tag = soup.find("title")
    meta.title = title_tag.get_text().strip() if title_tag else ""
    meta.meta_description = _attr(soup, "meta", {"name": "description"}, "content")
    meta.meta_keywords = _attr(soup, "meta", {"name": "keywords"}, "content")
    meta.robots = _attr(soup, "meta", {"name": "robots"}, "content")
    meta.og_title = _attr(soup, "meta", {"property": "og:title"}, "content")
    meta.og_description = _attr(soup, "meta", {"property": "og:description"}, "content")
    meta.og_image = _attr(soup, "meta", {"property": "og:image"}, "content")
    canonical = _rel_canonical(soup)
    meta.canonical = canonical["href"] if canonical else ""  # type: ignore[assignment]

    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        try:
            meta.structured_data.append(json.loads(script.get_text()))
        except ValueError:
            continue

    for level in ("h1", "h2", "h3"):
        meta.headings[level] = [h.get_text().strip() for h in soup.find_all(level)]

    base_domain = get_domain(url)
    for anchor in soup.find_all("a", href=True):
        href = anchor.get("href")
        if not href:
            continue
        try:
            host = urlsplit(urljoin(url, href)).hostname or ""
        except ValueError:
            continue
        if host == base_domain:
            meta.links["internal"] += 1
        else:
            meta.links["external"] += 1

    for img in soup.find_all("img"):
        meta.images["total"] += 1
        if img.get("alt"):
            meta.images["with_alt"] += 1

    body = soup.body or soup
    meta.content_length = len(body.get_text())
    return meta
