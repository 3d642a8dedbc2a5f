# File: page_scout/parser/sitemap_parser.py
"""page_scout.parser.sitemap_parser: Разбор sitemap.xml в типизированный документ.

Документ классифицируется один раз функцией :func:`classify_sitemap` и далее
обрабатывается как вариант :data:`SitemapDocument`:

* :class:`SitemapIndex`: ссылки на другие sitemap (``<sitemapindex>``);
* :class:`UrlSet`: адреса страниц (``<urlset>``);
* :class:`UnknownSitemap`: всё остальное (это не ошибка).
"""

from __future__ import annotations

import gzip
from dataclasses import dataclass, field
from typing import ClassVar, List, Optional, Union

from lxml import etree

from page_scout.exceptions import ParseError

__all__ = (
    "SitemapUrl",
    "SitemapRef",
    "SitemapIndex",
    "UrlSet",
    "UnknownSitemap",
    "SitemapDocument",
    "classify_sitemap",
    "parse_sitemap",
)

_GZIP_MAGIC = b"\x1f\x8b"


@dataclass(slots=True)
class SitemapUrl:
    url: str
    lastmod: Optional[str] = None
    changefreq: Optional[str] = None
    priority: Optional[str] = None


@dataclass(slots=True)
class SitemapRef:
    url: str
    lastmod: Optional[str] = None


@dataclass(slots=True)
class SitemapIndex:
    type: ClassVar[str] = "index"
    sitemaps: List[SitemapRef] = field(default_factory=list)

    @property
    def urls(self) -> List[SitemapUrl]:
        return []


@dataclass(slots=True)
class UrlSet:
    type: ClassVar[str] = "urlset"
    urls: List[SitemapUrl] = field(default_factory=list)

    @property
    def sitemaps(self) -> List[SitemapRef]:
        return []


@dataclass(slots=True)
class UnknownSitemap:
    type: ClassVar[str] = "unknown"

    @property
    def urls(self) -> List[SitemapUrl]:
        return []

    @property
    def sitemaps(self) -> List[SitemapRef]:
        return []


SitemapDocument = Union[SitemapIndex, UrlSet, UnknownSitemap]


def _local(tag: object) -> str:
    if not isinstance(tag, str):
        return ""
    return etree.QName(tag).localname


def _child_text(element: etree._Element, name: str) -> Optional[str]:
    for child in element:
        if _local(child.tag) == name:
            text = (child.text or "").strip()
            return text or None
    return None


def classify_sitemap(root: etree._Element) -> SitemapDocument:
    """Определяет тип документа по корневому элементу и собирает записи."""
    kind = _local(root.tag)
    if kind == "sitemapindex":
        refs = [
            SitemapRef(url=loc, lastmod=_child_text(node, "lastmod"))
            for node in root
            if _local(node.tag) == "sitemap" and (loc := _child_text(node, "loc"))
        ]
        if refs:
            return SitemapIndex(sitemaps=refs)
    elif kind == "urlset":
        urls = [
            SitemapUrl(
                url=loc,
                lastmod=_child_text(node, "lastmod"),
                changefreq=_child_text(node, "changefreq"),
                priority=_child_text(node, "priority"),
            )
            for node in root
            if _local(node.tag) == "url" and (loc := _child_text(node, "loc"))
        ]
        if urls:
            return UrlSet(urls=urls)
    return UnknownSitemap()


def parse_sitemap(content: Union[str, bytes]) -> SitemapDocument:
    """Разбирает XML sitemap (в том числе сжатый gzip) и возвращает типизированный документ.

    Args:
        content: тело ответа сервера, строка или байты.

    Returns:
        SitemapIndex, UrlSet или UnknownSitemap.

    Raises:
        ParseError: если XML повреждён или тело не распаковывается.

    Пример:
    ```python
    from page_scout.parser.sitemap_parser import parse_sitemap

    doc = parse_sitemap(open('sitemap.xml', 'rb').read())
    print(doc.type, [u.url for u in doc.urls])
    ```
    """
    data = content.encode("utf-8") if isinstance(content, str) else content
    if data[:2] == _GZIP_MAGIC:
        try:
            data = gzip.decompress(data)
        except (OSError, EOFError) as exc:
            raise ParseError(f"Failed to decompress sitemap: {exc}") from exc

    data = data.strip()
    if not data:
        raise ParseError("Failed to parse XML sitemap: empty document")

    parser = etree.XMLParser(ns_clean=True, recover=False, resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(data, parser=parser)
    except etree.XMLSyntaxError as exc:
        raise ParseError(f"Failed to parse XML sitemap: {exc}") from exc
    if root is None:
        raise ParseError("Failed to parse XML sitemap: empty document")
    return classify_sitemap(root)
