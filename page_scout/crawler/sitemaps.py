# page_scout/crawler/sitemaps.py
"""
Sitemap discovery: robots.txt + conventional locations, nested indexes
resolved breadth-first under depth and branching limits.
"""
from __future__ import annotations

import asyncio
from typing import Dict, List, Optional, Sequence, Set

from aiohttp import ClientError, ClientSession, ClientTimeout

from page_scout.config import CrawlerConfig
from page_scout.crawler.filters import FilterRules, should_crawl
from page_scout.crawler.models import DiscoveredUrlEntry
from page_scout.exceptions import FetchError, ParseError
from page_scout.logger import logger
from page_scout.parser.robots_parser import sitemaps_from_robots
from page_scout.parser.sitemap_parser import SitemapDocument, SitemapIndex, UrlSet, parse_sitemap
from page_scout.utils import get_domain, is_homepage, normalize_url, remove_duplicates

__all__ = ("COMMON_SITEMAP_PATHS", "common_sitemap_urls", "SitemapResolver")

COMMON_SITEMAP_PATHS: Sequence[str] = (
    "/sitemap.xml",
    "/sitemap_index.xml",
    "/sitemaps.xml",
    "/sitemap/sitemap.xml",
    "/wp-sitemap.xml",
    "/sitemap/index.xml",
)

_SITEMAP_ACCEPT = "application/xml, text/xml, application/rss+xml, */*"


def common_sitemap_urls(base_url: str) -> List[str]:
    """Conventional sitemap locations on ``https://{domain}``."""
    domain = get_domain(base_url)
    if not domain:
        return []
    return [f"https://{domain}{path}" for path in COMMON_SITEMAP_PATHS]


class SitemapResolver:
    """Fetches sitemaps over a shared session and flattens them into page URLs."""

    def __init__(
        self,
        session: ClientSession,
        config: Optional[CrawlerConfig] = None,
        rules: Optional[FilterRules] = None,
    ) -> None:
        self.session = session
        self.config = config or CrawlerConfig()
        self.rules = rules if rules is not None else self.config.active_filter_rules

    @property
    def _headers(self) -> Dict[str, str]:
        return {"User-Agent": self.config.sitemap_user_agent}

    async def get_robots_sitemaps(self, base_url: str) -> List[str]:
        """Sitemaps declared in ``https://{domain}/robots.txt``; ``[]`` on any failure."""
        domain = get_domain(base_url)
        if not domain:
            return []
        robots_url = f"https://{domain}/robots.txt"
        logger.info("[ROBOTS.TXT] Checking %s", robots_url)
        try:
            async with self.session.get(
                robots_url,
                headers=self._headers,
                timeout=ClientTimeout(total=self.config.robots_timeout),
            ) as resp:
                if resp.status != 200:
                    logger.info("[ROBOTS.TXT] Not found or error: %s", resp.status)
                    return []
                text = await resp.text(errors="replace")
        except (ClientError, asyncio.TimeoutError, UnicodeDecodeError) as exc:
            logger.info("[ROBOTS.TXT] Error: %s", exc)
            return []
        sitemaps = sitemaps_from_robots(text, base_url)
        logger.info("[ROBOTS.TXT] Found %d sitemap URLs", len(sitemaps))
        return sitemaps

    async def fetch_sitemap(self, url: str) -> SitemapDocument:
        """
        Fetch and parse one sitemap.

        Raises FetchError for network failures, timeouts and any status other
        than 200 (4xx included), ParseError for malformed XML.
        """
        logger.debug("[SITEMAP] Fetching %s", url)
        headers = {**self._headers, "Accept": _SITEMAP_ACCEPT}
        try:
            async with self.session.get(
                url,
                headers=headers,
                timeout=ClientTimeout(total=self.config.sitemap_timeout),
                max_redirects=self.config.sitemap_max_redirects,
            ) as resp:
                status = resp.status
                # 4xx fails here too, unlike page fetches
                if status != 200:
                    raise FetchError(url, f"HTTP {status}", status)
                content_type = resp.headers.get("Content-Type", "")
                body = await resp.read()
        except (ClientError, asyncio.TimeoutError) as exc:
            raise FetchError(url, str(exc) or type(exc).__name__) from exc

        if "xml" not in content_type and "text/plain" not in content_type and "gzip" not in content_type:
            logger.warning("[SITEMAP] Unexpected content type %r for %s", content_type, url)

        document = parse_sitemap(body)
        logger.info(
            "[SITEMAP] %s type=%s urls=%d nested=%d",
            url, document.type, len(document.urls), len(document.sitemaps),
        )
        return document

    async def resolve(
        self,
        sitemap_urls: Sequence[str],
        base_domain: str,
        max_depth: Optional[int] = None,
    ) -> List[DiscoveredUrlEntry]:
        """
        Breadth-first walk over *sitemap_urls* and the indexes they point to.

        Level 0 is *sitemap_urls*; levels up to ``max_depth - 1`` are fetched.
        A sitemap that fails to fetch or parse is logged and skipped.
        """
        if max_depth is None:
            max_depth = self.config.sitemap_max_depth
        per_level = self.config.max_sitemaps_per_level
        per_sitemap = self.config.max_urls_per_sitemap

        visited: Set[str] = set()
        entries: List[DiscoveredUrlEntry] = []
        level: List[str] = list(sitemap_urls)
        depth = 0

        while level:
            if depth >= max_depth:
                logger.info("[SITEMAP] Maximum depth %d reached, %d sitemaps left", max_depth, len(level))
                break
            if len(level) > per_level:
                logger.info(
                    "[SITEMAP] Limited to %d sitemaps at depth %d (found %d)", per_level, depth, len(level)
                )
                level = level[:per_level]

            next_level: List[str] = []
            for sitemap_url in level:
                if sitemap_url in visited:
                    continue
                visited.add(sitemap_url)
                try:
                    document = await self.fetch_sitemap(sitemap_url)
                except (FetchError, ParseError) as exc:
                    logger.warning("[SITEMAP] Error processing %s: %s", sitemap_url, exc)
                    continue

                if isinstance(document, UrlSet):
                    if len(document.urls) > per_sitemap:
                        logger.info(
                            "[SITEMAP] Limited to first %d URLs from %s (found %d)",
                            per_sitemap, sitemap_url, len(document.urls),
                        )
                    for item in document.urls[:per_sitemap]:
                        if should_crawl(item.url, base_domain, self.rules):
                            entries.append(
                                DiscoveredUrlEntry(
                                    url=normalize_url(item.url),
                                    source="sitemap",
                                    lastmod=item.lastmod,
                                    priority=item.priority,
                                    changefreq=item.changefreq,
                                )
                            )
                elif isinstance(document, SitemapIndex):
                    for ref in document.sitemaps:
                        if ref.url not in visited and ref.url not in next_level:
                            next_level.append(ref.url)

            if next_level:
                logger.info("[SITEMAP] Processing %d nested sitemaps at depth %d", len(next_level), depth + 1)
            level = next_level
            depth += 1

        return entries

    async def discover_urls_from_sitemaps(
        self,
        base_url: str,
        *,
        max_urls: Optional[int] = None,
        max_depth: Optional[int] = None,
        max_sitemaps: Optional[int] = None,
    ) -> List[DiscoveredUrlEntry]:
        """
        Discover page URLs of *base_url*'s domain from its sitemaps.

        Returns entries deduplicated by normalized URL (first seen wins),
        truncated to *max_urls*, homepage first and the rest by descending
        declared priority. An empty list means nothing was found.
        """
        max_urls = max_urls or self.config.sitemap_max_urls
        max_sitemaps = max_sitemaps or self.config.max_sitemaps

        domain = get_domain(base_url)
        logger.info("[SITEMAP DISCOVERY] Starting for domain: %s", domain)

        robots = await self.get_robots_sitemaps(base_url)
        candidates = remove_duplicates([*robots, *common_sitemap_urls(base_url)])
        logger.info("[SITEMAP DISCOVERY] Found %d potential sitemap URLs", len(candidates))
        if not candidates:
            return []
        if len(candidates) > max_sitemaps:
            logger.info(
                "[SITEMAP DISCOVERY] Limited to first %d sitemaps (found %d)", max_sitemaps, len(candidates)
            )
            candidates = candidates[:max_sitemaps]

        discovered = await self.resolve(candidates, domain, max_depth)

        unique: Dict[str, DiscoveredUrlEntry] = {}
        for entry in discovered:
            unique.setdefault(entry.url, entry)
        final = list(unique.values())[:max_urls]
        logger.info("[SITEMAP DISCOVERY] Discovered %d unique URLs from sitemaps", len(final))

        return sorted(final, key=lambda e: (not is_homepage(e.url, domain), -e.priority_value))
