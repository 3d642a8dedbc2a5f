# page_scout/crawler/fetcher.py
"""
Fetcher module: cache-aware page fetching with per-request timeout and
redirect limit. Every attempt, successful or not, ends up in the page cache.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from page_scout.config import CrawlerConfig
from page_scout.crawler.models import PageRecord
from page_scout.logger import logger
from page_scout.parser.html_parser import extract_metadata
from page_scout.store.base import CrawlStore
from page_scout.utils import get_domain, normalize_url

_BROWSER_HEADERS: Dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}


class PageFetcher:
    """Fetches single pages through the cache and records the outcome."""

    def __init__(self, session: ClientSession, store: CrawlStore, config: CrawlerConfig) -> None:
        self.session = session
        self.store = store
        self.config = config

    async def crawl_url(
        self,
        url: str,
        *,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> PageRecord:
        """
        Return the page record for *url*.

        A cached record without error is returned without touching the
        network. Otherwise the page is fetched: any status below 500 is a
        completed fetch (4xx included, with its status code), while network
        errors, timeouts and 5xx produce a record with ``error`` set and no
        HTML. The record is cached and the URL marked crawled either way.
        """
        key = normalize_url(url)
        cached = await self.store.get_cached_page(key)
        if cached is not None and cached.ok:
            logger.debug("[CACHE HIT] %s", key)
            await self.store.mark_url_as_crawled(key)
            return cached

        logger.info("[CRAWLING] %s", key)
        record = await self._fetch(url, key, user_agent=user_agent, timeout=timeout)
        await self.store.save_cached_page(record)
        await self.store.mark_url_as_crawled(key)
        if not record.ok:
            logger.warning("[ERROR] %s: %s", key, record.error)
        return record

    async def _fetch(
        self,
        url: str,
        key: str,
        *,
        user_agent: Optional[str],
        timeout: Optional[float],
    ) -> PageRecord:
        domain = get_domain(url)
        headers = {"User-Agent": user_agent or self.config.user_agent, **_BROWSER_HEADERS}
        status = 0
        try:
            async with self.session.get(
                url,
                headers=headers,
                timeout=ClientTimeout(total=timeout or self.config.page_timeout),
                max_redirects=self.config.page_max_redirects,
            ) as resp:
                status = resp.status
                if status >= 500:
                    return PageRecord(url=key, domain=domain, status_code=status, error=f"HTTP {status}")
                content_type = resp.headers.get("Content-Type", "")
                html = await resp.text(errors="replace")
        except asyncio.TimeoutError:
            return PageRecord(url=key, domain=domain, status_code=status, error="Request timed out")
        except (ClientError, LookupError) as exc:
            return PageRecord(
                url=key, domain=domain, status_code=status, error=str(exc) or type(exc).__name__
            )

        metadata = extract_metadata(html, url)
        return PageRecord(
            url=key,
            domain=domain,
            html=html,
            title=metadata.title,
            meta_description=metadata.meta_description,
            status_code=status,
            content_type=content_type,
            error=None,
            metadata=metadata,
        )
