# === FILE: page_scout/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import logging
import time
from typing import List, Optional, Set

from aiohttp import ClientSession

from page_scout.config import CrawlerConfig
from page_scout.crawler.fetcher import PageFetcher
from page_scout.crawler.filters import should_crawl
from page_scout.crawler.link_extractor import extract_urls
from page_scout.crawler.models import DiscoveredUrlEntry, PageRecord
from page_scout.crawler.sitemaps import SitemapResolver
from page_scout.logger import LOGGER_NAME
from page_scout.store.base import CrawlStore
from page_scout.utils import get_domain, homepage_url, normalize_url

__all__ = ("SiteCrawler",)


class SiteCrawler:
    """Асинхронный краулер: очередь в хранилище, кеш страниц, лимит параллельности и пауза."""

    def __init__(
        self,
        config: CrawlerConfig,
        store: CrawlStore,
        session: Optional[ClientSession] = None,
    ) -> None:
        self.config = config
        self.store = store
        self.rules = config.active_filter_rules
        self.session: Optional[ClientSession] = session
        self._owns_session = session is None
        self.logger = logging.getLogger(LOGGER_NAME)

    async def __aenter__(self) -> SiteCrawler:
        if self.session is None:
            self.session = ClientSession(raise_for_status=False)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    def _require_session(self) -> ClientSession:
        if not self.session:
            raise RuntimeError("Session not initialized")
        return self.session

    @property
    def fetcher(self) -> PageFetcher:
        return PageFetcher(self._require_session(), self.store, self.config)

    @property
    def resolver(self) -> SitemapResolver:
        return SitemapResolver(self._require_session(), self.config, self.rules)

    async def crawl_url(self, url: str) -> PageRecord:
        return await self.fetcher.crawl_url(url)

    async def discover(self, base_url: str) -> List[DiscoveredUrlEntry]:
        return await self.resolver.discover_urls_from_sitemaps(base_url)

    async def crawl_pages(
        self,
        start_url: str,
        *,
        max_pages: Optional[int] = None,
        parallel: Optional[int] = None,
        crawl_delay: Optional[float] = None,
    ) -> List[PageRecord]:
        """
        Crawl *start_url*'s domain until *max_pages* successful pages are
        collected or the discovery queue runs dry.

        The homepage is always queued. If the store already holds enough
        pages for the domain, homepage included, they are returned without
        any network activity. Failed pages are cached and logged but never
        counted and never stop the run.
        """
        max_pages = max_pages or self.config.max_pages
        parallel = parallel or self.config.parallel
        crawl_delay = self.config.crawl_delay if crawl_delay is None else crawl_delay

        start = normalize_url(start_url)
        domain = get_domain(start_url)
        homepage = homepage_url(domain)
        homepage_variants = {homepage, homepage_url(domain, "http")}

        self.logger.info("Starting crawl from: %s (domain %s, max pages %d)", start, domain, max_pages)

        existing = await self.store.get_crawled_pages_for_domain(domain)
        has_homepage = any(normalize_url(p.url) in homepage_variants for p in existing)
        results: List[PageRecord] = list(existing)
        result_urls: Set[str] = {p.url for p in results}
        limiter = asyncio.Semaphore(parallel)

        if len(existing) >= max_pages:
            self.logger.info("Already have %d cached pages for %s", len(existing), domain)
            if has_homepage:
                return existing[:max_pages]
            self.logger.info("Homepage not found in existing pages, will crawl it first")
            await self.store.add_discovered_url(homepage, domain, None)
            page = await self._crawl_one(homepage, domain, limiter, crawl_delay, result_urls)
            if page.ok:
                return [page, *existing][:max_pages]
            self.logger.warning("Homepage %s could not be fetched, using cached pages", homepage)
            return existing[:max_pages]

        await self.store.add_discovered_url(start, domain, None)
        await self.store.add_discovered_url(homepage, domain, None)
        if self.config.use_sitemaps:
            await self._seed_from_sitemaps(start_url, domain)

        dispatched: Set[str] = set()
        started = time.monotonic()
        first_batch = True

        while len(results) < max_pages:
            batch = await self.store.get_uncrawled_urls(
                domain, min(parallel * 2, max_pages - len(results)), first_batch
            )
            first_batch = False
            if not batch:
                self.logger.info("No more URLs to crawl")
                break

            fresh: List[str] = []
            for url in batch:
                if url in dispatched:
                    await self.store.mark_url_as_crawled(url)
                    continue
                dispatched.add(url)
                fresh.append(url)
            if not fresh:
                continue
            self.logger.debug("Batch of %d URLs, next: %s", len(fresh), fresh[0][:80])

            pages = await asyncio.gather(
                *(self._crawl_one(url, domain, limiter, crawl_delay, result_urls) for url in fresh)
            )

            for page in pages:
                if not page.ok:
                    continue
                if page.url in result_urls:
                    continue
                results.append(page)
                result_urls.add(page.url)
                if len(results) >= max_pages:
                    break

            self.logger.info("Progress: %d/%d pages crawled", len(results), max_pages)

        duration = time.monotonic() - started
        self.logger.info("Crawl completed: %d pages in %.2f s", len(results), duration)
        return results[:max_pages]

    async def _crawl_one(
        self,
        url: str,
        domain: str,
        limiter: asyncio.Semaphore,
        crawl_delay: float,
        known: Set[str],
    ) -> PageRecord:
        async with limiter:
            if crawl_delay > 0:
                await asyncio.sleep(crawl_delay)
            page = await self.fetcher.crawl_url(url)

        if page.ok and page.html:
            for link in extract_urls(page.html, url):
                if link not in known and should_crawl(link, domain, self.rules):
                    await self.store.add_discovered_url(link, domain, url)
        return page

    async def _seed_from_sitemaps(self, start_url: str, domain: str) -> None:
        entries = await self.resolver.discover_urls_from_sitemaps(start_url)
        for entry in entries:
            await self.store.add_discovered_url(entry.url, domain, None)
        self.logger.info("Queued %d URLs from sitemaps for %s", len(entries), domain)
