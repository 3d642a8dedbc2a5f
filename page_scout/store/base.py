# page_scout/store/base.py
"""
Persistent store interface consumed by the crawler.

The store holds the two shared mutable resources of a crawl: the page cache
(keyed by normalized URL) and the discovery queue. Implementations are
expected to make each operation atomic; the crawler holds no locks of its own.
"""
from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from page_scout.crawler.models import PageRecord
from page_scout.utils import is_homepage


@runtime_checkable
class CrawlStore(Protocol):
    async def get_cached_page(self, url: str) -> Optional[PageRecord]:
        """Cached record for the normalized *url*, or None."""

    async def save_cached_page(self, record: PageRecord) -> None:
        """Insert or replace the record under ``record.url``."""

    async def add_discovered_url(self, url: str, domain: str, from_url: Optional[str]) -> None:
        """Queue *url* for *domain*; a URL already queued is left untouched."""

    async def get_uncrawled_urls(
        self, domain: str, limit: int, prioritize_homepage: bool = False
    ) -> List[str]:
        """Up to *limit* queued, not yet crawled URLs of *domain*."""

    async def mark_url_as_crawled(self, url: str) -> None:
        """Take *url* out of the pending part of the queue."""

    async def get_crawled_pages_for_domain(self, domain: str) -> List[PageRecord]:
        """All successfully fetched (error-free) cached pages of *domain*."""


def split_homepage(urls: List[str], domain: str) -> tuple[List[str], List[str]]:
    """Partition *urls* into (homepage variants, everything else)."""
    home = [u for u in urls if is_homepage(u, domain)]
    rest = [u for u in urls if not is_homepage(u, domain)]
    return home, rest
