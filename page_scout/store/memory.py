# page_scout/store/memory.py
"""
In-process store: dictionaries for the cache and an insertion-ordered queue.

Used by tests and by ``--db :memory:`` runs; nothing survives the process.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Set

from page_scout.crawler.models import CrawlTarget, PageRecord
from page_scout.store.base import split_homepage


class MemoryStore:
    """Dictionary-backed :class:`~page_scout.store.base.CrawlStore`."""

    def __init__(self) -> None:
        self.pages: Dict[str, PageRecord] = {}
        self.queue: Dict[str, CrawlTarget] = {}
        self.crawled: Set[str] = set()

    async def __aenter__(self) -> MemoryStore:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def close(self) -> None:
        return None

    async def get_cached_page(self, url: str) -> Optional[PageRecord]:
        record = self.pages.get(url)
        # callers get a copy, like rows read back from a database
        return PageRecord.from_dict(record.to_dict()) if record is not None else None

    async def save_cached_page(self, record: PageRecord) -> None:
        self.pages[record.url] = PageRecord.from_dict(record.to_dict())

    async def add_discovered_url(self, url: str, domain: str, from_url: Optional[str]) -> None:
        self.queue.setdefault(url, CrawlTarget(url=url, domain=domain, discovered_from=from_url))

    async def get_uncrawled_urls(
        self, domain: str, limit: int, prioritize_homepage: bool = False
    ) -> List[str]:
        if limit <= 0:
            return []
        pending = [u for u, t in self.queue.items() if t.domain == domain and u not in self.crawled]
        if prioritize_homepage:
            home, rest = split_homepage(pending, domain)
            pending = home[:1] + rest
        return pending[:limit]

    async def mark_url_as_crawled(self, url: str) -> None:
        if url in self.queue:
            self.crawled.add(url)

    async def get_crawled_pages_for_domain(self, domain: str) -> List[PageRecord]:
        return [
            PageRecord.from_dict(r.to_dict())
            for r in self.pages.values()
            if r.domain == domain and r.error is None
        ]
