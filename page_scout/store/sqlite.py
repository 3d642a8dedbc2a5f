# page_scout/store/sqlite.py
"""
SQLite-backed store (aiosqlite): page cache + discovery queue in one file.

Schema::

    crawled_pages   (url UNIQUE, domain, html, title, meta_description,
                     status_code, content_type, crawled_at, error, metadata JSON)
    discovered_urls (url UNIQUE, domain, source_url, discovered_at, crawled)
"""
from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

import aiosqlite

from page_scout.crawler.models import PageMetadata, PageRecord
from page_scout.logger import logger
from page_scout.store.base import split_homepage

_SCHEMA = """
CREATE TABLE IF NOT EXISTS crawled_pages (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    url TEXT UNIQUE NOT NULL,
    domain TEXT NOT NULL,
    html TEXT,
    title TEXT,
    meta_description TEXT,
    status_code INTEGER,
    content_type TEXT,
    crawled_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    error TEXT,
    metadata TEXT
);
CREATE INDEX IF NOT EXISTS idx_crawled_pages_domain ON crawled_pages(domain);
CREATE INDEX IF NOT EXISTS idx_crawled_pages_crawled_at ON crawled_pages(crawled_at);

CREATE TABLE IF NOT EXISTS discovered_urls (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    url TEXT UNIQUE NOT NULL,
    domain TEXT NOT NULL,
    source_url TEXT,
    discovered_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    crawled BOOLEAN DEFAULT 0
);
CREATE INDEX IF NOT EXISTS idx_discovered_urls_domain ON discovered_urls(domain);
CREATE INDEX IF NOT EXISTS idx_discovered_urls_crawled ON discovered_urls(crawled);
"""

_PAGE_COLUMNS = "url, domain, html, title, meta_description, status_code, content_type, error, metadata"


def _row_to_record(row: aiosqlite.Row) -> PageRecord:
    metadata: Optional[PageMetadata] = None
    if row["metadata"]:
        try:
            metadata = PageMetadata.from_dict(json.loads(row["metadata"]))
        except (ValueError, TypeError):
            metadata = PageMetadata()
    return PageRecord(
        url=row["url"],
        domain=row["domain"],
        html=row["html"],
        title=row["title"],
        meta_description=row["meta_description"],
        status_code=row["status_code"] or 0,
        content_type=row["content_type"],
        error=row["error"],
        metadata=metadata,
    )


class SQLiteStore:
    """:class:`~page_scout.store.base.CrawlStore` on top of a SQLite file.

    ``cache_ttl_days`` limits which cached pages :meth:`get_cached_page`
    returns; by default every cached page is served until
    :meth:`clear_old_cache` removes it. ``randomize`` makes the queue hand
    out URLs in random order instead of discovery order.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        cache_ttl_days: Optional[float] = None,
        randomize: bool = True,
    ) -> None:
        self.path = str(path)
        self.cache_ttl_days = cache_ttl_days
        self.randomize = randomize
        self._conn: Optional[aiosqlite.Connection] = None

    async def __aenter__(self) -> SQLiteStore:
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def open(self) -> None:
        if self._conn is not None:
            return
        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = await aiosqlite.connect(self.path)
        self._conn.row_factory = aiosqlite.Row
        await self._conn.executescript(_SCHEMA)
        await self._conn.commit()
        logger.debug("Database initialized at: %s", self.path)

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Database not initialized")
        return self._conn

    async def get_cached_page(self, url: str) -> Optional[PageRecord]:
        query = f"SELECT {_PAGE_COLUMNS} FROM crawled_pages WHERE url = ?"
        params: tuple = (url,)
        if self.cache_ttl_days is not None:
            query += " AND crawled_at > datetime('now', ?)"
            params = (url, f"-{self.cache_ttl_days} days")
        async with self.conn.execute(query, params) as cursor:
            row = await cursor.fetchone()
        return _row_to_record(row) if row else None

    async def save_cached_page(self, record: PageRecord) -> None:
        metadata = json.dumps(asdict(record.metadata), ensure_ascii=False) if record.metadata else None
        await self.conn.execute(
            f"INSERT OR REPLACE INTO crawled_pages ({_PAGE_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                record.url,
                record.domain,
                record.html,
                record.title,
                record.meta_description,
                record.status_code,
                record.content_type,
                record.error,
                metadata,
            ),
        )
        await self.conn.commit()

    async def add_discovered_url(self, url: str, domain: str, from_url: Optional[str]) -> None:
        await self.conn.execute(
            "INSERT OR IGNORE INTO discovered_urls (url, domain, source_url) VALUES (?, ?, ?)",
            (url, domain, from_url),
        )
        await self.conn.commit()

    async def get_uncrawled_urls(
        self, domain: str, limit: int, prioritize_homepage: bool = False
    ) -> List[str]:
        if limit <= 0:
            return []
        order = "RANDOM()" if self.randomize else "id"
        async with self.conn.execute(
            f"SELECT url FROM discovered_urls WHERE domain = ? AND crawled = 0 ORDER BY {order}",
            (domain,),
        ) as cursor:
            pending = [row["url"] for row in await cursor.fetchall()]
        if prioritize_homepage:
            home, rest = split_homepage(pending, domain)
            pending = sorted(home)[:1] + rest
        return pending[:limit]

    async def mark_url_as_crawled(self, url: str) -> None:
        await self.conn.execute("UPDATE discovered_urls SET crawled = 1 WHERE url = ?", (url,))
        await self.conn.commit()

    async def get_crawled_pages_for_domain(self, domain: str) -> List[PageRecord]:
        async with self.conn.execute(
            f"SELECT {_PAGE_COLUMNS} FROM crawled_pages "
            "WHERE domain = ? AND error IS NULL ORDER BY crawled_at DESC",
            (domain,),
        ) as cursor:
            rows = await cursor.fetchall()
        return [_row_to_record(row) for row in rows]

    async def clear_old_cache(self, days_old: float = 30) -> int:
        """Delete cached pages older than *days_old*; return how many were removed."""
        cursor = await self.conn.execute(
            "DELETE FROM crawled_pages WHERE crawled_at < datetime('now', ?)",
            (f"-{days_old} days",),
        )
        await self.conn.commit()
        logger.info("Cleared %d old cache entries", cursor.rowcount)
        return cursor.rowcount
