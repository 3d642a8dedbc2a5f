"""page_scout.store: Хранилище кеша страниц и очереди обхода."""

from __future__ import annotations

from typing import Union

from page_scout.config import MEMORY_DB, CrawlerConfig
from page_scout.store.base import CrawlStore
from page_scout.store.memory import MemoryStore
from page_scout.store.sqlite import SQLiteStore


def open_store(config: CrawlerConfig) -> Union[MemoryStore, SQLiteStore]:
    """Создаёт хранилище по ``config.db_path``; используйте как ``async with``."""
    if config.db_path == MEMORY_DB:
        return MemoryStore()
    return SQLiteStore(
        config.db_path,
        cache_ttl_days=config.cache_ttl_days,
        randomize=config.randomize_queue,
    )


__all__ = ["CrawlStore", "MemoryStore", "SQLiteStore", "open_store"]
