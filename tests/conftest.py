# File: tests/conftest.py
import pytest

from page_scout.config import MEMORY_DB, CrawlerConfig
from page_scout.store.memory import MemoryStore


@pytest.fixture()
def fast_config() -> CrawlerConfig:
    """Конфигурация без пауз, без sitemap и с очередью в памяти."""
    return CrawlerConfig(
        max_pages=10,
        parallel=3,
        crawl_delay=0,
        use_sitemaps=False,
        db_path=MEMORY_DB,
        randomize_queue=False,
    )


@pytest.fixture()
def memory_store() -> MemoryStore:
    return MemoryStore()
