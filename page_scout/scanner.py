# === FILE: page_scout/scanner.py ===
"""
Модуль-обёртка для запуска обхода и поиска URL в sitemap.
"""
from typing import List

from page_scout.config import CrawlerConfig
from page_scout.crawler.crawler import SiteCrawler
from page_scout.crawler.models import DiscoveredUrlEntry, PageRecord
from page_scout.store import open_store


async def start_crawl(cfg: CrawlerConfig, url: str) -> List[PageRecord]:
    """
    Открывает хранилище и краулер в контексте и возвращает список PageRecord.

    Parameters
    ----------
    cfg : CrawlerConfig
        Конфигурация обхода.
    url : str
        Стартовый URL.

    Returns
    -------
    List[PageRecord]
        Успешно загруженные страницы, не больше ``cfg.max_pages``.
    """
    async with open_store(cfg) as store:
        async with SiteCrawler(cfg, store) as crawler:
            return await crawler.crawl_pages(url)


async def start_discovery(cfg: CrawlerConfig, url: str) -> List[DiscoveredUrlEntry]:
    """Находит URL сайта по sitemap без загрузки самих страниц."""
    async with open_store(cfg) as store:
        async with SiteCrawler(cfg, store) as crawler:
            return await crawler.discover(url)


__all__ = ["start_crawl", "start_discovery"]
