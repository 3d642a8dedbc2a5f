# File: page_scout/parser/robots_parser.py
"""page_scout.parser.robots_parser: Извлечение директив ``Sitemap:`` из robots.txt."""

from __future__ import annotations

from typing import List
from urllib.parse import urljoin, urlsplit

from page_scout.logger import logger

__all__ = ["sitemaps_from_robots"]


def sitemaps_from_robots(text: str, base_url: str) -> List[str]:
    """Возвращает абсолютные URL всех sitemap, объявленных в robots.txt.

    Директива ищется без учёта регистра; относительные значения разрешаются
    относительно *base_url*, неразрешимые значения отбрасываются.

    Args:
        text: содержимое robots.txt.
        base_url: адрес сайта, относительно которого разрешаются ссылки.

    Returns:
        Список URL в порядке появления в файле.
    """
    sitemaps: List[str] = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line.lower().startswith("sitemap:"):
            continue
        value = line[len("sitemap:"):].strip()
        if not value:
            continue
        try:
            absolute = urljoin(base_url, value)
            parsed = urlsplit(absolute)
        except ValueError:
            logger.debug("[ROBOTS.TXT] Invalid sitemap URL: %s", value)
            continue
        if not parsed.scheme or not parsed.netloc:
            logger.debug("[ROBOTS.TXT] Invalid sitemap URL: %s", value)
            continue
        sitemaps.append(absolute)
    return sitemaps
